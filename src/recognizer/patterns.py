# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Structural pattern probes shared by every component type.

Each detector looks at a node together with its parent (and, for cards, the
card subtree) and returns a RuleOutcome. Detectors are independent: the
validator sums all of them, none short-circuits another.
"""

from __future__ import annotations

from . import ComponentType
from .dom import Node, has_class, is_element, is_heading, tag_of, text_of
from .scoring import (
    BUTTON_KEYWORDS,
    CARD_PARENT_KEYWORDS,
    CARD_SELF_KEYWORDS,
    FORM_PARENT_KEYWORDS,
    LABEL_KEYWORDS,
    NAV_PARENT_KEYWORDS,
    RuleOutcome,
    ScoreTrail,
)

CARD_TEXT_MIN_CHARS = 30

_NO_MATCH = RuleOutcome()


def card_root(element: Node | None, parent: Node | None) -> Node | None:
    """The card container for *element*: itself if card-like, else a card-like parent."""
    if has_class(element, CARD_SELF_KEYWORDS):
        return element
    if has_class(parent, CARD_PARENT_KEYWORDS):
        return parent
    return None


def _is_button_like(node: Node) -> bool:
    return tag_of(node) == "button" or has_class(node, BUTTON_KEYWORDS)


def detect_card_pattern(element: Node | None, parent: Node | None) -> RuleOutcome:
    """Image / heading / description / button inventory of the card subtree.

    All four -> +5, heading + description -> +3, image + heading -> +2.
    """
    root = card_root(element, parent)
    if root is None:
        return _NO_MATCH

    has_image = has_heading = has_text = has_button = False
    for node in root.iterdescendants():
        if not is_element(node):
            continue
        tag = tag_of(node)
        has_image = has_image or tag == "img"
        has_heading = has_heading or is_heading(node)
        has_text = has_text or (tag == "p" and len(text_of(node)) > CARD_TEXT_MIN_CHARS)
        has_button = has_button or _is_button_like(node)

    trail = ScoreTrail()
    if has_image and has_heading and has_text and has_button:
        trail.add(5, "complete card pattern")
    elif has_heading and has_text:
        trail.add(3, "card with heading and description")
    elif has_image and has_heading:
        trail.add(2, "card with image and heading")
    return trail.outcome()


def _is_form_parent(parent: Node | None) -> bool:
    return tag_of(parent) == "form" or has_class(parent, FORM_PARENT_KEYWORDS)


def detect_form_pattern(element: Node | None, parent: Node | None, component_type: ComponentType) -> RuleOutcome:
    if not _is_form_parent(parent):
        return _NO_MATCH

    trail = ScoreTrail()
    if component_type == ComponentType.BUTTON:
        trail.add(3, "form button")
    elif component_type == ComponentType.TEXT:
        if tag_of(element) == "label" or has_class(element, LABEL_KEYWORDS):
            trail.add(-2, "form label, not text")
    return trail.outcome()


def _is_nav_parent(parent: Node | None) -> bool:
    return tag_of(parent) == "nav" or has_class(parent, NAV_PARENT_KEYWORDS)


def detect_navigation_pattern(
    element: Node | None,
    parent: Node | None,
    component_type: ComponentType,
) -> RuleOutcome:
    if not _is_nav_parent(parent):
        return _NO_MATCH
    trail = ScoreTrail()
    if component_type == ComponentType.BUTTON and tag_of(element) == "a":
        trail.add(-3, "nav link, not button")
        return trail.outcome(ComponentType.LINK)
    return trail.outcome()

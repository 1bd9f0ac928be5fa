# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Confidence booster: additive, type-specific local-evidence scoring.

Given a base ``RecognitionResult`` and the node's own facts (element, styles,
context), exactly one type-specific scorer runs, then the universal pass.
Every weight is additive; the clamp to [0, 99] happens once at the end.

Layers:
  1. Type scorer   – button / heading / image / text / section signals
  2. Universal     – id, data-*, shallow nesting, explicit styling count

The booster never changes ``component_type`` and never raises: a missing
attribute or style field simply does not fire.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable

from . import ComponentType, ElementContext, ExtractedStyles, RecognitionResult
from .dom import Node, attr, class_string, has_data_attributes, heading_level, tag_of, text_of, word_count
from .scoring import CLASS_TABLES, SHALLOW_DEPTH, ScoreTrail, clamp_confidence, extend_reason
from .styles import parse_float, parse_int_weight, parse_pixels

logger = logging.getLogger(__name__)

BOOST_MARKER = "Boosted"

CLEAN_NESTING_DEPTH = 5
STRONG_VISUAL_SCORE = 6
STRONG_TYPOGRAPHY_SCORE = 4
EXPLICIT_STYLE_COUNT = 3

_ACTION_TEXT_RE = re.compile(
    r"^(click|buy|download|submit|send|get started|learn more|sign up|subscribe|purchase"
    r"|add to cart|checkout|register|join|contact|book|shop now|view|read|try|start|demo"
    r"|order|apply|donate|continue|next|back|cancel|close|save|edit|delete|update|confirm"
    r"|yes|no|ok)$",
    re.IGNORECASE,
)
_IMAGE_EXT_RE = re.compile(r"\.(jpg|jpeg|png|gif|webp|svg|bmp|ico)(\?.*)?$", re.IGNORECASE)
_TITLE_CASE_RE = re.compile(r"^[A-Z]")

_SECTION_TAG_WEIGHTS: dict[str, int] = {
    "section": 5,
    "header": 5,
    "footer": 5,
    "main": 5,
    "article": 5,
    "aside": 4,
    "nav": 5,
}

_FULL_WIDTH = frozenset({"100%", "100vw"})


# ---------------------------------------------------------------------------
# Button
# ---------------------------------------------------------------------------


def _button_visual_score(styles: ExtractedStyles) -> int:
    score = 0
    if styles.background_color and styles.background_color != "transparent":
        score += 2
    if styles.padding is not None:
        if parse_pixels(styles.padding.top) >= 8 and parse_pixels(styles.padding.left) >= 15:
            score += 2
    if styles.border_radius is not None and parse_pixels(styles.border_radius.top_left) > 0:
        score += 2
    if styles.cursor == "pointer":
        score += 2
    if styles.display in ("inline-block", "inline-flex", "flex"):
        score += 1
    if styles.text_align == "center":
        score += 1
    return score


def _boost_button(element: Node, styles: ExtractedStyles, context: ElementContext, trail: ScoreTrail) -> None:
    tag = tag_of(element)

    if tag == "button":
        trail.add(5, "semantic <button> tag")
    if attr(element, "role") == "button":
        trail.add(5, 'ARIA role="button"')

    visual = _button_visual_score(styles)
    trail.add(visual, "strong visual button characteristics" if visual >= STRONG_VISUAL_SCORE else None)

    CLASS_TABLES[ComponentType.BUTTON].apply(class_string(element), trail)

    if _ACTION_TEXT_RE.match(text_of(element)):
        trail.add(3, "action-oriented text")

    if context.inside_form and tag == "button":
        trail.add(3, "button in form context")
    if context.inside_hero or context.inside_card:
        trail.add(2, "in prominent context (hero/card)")

    if attr(element, "onclick") is not None:
        trail.add(2, "has onclick handler")
    button_type = attr(element, "type")
    if button_type in ("submit", "button"):
        trail.add(3, f'type="{button_type}"')

    if tag == "a" and attr(element, "href"):
        trail.add(1, "interactive link")


# ---------------------------------------------------------------------------
# Heading
# ---------------------------------------------------------------------------


def _heading_typography_score(styles: ExtractedStyles) -> int:
    score = 0

    font_size = parse_pixels(styles.font_size or "16px")
    if font_size > 24:
        score += 3
    elif font_size > 20:
        score += 2
    elif font_size > 18:
        score += 1

    font_weight = parse_int_weight(styles.font_weight)
    if font_weight >= 700:
        score += 2
    elif font_weight >= 600:
        score += 1

    line_height = parse_float(styles.line_height)
    if line_height is not None and 1 <= line_height <= 1.5:
        score += 1

    if styles.display == "block":
        score += 1
    return score


def _boost_heading(element: Node, styles: ExtractedStyles, context: ElementContext, trail: ScoreTrail) -> None:
    level = heading_level(element)
    if level is not None:
        trail.add(5, f"semantic h{level} tag")
        if level == 1 and context.depth <= SHALLOW_DEPTH:
            trail.add(2, "proper H1 hierarchy")

    if attr(element, "role") == "heading":
        trail.add(4, 'ARIA role="heading"')

    typography = _heading_typography_score(styles)
    trail.add(typography, "strong heading typography" if typography >= STRONG_TYPOGRAPHY_SCORE else None)

    CLASS_TABLES[ComponentType.HEADING].apply(class_string(element), trail)

    text = text_of(element)
    if 1 <= word_count(text) <= 10:
        trail.add(2, "concise heading length")
    if _TITLE_CASE_RE.match(text):
        trail.add(1, "title case")

    if context.depth <= SHALLOW_DEPTH:
        trail.add(1, "top-level element")


# ---------------------------------------------------------------------------
# Image
# ---------------------------------------------------------------------------


def _boost_image(element: Node, styles: ExtractedStyles, context: ElementContext, trail: ScoreTrail) -> None:
    tag = tag_of(element)
    src = attr(element, "src")
    alt = attr(element, "alt")

    if tag == "img":
        trail.add(5, "semantic <img> tag")
        if alt:
            trail.add(2, "has alt text")
            # filenames ("hero.jpg") are not descriptive
            if len(alt) > 5 and "." not in alt:
                trail.add(1, "descriptive alt text")
    elif tag == "picture":
        trail.add(5, "semantic <picture> tag")
    elif tag == "svg":
        trail.add(4, "SVG image")

    if src:
        if _IMAGE_EXT_RE.search(src):
            trail.add(3, "valid image extension")
        if src.startswith("data:image/"):
            trail.add(2, "inline base64 image")

    if styles.background_image:
        trail.add(2, "has background image")
        if styles.background_size or styles.background_position:
            trail.add(1, "styled background")

    if attr(element, "role") == "img":
        trail.add(3, 'ARIA role="img"')
    if styles.width and styles.height:
        trail.add(1, "explicit dimensions")
    if styles.object_fit:
        trail.add(1, "uses object-fit")


# ---------------------------------------------------------------------------
# Text / paragraph
# ---------------------------------------------------------------------------


def _boost_text(element: Node, styles: ExtractedStyles, context: ElementContext, trail: ScoreTrail) -> None:
    tag = tag_of(element)
    if tag == "p":
        trail.add(5, "semantic <p> tag")
    elif tag == "blockquote":
        trail.add(5, "semantic <blockquote>")

    words = word_count(text_of(element))
    if words > 10:
        trail.add(3, "paragraph-length text")
    elif words > 5:
        trail.add(1)

    if styles.display == "block":
        trail.add(1)

    line_height = parse_float(styles.line_height)
    if line_height is not None and 1.4 <= line_height <= 2:
        trail.add(2, "readable line height")

    font_size = parse_pixels(styles.font_size or "16px")
    if 14 <= font_size <= 20:
        trail.add(1, "body text size")


# ---------------------------------------------------------------------------
# Section / container
# ---------------------------------------------------------------------------


def _boost_section(element: Node, styles: ExtractedStyles, context: ElementContext, trail: ScoreTrail) -> None:
    tag = tag_of(element)
    weight = _SECTION_TAG_WEIGHTS.get(tag)
    if weight is not None:
        trail.add(weight, f"semantic <{tag}>")

    CLASS_TABLES[ComponentType.SECTION].apply(class_string(element), trail)

    if styles.width in _FULL_WIDTH:
        trail.add(2, "full-width section")
    if styles.background_color or styles.background_image:
        trail.add(1, "has background")
    if styles.padding is not None:
        if parse_pixels(styles.padding.top) >= 20 or parse_pixels(styles.padding.bottom) >= 20:
            trail.add(2, "section-like padding")
    if styles.display == "block":
        trail.add(1)


# ---------------------------------------------------------------------------
# Universal pass
# ---------------------------------------------------------------------------


def _explicit_style_count(styles: ExtractedStyles) -> int:
    return sum(
        (
            bool(styles.background_color) and styles.background_color != "transparent",
            bool(styles.color) and styles.color != "#000000",
            bool(styles.font_size),
            bool(styles.font_weight) and styles.font_weight != "400",
            styles.padding is not None,
            styles.margin is not None,
        )
    )


def _boost_universal(element: Node, styles: ExtractedStyles, context: ElementContext, trail: ScoreTrail) -> None:
    if attr(element, "id"):
        trail.add(1, "has id")
    if has_data_attributes(element):
        trail.add(1, "data attributes")
    if context.depth <= CLEAN_NESTING_DEPTH:
        trail.add(1, "shallow nesting")
    if _explicit_style_count(styles) >= EXPLICIT_STYLE_COUNT:
        trail.add(1, "explicit styling")


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

_Scorer = Callable[[Node, ExtractedStyles, ElementContext, ScoreTrail], None]

_TYPE_SCORERS: dict[ComponentType, _Scorer] = {
    ComponentType.BUTTON: _boost_button,
    ComponentType.HEADING: _boost_heading,
    ComponentType.IMAGE: _boost_image,
    ComponentType.TEXT: _boost_text,
    ComponentType.PARAGRAPH: _boost_text,
    ComponentType.SECTION: _boost_section,
    ComponentType.CONTAINER: _boost_section,
}


def boost_confidence(
    initial: RecognitionResult,
    element: Node | None,
    styles: ExtractedStyles | None,
    context: ElementContext | None,
) -> RecognitionResult:
    """Return a new result with local evidence added to the base confidence.

    ``confidence = clamp(initial + sum(boosts))``; the reason gains a
    ``" + Boosted: a, b"`` suffix listing the labelled signals that fired.
    """
    styles = styles if styles is not None else ExtractedStyles()
    context = context if context is not None else ElementContext()
    trail = ScoreTrail()

    scorer = _TYPE_SCORERS.get(initial.component_type)
    if scorer is not None:
        scorer(element, styles, context, trail)
    _boost_universal(element, styles, context, trail)

    confidence = clamp_confidence(initial.confidence + trail.total)
    logger.debug(
        "boost %s <%s>: %s -> %d (%s)",
        initial.component_type,
        tag_of(element),
        initial.confidence,
        confidence,
        ", ".join(trail.labels) or "none",
    )
    return RecognitionResult(
        component_type=initial.component_type,
        confidence=confidence,
        reason=extend_reason(initial.reason, BOOST_MARKER, trail.labels),
        matched_patterns=initial.matched_patterns,
    )

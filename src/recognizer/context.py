# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""ElementContext / ValidationContext builders — leaf module over dom helpers.

Both records are derived once per node right before scoring and are never
mutated afterwards.
"""

from __future__ import annotations

from . import ElementContext, ExtractedStyles, ValidationContext
from .dom import Node, class_string, element_children, is_element, tag_of

_ROOT_TAGS = frozenset({"body", "html"})

_HERO_CLASS_HINTS = ("hero", "banner")
_CARD_CLASS_HINTS = ("card", "box")


def element_depth(element: Node | None) -> int:
    """Nesting depth below ``<body>`` (direct child of body = 0)."""
    if not is_element(element):
        return 0
    depth = 0
    node = element.getparent()
    while node is not None and tag_of(node) not in _ROOT_TAGS:
        depth += 1
        node = node.getparent()
    return depth


def build_element_context(element: Node | None) -> ElementContext:
    """Ancestry flags for *element*, checking the element itself and every ancestor."""
    if not is_element(element):
        return ElementContext()

    flags = {
        "inside_form": False,
        "inside_hero": False,
        "inside_card": False,
        "inside_nav": False,
    }
    node = element
    while node is not None:
        if is_element(node):
            tag = tag_of(node)
            if tag in ("form", "nav"):
                flags[f"inside_{tag}"] = True
            classes = class_string(node)
            if any(hint in classes for hint in _HERO_CLASS_HINTS):
                flags["inside_hero"] = True
            if any(hint in classes for hint in _CARD_CLASS_HINTS):
                flags["inside_card"] = True
        node = node.getparent()

    return ElementContext(depth=element_depth(element), **flags)


def build_validation_context(
    element: Node,
    styles: ExtractedStyles,
    context: ElementContext,
) -> ValidationContext:
    """Snapshot *element*'s neighborhood: siblings (self excluded), parent, children."""
    parent = element.getparent() if is_element(element) else None
    siblings = tuple(c for c in element_children(parent) if c is not element) if parent is not None else ()
    return ValidationContext(
        element=element,
        styles=styles,
        context=context,
        siblings=siblings,
        parent=parent,
        children=tuple(element_children(element)),
    )

# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Cross-validator: contextual corrections from a node's neighborhood.

Re-scores an already boosted result using siblings, parent and children.
This is the only pass whose adjustments may be negative; the sum of every
type rule and pattern detector is clamped once into [0, 99].

Negative signals are confined to:
  - anchor typed ``button`` directly under a nav (type rule and nav probe)
  - heading level skips and headings wrapping interactive children
  - very short ``div`` text
  - small icon-like images
  - form labels typed ``text``
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from . import ComponentType, RecognitionResult, ValidationContext
from .dom import (
    Node,
    attr,
    element_children,
    following_siblings,
    has_class,
    heading_level,
    is_heading,
    parse_int_prefix,
    preceding_siblings,
    tag_of,
    text_of,
)
from .patterns import detect_card_pattern, detect_form_pattern, detect_navigation_pattern
from .scoring import (
    BUTTON_KEYWORDS,
    CARD_BLOCK_KEYWORDS,
    CARD_BODY_KEYWORDS,
    CARD_FOOTER_KEYWORDS,
    CARD_IMAGE_KEYWORDS,
    HERO_HEADING_KEYWORDS,
    HERO_KEYWORDS,
    IMAGE_KEYWORDS,
    SECTION_BLOCK_KEYWORDS,
    SHALLOW_DEPTH,
    RuleOutcome,
    ScoreTrail,
    clamp_confidence,
    extend_reason,
)

logger = logging.getLogger(__name__)

VALIDATION_MARKER = "Cross-validated"
_MARKER_TEXT = f" + {VALIDATION_MARKER}: "

ICON_MAX_DIMENSION = 50
HEADING_LOOKBACK = 3
SUBSTANTIAL_TEXT_CHARS = 50
SHORT_TEXT_CHARS = 20

_SEMANTIC_SECTION_TAGS = frozenset({"header", "footer", "main", "article", "aside", "nav"})


def _is_text_block(node: Node, min_chars: int) -> bool:
    """``<p>`` of any length, or a ``<div>`` longer than *min_chars*."""
    tag = tag_of(node)
    return tag == "p" or (tag == "div" and len(text_of(node)) > min_chars)


def _is_button_like(node: Node) -> bool:
    return tag_of(node) == "button" or has_class(node, BUTTON_KEYWORDS)


# ---------------------------------------------------------------------------
# Button
# ---------------------------------------------------------------------------


def _validate_button(vctx: ValidationContext) -> RuleOutcome:
    element, parent, siblings = vctx.element, vctx.parent, vctx.siblings
    trail = ScoreTrail()
    suggested = None

    if tag_of(parent) == "form":
        button_type = attr(element, "type")
        if button_type == "submit":
            trail.add(5, "submit button in form")
        elif button_type == "reset":
            trail.add(3, "reset button in form")
        else:
            trail.add(2, "button in form")

    has_heading_sibling = any(is_heading(s) for s in siblings)
    has_text_sibling = any(_is_text_block(s, 20) for s in siblings)
    if has_heading_sibling and has_text_sibling:
        trail.add(4, "CTA pattern (heading + text + button)")
    elif has_heading_sibling or has_text_sibling:
        trail.add(2, "button with contextual content")

    if has_class(parent, HERO_KEYWORDS):
        trail.add(3, "hero section CTA button")
    if has_class(parent, CARD_FOOTER_KEYWORDS):
        trail.add(2, "card action button")

    if tag_of(parent) == "nav" and tag_of(element) == "a":
        trail.add(-3, "likely nav link, not button")
        suggested = ComponentType.LINK

    if any(_is_button_like(s) for s in siblings):
        trail.add(2, "button group pattern")

    return trail.outcome(suggested)


# ---------------------------------------------------------------------------
# Heading
# ---------------------------------------------------------------------------


def _is_primary_h1(element: Node) -> bool:
    """Only ``<h1>`` in the document, or the first one."""
    root = element.getroottree().getroot()
    h1s = [node for node in root.iter() if tag_of(node) == "h1"]
    return len(h1s) == 1 or (bool(h1s) and h1s[0] is element)


def _validate_heading(vctx: ValidationContext) -> RuleOutcome:
    element, parent = vctx.element, vctx.parent
    trail = ScoreTrail()
    level = heading_level(element)

    if level is not None:
        previous = next((s for s in preceding_siblings(element) if is_heading(s)), None)
        if previous is not None:
            prev_level = heading_level(previous)
            if level in (prev_level, prev_level + 1):
                trail.add(3, "correct heading hierarchy")
            elif level > prev_level + 1:
                trail.add(-1, "skipped heading level (suspicious)")

        if level == 1 and vctx.context.depth <= SHALLOW_DEPTH and _is_primary_h1(element):
            trail.add(4, "primary page heading")

    if any(_is_text_block(s, 30) for s in following_siblings(element)):
        trail.add(3, "heading with following content")

    if has_class(parent, HERO_HEADING_KEYWORDS):
        trail.add(3, "hero section heading")
    if has_class(parent, CARD_BLOCK_KEYWORDS):
        trail.add(2, "card heading")

    if tag_of(parent) == "section":
        first = element_children(parent)[:1]
        if first and first[0] is element:
            trail.add(3, "section title (first child)")

    if any(tag_of(c) in ("button", "a") for c in vctx.children):
        trail.add(-2, "contains interactive elements (suspicious)")

    return trail.outcome()


# ---------------------------------------------------------------------------
# Image
# ---------------------------------------------------------------------------


def _validate_image(vctx: ValidationContext) -> RuleOutcome:
    element, parent = vctx.element, vctx.parent
    trail = ScoreTrail()
    suggested = None

    if tag_of(parent) == "figure":
        trail.add(4, "semantic figure/image pattern")
        if any(tag_of(c) == "figcaption" for c in element_children(parent)):
            trail.add(2, "has figcaption")

    gallery = [
        s for s in vctx.siblings
        if tag_of(s) in ("img", "picture") or has_class(s, IMAGE_KEYWORDS)
    ]
    if len(gallery) >= 2:
        trail.add(3, "gallery pattern")

    if has_class(parent, HERO_KEYWORDS):
        trail.add(3, "hero background/image")

    alt = (attr(element, "alt") or "").lower()
    src = (attr(element, "src") or "").lower()

    if "logo" in alt or "logo" in src:
        if tag_of(parent) == "header":
            trail.add(4, "header logo")
        else:
            trail.add(2, "logo image")

    if "avatar" in alt or "profile" in alt or "avatar" in src:
        trail.add(2, "avatar/profile image")

    if has_class(parent, CARD_IMAGE_KEYWORDS):
        trail.add(3, "card image")

    width = parse_int_prefix(attr(element, "width"))
    height = parse_int_prefix(attr(element, "height"))
    small = 0 < width < ICON_MAX_DIMENSION or 0 < height < ICON_MAX_DIMENSION
    if small and ("icon" in alt or "icon" in src):
        trail.add(-2, "likely icon, not image")
        suggested = ComponentType.ICON

    return trail.outcome(suggested)


# ---------------------------------------------------------------------------
# Text / paragraph
# ---------------------------------------------------------------------------


def _validate_text(vctx: ValidationContext) -> RuleOutcome:
    element, parent = vctx.element, vctx.parent
    trail = ScoreTrail()
    text_length = len(text_of(element))

    substantial = [
        s for s in vctx.siblings
        if tag_of(s) in ("p", "div") and len(text_of(s)) > SUBSTANTIAL_TEXT_CHARS
    ]
    if len(substantial) >= 2:
        trail.add(4, "article/blog content pattern")

    nearby = preceding_siblings(element)[:HEADING_LOOKBACK]
    if text_length > SUBSTANTIAL_TEXT_CHARS and any(is_heading(s) for s in nearby):
        trail.add(3, "content following heading")

    if has_class(parent, CARD_BODY_KEYWORDS):
        trail.add(2, "card description")

    parent_tag = tag_of(parent)
    if parent_tag == "blockquote":
        trail.add(4, "semantic blockquote")
    elif parent_tag == "li":
        trail.add(2, "list item text")

    if text_length < SHORT_TEXT_CHARS and tag_of(element) == "div":
        trail.add(-2, "very short text (might be label)")

    return trail.outcome()


# ---------------------------------------------------------------------------
# Section / container
# ---------------------------------------------------------------------------


def _validate_section(vctx: ValidationContext) -> RuleOutcome:
    trail = ScoreTrail()
    tag = tag_of(vctx.element)
    children = vctx.children

    if tag in _SEMANTIC_SECTION_TAGS:
        trail.add(5, f"semantic {tag} element")

    has_heading = any(is_heading(c) for c in children)
    has_text = any(tag_of(c) in ("p", "div") and len(text_of(c)) > 30 for c in children)
    has_button = any(_is_button_like(c) for c in children)

    if has_heading and has_text and has_button:
        trail.add(5, "complete section pattern (heading + content + CTA)")
    elif has_heading and has_text:
        trail.add(3, "section pattern (heading + content)")
    elif has_heading or has_text:
        trail.add(1, "partial section content")

    nested = [c for c in children if tag_of(c) == "section" or has_class(c, SECTION_BLOCK_KEYWORDS)]
    if len(nested) >= 2:
        trail.add(3, "contains multiple sections (container)")

    styles = vctx.styles
    if styles.display in ("flex", "grid"):
        trail.add(3, "layout container (flex/grid)")
    if styles.width in ("100%", "100vw"):
        trail.add(2, "full-width section")

    return trail.outcome()


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

_TYPE_RULES: dict[ComponentType, Callable[[ValidationContext], RuleOutcome]] = {
    ComponentType.BUTTON: _validate_button,
    ComponentType.HEADING: _validate_heading,
    ComponentType.IMAGE: _validate_image,
    ComponentType.TEXT: _validate_text,
    ComponentType.PARAGRAPH: _validate_text,
    ComponentType.SECTION: _validate_section,
    ComponentType.CONTAINER: _validate_section,
}


def collect_outcomes(component_type: ComponentType, vctx: ValidationContext) -> list[RuleOutcome]:
    """Outcomes that fired for one node: the type rule first, then the pattern probes."""
    outcomes: list[RuleOutcome] = []
    rule = _TYPE_RULES.get(component_type)
    if rule is not None:
        outcomes.append(rule(vctx))
    outcomes.append(detect_card_pattern(vctx.element, vctx.parent))
    outcomes.append(detect_form_pattern(vctx.element, vctx.parent, component_type))
    outcomes.append(detect_navigation_pattern(vctx.element, vctx.parent, component_type))
    return [o for o in outcomes if o.fired]


def validate_with_context(result: RecognitionResult, vctx: ValidationContext) -> RecognitionResult:
    """Apply neighborhood corrections to *result*.

    ``confidence = clamp(confidence + sum(adjustments))``; the reason gains a
    ``" + Cross-validated: a, b"`` suffix. A result that already carries that
    suffix is returned as is, so repeated calls never double count.
    ``component_type`` is never changed.
    """
    if _MARKER_TEXT in result.reason:
        return result

    outcomes = collect_outcomes(result.component_type, vctx)
    adjustment = sum(o.adjustment for o in outcomes)
    labels = [label for o in outcomes for label in o.reasons]

    suggestions = [o.suggested_type for o in outcomes if o.suggested_type is not None]
    if suggestions and any(s != result.component_type for s in suggestions):
        logger.debug(
            "validator suggests %s for <%s> typed %s (not applied)",
            "/".join(suggestions),
            tag_of(vctx.element),
            result.component_type,
        )

    return RecognitionResult(
        component_type=result.component_type,
        confidence=clamp_confidence(result.confidence + adjustment),
        reason=extend_reason(result.reason, VALIDATION_MARKER, labels),
        matched_patterns=result.matched_patterns,
    )

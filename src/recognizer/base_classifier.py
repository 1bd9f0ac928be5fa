# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Base classifier: priority-ordered pattern registry.

Each RecognitionPattern declares up to six checks (tag, class keywords,
style predicate, text content, ARIA role, required context). A pattern
whose declared tag list does not contain the node's tag is disqualified;
otherwise it scores ``round(confidence * matched / declared)``.

The best score wins; ties keep the earlier (higher-priority) pattern.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass

from . import ComponentType, ElementContext, ExtractedStyles, RecognitionResult
from .dom import Node, attr, class_string, element_children, tag_of, text_of
from .styles import looks_like_button, looks_like_heading

logger = logging.getLogger(__name__)

NO_MATCH_REASON = "No matching pattern found"

StyleCheck = Callable[[ExtractedStyles, Node], bool]


@dataclass(frozen=True, slots=True)
class RecognitionPattern:
    """One candidate rule in the base classifier registry."""

    name: str
    component_type: ComponentType
    confidence: int  # 0-100, awarded when every declared check matches
    priority: int  # higher = tried first
    tag_names: frozenset[str] | None = None
    class_keywords: tuple[str, ...] | None = None
    style_check: StyleCheck | None = None
    content_pattern: re.Pattern[str] | None = None
    aria_role: str | None = None
    context_required: Mapping[str, bool] | None = None


# ---------------------------------------------------------------------------
# Style predicates
# ---------------------------------------------------------------------------

_INLINE_TAGS = frozenset({"a", "b", "br", "code", "em", "i", "small", "span", "strong", "sub", "sup", "u"})


def _button_styled(styles: ExtractedStyles, element: Node) -> bool:
    return looks_like_button(styles)


def _heading_styled(styles: ExtractedStyles, element: Node) -> bool:
    return looks_like_heading(styles)


def _has_background_image(styles: ExtractedStyles, element: Node) -> bool:
    return bool(styles.background_image)


def _layout_display(styles: ExtractedStyles, element: Node) -> bool:
    return styles.display in ("flex", "inline-flex", "grid")


def _leaf_text(styles: ExtractedStyles, element: Node) -> bool:
    """Only inline children (no nested blocks)."""
    return all(tag_of(c) in _INLINE_TAGS for c in element_children(element))


def _has_block_children(styles: ExtractedStyles, element: Node) -> bool:
    return any(tag_of(c) not in _INLINE_TAGS for c in element_children(element))


_HAS_WORDS = re.compile(r"\w")


def _tags(*names: str) -> frozenset[str]:
    return frozenset(names)


# ---------------------------------------------------------------------------
# Default registry
# ---------------------------------------------------------------------------

DEFAULT_PATTERNS: tuple[RecognitionPattern, ...] = (
    # Layout regions
    RecognitionPattern("semantic-header", ComponentType.HEADER, 95, 100, tag_names=_tags("header")),
    RecognitionPattern("banner-role", ComponentType.HEADER, 95, 95, aria_role="banner"),
    RecognitionPattern(
        "header-class", ComponentType.HEADER, 85, 90,
        class_keywords=("site-header", "page-header", "top-bar"),
    ),
    RecognitionPattern("semantic-footer", ComponentType.FOOTER, 95, 100, tag_names=_tags("footer")),
    RecognitionPattern("contentinfo-role", ComponentType.FOOTER, 90, 95, aria_role="contentinfo"),
    RecognitionPattern(
        "footer-class", ComponentType.FOOTER, 85, 90,
        class_keywords=("site-footer", "page-footer"),
    ),
    RecognitionPattern(
        "hero-class", ComponentType.HERO, 90, 95,
        class_keywords=("hero", "jumbotron", "masthead"),
    ),
    RecognitionPattern("semantic-nav", ComponentType.NAVIGATION, 95, 100, tag_names=_tags("nav")),
    RecognitionPattern("navigation-role", ComponentType.NAVIGATION, 95, 95, aria_role="navigation"),
    RecognitionPattern(
        "nav-class", ComponentType.NAVIGATION, 85, 90,
        class_keywords=("navbar", "nav-menu", "main-menu"),
    ),
    RecognitionPattern(
        "card-class", ComponentType.CARD, 85, 85,
        class_keywords=("card", "tile"),
    ),
    RecognitionPattern(
        "semantic-section", ComponentType.SECTION, 90, 80,
        tag_names=_tags("section", "main", "article", "aside"),
    ),
    RecognitionPattern(
        "section-class", ComponentType.SECTION, 80, 70,
        class_keywords=("section", "block", "panel"),
    ),
    RecognitionPattern(
        "container-class", ComponentType.CONTAINER, 75, 60,
        class_keywords=("container", "wrapper", "grid"),
    ),
    RecognitionPattern(
        "layout-container", ComponentType.CONTAINER, 65, 40,
        tag_names=_tags("div"),
        style_check=_layout_display,
    ),
    RecognitionPattern(
        "block-wrapper", ComponentType.CONTAINER, 55, 35,
        tag_names=_tags("div"),
        style_check=_has_block_children,
    ),
    # Forms
    RecognitionPattern("semantic-form", ComponentType.FORM, 95, 90, tag_names=_tags("form")),
    RecognitionPattern(
        "form-field", ComponentType.INPUT, 95, 90,
        tag_names=_tags("input", "textarea", "select"),
    ),
    # Basic components
    RecognitionPattern("semantic-list", ComponentType.LIST, 90, 60, tag_names=_tags("ul", "ol")),
    RecognitionPattern("semantic-button", ComponentType.BUTTON, 95, 50, tag_names=_tags("button")),
    RecognitionPattern("button-role", ComponentType.BUTTON, 90, 50, aria_role="button"),
    RecognitionPattern(
        "button-class-link", ComponentType.BUTTON, 90, 50,
        tag_names=_tags("a"),
        class_keywords=("btn", "button", "cta"),
    ),
    RecognitionPattern(
        "button-styled", ComponentType.BUTTON, 70, 30,
        tag_names=_tags("a", "span", "div"),
        style_check=_button_styled,
    ),
    RecognitionPattern(
        "semantic-heading", ComponentType.HEADING, 95, 50,
        tag_names=_tags("h1", "h2", "h3", "h4", "h5", "h6"),
    ),
    RecognitionPattern("heading-role", ComponentType.HEADING, 90, 50, aria_role="heading"),
    RecognitionPattern(
        "heading-styled", ComponentType.HEADING, 75, 30,
        tag_names=_tags("div", "span", "p"),
        style_check=_heading_styled,
    ),
    RecognitionPattern(
        "icon-class", ComponentType.ICON, 85, 55,
        tag_names=_tags("i", "span"),
        class_keywords=("icon", "fa-", "bi-"),
    ),
    RecognitionPattern(
        "semantic-image", ComponentType.IMAGE, 95, 50,
        tag_names=_tags("img", "picture", "svg"),
    ),
    RecognitionPattern("img-role", ComponentType.IMAGE, 85, 50, aria_role="img"),
    RecognitionPattern(
        "background-image", ComponentType.IMAGE, 60, 20,
        tag_names=_tags("div", "span"),
        style_check=_has_background_image,
    ),
    RecognitionPattern(
        "nav-link", ComponentType.LINK, 85, 25,
        tag_names=_tags("a"),
        context_required={"inside_nav": True},
    ),
    RecognitionPattern("semantic-link", ComponentType.LINK, 80, 20, tag_names=_tags("a")),
    RecognitionPattern("semantic-paragraph", ComponentType.PARAGRAPH, 90, 40, tag_names=_tags("p")),
    RecognitionPattern("blockquote", ComponentType.PARAGRAPH, 85, 40, tag_names=_tags("blockquote")),
    RecognitionPattern(
        "inline-text", ComponentType.TEXT, 60, 10,
        tag_names=_tags("div", "span", "label", "small", "strong", "em"),
        style_check=_leaf_text,
        content_pattern=_HAS_WORDS,
    ),
)


# ---------------------------------------------------------------------------
# Matching
# ---------------------------------------------------------------------------


def match_pattern(
    pattern: RecognitionPattern,
    element: Node,
    styles: ExtractedStyles,
    context: ElementContext,
) -> int:
    """Score one pattern against a node; 0 when disqualified or nothing declared."""
    declared = 0
    matched = 0

    if pattern.tag_names is not None:
        if tag_of(element) not in pattern.tag_names:
            return 0
        declared += 1
        matched += 1

    if pattern.class_keywords is not None:
        declared += 1
        classes = class_string(element)
        if any(kw in classes for kw in pattern.class_keywords):
            matched += 1

    if pattern.style_check is not None:
        declared += 1
        if pattern.style_check(styles, element):
            matched += 1

    if pattern.content_pattern is not None:
        declared += 1
        if pattern.content_pattern.search(text_of(element)):
            matched += 1

    if pattern.aria_role is not None:
        declared += 1
        if attr(element, "role") == pattern.aria_role:
            matched += 1

    if pattern.context_required is not None:
        declared += 1
        if all(getattr(context, key, None) == value for key, value in pattern.context_required.items()):
            matched += 1

    if declared == 0:
        return 0
    return math.floor(pattern.confidence * matched / declared + 0.5)


class BaseClassifier:
    """Runs a pattern registry in priority order and keeps the best match."""

    def __init__(self, patterns: Iterable[RecognitionPattern] = DEFAULT_PATTERNS) -> None:
        # stable sort: equal priorities keep registry order
        self._patterns = tuple(sorted(patterns, key=lambda p: -p.priority))

    @property
    def patterns(self) -> tuple[RecognitionPattern, ...]:
        return self._patterns

    def classify(self, element: Node, styles: ExtractedStyles, context: ElementContext) -> RecognitionResult:
        best: RecognitionPattern | None = None
        best_confidence = 0
        for pattern in self._patterns:
            confidence = match_pattern(pattern, element, styles, context)
            if confidence > best_confidence:
                best, best_confidence = pattern, confidence

        if best is None:
            return RecognitionResult(ComponentType.UNKNOWN, 0, NO_MATCH_REASON)

        logger.debug("base match <%s>: %s (%d)", tag_of(element), best.name, best_confidence)
        return RecognitionResult(
            component_type=best.component_type,
            confidence=best_confidence,
            reason=f"Matched {best.component_type} pattern with {best_confidence}% confidence",
            matched_patterns=(best.name,),
        )


_default_classifier: BaseClassifier | None = None


def classify(element: Node, styles: ExtractedStyles, context: ElementContext) -> RecognitionResult:
    """Classify with the default registry."""
    global _default_classifier
    if _default_classifier is None:
        _default_classifier = BaseClassifier()
    return _default_classifier.classify(element, styles, context)

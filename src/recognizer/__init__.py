# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Component recognition: confidence scoring for page-builder export.

Given a parsed HTML tree, decides what each element "is" and attaches a
reproducible, explainable confidence score:
- base classifier: pattern registry producing a candidate type
- booster: type-specific + universal local heuristics (additive)
- cross-validator: sibling/parent/child pattern corrections (+/-)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

import lxml.html

REVIEW_THRESHOLD = 70  # below this a human should double-check the result


class ComponentType(StrEnum):
    """Closed set of semantic roles a node can be assigned."""

    BUTTON = "button"
    HEADING = "heading"
    TEXT = "text"
    PARAGRAPH = "paragraph"
    IMAGE = "image"
    ICON = "icon"
    LINK = "link"
    SECTION = "section"
    CONTAINER = "container"
    CARD = "card"
    HERO = "hero"
    HEADER = "header"
    FOOTER = "footer"
    FORM = "form"
    INPUT = "input"
    NAVIGATION = "navigation"
    LIST = "list"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class BoxSpacing:
    """Per-side CSS lengths for margin or padding (e.g. ``"10px"``)."""

    top: str = "0"
    right: str = "0"
    bottom: str = "0"
    left: str = "0"


@dataclass(frozen=True, slots=True)
class BorderRadius:
    top_left: str = "0"
    top_right: str = "0"
    bottom_right: str = "0"
    bottom_left: str = "0"


@dataclass(frozen=True, slots=True)
class ExtractedStyles:
    """Normalized visual properties of one node. ``None`` means not set."""

    display: str | None = None  # block, inline, inline-block, flex, grid, ...
    width: str | None = None
    height: str | None = None
    margin: BoxSpacing | None = None
    padding: BoxSpacing | None = None
    border_radius: BorderRadius | None = None
    background_color: str | None = None  # normalized #rrggbb
    color: str | None = None
    font_size: str | None = None
    font_weight: str | None = None  # numeric string, "400" = normal
    line_height: str | None = None
    text_align: str | None = None
    background_image: str | None = None  # bare URL extracted from url(...)
    background_size: str | None = None
    background_position: str | None = None
    cursor: str | None = None
    object_fit: str | None = None


@dataclass(frozen=True, slots=True)
class ElementContext:
    """Structural facts about a node's position in the document."""

    depth: int = 0  # 0 = direct child of <body>
    inside_form: bool = False
    inside_hero: bool = False
    inside_card: bool = False
    inside_nav: bool = False


@dataclass(frozen=True, slots=True)
class RecognitionResult:
    """Component type + confidence in [0, 99] + append-only reason trail."""

    component_type: ComponentType
    confidence: int
    reason: str
    matched_patterns: tuple[str, ...] = ()

    @property
    def manual_review_needed(self) -> bool:
        return self.confidence < REVIEW_THRESHOLD

    def __str__(self) -> str:
        return f"{self.component_type} ({self.confidence}%): {self.reason}"


@dataclass(frozen=True, slots=True)
class ValidationContext:
    """A node plus its structural neighborhood, built right before validation."""

    element: lxml.html.HtmlElement
    styles: ExtractedStyles
    context: ElementContext
    siblings: tuple[lxml.html.HtmlElement, ...] = field(default=())  # document order, self excluded
    parent: lxml.html.HtmlElement | None = None
    children: tuple[lxml.html.HtmlElement, ...] = field(default=())

# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Style extraction behind an injectable StyleProvider.

The scoring core never resolves CSS itself; it reads ``ExtractedStyles``
records. Providers:
  - InlineStyleProvider: ``style=""`` attribute layered over tag defaults
  - StaticStyleProvider: pre-computed records (tests, real style engines)
"""

from __future__ import annotations

import dataclasses
import re
from collections.abc import Mapping
from typing import Protocol, runtime_checkable

from . import BorderRadius, BoxSpacing, ExtractedStyles
from .dom import Node, attr, tag_of

_PX_RE = re.compile(r"^([\d.]+)px$")
_RGB_RE = re.compile(r"rgba?\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*(?:,\s*([\d.]+)\s*)?\)")
_URL_RE = re.compile(r"""url\(\s*['"]?([^'")]+)['"]?\s*\)""")
_NOT_A_COLOR = frozenset({"transparent", "none", "inherit", "initial", "unset", "revert", "revert-layer"})
_IMPORTANT_RE = re.compile(r"\s*!important\s*$", re.IGNORECASE)

_FONT_WEIGHTS: dict[str, str] = {
    "normal": "400",
    "bold": "700",
    "bolder": "700",
    "lighter": "300",
}

_SIDES = ("top", "right", "bottom", "left")

# User-agent display defaults (what a computed-style engine would report)
_DISPLAY_DEFAULTS: dict[str, str] = {
    **dict.fromkeys(
        (
            "div", "p", "section", "header", "footer", "main", "article", "aside", "nav",
            "h1", "h2", "h3", "h4", "h5", "h6", "blockquote", "form", "ul", "ol",
            "figure", "figcaption", "fieldset", "address", "dl", "table", "hr", "pre",
        ),
        "block",
    ),
    "li": "list-item",
    "button": "inline-block",
    "input": "inline-block",
    "select": "inline-block",
    "textarea": "inline-block",
}

# UA heading typography: (font-size, font-weight)
_HEADING_DEFAULTS: dict[str, tuple[str, str]] = {
    "h1": ("32px", "700"),
    "h2": ("24px", "700"),
    "h3": ("18.72px", "700"),
    "h4": ("16px", "700"),
    "h5": ("13.28px", "700"),
    "h6": ("10.72px", "700"),
}


# ---------------------------------------------------------------------------
# Value normalization
# ---------------------------------------------------------------------------


def parse_pixels(value: str | None) -> float:
    """``"12px"`` -> 12.0; anything that is not a plain px length -> 0.0."""
    if not value:
        return 0.0
    m = _PX_RE.match(value.strip())
    if not m:
        return 0.0
    try:
        return float(m.group(1))
    except ValueError:
        return 0.0


def parse_float(value: str | None) -> float | None:
    """Leading float of a CSS value (``"1.5"``, ``"1.5em"``), None if absent."""
    if not value:
        return None
    m = re.match(r"^\s*(\d+(?:\.\d+)?|\.\d+)", value)
    return float(m.group(1)) if m else None


def normalize_color(color: str | None) -> str | None:
    """rgb()/rgba() -> ``#rrggbb``; transparent / fully clear / CSS-wide keywords -> None."""
    if not color:
        return None
    color = color.strip().lower()
    if not color or color in _NOT_A_COLOR:
        return None
    if color.startswith("#"):
        return color
    m = _RGB_RE.match(color)
    if m:
        alpha = parse_float(m.group(4))
        if alpha is not None and alpha == 0:
            return None
        r, g, b = (min(255, int(m.group(i))) for i in (1, 2, 3))
        return f"#{r:02x}{g:02x}{b:02x}"
    return color


def normalize_font_weight(weight: str | None) -> str | None:
    if not weight:
        return None
    weight = weight.strip().lower()
    return _FONT_WEIGHTS.get(weight, weight)


def extract_background_url(value: str | None) -> str | None:
    if not value or value.strip() == "none":
        return None
    m = _URL_RE.search(value)
    return m.group(1).strip() if m else None


def _expand_box(value: str) -> dict[str, str]:
    """CSS 1-4 value shorthand -> per-side dict."""
    parts = value.split()
    if not parts:
        return {}
    if len(parts) == 1:
        parts = parts * 4
    elif len(parts) == 2:
        parts = [parts[0], parts[1], parts[0], parts[1]]
    elif len(parts) == 3:
        parts = [parts[0], parts[1], parts[2], parts[1]]
    return dict(zip(_SIDES, parts[:4], strict=False))


# ---------------------------------------------------------------------------
# Inline style parsing
# ---------------------------------------------------------------------------


def _declarations(style_attr: str) -> list[tuple[str, str]]:
    out: list[tuple[str, str]] = []
    for decl in style_attr.split(";"):
        prop, sep, value = decl.partition(":")
        prop = prop.strip().lower()
        value = _IMPORTANT_RE.sub("", value.strip())
        if sep and prop and value:
            out.append((prop, value))
    return out


def extract_inline_styles(style_attr: str | None, base: ExtractedStyles | None = None) -> ExtractedStyles:
    """Parse a ``style`` attribute into ExtractedStyles, layered over *base*."""
    fields: dict = {}
    if base is not None:
        fields = {f.name: getattr(base, f.name) for f in dataclasses.fields(base)}
    if not style_attr:
        return ExtractedStyles(**fields)

    padding: dict[str, str] = {}
    margin: dict[str, str] = {}

    for prop, value in _declarations(style_attr):
        if prop == "background-color":
            fields["background_color"] = normalize_color(value)
        elif prop == "background":
            url = extract_background_url(value)
            if url:
                fields["background_image"] = url
            elif len(value.split()) == 1:
                fields["background_color"] = normalize_color(value)
        elif prop == "background-image":
            fields["background_image"] = extract_background_url(value)
        elif prop == "background-size":
            fields["background_size"] = value
        elif prop == "background-position":
            fields["background_position"] = value
        elif prop == "color":
            fields["color"] = normalize_color(value)
        elif prop == "font-size":
            fields["font_size"] = value
        elif prop == "font-weight":
            fields["font_weight"] = normalize_font_weight(value)
        elif prop == "line-height":
            fields["line_height"] = value
        elif prop == "text-align":
            fields["text_align"] = value.lower()
        elif prop == "display":
            fields["display"] = value.lower()
        elif prop == "cursor":
            fields["cursor"] = value.lower()
        elif prop == "object-fit":
            fields["object_fit"] = value.lower()
        elif prop in ("width", "height"):
            fields[prop] = value
        elif prop == "padding":
            padding.update(_expand_box(value))
        elif prop == "margin":
            margin.update(_expand_box(value))
        elif prop.startswith("padding-") and prop[8:] in _SIDES:
            padding[prop[8:]] = value
        elif prop.startswith("margin-") and prop[7:] in _SIDES:
            margin[prop[7:]] = value
        elif prop == "border-radius":
            radius = value.split()[0]
            fields["border_radius"] = BorderRadius(radius, radius, radius, radius)

    if padding:
        fields["padding"] = BoxSpacing(**padding)
    if margin:
        fields["margin"] = BoxSpacing(**margin)
    return ExtractedStyles(**fields)


# ---------------------------------------------------------------------------
# Providers
# ---------------------------------------------------------------------------


@runtime_checkable
class StyleProvider(Protocol):
    """Resolves the normalized style record for one element."""

    def styles_for(self, element: Node) -> ExtractedStyles: ...


class InlineStyleProvider:
    """Reads the ``style`` attribute, layered over user-agent tag defaults."""

    def __init__(self, *, ua_defaults: bool = True) -> None:
        self._ua_defaults = ua_defaults

    def styles_for(self, element: Node) -> ExtractedStyles:
        base = self._defaults_for(tag_of(element)) if self._ua_defaults else None
        return extract_inline_styles(attr(element, "style"), base)

    @staticmethod
    def _defaults_for(tag: str) -> ExtractedStyles:
        font_size, font_weight = _HEADING_DEFAULTS.get(tag, (None, None))
        return ExtractedStyles(
            display=_DISPLAY_DEFAULTS.get(tag),
            font_size=font_size,
            font_weight=font_weight,
        )


class StaticStyleProvider:
    """Pre-computed records keyed by element; unknown elements use *fallback*.

    Keys must stay referenced while the provider is in use (lxml element
    proxies are identity-hashed).
    """

    def __init__(
        self,
        records: Mapping[Node, ExtractedStyles],
        fallback: StyleProvider | None = None,
    ) -> None:
        self._records = dict(records)
        self._fallback = fallback

    def styles_for(self, element: Node) -> ExtractedStyles:
        record = self._records.get(element)
        if record is not None:
            return record
        if self._fallback is not None:
            return self._fallback.styles_for(element)
        return ExtractedStyles()


# ---------------------------------------------------------------------------
# Style-only heuristics (used by the base classifier)
# ---------------------------------------------------------------------------


def looks_like_button(styles: ExtractedStyles) -> bool:
    """Three or more button-ish visual traits."""
    padding = styles.padding
    radius = styles.border_radius
    traits = (
        bool(styles.background_color),
        padding is not None and (parse_pixels(padding.top) > 5 or parse_pixels(padding.left) > 10),
        radius is not None and parse_pixels(radius.top_left) > 0,
        styles.cursor == "pointer",
        styles.display in ("inline-block", "inline-flex", "flex"),
    )
    return sum(traits) >= 3


def looks_like_heading(styles: ExtractedStyles) -> bool:
    font_size = parse_pixels(styles.font_size or "16px")
    font_weight = parse_int_weight(styles.font_weight)
    return font_size > 20 and font_weight >= 600


def parse_int_weight(weight: str | None) -> int:
    """Numeric font weight; missing or non-numeric -> 400."""
    if not weight:
        return 400
    m = re.match(r"^\s*(\d+)", weight)
    return int(m.group(1)) if m else 400

# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Tests for inline style extraction and style providers."""

from __future__ import annotations

import pytest

from recognizer import BoxSpacing, ExtractedStyles
from recognizer.styles import (
    InlineStyleProvider,
    StaticStyleProvider,
    StyleProvider,
    extract_background_url,
    extract_inline_styles,
    looks_like_button,
    looks_like_heading,
    normalize_color,
    normalize_font_weight,
    parse_float,
    parse_int_weight,
    parse_pixels,
)
from tests._dom_helpers import pad, parse_el, radius

# ---------------------------------------------------------------------------
# Value normalization
# ---------------------------------------------------------------------------


class TestParsePixels:
    @pytest.mark.parametrize(
        "value,expected",
        [("12px", 12.0), (" 8.5px ", 8.5), ("0px", 0.0), ("2em", 0.0), ("auto", 0.0), ("", 0.0), (None, 0.0)],
    )
    def test_values(self, value, expected):
        assert parse_pixels(value) == expected

    def test_malformed_number(self):
        assert parse_pixels("1.2.3px") == 0.0


class TestParseFloat:
    @pytest.mark.parametrize(
        "value,expected", [("1.5", 1.5), ("1.4em", 1.4), (".8", 0.8), ("normal", None), (None, None)]
    )
    def test_values(self, value, expected):
        assert parse_float(value) == expected


class TestNormalizeColor:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("rgb(255, 0, 0)", "#ff0000"),
            ("rgba(0,128,255,0.5)", "#0080ff"),
            ("RGB(300, 0, 0)", "#ff0000"),
            ("#ABCDEF", "#abcdef"),
            ("red", "red"),
        ],
    )
    def test_normalized(self, value, expected):
        assert normalize_color(value) == expected

    @pytest.mark.parametrize(
        "value",
        ["transparent", "rgba(0, 0, 0, 0)", "rgba(1,2,3,0.0)", "", None, "none", "Inherit", "initial", "unset", "revert"],
    )
    def test_clear_is_none(self, value):
        assert normalize_color(value) is None


class TestFontWeight:
    @pytest.mark.parametrize(
        "value,expected", [("bold", "700"), ("Normal", "400"), ("lighter", "300"), ("600", "600"), (None, None)]
    )
    def test_normalize(self, value, expected):
        assert normalize_font_weight(value) == expected

    @pytest.mark.parametrize("value,expected", [("700", 700), ("550 ", 550), ("bold", 400), (None, 400)])
    def test_parse_int_weight(self, value, expected):
        assert parse_int_weight(value) == expected


class TestBackgroundUrl:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("url(hero.jpg)", "hero.jpg"),
            ("url('a b.png')", "a b.png"),
            ('#fff url("/img/bg.webp") no-repeat', "/img/bg.webp"),
            ("none", None),
            ("linear-gradient(red, blue)", None),
        ],
    )
    def test_extract(self, value, expected):
        assert extract_background_url(value) == expected


# ---------------------------------------------------------------------------
# Inline style parsing
# ---------------------------------------------------------------------------


class TestExtractInlineStyles:
    def test_empty(self):
        assert extract_inline_styles(None) == ExtractedStyles()
        assert extract_inline_styles("") == ExtractedStyles()

    def test_button_like_declarations(self):
        styles = extract_inline_styles(
            "background-color: rgb(0, 123, 255); padding: 10px 20px; border-radius: 4px;"
            " cursor: Pointer; display: inline-block; text-align: center"
        )
        assert styles.background_color == "#007bff"
        assert styles.padding == pad("10px", "20px", "10px", "20px")
        assert styles.border_radius == radius("4px")
        assert styles.cursor == "pointer"
        assert styles.display == "inline-block"
        assert styles.text_align == "center"

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("5px", pad("5px", "5px", "5px", "5px")),
            ("1px 2px 3px", pad("1px", "2px", "3px", "2px")),
            ("1px 2px 3px 4px", pad("1px", "2px", "3px", "4px")),
        ],
    )
    def test_margin_shorthand(self, value, expected):
        assert extract_inline_styles(f"margin: {value}").margin == expected

    def test_per_side_overrides_shorthand(self):
        styles = extract_inline_styles("padding: 10px; padding-top: 30px")
        assert styles.padding == pad("30px", "10px", "10px", "10px")

    def test_single_side_defaults_others(self):
        assert extract_inline_styles("padding-bottom: 24px").padding == BoxSpacing(bottom="24px")

    def test_important_and_case(self):
        styles = extract_inline_styles("FONT-WEIGHT: bold !important; Font-Size: 18px")
        assert styles.font_weight == "700"
        assert styles.font_size == "18px"

    def test_background_shorthand(self):
        assert extract_inline_styles("background: url(a.png) center / cover").background_image == "a.png"
        assert extract_inline_styles("background: #222222").background_color == "#222222"

    @pytest.mark.parametrize("style", ["background: none", "background-color: inherit", "background: initial"])
    def test_background_keywords_are_not_colors(self, style):
        assert extract_inline_styles(style).background_color is None

    def test_background_properties(self):
        styles = extract_inline_styles(
            "background-image: url(x.jpg); background-size: cover; background-position: center; object-fit: Cover"
        )
        assert styles.background_image == "x.jpg"
        assert styles.background_size == "cover"
        assert styles.background_position == "center"
        assert styles.object_fit == "cover"

    def test_garbage_is_ignored(self):
        styles = extract_inline_styles(";;color;:red; width: 100%; nonsense: 1; height:")
        assert styles == ExtractedStyles(width="100%")

    def test_layers_over_base(self):
        base = ExtractedStyles(display="block", font_size="32px", font_weight="700")
        styles = extract_inline_styles("font-size: 20px; color: #333", base)
        assert styles.display == "block"
        assert styles.font_size == "20px"
        assert styles.font_weight == "700"
        assert styles.color == "#333"


# ---------------------------------------------------------------------------
# Providers
# ---------------------------------------------------------------------------


class TestInlineStyleProvider:
    def test_satisfies_protocol(self):
        assert isinstance(InlineStyleProvider(), StyleProvider)
        assert isinstance(StaticStyleProvider({}), StyleProvider)

    def test_heading_defaults(self):
        styles = InlineStyleProvider().styles_for(parse_el("<h1>Title</h1>"))
        assert styles == ExtractedStyles(display="block", font_size="32px", font_weight="700")

    def test_inline_overrides_defaults(self):
        el = parse_el('<h2 style="font-size: 40px; display: flex">Title</h2>')
        styles = InlineStyleProvider().styles_for(el)
        assert styles.font_size == "40px"
        assert styles.display == "flex"
        assert styles.font_weight == "700"

    def test_button_default_display(self):
        assert InlineStyleProvider().styles_for(parse_el("<button>Go</button>")).display == "inline-block"

    def test_unknown_tag_has_no_defaults(self):
        assert InlineStyleProvider().styles_for(parse_el("<span>x</span>")) == ExtractedStyles()

    def test_defaults_disabled(self):
        provider = InlineStyleProvider(ua_defaults=False)
        assert provider.styles_for(parse_el("<h1>Title</h1>")) == ExtractedStyles()


class TestStaticStyleProvider:
    def test_records_and_fallback(self):
        div = parse_el("<div><p>a</p><span>b</span></div>")
        p, span = div[0], div[1]
        record = ExtractedStyles(color="#123456")
        provider = StaticStyleProvider({p: record}, fallback=InlineStyleProvider())
        assert provider.styles_for(p) is record
        assert provider.styles_for(div).display == "block"
        assert provider.styles_for(span) == ExtractedStyles()

    def test_no_fallback(self):
        div = parse_el("<div></div>")
        assert StaticStyleProvider({}).styles_for(div) == ExtractedStyles()


# ---------------------------------------------------------------------------
# Style-only heuristics
# ---------------------------------------------------------------------------


class TestLooksLike:
    def test_button(self):
        styles = ExtractedStyles(background_color="#000000", cursor="pointer", display="inline-flex")
        assert looks_like_button(styles)
        assert not looks_like_button(ExtractedStyles(background_color="#000000", cursor="pointer"))

    def test_button_padding_trait(self):
        styles = ExtractedStyles(padding=pad("6px", "0", "6px", "0"), border_radius=radius("2px"), cursor="pointer")
        assert looks_like_button(styles)

    def test_heading(self):
        assert looks_like_heading(ExtractedStyles(font_size="24px", font_weight="600"))
        assert not looks_like_heading(ExtractedStyles(font_size="24px", font_weight="400"))
        assert not looks_like_heading(ExtractedStyles(font_weight="800"))

# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Tests for ElementContext / ValidationContext derivation."""

from __future__ import annotations

import lxml.html

from recognizer import ElementContext, ExtractedStyles
from recognizer.context import build_element_context, build_validation_context, element_depth
from tests._dom_helpers import find, html, parse_doc, parse_el


class TestElementDepth:
    def test_body_child_is_zero(self):
        assert element_depth(parse_el("<div></div>")) == 0

    def test_nested(self):
        root = parse_doc(html("<div><section><p><span>x</span></p></section></div>"))
        assert element_depth(find(root, "//span")) == 3

    def test_detached_fragment(self):
        frag = lxml.html.fragment_fromstring("<div><p><b>x</b></p></div>")
        # no <body> above: every ancestor counts
        assert element_depth(frag.find(".//b")) == 2

    def test_none(self):
        assert element_depth(None) == 0


class TestBuildElementContext:
    def test_plain(self):
        assert build_element_context(parse_el("<div></div>")) == ElementContext()

    def test_ancestor_tags(self):
        root = parse_doc(html("<header><nav><form><section><footer><a>x</a></footer></section></form></nav></header>"))
        ctx = build_element_context(find(root, "//a"))
        assert ctx.inside_nav
        assert ctx.inside_form
        assert not ctx.inside_hero
        assert not ctx.inside_card
        assert ctx.depth == 5

    def test_class_hints(self):
        root = parse_doc(html('<div class="site-banner"><div class="product-box"><h2>x</h2></div></div>'))
        ctx = build_element_context(find(root, "//h2"))
        assert ctx.inside_hero
        assert ctx.inside_card

    def test_element_itself_counts(self):
        ctx = build_element_context(parse_el('<form class="hero"></form>'))
        assert ctx.inside_form
        assert ctx.inside_hero
        assert ctx.depth == 0

    def test_non_element(self):
        assert build_element_context(None) == ElementContext()


class TestBuildValidationContext:
    def test_neighborhood(self):
        root = parse_doc(html("<div><h2>T</h2><!-- c --><p id='me'><b>x</b><i>y</i></p><a>z</a></div>"))
        me = find(root, "//p")
        styles = ExtractedStyles(display="block")
        ctx = ElementContext(depth=1)
        vctx = build_validation_context(me, styles, ctx)
        assert vctx.element is me
        assert vctx.styles is styles
        assert vctx.context is ctx
        assert [s.tag for s in vctx.siblings] == ["h2", "a"]
        assert vctx.parent is me.getparent()
        assert [c.tag for c in vctx.children] == ["b", "i"]

    def test_root_has_no_siblings(self):
        frag = lxml.html.fragment_fromstring("<div><p>x</p></div>")
        vctx = build_validation_context(frag, ExtractedStyles(), ElementContext())
        assert vctx.parent is None
        assert vctx.siblings == ()
        assert len(vctx.children) == 1

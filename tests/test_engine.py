# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Tests for the per-node pipeline and the document walk."""

from __future__ import annotations

import logging

import lxml.html
import pytest

from recognizer import ComponentType, ElementContext, ExtractedStyles
from recognizer.base_classifier import NO_MATCH_REASON, BaseClassifier
from recognizer.config import RecognizerConfig
from recognizer.context import build_element_context
from recognizer.engine import (
    RecognizedElement,
    filter_by_confidence,
    iter_elements,
    recognize_component,
    recognize_document,
)
from recognizer.errors import DocumentParseError, RecognizerError, ResourceExhaustionError
from recognizer.styles import StaticStyleProvider
from tests._dom_helpers import html, parse_el, result

# ---------------------------------------------------------------------------
# recognize_component
# ---------------------------------------------------------------------------


class TestRecognizeComponent:
    def test_unknown_skips_both_passes(self):
        br = parse_el("<p><br></p>")[0]
        res = recognize_component(br, ExtractedStyles(), ElementContext(depth=1))
        assert res.component_type == ComponentType.UNKNOWN
        assert res.confidence == 0
        assert res.reason == NO_MATCH_REASON

    def test_passes_extend_reason(self):
        doc = lxml.html.document_fromstring(html('<form><button type="submit">Send</button></form>'))
        button = doc.find(".//button")
        res = recognize_component(button, ExtractedStyles(display="inline-block"), build_element_context(button))
        assert res.component_type == ComponentType.BUTTON
        assert res.confidence == 99
        assert res.reason.startswith("Matched button pattern with 95% confidence + Boosted: semantic <button> tag")
        assert " + Cross-validated: submit button in form" in res.reason
        assert res.matched_patterns == ("semantic-button",)
        assert not res.manual_review_needed

    def test_custom_classifier(self):
        button = parse_el("<button>Go</button>")
        res = recognize_component(button, ExtractedStyles(), ElementContext(), classifier=BaseClassifier([]))
        assert res.component_type == ComponentType.UNKNOWN


# ---------------------------------------------------------------------------
# Document walk
# ---------------------------------------------------------------------------


class TestIterElements:
    def test_pre_order_skipping_non_rendered(self):
        root = parse_el(
            "<div><script>x()</script><p><b>a</b></p><style>p{}</style><template><i></i></template><a></a></div>"
        )
        assert [el.tag for el in iter_elements(root)] == ["p", "b", "a"]


class TestRecognizeDocument:
    def test_records_in_document_order(self, provider):
        source = html("<div><script>x()</script><button>Go</button></div><p>Text</p>")
        records = recognize_document(source, provider=provider)
        assert [r.xpath for r in records] == ["/html/body/div", "/html/body/div/button", "/html/body/p"]
        assert [r.tag for r in records] == ["div", "button", "p"]
        assert records[1].result.component_type == ComponentType.BUTTON
        assert records[2].result.component_type == ComponentType.PARAGRAPH

    def test_head_is_not_walked(self):
        records = recognize_document(html("<p>x</p>", head="<title>T</title><style>p{}</style>"))
        assert [r.tag for r in records] == ["p"]

    def test_bytes_and_tree_inputs(self):
        source = html("<h1>Welcome</h1>")
        from_bytes = recognize_document(source.encode())
        from_tree = recognize_document(lxml.html.document_fromstring(source).getroottree())
        assert [r.result for r in from_bytes] == [r.result for r in from_tree]

    def test_element_root(self):
        frag = lxml.html.fragment_fromstring("<div><h2>A</h2><p>B</p></div>")
        assert [r.tag for r in recognize_document(frag)] == ["h2", "p"]

    def test_confidence_bounds(self):
        records = recognize_document(
            html(
                '<header class="site-header"><nav><a href="/">Home</a><a class="btn" href="/x">Go</a></nav></header>'
                '<section class="hero"><h1>Big Title</h1><p>Some copy that goes on for a while here.</p>'
                '<button type="submit">Get Started</button></section>'
                '<div class="card"><img src="a.jpg" alt="Product photo"><h3>Item</h3></div>'
            )
        )
        assert records
        assert all(0 <= r.result.confidence <= 99 for r in records)

    def test_deterministic(self):
        source = html('<div class="card"><img src="a.jpg"><h4>T</h4><button>Buy</button></div>')
        assert recognize_document(source) == recognize_document(source)

    def test_style_provider_is_used(self):
        doc = lxml.html.document_fromstring(html("<div>Big</div>"))
        div = doc.find(".//div")
        provider = StaticStyleProvider({div: ExtractedStyles(font_size="30px", font_weight="700")})
        records = recognize_document(doc, provider=provider)
        assert records[0].result.component_type == ComponentType.HEADING

    @pytest.mark.parametrize("source", ["", "   \n", b""])
    def test_empty_document(self, source):
        with pytest.raises(DocumentParseError, match="empty"):
            recognize_document(source)

    def test_unsupported_input(self):
        with pytest.raises(DocumentParseError, match="unsupported"):
            recognize_document(42)  # type: ignore[arg-type]

    def test_node_budget(self):
        config = RecognizerConfig(max_nodes=2)
        with pytest.raises(ResourceExhaustionError) as exc_info:
            recognize_document(html("<div><p>a</p><p>b</p></div>"), config=config)
        assert exc_info.value.node_count == 3
        assert exc_info.value.limit == 2
        assert isinstance(exc_info.value, RecognizerError)

    def test_summary_log(self, caplog):
        caplog.set_level(logging.INFO, logger="recognizer.engine")
        recognize_document(html("<button>Go</button><br>"), config=RecognizerConfig(min_confidence=50))
        assert "Recognized 2 elements (1 at >= 50%)" in caplog.text


class TestFilterByConfidence:
    def test_threshold_is_inclusive(self):
        records = [
            RecognizedElement("/a", "a", result(confidence=69)),
            RecognizedElement("/b", "b", result(confidence=70)),
            RecognizedElement("/c", "c", result(confidence=99)),
        ]
        assert [r.xpath for r in filter_by_confidence(records, 70)] == ["/b", "/c"]
        assert filter_by_confidence(records, 0) == records

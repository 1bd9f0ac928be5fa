# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Recognition pipeline: base classify -> boost -> cross-validate.

``recognize_component`` runs the three passes for one node.
``recognize_document`` walks every element under ``<body>`` once, in
document order, and records one result per element.

Node-level passes only read the tree; no node depends on another node's
result, so the per-node order is irrelevant to the outcome.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

import lxml.html
from lxml import etree

from . import ComponentType, ElementContext, ExtractedStyles, RecognitionResult
from .base_classifier import BaseClassifier
from .base_classifier import classify as default_classify
from .booster import boost_confidence
from .config import RecognizerConfig
from .context import build_element_context, build_validation_context
from .cross_validator import validate_with_context
from .dom import Node, is_element, tag_of, xpath_of
from .errors import DocumentParseError, ResourceExhaustionError
from .styles import InlineStyleProvider, StyleProvider

logger = logging.getLogger(__name__)

# Subtrees that never render as page-builder components
_SKIP_TAGS = frozenset({"script", "style", "noscript", "template", "head", "meta", "link", "title"})


@dataclass(frozen=True, slots=True)
class RecognizedElement:
    """One recognized node, addressed by its XPath in the parsed document."""

    xpath: str
    tag: str
    result: RecognitionResult


def recognize_component(
    element: Node,
    styles: ExtractedStyles,
    context: ElementContext,
    *,
    classifier: BaseClassifier | None = None,
) -> RecognitionResult:
    """Base classification followed by the boost and cross-validation passes.

    ``unknown`` results skip both passes (nothing to corroborate).
    """
    base = classifier.classify(element, styles, context) if classifier else default_classify(element, styles, context)
    if base.component_type == ComponentType.UNKNOWN:
        return base

    boosted = boost_confidence(base, element, styles, context)
    vctx = build_validation_context(element, styles, context)
    return validate_with_context(boosted, vctx)


# ---------------------------------------------------------------------------
# Document walk
# ---------------------------------------------------------------------------


def _parse(source: str | bytes | Node | etree._ElementTree) -> Node:
    if isinstance(source, etree._ElementTree):
        return source.getroot()
    if isinstance(source, etree._Element):
        return source
    if isinstance(source, (str, bytes)):
        if not source.strip():
            raise DocumentParseError("document is empty")
        try:
            return lxml.html.document_fromstring(source)
        except (etree.ParserError, ValueError) as e:
            raise DocumentParseError(f"could not parse HTML: {e}") from e
    raise DocumentParseError(f"unsupported document type: {type(source).__name__}")


def _walk_root(root: Node) -> Node:
    if tag_of(root) == "html":
        body = root.find("body")
        if body is not None:
            return body
    return root


def iter_elements(root: Node) -> Iterator[Node]:
    """Pre-order walk below *root*, skipping non-rendered subtrees."""
    stack = [c for c in reversed(root) if is_element(c)]
    while stack:
        node = stack.pop()
        if tag_of(node) in _SKIP_TAGS:
            continue
        yield node
        stack.extend(c for c in reversed(node) if is_element(c))


def recognize_document(
    html_or_tree: str | bytes | Node | etree._ElementTree,
    *,
    provider: StyleProvider | None = None,
    config: RecognizerConfig | None = None,
    classifier: BaseClassifier | None = None,
) -> list[RecognizedElement]:
    """Recognize every element under ``<body>``.

    Raises:
        DocumentParseError: the input is empty or not parseable HTML.
        ResourceExhaustionError: more than ``config.max_nodes`` elements.
    """
    config = config or RecognizerConfig()
    provider = provider or InlineStyleProvider()
    start = time.monotonic()

    root = _walk_root(_parse(html_or_tree))
    records: list[RecognizedElement] = []

    for count, element in enumerate(iter_elements(root), start=1):
        if count > config.max_nodes:
            raise ResourceExhaustionError(
                f"document exceeds {config.max_nodes} elements",
                node_count=count,
                limit=config.max_nodes,
            )
        styles = provider.styles_for(element)
        context = build_element_context(element)
        result = recognize_component(element, styles, context, classifier=classifier)
        records.append(RecognizedElement(xpath_of(element), tag_of(element), result))

    elapsed_ms = (time.monotonic() - start) * 1000
    accepted = sum(1 for r in records if r.result.confidence >= config.min_confidence)
    logger.info(
        "Recognized %d elements (%d at >= %d%%) in %.1fms",
        len(records),
        accepted,
        config.min_confidence,
        elapsed_ms,
    )
    return records


def filter_by_confidence(records: Iterable[RecognizedElement], min_confidence: int) -> list[RecognizedElement]:
    """Consumer-side threshold: keep records at or above *min_confidence*."""
    return [r for r in records if r.result.confidence >= min_confidence]

# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Total helpers over lxml nodes.

Every helper accepts ``None`` (and comment / processing-instruction nodes,
whose ``tag`` is not a string) and returns a neutral value, so heuristics
built on top of them never raise on partial trees.
"""

from __future__ import annotations

import re

import lxml.html
from lxml import etree

_HEADING_TAG_RE = re.compile(r"^h([1-6])$")
_INT_PREFIX_RE = re.compile(r"^\s*([+-]?\d+)")

Node = lxml.html.HtmlElement


def is_element(node: object) -> bool:
    """True for real element nodes (not comments, PIs or None)."""
    return node is not None and isinstance(getattr(node, "tag", None), str)


def tag_of(node: Node | None) -> str:
    if not is_element(node):
        return ""
    tag = node.tag
    # lxml keeps namespaced tags as {uri}local (inline <svg> from XHTML)
    if tag.startswith("{"):
        tag = tag.rsplit("}", 1)[-1]
    return tag.lower()


def attr(node: Node | None, name: str) -> str | None:
    if not is_element(node):
        return None
    return node.get(name)


def class_string(node: Node | None) -> str:
    """Lower-cased, whitespace-normalized class attribute."""
    raw = attr(node, "class") or ""
    return " ".join(raw.split()).lower()


def has_class(node: Node | None, keywords: tuple[str, ...]) -> bool:
    """Substring match of any keyword against the joined class string.

    Substring (not token) semantics: ``card-footer`` matches ``footer``.
    """
    classes = class_string(node)
    if not classes:
        return False
    return any(kw.lower() in classes for kw in keywords)


def text_of(node: Node | None) -> str:
    """Stripped text content of the subtree (comments excluded)."""
    if not is_element(node):
        return ""
    try:
        return etree.tostring(node, method="text", encoding="unicode", with_tail=False).strip()
    except (TypeError, ValueError):
        return ""


def word_count(text: str) -> int:
    return len(text.split())


def element_children(node: Node | None) -> list[Node]:
    if not is_element(node):
        return []
    return [c for c in node if is_element(c)]


def preceding_siblings(node: Node | None) -> list[Node]:
    """Element siblings before *node*, nearest first."""
    if not is_element(node):
        return []
    return [s for s in node.itersiblings(preceding=True) if is_element(s)]


def following_siblings(node: Node | None) -> list[Node]:
    """Element siblings after *node*, in document order."""
    if not is_element(node):
        return []
    return [s for s in node.itersiblings() if is_element(s)]


def heading_level(node: Node | None) -> int | None:
    """1-6 for ``<h1>``-``<h6>``, otherwise None."""
    m = _HEADING_TAG_RE.match(tag_of(node))
    return int(m.group(1)) if m else None


def is_heading(node: Node | None) -> bool:
    return heading_level(node) is not None


def has_data_attributes(node: Node | None) -> bool:
    if not is_element(node):
        return False
    return any(str(key).startswith("data-") for key in node.attrib)


def parse_int_prefix(value: str | None) -> int:
    """Leading integer of an attribute value (``"48px"`` -> 48), 0 if none."""
    if not value:
        return 0
    m = _INT_PREFIX_RE.match(value)
    return int(m.group(1)) if m else 0


def xpath_of(node: Node | None) -> str:
    if not is_element(node):
        return ""
    try:
        return node.getroottree().getpath(node)
    except (TypeError, ValueError):
        return ""

# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Shared scoring primitives for the booster and the cross-validator.

- the [0, 99] confidence clamp (single choke point for every pass)
- weighted class-keyword tables (regex, word-boundary) with exact weights
- substring keyword groups used by the structural ``has_class`` probes
- ScoreTrail: the running accumulator owned by one scoring call
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field

from . import ComponentType

MAX_CONFIDENCE = 99  # never 100: the score is always a heuristic estimate
MIN_CONFIDENCE = 0

SHALLOW_DEPTH = 2  # "top of the page" for heading rules in both passes


def clamp_confidence(value: float) -> int:
    """Round half-up, then clamp into [0, 99]."""
    if math.isnan(value):
        return MIN_CONFIDENCE
    rounded = math.floor(value + 0.5)
    return max(MIN_CONFIDENCE, min(MAX_CONFIDENCE, rounded))


def extend_reason(reason: str, marker: str, labels: list[str] | tuple[str, ...]) -> str:
    """Append ``" + <marker>: a, b"`` to a reason trail; unchanged when nothing fired."""
    if not labels:
        return reason
    return f"{reason} + {marker}: {', '.join(labels)}"


# ---------------------------------------------------------------------------
# Weighted keyword tables
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class KeywordWeight:
    """One row of a weighted class-keyword table."""

    pattern: re.Pattern[str]
    weight: int
    label: str


@dataclass(frozen=True, slots=True)
class WeightedKeywordTable:
    """Scores a lower-cased class string against weighted keyword rows.

    ``first_match_only`` tables stop at the first matching row; otherwise
    every matching row contributes.
    """

    name: str
    rows: tuple[KeywordWeight, ...]
    first_match_only: bool = False

    def matches(self, classes: str) -> list[KeywordWeight]:
        if not classes:
            return []
        hits: list[KeywordWeight] = []
        for row in self.rows:
            if row.pattern.search(classes):
                hits.append(row)
                if self.first_match_only:
                    break
        return hits

    def apply(self, classes: str, trail: ScoreTrail) -> int:
        """Add every hit to *trail*; return the points added."""
        added = 0
        for row in self.matches(classes):
            trail.add(row.weight, row.label)
            added += row.weight
        return added


def _row(regex: str, weight: int, label: str) -> KeywordWeight:
    return KeywordWeight(re.compile(regex), weight, label)


CLASS_TABLES: dict[ComponentType, WeightedKeywordTable] = {
    ComponentType.BUTTON: WeightedKeywordTable(
        "button",
        (
            _row(r"\bbtn\b", 3, "btn class"),
            _row(r"\bbutton\b", 3, "button class"),
            _row(r"\bcta\b", 2, "cta class"),
            _row(r"\bprimary\b", 1, "primary variant"),
            _row(r"\bsecondary\b", 1, "secondary variant"),
            _row(r"\b(submit|send|contact|signup|subscribe)\b", 2, "action class"),
        ),
    ),
    ComponentType.HEADING: WeightedKeywordTable(
        "heading",
        (
            _row(r"\b(title|heading|headline|header)\b", 3, "heading class"),
            _row(r"\bh[1-6]\b", 2, "h-tag class"),
            _row(r"\b(hero|banner|featured)-?(title|heading)?\b", 2, "prominent heading"),
        ),
    ),
    ComponentType.SECTION: WeightedKeywordTable(
        "section",
        (
            _row(r"\bsection\b", 3, "section-like class"),
            _row(r"\bcontainer\b", 2, "section-like class"),
            _row(r"\bwrapper\b", 2, "section-like class"),
            _row(r"\bhero\b", 3, "section-like class"),
            _row(r"\bbanner\b", 2, "section-like class"),
        ),
        first_match_only=True,
    ),
}
CLASS_TABLES[ComponentType.CONTAINER] = CLASS_TABLES[ComponentType.SECTION]


# ---------------------------------------------------------------------------
# Substring keyword groups (structural probes, see dom.has_class)
# ---------------------------------------------------------------------------

HERO_KEYWORDS: tuple[str, ...] = ("hero", "banner", "jumbotron")
HERO_HEADING_KEYWORDS: tuple[str, ...] = (*HERO_KEYWORDS, "masthead")
CARD_FOOTER_KEYWORDS: tuple[str, ...] = ("card-footer", "footer", "actions")
CARD_BLOCK_KEYWORDS: tuple[str, ...] = ("card", "block", "box", "panel")
CARD_IMAGE_KEYWORDS: tuple[str, ...] = ("card", "card-image", "card-img")
CARD_BODY_KEYWORDS: tuple[str, ...] = ("card", "card-body", "card-content")
CARD_SELF_KEYWORDS: tuple[str, ...] = ("card", "card-body", "panel", "box")
CARD_PARENT_KEYWORDS: tuple[str, ...] = ("card", "panel", "box")
BUTTON_KEYWORDS: tuple[str, ...] = ("btn", "button")
IMAGE_KEYWORDS: tuple[str, ...] = ("image", "img", "photo")
SECTION_BLOCK_KEYWORDS: tuple[str, ...] = ("section", "block", "panel")
FORM_PARENT_KEYWORDS: tuple[str, ...] = ("form", "form-group", "form-row")
LABEL_KEYWORDS: tuple[str, ...] = ("label", "form-label")
NAV_PARENT_KEYWORDS: tuple[str, ...] = ("nav", "navbar", "menu", "navigation")


# ---------------------------------------------------------------------------
# Accumulators
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class ScoreTrail:
    """Running total + fired labels for a single scoring call."""

    total: int = 0
    labels: list[str] = field(default_factory=list)
    entries: list[tuple[str, int]] = field(default_factory=list)  # (label, signed weight)

    def add(self, weight: int, label: str | None = None) -> None:
        self.total += weight
        if label:
            self.labels.append(label)
            self.entries.append((label, weight))

    def outcome(self, suggested_type: ComponentType | None = None) -> RuleOutcome:
        return RuleOutcome(self.total, tuple(self.labels), suggested_type, tuple(self.entries))


@dataclass(frozen=True, slots=True)
class RuleOutcome:
    """Result of one validation rule or pattern detector.

    ``suggested_type`` records what the rule believes the node really is;
    it is never applied to the public result (classification stays as set
    by the base classifier).
    """

    adjustment: int = 0
    reasons: tuple[str, ...] = ()
    suggested_type: ComponentType | None = None
    # per-label signed weights; bookkeeping only, ignored by equality
    contributions: tuple[tuple[str, int], ...] = field(default=(), compare=False)

    @property
    def fired(self) -> bool:
        return bool(self.reasons) or self.adjustment != 0

    @property
    def penalties(self) -> tuple[str, ...]:
        """Labels whose weight was negative."""
        return tuple(label for label, weight in self.contributions if weight < 0)

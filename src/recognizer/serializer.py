# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Recognition output formats.

Two output formats:
- JSON: structured data read by page-builder widget mappers
- Text: one line per component, for humans reviewing a run
"""

from __future__ import annotations

import json
from collections import Counter
from collections.abc import Sequence
from typing import Any

from .engine import RecognizedElement


def _component_entry(record: RecognizedElement) -> dict[str, Any]:
    result = record.result
    return {
        "xpath": record.xpath,
        "tag": record.tag,
        "component_type": str(result.component_type),
        "confidence": result.confidence,
        "reason": result.reason,
        "matched_patterns": list(result.matched_patterns),
        "manual_review_needed": result.manual_review_needed,
    }


def to_dict(records: Sequence[RecognizedElement]) -> dict[str, Any]:
    """Serialize recognized elements to a JSON-ready dictionary."""
    type_counts = Counter(str(r.result.component_type) for r in records)
    return {
        "components": [_component_entry(r) for r in records],
        "meta": {
            "count": len(records),
            "type_counts": dict(sorted(type_counts.items())),
        },
    }


def to_json(records: Sequence[RecognizedElement], indent: int = 2) -> str:
    """Serialize recognized elements to a JSON string.

    Args:
        records: output of ``recognize_document``
        indent: JSON indentation level

    Returns:
        JSON string
    """
    return json.dumps(to_dict(records), ensure_ascii=False, indent=indent)


def to_text(records: Sequence[RecognizedElement]) -> str:
    """Human-readable report.

    Format:
        [87] button  /html/body/form/button  (review)
             Matched button pattern with 95% confidence + Boosted: ...
    """
    lines: list[str] = []
    for r in records:
        flag = "  (review)" if r.result.manual_review_needed else ""
        lines.append(f"[{r.result.confidence:>2}] {r.result.component_type:<10} {r.xpath}{flag}")
        lines.append(f"     {r.result.reason}")
    if records:
        lines.append("")
    lines.append(f"{len(records)} components")
    return "\n".join(lines)

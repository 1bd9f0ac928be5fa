# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Recognizer exception hierarchy.

Scoring heuristics never raise: a missing fact simply does not fire.
These errors only surface at the document, configuration and CLI boundary,
and all inherit from RecognizerError so callers can catch the base class.
"""

from __future__ import annotations


class RecognizerError(Exception):
    """Base exception for all recognizer errors."""


class DocumentParseError(RecognizerError):
    """Input could not be parsed into an HTML tree."""


class ResourceExhaustionError(RecognizerError):
    """Document exceeds the configured node budget."""

    def __init__(self, message: str, *, node_count: int = 0, limit: int = 0) -> None:
        super().__init__(message)
        self.node_count = node_count
        self.limit = limit


class ConfigError(RecognizerError):
    """Invalid configuration value (environment or CLI)."""

    def __init__(self, message: str, *, key: str = "") -> None:
        super().__init__(message)
        self.key = key

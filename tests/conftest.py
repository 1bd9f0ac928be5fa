# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Shared test configuration and fixtures."""

try:
    import recognizer  # noqa: F401
except ImportError:
    raise ImportError("recognizer is not installed. Run: pip install -e '.[dev]'") from None

import pytest

from recognizer.styles import InlineStyleProvider


@pytest.fixture
def provider():
    """Default style provider (inline styles over UA defaults)."""
    return InlineStyleProvider()

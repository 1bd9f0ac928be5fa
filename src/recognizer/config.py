# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Runtime configuration for document-level recognition runs.

The scoring core takes no configuration; these knobs only affect the
document walk (node budget), the consumer-side threshold used by the CLI,
and logging.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from .errors import ConfigError
from .scoring import MAX_CONFIDENCE

_ENV_PREFIX = "RECOGNIZER_"
_TRUTHY = frozenset({"1", "true", "yes", "on"})
_FALSY = frozenset({"", "0", "false", "no", "off"})


@dataclass(frozen=True)
class RecognizerConfig:
    """Immutable recognizer configuration."""

    min_confidence: int = 0  # consumer threshold, never applied by the core itself
    max_nodes: int = 50_000
    log_level: str = "INFO"
    json_logs: bool = False

    def __post_init__(self) -> None:
        if not 0 <= self.min_confidence <= MAX_CONFIDENCE:
            raise ConfigError(
                f"min_confidence must be between 0 and {MAX_CONFIDENCE}, got {self.min_confidence}",
                key="min_confidence",
            )
        if self.max_nodes < 1:
            raise ConfigError(f"max_nodes must be positive, got {self.max_nodes}", key="max_nodes")

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> RecognizerConfig:
        """Build a config from ``RECOGNIZER_*`` environment variables.

        Unset variables keep the dataclass defaults.
        """
        env = os.environ if environ is None else environ
        kwargs: dict = {}

        raw = env.get(f"{_ENV_PREFIX}MIN_CONFIDENCE", "").strip()
        if raw:
            kwargs["min_confidence"] = _parse_int(raw, "min_confidence")

        raw = env.get(f"{_ENV_PREFIX}MAX_NODES", "").strip()
        if raw:
            kwargs["max_nodes"] = _parse_int(raw, "max_nodes")

        raw = env.get(f"{_ENV_PREFIX}LOG_LEVEL", "").strip()
        if raw:
            kwargs["log_level"] = raw.upper()

        raw = env.get(f"{_ENV_PREFIX}JSON_LOGS", "").strip().lower()
        if raw in _TRUTHY:
            kwargs["json_logs"] = True
        elif raw not in _FALSY:
            raise ConfigError(f"json_logs must be a boolean flag, got {raw!r}", key="json_logs")

        return cls(**kwargs)


def _parse_int(raw: str, key: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{key} must be an integer, got {raw!r}", key=key) from None

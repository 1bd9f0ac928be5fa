# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Tests for RecognizerConfig defaults, validation and environment loading."""

from __future__ import annotations

import dataclasses

import pytest

from recognizer.config import RecognizerConfig
from recognizer.errors import ConfigError, RecognizerError


class TestDefaults:
    def test_values(self):
        config = RecognizerConfig()
        assert config.min_confidence == 0
        assert config.max_nodes == 50_000
        assert config.log_level == "INFO"
        assert config.json_logs is False

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            RecognizerConfig().max_nodes = 1  # type: ignore[misc]


class TestValidation:
    @pytest.mark.parametrize("value", [-1, 100])
    def test_min_confidence_range(self, value):
        with pytest.raises(ConfigError) as exc_info:
            RecognizerConfig(min_confidence=value)
        assert exc_info.value.key == "min_confidence"

    def test_bounds_accepted(self):
        assert RecognizerConfig(min_confidence=99).min_confidence == 99
        assert RecognizerConfig(max_nodes=1).max_nodes == 1

    def test_max_nodes_positive(self):
        with pytest.raises(ConfigError, match="max_nodes"):
            RecognizerConfig(max_nodes=0)

    def test_is_recognizer_error(self):
        with pytest.raises(RecognizerError):
            RecognizerConfig(max_nodes=-5)


class TestFromEnv:
    def test_empty_env_keeps_defaults(self):
        assert RecognizerConfig.from_env({}) == RecognizerConfig()

    def test_reads_all_keys(self):
        config = RecognizerConfig.from_env(
            {
                "RECOGNIZER_MIN_CONFIDENCE": "70",
                "RECOGNIZER_MAX_NODES": " 1000 ",
                "RECOGNIZER_LOG_LEVEL": "debug",
                "RECOGNIZER_JSON_LOGS": "Yes",
            }
        )
        assert config == RecognizerConfig(min_confidence=70, max_nodes=1000, log_level="DEBUG", json_logs=True)

    @pytest.mark.parametrize("raw", ["0", "false", "off", ""])
    def test_json_logs_false(self, raw):
        assert RecognizerConfig.from_env({"RECOGNIZER_JSON_LOGS": raw}).json_logs is False

    def test_json_logs_garbage(self):
        with pytest.raises(ConfigError) as exc_info:
            RecognizerConfig.from_env({"RECOGNIZER_JSON_LOGS": "maybe"})
        assert exc_info.value.key == "json_logs"

    def test_non_integer(self):
        with pytest.raises(ConfigError, match="max_nodes must be an integer"):
            RecognizerConfig.from_env({"RECOGNIZER_MAX_NODES": "lots"})

    def test_out_of_range_from_env(self):
        with pytest.raises(ConfigError):
            RecognizerConfig.from_env({"RECOGNIZER_MIN_CONFIDENCE": "150"})

    def test_reads_process_environment(self, monkeypatch):
        monkeypatch.setenv("RECOGNIZER_MIN_CONFIDENCE", "42")
        assert RecognizerConfig.from_env().min_confidence == 42

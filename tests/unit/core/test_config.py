"""Tests for snipsearch.config module."""

from __future__ import annotations

import pytest

from snipsearch.config import KeyStrategy, SearchConfig, validate_half_window
from snipsearch.error_handling import InvalidArgumentError
from snipsearch.types import OutputFormat


class TestSearchConfig:
    def test_defaults(self):
        cfg = SearchConfig()
        assert cfg.half_window == 2
        assert cfg.markers == ("<b>", "</b>")
        assert cfg.encoding == "utf-8"
        assert cfg.key_strategy == KeyStrategy.BASENAME
        assert cfg.parallel is False
        assert cfg.output_format == OutputFormat.TEXT
        cfg.validate()

    def test_resolve_workers(self):
        assert SearchConfig(workers=3).resolve_workers() == 3
        assert SearchConfig().resolve_workers() >= 1

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"half_window": -1},
            {"highlight_start": ""},
            {"highlight_end": ""},
            {"workers": -2},
            {"max_results": 0},
        ],
    )
    def test_validate_rejects(self, kwargs):
        with pytest.raises(InvalidArgumentError):
            SearchConfig(**kwargs).validate()


class TestValidateHalfWindow:
    @pytest.mark.parametrize("k", [0, 1, 100])
    def test_accepts_non_negative(self, k):
        assert validate_half_window(k) == k

    @pytest.mark.parametrize("k", [-1, -100])
    def test_rejects_negative(self, k):
        with pytest.raises(InvalidArgumentError) as exc_info:
            validate_half_window(k)
        assert exc_info.value.context["half_window"] == k

    @pytest.mark.parametrize("k", [True, "2", 2.0, None])
    def test_rejects_non_integers(self, k):
        with pytest.raises(InvalidArgumentError):
            validate_half_window(k)  # type: ignore[arg-type]

    def test_is_a_value_error(self):
        with pytest.raises(ValueError):
            validate_half_window(-1)

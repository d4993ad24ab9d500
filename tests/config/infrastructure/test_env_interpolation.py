"""Tests for ${VAR} interpolation over raw YAML data."""

import pytest

from lib_bench.config.infrastructure.env_interpolation import (
    collect_missing_vars,
    interpolate,
)


class TestCollectMissingVars:
    def test_reports_each_unset_var_once_in_first_seen_order(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("ALPHA", raising=False)
        monkeypatch.delenv("BETA", raising=False)
        data = {"a": "${BETA}", "b": ["${ALPHA}", "x-${BETA}"]}

        assert collect_missing_vars(data) == ["BETA", "ALPHA"]

    def test_var_with_default_is_never_missing(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("ALPHA", raising=False)

        assert collect_missing_vars({"a": "${ALPHA:-fallback}"}) == []

    def test_keys_are_not_scanned(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("ALPHA", raising=False)

        assert collect_missing_vars({"${ALPHA}": "plain"}) == []


class TestInterpolate:
    def test_substitutes_nested_strings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HOST", "example.org")
        data = {"servers": [{"url": "https://${HOST}/api"}], "port": 8080}

        assert interpolate(data) == {
            "servers": [{"url": "https://example.org/api"}],
            "port": 8080,
        }

    def test_set_var_wins_over_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MODE", "strict")

        assert interpolate("${MODE:-lenient}") == "strict"

    def test_default_used_when_unset(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("MODE", raising=False)

        assert interpolate("${MODE:-lenient}") == "lenient"

    def test_non_string_leaves_untouched(self) -> None:
        assert interpolate([1, 2.5, True, None]) == [1, 2.5, True, None]

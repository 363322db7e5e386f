"""Tests for rule filtering and nixf-tidy path resolution."""

import pytest

from nixf_diagnose.config import (
    NIXF_TIDY_PATH_ENV,
    Config,
    get_default_config,
    is_selected,
    resolve_nixf_tidy_path,
)
from nixf_diagnose.errors import NixfTidyNotFoundError


def test_default_config():
    config = get_default_config()
    assert config.variable_lookup is True
    assert config.auto_fix is False
    assert config.only is None
    assert config.ignore == frozenset()


class TestIsSelected:
    def test_everything_selected_by_default(self):
        assert is_selected(Config(), "E1")

    def test_ignored_rule(self):
        config = Config(ignore=frozenset({"E1"}))
        assert not is_selected(config, "E1")
        assert is_selected(config, "E2")

    def test_only_rule(self):
        config = Config(only="E2")
        assert not is_selected(config, "E1")
        assert is_selected(config, "E2")

    def test_ignore_applies_after_only(self):
        config = Config(only="E1", ignore=frozenset({"E1"}))
        assert not is_selected(config, "E1")

    def test_exact_match(self):
        config = Config(ignore=frozenset({"sema-unused"}))
        assert is_selected(config, "sema-unused-def-let")
        assert is_selected(config, "SEMA-UNUSED")


class TestResolveNixfTidyPath:
    def test_explicit_path_wins(self, monkeypatch):
        monkeypatch.setenv(NIXF_TIDY_PATH_ENV, "/from/env")
        assert resolve_nixf_tidy_path("/explicit/nixf-tidy") == "/explicit/nixf-tidy"

    def test_environment_before_search_path(self, monkeypatch, tmp_path):
        monkeypatch.setenv(NIXF_TIDY_PATH_ENV, "/from/env")
        monkeypatch.setenv("PATH", str(tmp_path))
        assert resolve_nixf_tidy_path() == "/from/env"

    def test_search_path(self, monkeypatch, fake_nixf_tidy):
        monkeypatch.delenv(NIXF_TIDY_PATH_ENV, raising=False)
        monkeypatch.setenv("PATH", str(fake_nixf_tidy.parent))
        assert resolve_nixf_tidy_path() == str(fake_nixf_tidy)

    def test_not_found(self, monkeypatch, tmp_path):
        monkeypatch.delenv(NIXF_TIDY_PATH_ENV, raising=False)
        monkeypatch.setenv("PATH", str(tmp_path))
        with pytest.raises(NixfTidyNotFoundError):
            resolve_nixf_tidy_path()

    def test_custom_lookup_chain(self):
        chain = [lambda: None, lambda: "/second", lambda: "/third"]
        assert resolve_nixf_tidy_path(lookups=chain) == "/second"

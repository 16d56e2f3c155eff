import logging

import pytest

from research_scaffold import config


def test_defaults():
    assert config.default_mode() == "literate"
    assert config.ignore_large_outputs() is True
    assert config.git_add_default() is True
    assert config.git_author_env() == {}
    assert config.package_snapshot_date() == "2025-01-01"
    assert config.log_level() == logging.INFO


@pytest.mark.parametrize(
    "raw,expected",
    [("false", False), ("0", False), ("Off", False), ("yes", True), ("garbage", True)],
)
def test_bool_parsing(monkeypatch, raw, expected):
    monkeypatch.setenv("RESEARCH_SCAFFOLD_IGNORE_LARGE_OUTPUTS", raw)
    assert config.ignore_large_outputs() is expected


def test_default_mode_ignores_unknown_values(monkeypatch):
    monkeypatch.setenv("RESEARCH_SCAFFOLD_DEFAULT_MODE", " Scripted ")
    assert config.default_mode() == "scripted"
    monkeypatch.setenv("RESEARCH_SCAFFOLD_DEFAULT_MODE", "notebook")
    assert config.default_mode() == "literate"


def test_log_level(monkeypatch):
    monkeypatch.setenv("RESEARCH_SCAFFOLD_LOG_LEVEL", "debug")
    assert config.log_level() == logging.DEBUG
    monkeypatch.setenv("RESEARCH_SCAFFOLD_LOG_LEVEL", "chatty")
    assert config.log_level() == logging.INFO


def test_package_date_override(monkeypatch):
    monkeypatch.setenv("RESEARCH_SCAFFOLD_PACKAGE_DATE", "2024-03-01")
    assert config.package_snapshot_date() == "2024-03-01"

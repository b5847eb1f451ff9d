"""Tests for settings loading and RNG construction."""

from __future__ import annotations

import importlib
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

utils = importlib.import_module("melody_composer.utils")


def test_missing_settings_file_returns_empty(tmp_path):
    """Absent files are not an error."""

    assert utils.load_settings(tmp_path / "missing.json") == {}


def test_settings_file_is_loaded(tmp_path):
    """A JSON object is returned as a dictionary."""

    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"key": "D", "length": 8}), encoding="utf-8")
    assert utils.load_settings(path) == {"key": "D", "length": 8}


def test_invalid_settings_are_logged(tmp_path, caplog):
    """Malformed JSON logs an error and falls back to no settings."""

    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")
    with caplog.at_level(logging.ERROR):
        assert utils.load_settings(path) == {}
    assert "Could not load settings" in caplog.text


def test_non_object_settings_are_rejected(tmp_path, caplog):
    """A JSON list is not a valid settings file."""

    path = tmp_path / "settings.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with caplog.at_level(logging.ERROR):
        assert utils.load_settings(path) == {}


def test_environment_override(tmp_path, monkeypatch):
    """``MELODY_COMPOSER_SETTINGS`` redirects the default settings path."""

    path = tmp_path / "custom.json"
    path.write_text(json.dumps({"mood": "calm"}), encoding="utf-8")
    monkeypatch.setenv("MELODY_COMPOSER_SETTINGS", str(path))
    assert utils.settings_path() == path
    assert utils.load_settings() == {"mood": "calm"}


def test_make_rng_is_reproducible():
    """Equal seeds give equal streams."""

    first = utils.make_rng(99)
    second = utils.make_rng(99)
    assert [first.random() for _ in range(5)] == [second.random() for _ in range(5)]

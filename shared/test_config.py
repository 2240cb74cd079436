"""Tests for configuration helpers."""

import pytest

from shared.config import (
    DEFAULT_MAX_WORKERS,
    get_attachments_dir,
    get_database_url,
    get_default_collection,
    get_env,
    get_max_workers,
)


def test_get_env_required_missing(monkeypatch):
    """Test that a missing required variable raises."""
    monkeypatch.delenv("NOTES_TEST_VAR", raising=False)

    with pytest.raises(ValueError):
        get_env("NOTES_TEST_VAR", required=True)


def test_defaults(monkeypatch):
    """Test default values when nothing is configured."""
    for key in ("DATABASE_URL", "ATTACHMENTS_DIR", "NOTES_COLLECTION", "SYNC_MAX_WORKERS"):
        monkeypatch.delenv(key, raising=False)

    assert get_database_url() == "sqlite:///notes.db"
    assert get_attachments_dir() == "attachments"
    assert get_default_collection() == "Blog"
    assert get_max_workers() == DEFAULT_MAX_WORKERS


def test_environment_overrides(monkeypatch):
    """Test reading values from the environment."""
    monkeypatch.setenv("DATABASE_URL", "sqlite:///other.db")
    monkeypatch.setenv("NOTES_COLLECTION", "Photos")
    monkeypatch.setenv("SYNC_MAX_WORKERS", "8")

    assert get_database_url() == "sqlite:///other.db"
    assert get_default_collection() == "Photos"
    assert get_max_workers() == 8


@pytest.mark.parametrize("raw", ["abc", "0", "-2"])
def test_invalid_max_workers_falls_back(monkeypatch, raw):
    """Test that unusable worker counts fall back to the default."""
    monkeypatch.setenv("SYNC_MAX_WORKERS", raw)

    assert get_max_workers() == DEFAULT_MAX_WORKERS

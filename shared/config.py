"""Shared configuration utilities."""

import logging
import os
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 4


def get_env(key: str, default: Optional[str] = None, required: bool = False) -> str:
    """Get environment variable with optional default and required validation."""
    value = os.getenv(key, default)
    if required and not value:
        raise ValueError(f"Required environment variable {key} is not set")
    return value


def get_database_url() -> str:
    """Get the notes database URL from environment."""
    return get_env("DATABASE_URL", "sqlite:///notes.db")


def get_attachments_dir() -> str:
    """Get the root directory for extracted attachments."""
    return get_env("ATTACHMENTS_DIR", "attachments")


def get_default_collection() -> str:
    """Get the notes folder synced when none is given."""
    return get_env("NOTES_COLLECTION", "Blog")


def get_max_workers() -> int:
    """Get the bound on concurrent attachment extraction."""
    raw = get_env("SYNC_MAX_WORKERS")
    if not raw or not raw.strip():
        return DEFAULT_MAX_WORKERS
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"Invalid SYNC_MAX_WORKERS value: {raw}, using {DEFAULT_MAX_WORKERS}")
        return DEFAULT_MAX_WORKERS
    if value < 1:
        logger.warning(f"SYNC_MAX_WORKERS must be positive, got {value}, using {DEFAULT_MAX_WORKERS}")
        return DEFAULT_MAX_WORKERS
    return value

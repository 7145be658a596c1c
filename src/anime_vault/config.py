# anime_vault/config.py

"""Shared configuration and environment setup."""

from __future__ import annotations

import logging
from os import getenv
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(override=True)

LOGGER = logging.getLogger(__name__)

ANILIST_URL = getenv("ANILIST_URL", "https://graphql.anilist.co")
DEFAULT_HTTP_TIMEOUT = 10.0


def get_http_timeout() -> float:
    """Return ANIME_VAULT_HTTP_TIMEOUT in seconds, or the default if unset or invalid."""
    raw = getenv("ANIME_VAULT_HTTP_TIMEOUT")
    if not raw:
        return DEFAULT_HTTP_TIMEOUT
    try:
        timeout = float(raw)
    except ValueError:
        timeout = 0.0
    if timeout <= 0:
        LOGGER.warning(
            "Invalid ANIME_VAULT_HTTP_TIMEOUT=%r, using %s seconds.",
            raw,
            DEFAULT_HTTP_TIMEOUT,
        )
        return DEFAULT_HTTP_TIMEOUT
    return timeout


def get_project_root() -> Path:
    """Return the project root directory.

    Prefers ANIME_VAULT_PROJECT_ROOT env var. Falls back to current working directory.
    """
    if root := getenv("ANIME_VAULT_PROJECT_ROOT"):
        return Path(root).resolve()
    return Path.cwd()


def get_store_path() -> Path:
    """Return the JSONL file previews are saved to."""
    if store := getenv("ANIME_VAULT_STORE"):
        return Path(store)
    return get_project_root() / "data" / "previews.jsonl"

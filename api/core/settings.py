"""
Environment configuration.

Every value is read on demand from `os.environ`. `validate()` is called once
on startup (see `api/main.py`) so a missing or malformed variable stops the
process before it starts serving.
"""

from __future__ import annotations

import os

DEFAULT_PORT = 3005
DEFAULT_PAGE_LIMIT = 6
DEFAULT_DB_NAME = "db_pokemon"
DEFAULT_SEED_SOURCE_URL = "https://pokeapi.co/api/v2/pokemon?limit=650"

API_PREFIX = "/api/v2"


class SettingsError(RuntimeError):
    pass


def _env_str(name: str, default: str = "") -> str:
    return os.environ.get(name, "").strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise SettingsError(f"{name} must be an integer, got {raw!r}.") from e


def mongodb_url() -> str:
    url = _env_str("MONGODB")
    if not url:
        raise SettingsError("MONGODB is not set.")
    return url


def mongodb_db_name() -> str:
    return _env_str("MONGODB_DB_NAME", DEFAULT_DB_NAME)


def port() -> int:
    return _env_int("PORT", DEFAULT_PORT)


def default_limit() -> int:
    return _env_int("DEFAULT_LIMIT", DEFAULT_PAGE_LIMIT)


def seed_source_url() -> str:
    return _env_str("SEED_SOURCE_URL", DEFAULT_SEED_SOURCE_URL)


def log_level() -> str:
    return _env_str("LOG_LEVEL", "INFO").upper()


def validate() -> None:
    """
    Fail fast on a bad environment.
    """
    mongodb_url()
    port()
    if default_limit() < 1:
        raise SettingsError("DEFAULT_LIMIT must be >= 1.")

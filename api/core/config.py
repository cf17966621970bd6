"""
Environment-backed settings.

Values come from the process environment. `load_env_file()` reads a local
`.env` first; variables already set in the environment take precedence.
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3000


def load_env_file(path: str | None = None) -> bool:
    return load_dotenv(dotenv_path=path, override=False)


def env_str(name: str, default: str) -> str:
    return os.environ.get(name, "").strip() or default


def env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def host() -> str:
    return env_str("HOST", DEFAULT_HOST)


def port() -> int:
    return env_int("PORT", DEFAULT_PORT)


def log_level() -> str:
    return env_str("LOG_LEVEL", "INFO").upper()

"""
Runtime settings read from environment variables.

Values are read on every call so tests (and a reloaded `.env`) can change
them without restarting the process.
"""

from __future__ import annotations

import os
from pathlib import Path

DEFAULT_PORT = 4441
DEFAULT_MAX_UPLOAD_BYTES = 5 * 1024 * 1024  # 5 MiB


def env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def app_env() -> str:
    return os.environ.get("APP_ENV", "production").strip().lower() or "production"


def is_development() -> bool:
    return app_env() == "development"


def host() -> str:
    return os.environ.get("HOST", "0.0.0.0").strip() or "0.0.0.0"


def port() -> int:
    return env_int("PORT", DEFAULT_PORT)


def log_level() -> str:
    return os.environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO"


def upload_dir() -> Path:
    raw = os.environ.get("UPLOAD_DIR", "").strip() or os.path.join("public", "img")
    return Path(raw)


def max_upload_bytes() -> int:
    return env_int("MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES)


def cors_origins() -> list[str]:
    raw = os.environ.get("CORS_ORIGINS", "").strip()
    if not raw:
        return ["*"]
    return [origin.strip() for origin in raw.split(",") if origin.strip()]

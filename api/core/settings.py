"""
Environment-driven settings.

Values are read at call time (not import time) so a restarted worker or a
test's `monkeypatch.setenv` picks up changes without reloading modules.
"""

from __future__ import annotations

import os
from pathlib import Path

from fastapi import HTTPException

DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024  # 10 MiB
DEFAULT_CORS_ORIGINS = ("http://localhost:5173", "http://127.0.0.1:5173")


def env_str(name: str, default: str) -> str:
    return os.environ.get(name, default).strip() or default


def env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def upload_dir() -> Path:
    return Path(env_str("UPLOAD_DIR", "uploads"))


def public_dir() -> Path:
    return Path(env_str("PUBLIC_DIR", "public"))


def log_level() -> str:
    return env_str("LOG_LEVEL", "INFO").upper()


def cors_origins() -> list[str]:
    raw = os.environ.get("CORS_ORIGINS", "")
    origins = [o.strip() for o in raw.split(",") if o.strip()]
    return origins or list(DEFAULT_CORS_ORIGINS)


def max_upload_bytes() -> int:
    """
    Read MAX_UPLOAD_BYTES, falling back to 10 MiB when unset.
    """
    raw = os.environ.get("MAX_UPLOAD_BYTES", "").strip()
    if not raw:
        return DEFAULT_MAX_UPLOAD_BYTES

    try:
        value = int(raw)
    except ValueError:
        raise HTTPException(
            status_code=500,
            detail="Invalid MAX_UPLOAD_BYTES. It must be an integer.",
        )

    if value <= 0:
        raise HTTPException(
            status_code=500,
            detail="Invalid MAX_UPLOAD_BYTES. It must be > 0.",
        )

    return value

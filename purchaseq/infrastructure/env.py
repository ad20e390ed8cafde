"""
Environment loader for PurchaseQ.

Side Effects:
    - Loads the nearest .env file (walking up from this package) exactly once

Usage:
    from purchaseq.infrastructure.env import ensure_env_loaded, get_env_bool

    ensure_env_loaded()
    strict = get_env_bool("PURCHASEQ_REQUIRE_SINK", False)
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

_ENV_LOADED = False

_TRUTHY = ("true", "1", "yes", "on")
_FALSY = ("false", "0", "no", "off")


def ensure_env_loaded(env_path: Path | None = None) -> None:
    """
    Ensure the .env file is loaded exactly once.

    Args:
        env_path: Optional path to .env file. If None, searches upward for one.

    Side Effects:
        - Loads environment variables from .env (existing variables win)
        - Sets module-level flag to prevent double-loading
    """
    global _ENV_LOADED
    if _ENV_LOADED:
        return

    if env_path is None:
        current = Path(__file__).parent
        while current != current.parent:
            env_candidate = current / ".env"
            if env_candidate.exists():
                env_path = env_candidate
                break
            current = current.parent

    if env_path and env_path.exists():
        load_dotenv(env_path)
    else:
        load_dotenv()
    _ENV_LOADED = True


def get_env_int(key: str, default: int) -> int:
    """Integer env var; unparseable values fall back to default."""
    raw = os.getenv(key)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def get_env_bool(key: str, default: bool) -> bool:
    raw = os.getenv(key)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    return default

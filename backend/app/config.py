from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


logger = logging.getLogger(__name__)

_DOTENV_LOADED = False
_BACKEND_DIR = Path(__file__).resolve().parents[1]
_PROJECT_ROOT = _BACKEND_DIR.parent


def _load_env_once() -> None:
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return

    candidates = []
    env_hint = os.environ.get("APP_ENV_FILE")
    if env_hint:
        candidates.append(Path(env_hint))
    candidates.append(_PROJECT_ROOT / ".env")
    candidates.append(_BACKEND_DIR / ".env")

    for candidate in candidates:
        candidate = Path(candidate).expanduser()
        if not candidate.is_absolute():
            candidate = (_PROJECT_ROOT / candidate).resolve()
        if candidate.exists():
            load_dotenv(candidate)
            break

    _DOTENV_LOADED = True


_load_env_once()


def _env(key: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    return value.strip()


def _env_int(key: str, default: int) -> int:
    raw = _env(key)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("config: %s=%r is not an integer, using %s", key, raw, default)
        return default


def _env_float(key: str, default: float) -> float:
    raw = _env(key)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("config: %s=%r is not a number, using %s", key, raw, default)
        return default


def jwt_secret() -> str:
    secret = _env("JWT_SECRET")
    if not secret:
        # Fallback to SESSION_SECRET if provided
        secret = _env("SESSION_SECRET", "changeme-secret")
    return secret


def jwt_refresh_secret() -> str:
    return _env("JWT_REFRESH_SECRET", "changeme-refresh-secret") or "changeme-refresh-secret"


def jwt_ttl_min() -> int:
    return _env_int("JWT_TTL_MIN", 60)


def jwt_refresh_ttl_days() -> int:
    return _env_int("JWT_REFRESH_TTL_DAYS", 7)


def gemini_api_key() -> Optional[str]:
    return _env("GEMINI_API_KEY")


def gemini_model() -> str:
    return _env("GEMINI_MODEL", "gemini-1.5-flash-latest") or "gemini-1.5-flash-latest"


def gemini_timeout_seconds() -> float:
    return _env_float("GEMINI_TIMEOUT_SECONDS", 15.0)


def twilio_account_sid() -> Optional[str]:
    return _env("TWILIO_ACCOUNT_SID")


def twilio_auth_token() -> Optional[str]:
    return _env("TWILIO_AUTH_TOKEN")


def twilio_phone_number() -> Optional[str]:
    return _env("TWILIO_PHONE_NUMBER")


def alert_phone_number() -> Optional[str]:
    return _env("ALERT_PHONE_NUMBER")

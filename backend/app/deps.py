import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from fastapi import Depends, Header, HTTPException, Request, status

from backend.app import config as app_config
from backend.app.core.security import decode_jwt
from backend.app.services.alerts import AlertDispatcher
from backend.app.services.chat_history import ChatHistoryStore
from backend.app.services.chat_service import ChatService
from backend.core.enums import Role
from backend.core.ports.sentiment import SentimentClassifierPort
from backend.providers.gemini import GeminiChatModel, GeminiClient, GeminiSentimentClassifier
from backend.providers.twilio import TwilioSmsClient


logger = logging.getLogger(__name__)

# ---------------- paths ----------------
BASE_DIR = Path(__file__).resolve().parents[1]  # backend/
PROJECT_ROOT = Path(__file__).resolve().parents[2]


# ---------------- settings ----------------
def _read_yaml(p: Path):
    with p.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def _deep_resolve_env(obj):
    def resolve(v):
        if isinstance(v, str) and v.startswith("${") and v.endswith("}"):
            return os.getenv(v[2:-1])
        return v

    if isinstance(obj, dict):
        return {k: _deep_resolve_env(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_deep_resolve_env(v) for v in obj]
    return resolve(obj)


def _load_config_yaml(env_var: str, filename: str) -> Dict[str, Any]:
    override = os.environ.get(env_var)
    if override:
        override_path = Path(override).expanduser()
        if not override_path.is_absolute():
            override_path = (PROJECT_ROOT / override_path).resolve()
        if not override_path.exists():
            raise FileNotFoundError(f"Config file not found at {override_path}")
        return _read_yaml(override_path) or {}

    default_path = BASE_DIR / "config" / filename
    if not default_path.exists():
        logger.warning("Config file %s missing; using built-in defaults", default_path)
        return {}
    return _read_yaml(default_path) or {}


class Settings:
    def __init__(self):
        self.app = _deep_resolve_env(_load_config_yaml("APP_CONFIG_PATH", "app.yaml"))

    def section(self, name: str) -> Dict[str, Any]:
        value = self.app.get(name) if isinstance(self.app, dict) else None
        return value if isinstance(value, dict) else {}


settings = Settings()


# ---------------- collaborator factories ----------------
def make_gemini_client() -> Optional[GeminiClient]:
    api_key = app_config.gemini_api_key()
    if not api_key:
        logger.warning("GEMINI_API_KEY not set; chat disabled and sentiment falls back to keywords")
        return None
    return GeminiClient(
        api_key,
        model=app_config.gemini_model(),
        timeout=app_config.gemini_timeout_seconds(),
    )


def make_sentiment_classifier(client: Optional[GeminiClient] = None) -> GeminiSentimentClassifier:
    return GeminiSentimentClassifier(client)


def make_sms_client() -> Optional[TwilioSmsClient]:
    sid = app_config.twilio_account_sid()
    token = app_config.twilio_auth_token()
    if not (sid and token):
        logger.warning("Twilio credentials not found; SMS alerts disabled")
        return None
    return TwilioSmsClient(sid, token)


def make_alert_dispatcher(sender: Optional[TwilioSmsClient] = None) -> AlertDispatcher:
    return AlertDispatcher(
        sender,
        from_number=app_config.twilio_phone_number(),
        to_number=app_config.alert_phone_number(),
    )


def make_chat_history() -> ChatHistoryStore:
    chat_cfg = settings.section("chat")
    return ChatHistoryStore(max_exchanges=int(chat_cfg.get("max_history", 10) or 10))


def make_chat_service(client: Optional[GeminiClient] = None, history: Optional[ChatHistoryStore] = None) -> ChatService:
    chat_cfg = settings.section("chat")
    model = None
    if client is not None:
        model = GeminiChatModel(
            client,
            max_output_tokens=int(chat_cfg.get("max_output_tokens", 250) or 250),
            temperature=float(chat_cfg.get("temperature", 0.7)),
        )
    return ChatService(
        model,
        history or make_chat_history(),
        assistant_name=str(chat_cfg.get("assistant_name") or "HahuBot"),
        hotel_name=str(chat_cfg.get("hotel_name") or "the hotel"),
        summary_window_hours=int(chat_cfg.get("summary_window_hours", 24) or 24),
    )


# ---------------- request dependencies ----------------
def get_sentiment_classifier(request: Request) -> SentimentClassifierPort:
    return request.app.state.sentiment_classifier


def get_alert_dispatcher(request: Request) -> AlertDispatcher:
    return request.app.state.alert_dispatcher


def get_chat_service(request: Request) -> ChatService:
    return request.app.state.chat_service


def _decode_bearer(authorization: Optional[str]) -> Dict[str, Any]:
    if not authorization:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authorization header missing")
    parts = authorization.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1].strip():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token missing")
    try:
        payload = decode_jwt(parts[1].strip(), secret=app_config.jwt_secret())
    except ValueError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    if payload.get("role") not in {r.value for r in Role}:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    return payload


def get_current_user(authorization: Optional[str] = Header(default=None)) -> Dict[str, Any]:
    return _decode_bearer(authorization)


def get_current_user_optional(authorization: Optional[str] = Header(default=None)) -> Optional[Dict[str, Any]]:
    if not authorization:
        return None
    return _decode_bearer(authorization)


def require_admin(user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
    if user.get("role") != Role.ADMIN.value:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden: Admins only")
    return user

import logging

from fastapi import APIRouter, Request

from backend.core.db.engine import get_engine, ping


logger = logging.getLogger(__name__)
router = APIRouter()


def _database_status() -> str:
    try:
        with get_engine().connect() as conn:
            return "up" if ping(conn) else "down (no result)"
    except Exception as exc:  # noqa: BLE001
        logger.debug("Health detail for database: %s", exc)
        return f"down ({exc.__class__.__name__})"


@router.get("/healthz")
def healthz(request: Request):
    state = request.app.state
    services = {
        "database": _database_status(),
        "sentiment": "configured" if state.sentiment_classifier.enabled else "disabled (no api key)",
        "sms": "configured" if state.alert_dispatcher.enabled else "disabled (not configured)",
        "chat": "configured" if state.chat_service.enabled else "disabled (no api key)",
    }
    return {"ok": services["database"] == "up", "services": services}

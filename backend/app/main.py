import logging

# --- Logging setup ---
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s %(name)s:%(lineno)d | %(message)s"
)
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
logging.getLogger("uvicorn.error").setLevel(logging.WARNING)
# --- End logging setup ---

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from tenacity import before_sleep_log, retry, stop_after_attempt, wait_exponential

from backend.app import deps as app_deps
from backend.app.deps import settings
from backend.app.routers import auth as auth_router
from backend.app.routers import chat as chat_router
from backend.app.routers import feedback as feedback_router
from backend.app.routers import health

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Hospitality Feedback API",
    version="1.0.0",
    description="Guest and staff feedback intake with negativity alerts and an assistant chat.",
)


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=0.5, min=1, max=5),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True,
)
def _create_tables() -> None:
    from backend.core.db.base import Base
    from backend.core.db.engine import get_engine
    import backend.core.models  # noqa: F401 - register models

    Base.metadata.create_all(bind=get_engine())


# Ensure DB tables exist (auto-create if migrations not applied)
try:
    _create_tables()
except Exception as _exc:  # noqa: BLE001 - non-fatal
    logger.warning("DB init skipped: %s", _exc)


# Collaborators built once and shared by every request
_gemini = app_deps.make_gemini_client()
app.state.sentiment_classifier = app_deps.make_sentiment_classifier(_gemini)
app.state.alert_dispatcher = app_deps.make_alert_dispatcher(app_deps.make_sms_client())
app.state.chat_service = app_deps.make_chat_service(_gemini)


# CORS
cfg = settings.section("server").get("cors", {}) or {}
app.add_middleware(
    CORSMiddleware,
    allow_origins=cfg.get("allow_origins", ["*"]),
    allow_methods=cfg.get("allow_methods", ["*"]),
    allow_headers=cfg.get("allow_headers", ["*"]),
)


@app.exception_handler(RequestValidationError)
async def _validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"field": ".".join(str(p) for p in err.get("loc", ()) if p != "body"), "message": err.get("msg", "")}
        for err in exc.errors()
    ]
    logger.info("request.invalid path=%s errors=%s", request.url.path, len(errors))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "Validation Failed", "errors": errors},
    )


# Routers
api_prefix = settings.section("server").get("api_prefix", "/api") or ""
app.include_router(health.router)
app.include_router(auth_router.router, prefix=f"{api_prefix}/auth", tags=["auth"])
app.include_router(feedback_router.router, prefix=api_prefix)
app.include_router(chat_router.router, prefix=api_prefix)


@app.get("/")
def root():
    return {"name": app.title, "docs": "/docs"}

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.app.deps import (
    get_alert_dispatcher,
    get_sentiment_classifier,
    require_admin,
    settings,
)
from backend.app.models.feedback import (
    ContextualFeedbackIn,
    FeedbackOut,
    GuestFeedbackIn,
    StaffFeedbackIn,
    TokenContext,
    TokenCreate,
    TokenOut,
    TokenValidationOut,
)
from backend.app.services.alerts import AlertDispatcher
from backend.app.services.feedback_ingestion import (
    FeedbackIngestionService,
    FeedbackValidationError,
    TokenRejectedError,
)
from backend.app.services.token_validator import FeedbackTokenValidator
from backend.core.db.session import get_db
from backend.core.ports.sentiment import SentimentClassifierPort
from backend.core.repos.factory import get_feedback_repo, get_feedback_tokens_repo


logger = logging.getLogger(__name__)
router = APIRouter(prefix="/feedback", tags=["feedback"])


def _feedback_cfg() -> Dict[str, Any]:
    return settings.section("feedback")


def get_ingestion_service(
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    alerts: AlertDispatcher = Depends(get_alert_dispatcher),
    sentiment: SentimentClassifierPort = Depends(get_sentiment_classifier),
) -> FeedbackIngestionService:
    return FeedbackIngestionService(
        get_feedback_repo(session=db),
        alerts=alerts,
        sentiment=sentiment,
        tokens=FeedbackTokenValidator(get_feedback_tokens_repo(session=db)),
        require_token=bool(_feedback_cfg().get("require_token", False)),
        defer=background_tasks.add_task,
    )


def _server_error(what: str, exc: Exception) -> HTTPException:
    logger.exception("Error saving %s feedback: %s", what, exc)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Server error while saving {what} feedback.",
    )


@router.post("/guest", response_model=FeedbackOut, status_code=status.HTTP_201_CREATED)
def create_guest_feedback(
    payload: GuestFeedbackIn,
    service: FeedbackIngestionService = Depends(get_ingestion_service),
):
    try:
        return service.submit_guest(payload)
    except SQLAlchemyError as exc:
        raise _server_error("guest", exc) from exc


@router.post("/staff", response_model=FeedbackOut, status_code=status.HTTP_201_CREATED)
def create_staff_feedback(
    payload: StaffFeedbackIn,
    service: FeedbackIngestionService = Depends(get_ingestion_service),
):
    try:
        return service.submit_staff(payload)
    except SQLAlchemyError as exc:
        raise _server_error("staff", exc) from exc


@router.post("/contextual", response_model=FeedbackOut, status_code=status.HTTP_201_CREATED)
def create_contextual_feedback(
    payload: ContextualFeedbackIn,
    service: FeedbackIngestionService = Depends(get_ingestion_service),
):
    try:
        return service.submit_contextual(payload)
    except FeedbackValidationError as exc:
        logger.warning("feedback.rejected reason=%s", exc)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except TokenRejectedError as exc:
        code = status.HTTP_400_BAD_REQUEST if exc.missing else status.HTTP_404_NOT_FOUND
        raise HTTPException(status_code=code, detail=str(exc)) from exc
    except SQLAlchemyError as exc:
        raise _server_error("contextual", exc) from exc


@router.get("", response_model=List[FeedbackOut])
def list_feedback(
    _admin: Dict[str, Any] = Depends(require_admin),
    db: Session = Depends(get_db),
):
    try:
        rows = get_feedback_repo(session=db).list_recent()
    except SQLAlchemyError as exc:
        logger.exception("Error fetching feedback logs: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server error while fetching feedback.",
        ) from exc
    return rows


@router.get("/validate-token", response_model=TokenValidationOut, response_model_exclude_none=True)
def validate_token(
    tok: Optional[str] = Query(None),
    loc: Optional[str] = Query(None),
    id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    if not tok:
        content = TokenValidationOut(valid=False, message="Token is required for validation.")
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=content.to_content())

    check = FeedbackTokenValidator(get_feedback_tokens_repo(session=db)).validate(tok, loc=loc, context_id=id)
    if not check.valid:
        logger.info("token.invalid loc=%s id=%s reason=%s", loc, id, check.message)
        content = TokenValidationOut(valid=False, message=check.message)
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content=content.to_content())
    return TokenValidationOut(valid=True, context=check.context)


@router.post("/tokens", response_model=TokenOut, status_code=status.HTTP_201_CREATED)
def create_token(
    payload: TokenCreate,
    _admin: Dict[str, Any] = Depends(require_admin),
    db: Session = Depends(get_db),
):
    ttl = payload.ttl_hours or _feedback_cfg().get("token_ttl_hours")
    row = FeedbackTokenValidator(get_feedback_tokens_repo(session=db)).issue(
        payload.loc,
        context_id=payload.id,
        guest_name=payload.guest_name,
        ttl_hours=int(ttl) if ttl else None,
    )
    return TokenOut(
        token=row.token,
        context=TokenContext(loc=row.context_loc, id=row.context_id, guest_name=row.guest_name),
        expires_at=row.expires_at,
    )

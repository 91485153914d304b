import logging
from functools import partial
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException
from sqlalchemy.orm import Session

from backend.app.deps import get_chat_service
from backend.app.models.chat import ChatReply, ChatRequest
from backend.app.services.chat_service import ChatService, ChatServiceError, dashboard_summary
from backend.core.db.session import get_db
from backend.core.repos.factory import get_feedback_repo

router = APIRouter(prefix="/chat", tags=["chat"])
logger = logging.getLogger(__name__)

DEFAULT_SESSION = "anonymous"


@router.post("/message", response_model=ChatReply)
def chat_message(
    req: ChatRequest,
    x_session_id: Optional[str] = Header(default=None),
    service: ChatService = Depends(get_chat_service),
    db: Session = Depends(get_db),
):
    session_id = req.session_id or x_session_id or DEFAULT_SESSION
    summary = partial(_summary, db)
    try:
        reply = service.reply(session_id, req.message, summary)
    except ChatServiceError as exc:
        if exc.status_code >= 500:
            logger.error("chat.failed session=%s status=%s error=%s", session_id, exc.status_code, exc.message)
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc
    return ChatReply(reply=reply)


def _summary(db: Session, window_hours: int) -> str:
    return dashboard_summary(get_feedback_repo(session=db), window_hours=window_hours)

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from backend.app.models.feedback import TokenContext
from backend.core.models.tokens import FeedbackToken
from backend.core.repos.feedback_tokens_repo_db import FeedbackTokensRepoDB

logger = logging.getLogger(__name__)

DEFAULT_TTL_HOURS = 72

MSG_NOT_FOUND = "Feedback session not found or expired."
MSG_USED = "This feedback link has already been used."
MSG_MISMATCH = "This feedback link does not belong to this location."


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo on the way back
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


@dataclass
class TokenCheck:
    valid: bool
    context: Optional[TokenContext] = None
    message: Optional[str] = None
    token_id: Optional[int] = None


class FeedbackTokenValidator:
    def __init__(self, repo: FeedbackTokensRepoDB, *, clock: Callable[[], datetime] = _utcnow) -> None:
        self._repo = repo
        self._clock = clock

    def issue(
        self,
        loc: str,
        *,
        context_id: Optional[str] = None,
        guest_name: Optional[str] = None,
        ttl_hours: Optional[int] = None,
    ) -> FeedbackToken:
        expires_at = self._clock() + timedelta(hours=ttl_hours or DEFAULT_TTL_HOURS)
        row = self._repo.create(
            token=secrets.token_urlsafe(24),
            context_loc=loc,
            context_id=context_id,
            guest_name=guest_name,
            expires_at=expires_at,
        )
        logger.info("token.issue id=%s loc=%s context_id=%s", row.id, loc, context_id)
        return row

    def validate(self, token: str, *, loc: Optional[str] = None, context_id: Optional[str] = None) -> TokenCheck:
        row = self._repo.get_by_token(token)
        if row is None or _as_utc(row.expires_at) <= self._clock():
            return TokenCheck(valid=False, message=MSG_NOT_FOUND)
        if row.used_at is not None:
            return TokenCheck(valid=False, message=MSG_USED)
        if loc and row.context_loc and loc != row.context_loc:
            return TokenCheck(valid=False, message=MSG_MISMATCH)
        if context_id and row.context_id and str(context_id) != row.context_id:
            return TokenCheck(valid=False, message=MSG_MISMATCH)
        return TokenCheck(
            valid=True,
            context=TokenContext(loc=row.context_loc, id=row.context_id, guest_name=row.guest_name),
            token_id=row.id,
        )

    def consume(self, token: str, *, loc: Optional[str] = None, context_id: Optional[str] = None) -> TokenCheck:
        check = self.validate(token, loc=loc, context_id=context_id)
        if not check.valid:
            return check
        if not self._repo.mark_used(check.token_id, self._clock()):
            return TokenCheck(valid=False, message=MSG_USED)
        logger.info("token.consume id=%s", check.token_id)
        return check

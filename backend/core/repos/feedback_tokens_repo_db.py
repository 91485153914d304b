from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from backend.core.models.tokens import FeedbackToken


class FeedbackTokensRepoDB:
    def __init__(self, session: Session):
        self.session = session

    def create(
        self,
        *,
        token: str,
        context_loc: str,
        context_id: Optional[str],
        guest_name: Optional[str],
        expires_at: datetime,
    ) -> FeedbackToken:
        row = FeedbackToken(
            token=token,
            context_loc=context_loc,
            context_id=context_id,
            guest_name=guest_name,
            expires_at=expires_at,
        )
        self.session.add(row)
        self.session.flush()
        return row

    def get_by_token(self, token: str) -> Optional[FeedbackToken]:
        stmt = select(FeedbackToken).where(FeedbackToken.token == token)
        return self.session.execute(stmt).scalar_one_or_none()

    def mark_used(self, token_id: int, used_at: datetime) -> bool:
        # Guarded update so two concurrent submissions cannot both consume it
        stmt = (
            update(FeedbackToken)
            .where(FeedbackToken.id == token_id, FeedbackToken.used_at.is_(None))
            .values(used_at=used_at)
            .execution_options(synchronize_session="fetch")
        )
        res = self.session.execute(stmt)
        return res.rowcount > 0

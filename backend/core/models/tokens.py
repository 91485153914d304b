from __future__ import annotations

from sqlalchemy import Column, DateTime, Integer, String, UniqueConstraint
from sqlalchemy.sql import func

from backend.core.db.base import Base


class FeedbackToken(Base):
    """Single-use link token tying a contextual submission to a room, table or desk."""

    __tablename__ = "feedback_tokens"

    id = Column(Integer, primary_key=True, autoincrement=True)
    token = Column(String(128), nullable=False)
    context_loc = Column(String(50), nullable=False)
    context_id = Column(String(100), nullable=True)
    guest_name = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    used_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        UniqueConstraint("token", name="uq_feedback_tokens_token"),
    )

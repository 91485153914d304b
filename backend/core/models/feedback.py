from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import List

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Index,
    Integer,
    String,
    Text,
    func,
)

from backend.core.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _rating():
    return Column(Integer, nullable=True)


class Feedback(Base):
    """One guest or staff submission. Rows are insert-only."""

    __tablename__ = "feedback"

    id = Column(Integer, primary_key=True, autoincrement=True)
    source = Column(String(10), nullable=False)
    timestamp = Column(DateTime(timezone=True), default=_utcnow, server_default=func.now(), nullable=False)
    sentiment = Column(String(10), nullable=False, default="Neutral")
    is_negative = Column(Boolean, nullable=False, default=False)
    # Map attribute 'comment' to COMMENT_TEXT (reserved keyword on some backends)
    comment = Column("COMMENT_TEXT", Text, nullable=True)
    feedback_area = Column(String(50), nullable=True)

    # quick guest form
    rating = _rating()
    room_number = Column(String(50), nullable=True)
    language = Column(String(20), nullable=True)

    # context
    context_loc = Column(String(50), nullable=True)
    context_id = Column(String(100), nullable=True)
    context_token = Column(String(255), nullable=True)
    context_guest_name = Column(String(255), nullable=True)

    # general guest feedback
    overall_rating = _rating()
    feedback_type = Column(String(20), nullable=True)
    booking_reference = Column(String(100), nullable=True)
    contact_consent = Column(Boolean, nullable=False, default=False)
    other_comments = Column(Text, nullable=True)

    # room
    room_cleanliness = _rating()
    room_comfort = _rating()
    room_noise = _rating()
    bathroom_cleanliness = _rating()
    room_amenities = _rating()
    room_comments = Column(Text, nullable=True)

    # dining
    food_quality = _rating()
    food_variety = _rating()
    dining_service = _rating()
    service_speed = _rating()
    staff_attentiveness = _rating()
    ambiance_rating = _rating()
    dining_comments = Column(Text, nullable=True)

    # amenities
    pool_cleanliness = _rating()
    seating_availability = _rating()
    towel_availability = _rating()
    pool_ambiance = _rating()
    wifi_rating = _rating()
    restroom_rating = _rating()
    amenities_comments = Column(Text, nullable=True)

    # staff / checkout
    staff_helpfulness = _rating()
    staff_friendliness = _rating()
    reception_rating = _rating()
    checkout_speed = _rating()
    checkout_staff_friendliness = _rating()
    billing_accuracy = _rating()
    staff_mention = Column(String(255), nullable=True)
    staff_comments = Column(Text, nullable=True)
    checkout_comments = Column(Text, nullable=True)

    value_rating = _rating()

    # JSON-encoded list of file names
    simulated_file_names_json = Column("SIMULATED_FILE_NAMES", Text, nullable=True)

    # staff log
    category = Column(String(20), nullable=True)
    severity = Column(String(10), nullable=True)
    location = Column(String(255), nullable=True)
    details = Column(Text, nullable=True)

    __table_args__ = (
        Index("ix_feedback_timestamp", "timestamp"),
        Index("ix_feedback_context", "context_loc", "context_id"),
    )

    def __repr__(self) -> str:
        return f"<Feedback(id={self.id}, source={self.source}, negative={self.is_negative})>"

    @property
    def simulated_file_names(self) -> List[str]:
        if not self.simulated_file_names_json:
            return []
        try:
            names = json.loads(self.simulated_file_names_json)
        except ValueError:
            return []
        return [str(n) for n in names] if isinstance(names, list) else []

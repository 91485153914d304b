from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from backend.core.models.feedback import Feedback


class FeedbackRepoDB:
    def __init__(self, session: Session):
        self.session = session

    def create(self, data: Dict[str, Any]) -> Feedback:
        payload = dict(data)
        # Map 'simulated_file_names' -> JSON text column
        if "simulated_file_names" in payload:
            names = payload.pop("simulated_file_names")
            payload["simulated_file_names_json"] = json.dumps(list(names), ensure_ascii=False) if names else None

        fb = Feedback(**payload)
        self.session.add(fb)
        self.session.flush()
        return fb

    def commit(self) -> None:
        self.session.commit()

    def list_recent(self) -> List[Feedback]:
        q = select(Feedback).order_by(Feedback.timestamp.desc(), Feedback.id.desc())
        return list(self.session.execute(q).scalars().all())

    def count_negative_since(self, since: datetime) -> int:
        q = select(func.count()).select_from(Feedback).where(
            Feedback.is_negative.is_(True), Feedback.timestamp >= since
        )
        return int(self.session.execute(q).scalar_one())

    def average_guest_rating_since(self, since: datetime) -> Optional[float]:
        q = select(func.avg(Feedback.rating)).where(
            Feedback.source == "Guest",
            Feedback.rating.is_not(None),
            Feedback.timestamp >= since,
        )
        value = self.session.execute(q).scalar()
        return float(value) if value is not None else None

from __future__ import annotations

import logging
from typing import Any, List, Optional

from backend.app.models.feedback import FeedbackOut
from backend.core.ports.sms import SmsSenderPort

logger = logging.getLogger(__name__)

MAX_SMS_LENGTH = 1600

_COMMENT_FIELDS = (
    "comment",
    "details",
    "checkout_comments",
    "room_comments",
    "dining_comments",
    "amenities_comments",
    "staff_comments",
    "other_comments",
)


def _value(v: Any) -> str:
    return getattr(v, "value", v)


def _first_comment(record: FeedbackOut) -> str:
    for field in _COMMENT_FIELDS:
        text = getattr(record, field, None)
        if text:
            return text
    return "N/A"


def format_alert_body(record: FeedbackOut) -> str:
    lines: List[str] = ["ALERT: Negative feedback received!", f"Source: {_value(record.source)}"]
    if record.rating is not None:
        lines.append(f"Rating: {record.rating}★")
    if record.severity:
        lines.append(f"Severity: {_value(record.severity)}")
    if record.location:
        lines.append(f"Location: {record.location}")
    if record.room_number:
        lines.append(f"Room/Table: {record.room_number}")
    if record.context_loc:
        where = record.context_loc if not record.context_id else f"{record.context_loc} {record.context_id}"
        lines.append(f"Context: {where}")
    if record.context_guest_name:
        lines.append(f"Guest: {record.context_guest_name}")
    if record.category:
        lines.append(f"Category: {_value(record.category)}")
    lines.append(f"Details: {_first_comment(record)}")
    if record.language:
        lines.append(f"Lang: {record.language}")
    return "\n".join(lines)[:MAX_SMS_LENGTH]


class AlertDispatcher:
    """Forwards negative records to an SMS recipient.

    A dispatcher without a sender or without both phone numbers is a no-op.
    ``dispatch`` never raises; it returns whether a message was handed off.
    """

    def __init__(
        self,
        sender: Optional[SmsSenderPort],
        *,
        from_number: Optional[str] = None,
        to_number: Optional[str] = None,
    ) -> None:
        self._sender = sender
        self._from = from_number
        self._to = to_number

    @property
    def enabled(self) -> bool:
        return bool(self._sender and self._from and self._to)

    def dispatch(self, record: FeedbackOut) -> bool:
        if not self.enabled:
            logger.warning("alert.skip feedback_id=%s reason=sms_not_configured", record.id)
            return False
        body = format_alert_body(record)
        try:
            sid = self._sender.send(body, to=self._to, from_=self._from)
        except Exception as exc:  # noqa: BLE001
            logger.error("alert.failed feedback_id=%s error=%s", record.id, exc)
            return False
        logger.info("alert.sent feedback_id=%s sid=%s", record.id, sid)
        return True

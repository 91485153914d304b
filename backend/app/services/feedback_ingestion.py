"""Validate, classify, persist and (maybe) alert for the three submission shapes.

Guest submissions are classified by the sentiment collaborator; when it cannot
produce a verdict the keyword lists decide. Staff submissions are negative iff
severity is High. Contextual submissions run a fixed cascade: a low primary
rating for the location first, then a keyword scan of the per-area comments.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Mapping, Optional

from backend.app.models.feedback import (
    ContextualFeedbackIn,
    FeedbackOut,
    GuestFeedbackIn,
    StaffFeedbackIn,
)
from backend.app.services.alerts import AlertDispatcher
from backend.app.services.token_validator import FeedbackTokenValidator
from backend.core.classifiers.keywords import is_negative_comment
from backend.core.enums import Sentiment, Severity, Source
from backend.core.ports.sentiment import SentimentClassifierPort
from backend.core.repos.feedback_repo_db import FeedbackRepoDB

logger = logging.getLogger(__name__)

LOW_RATING = 2

CONTEXT_COMMENT_FIELDS = (
    "checkout_comments",
    "room_comments",
    "dining_comments",
    "amenities_comments",
    "staff_comments",
    "other_comments",
)

Defer = Callable[..., Any]


class FeedbackValidationError(ValueError):
    pass


class MissingContextError(FeedbackValidationError):
    def __init__(self) -> None:
        super().__init__("Feedback context (location) is required.")


class TokenRejectedError(Exception):
    def __init__(self, message: str, *, missing: bool = False) -> None:
        super().__init__(message)
        self.missing = missing


def _is_low(value: Optional[int]) -> bool:
    return value is not None and value <= LOW_RATING


def contextual_is_negative(fields: Mapping[str, Any], loc: Optional[str]) -> bool:
    if loc == "checkout" and (_is_low(fields.get("checkout_speed")) or _is_low(fields.get("billing_accuracy"))):
        return True
    if loc == "room" and (_is_low(fields.get("room_cleanliness")) or _is_low(fields.get("bathroom_cleanliness"))):
        return True
    if loc == "dining_table" and _is_low(fields.get("food_quality")):
        return True
    return any(is_negative_comment(fields.get(name)) for name in CONTEXT_COMMENT_FIELDS)


def guest_sentiment(comment: Optional[str], classifier: Optional[SentimentClassifierPort]) -> Sentiment:
    if not comment:
        return Sentiment.NEUTRAL
    verdict = classifier.try_classify(comment) if classifier is not None else None
    if verdict is not None:
        return verdict
    fallback = Sentiment.NEGATIVE if is_negative_comment(comment) else Sentiment.NEUTRAL
    logger.info("sentiment.keyword_fallback verdict=%s", fallback.value)
    return fallback


def _run_inline(fn: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
    fn(*args, **kwargs)


class FeedbackIngestionService:
    def __init__(
        self,
        repo: FeedbackRepoDB,
        *,
        alerts: AlertDispatcher,
        sentiment: Optional[SentimentClassifierPort] = None,
        tokens: Optional[FeedbackTokenValidator] = None,
        require_token: bool = False,
        defer: Defer = _run_inline,
    ) -> None:
        self._repo = repo
        self._alerts = alerts
        self._sentiment = sentiment
        self._tokens = tokens
        self._require_token = require_token
        self._defer = defer

    def submit_guest(self, payload: GuestFeedbackIn) -> FeedbackOut:
        sentiment = guest_sentiment(payload.comment, self._sentiment)
        data = payload.model_dump()
        data.update(
            source=Source.GUEST.value,
            sentiment=sentiment.value,
            is_negative=sentiment is Sentiment.NEGATIVE,
        )
        return self._persist(data)

    def submit_staff(self, payload: StaffFeedbackIn) -> FeedbackOut:
        negative = payload.severity is Severity.HIGH
        data = payload.model_dump(mode="json")
        data.update(
            source=Source.STAFF.value,
            sentiment=(Sentiment.NEGATIVE if negative else Sentiment.NEUTRAL).value,
            is_negative=negative,
        )
        return self._persist(data)

    def submit_contextual(self, payload: ContextualFeedbackIn) -> FeedbackOut:
        context = payload.context
        if context is None or not context.loc:
            raise MissingContextError()

        guest_name = context.guest_name
        if self._tokens is not None and context.token:
            check = self._tokens.consume(context.token, loc=context.loc, context_id=context.id)
            if check.valid:
                guest_name = guest_name or (check.context.guest_name if check.context else None)
            elif self._require_token:
                raise TokenRejectedError(check.message or "Invalid feedback token.")
            else:
                logger.warning("token.rejected loc=%s reason=%s", context.loc, check.message)
        elif self._require_token:
            raise TokenRejectedError("A feedback token is required.", missing=True)

        fields: Dict[str, Any] = payload.model_dump(mode="json", exclude={"context", "source", "feedback_area"})
        negative = contextual_is_negative(fields, context.loc)
        fields.update(
            source=(payload.source or Source.GUEST).value,
            feedback_area=payload.feedback_area or context.loc,
            context_loc=context.loc,
            context_id=context.id,
            context_token=context.token,
            context_guest_name=guest_name,
            sentiment=(Sentiment.NEGATIVE if negative else Sentiment.NEUTRAL).value,
            is_negative=negative,
        )
        return self._persist(fields)

    def _persist(self, data: Dict[str, Any]) -> FeedbackOut:
        record = self._repo.create(data)
        self._repo.commit()
        out = FeedbackOut.model_validate(record)
        logger.info(
            "feedback.create id=%s source=%s area=%s negative=%s",
            out.id, out.source.value, out.feedback_area, out.is_negative,
        )
        if out.is_negative:
            self._defer(self._alerts.dispatch, out)
        return out

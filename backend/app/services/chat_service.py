from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError

from backend.app.services.chat_history import ChatHistoryStore
from backend.core.ports.chat_model import ChatModelPort
from backend.core.repos.feedback_repo_db import FeedbackRepoDB
from backend.providers.gemini.client import GeminiAPIError

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[<>{}]")

SYSTEM_PROMPT = (
    "You are {assistant}, a helpful assistant for the staff of {hotel}. "
    "Answer questions about guest and staff feedback briefly and politely. "
    "When asked about the current situation, use the live dashboard data given below.\n"
    "Live Dashboard Data: {summary}"
)


class ChatServiceError(Exception):
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ChatUnavailableError(ChatServiceError):
    status_code = 503


class EmptyMessageError(ChatServiceError):
    status_code = 400


def sanitize_input(text: Optional[str]) -> str:
    if not text:
        return ""
    return _UNSAFE_CHARS.sub("", text).strip()


def user_message_for(exc: GeminiAPIError) -> str:
    if exc.is_safety_block:
        return "Sorry, the request or response was blocked for safety reasons."
    if exc.status_code == 400:
        return "Sorry, there was an issue with the request format."
    if exc.status_code == 429:
        return "Sorry, the chat service is busy. Please try again shortly."
    if exc.status_code == 404:
        return "Sorry, the requested AI model was not found."
    if exc.status_code is None:
        if "unexpected response format" in str(exc):
            return "Received an unexpected response format from the AI."
        return "Sorry, I encountered an unexpected error. Please try again later."
    return f"Sorry, the AI service returned an error ({exc.status_code})."


def dashboard_summary(repo: FeedbackRepoDB, *, window_hours: int = 24, now: Optional[datetime] = None) -> str:
    since = (now or datetime.now(timezone.utc)) - timedelta(hours=window_hours)
    try:
        negative = repo.count_negative_since(since)
        average = repo.average_guest_rating_since(since)
    except SQLAlchemyError as exc:
        logger.error("chat.summary_failed error=%s", exc)
        return "Could not retrieve current dashboard summary."
    avg_label = f"{average:.1f}" if average is not None else "N/A"
    return (
        f"Recent Summary: {negative} negative feedback entries in last {window_hours}h. "
        f"Recent average guest rating is {avg_label}/5."
    )


class ChatService:
    def __init__(
        self,
        model: Optional[ChatModelPort],
        history: ChatHistoryStore,
        *,
        assistant_name: str = "HahuBot",
        hotel_name: str = "the hotel",
        summary_window_hours: int = 24,
    ) -> None:
        self._model = model
        self._history = history
        self._assistant = assistant_name
        self._hotel = hotel_name
        self._window = summary_window_hours

    @property
    def enabled(self) -> bool:
        return self._model is not None

    def reply(self, session_id: str, message: Optional[str], summary: Callable[[int], str]) -> str:
        if self._model is None:
            raise ChatUnavailableError("Chat service API key not configured.")
        text = sanitize_input(message)
        if not text:
            raise EmptyMessageError("Message cannot be empty.")

        system = SYSTEM_PROMPT.format(assistant=self._assistant, hotel=self._hotel, summary=summary(self._window))
        history = self._history.get(session_id)
        prompt = f"{system}\n\nUser: {text}"
        try:
            answer = self._model.generate(prompt, history=history)
        except GeminiAPIError as exc:
            raise ChatServiceError(user_message_for(exc)) from exc

        self._history.append_exchange(session_id, text, answer)
        logger.info("chat.reply session=%s turns=%s", session_id, len(history) + 2)
        return answer

import pytest

from backend.app.services.chat_history import ChatHistoryStore
from backend.app.services.chat_service import (
    ChatService,
    ChatServiceError,
    ChatUnavailableError,
    EmptyMessageError,
    sanitize_input,
    user_message_for,
)
from backend.providers.gemini.client import GeminiAPIError


class RecordingModel:
    def __init__(self, answers=None, exc=None):
        self.answers = list(answers or [])
        self.exc = exc
        self.calls = []

    def generate(self, prompt, history=None):
        self.calls.append((prompt, list(history or [])))
        if self.exc is not None:
            raise self.exc
        return self.answers.pop(0) if self.answers else "ok"


def summary(_hours):
    return "Recent Summary: 0 negative feedback entries in last 24h."


def test_sanitize_strips_markup_characters():
    assert sanitize_input("  <b>{hi}</b> ") == "bhi/b"
    assert sanitize_input(None) == ""


def test_history_ring_buffer_keeps_last_exchanges():
    store = ChatHistoryStore(max_exchanges=2)
    for i in range(3):
        store.append_exchange("s1", f"q{i}", f"a{i}")

    assert store.get("s1") == [("user", "q1"), ("model", "a1"), ("user", "q2"), ("model", "a2")]
    assert store.get("other") == []


def test_history_evicts_least_recent_session():
    store = ChatHistoryStore(max_exchanges=1, max_sessions=2)
    store.append_exchange("a", "q", "r")
    store.append_exchange("b", "q", "r")
    store.append_exchange("a", "q2", "r2")
    store.append_exchange("c", "q", "r")

    assert len(store) == 2
    assert store.get("b") == []
    assert store.get("a") == [("user", "q2"), ("model", "r2")]


def test_reply_without_model_is_unavailable():
    service = ChatService(None, ChatHistoryStore())

    with pytest.raises(ChatUnavailableError) as err:
        service.reply("s", "hello", summary)
    assert err.value.status_code == 503


def test_reply_rejects_empty_message():
    service = ChatService(RecordingModel(), ChatHistoryStore())

    with pytest.raises(EmptyMessageError) as err:
        service.reply("s", " <> ", summary)
    assert err.value.status_code == 400


def test_reply_uses_history_and_records_exchange():
    model = RecordingModel(["first", "second"])
    history = ChatHistoryStore()
    service = ChatService(model, history, assistant_name="HahuBot", hotel_name="Test Hotel")

    assert service.reply("s", "hi", summary) == "first"
    assert service.reply("s", "again", summary) == "second"

    prompt, sent_history = model.calls[1]
    assert "HahuBot" in prompt and "Test Hotel" in prompt
    assert "Live Dashboard Data: Recent Summary" in prompt
    assert prompt.endswith("User: again")
    assert sent_history == [("user", "hi"), ("model", "first")]
    assert len(history.get("s")) == 4


def test_reply_maps_provider_errors():
    service = ChatService(RecordingModel(exc=GeminiAPIError("quota", 429)), ChatHistoryStore())

    with pytest.raises(ChatServiceError) as err:
        service.reply("s", "hi", summary)
    assert err.value.status_code == 500
    assert "busy" in err.value.message


@pytest.mark.parametrize(
    "exc,fragment",
    [
        (GeminiAPIError("x", 400, {"error": {"details": [{"reason": "SAFETY"}]}}), "safety"),
        (GeminiAPIError("x", 400), "request format"),
        (GeminiAPIError("x", 404), "not found"),
        (GeminiAPIError("Received an unexpected response format from the AI."), "unexpected response format"),
        (GeminiAPIError("timeout"), "unexpected error"),
        (GeminiAPIError("x", 503), "(503)"),
    ],
)
def test_user_message_for(exc, fragment):
    assert fragment in user_message_for(exc)

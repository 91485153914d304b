import os

# Must be set before any backend module builds the engine
os.environ.setdefault("DATABASE_SQLALCHEMY_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("JWT_REFRESH_SECRET", "test-refresh-secret")
for _key in ("GEMINI_API_KEY", "TWILIO_ACCOUNT_SID", "TWILIO_AUTH_TOKEN"):
    os.environ.pop(_key, None)

from typing import List, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from backend.app import deps as app_deps
from backend.app.config import jwt_secret
from backend.app.core.security import issue_jwt
from backend.app.main import app
from backend.app.services.alerts import AlertDispatcher
from backend.app.services.chat_history import ChatHistoryStore
from backend.app.services.chat_service import ChatService
from backend.core.db.base import Base
from backend.core.db.session import get_db
from backend.core.enums import Sentiment
from backend.core.ports.sentiment import SentimentClassifierPort
import backend.core.models  # noqa: F401


class RecordingSender:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.messages: List[dict] = []

    def send(self, body, *, to, from_):
        if self.fail:
            raise RuntimeError("sms down")
        self.messages.append({"body": body, "to": to, "from": from_})
        return f"SM{len(self.messages)}"


class StubSentiment(SentimentClassifierPort):
    def __init__(self, verdict: Optional[Sentiment] = None):
        self.verdict = verdict
        self.calls: List[str] = []

    def try_classify(self, text):
        self.calls.append(text)
        return self.verdict


@pytest.fixture
def db_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    Session = sessionmaker(bind=db_engine, expire_on_commit=False, future=True)
    session = Session()
    yield session
    session.close()


@pytest.fixture
def sender():
    return RecordingSender()


@pytest.fixture
def sentiment():
    return StubSentiment()


@pytest.fixture
def chat_service():
    return ChatService(None, ChatHistoryStore())


@pytest.fixture
def client(db_engine, sender, sentiment, chat_service):
    Session = sessionmaker(bind=db_engine, expire_on_commit=False, future=True)

    def _get_db():
        session = Session()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    dispatcher = AlertDispatcher(sender, from_number="+15550000001", to_number="+15550000002")
    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[app_deps.get_alert_dispatcher] = lambda: dispatcher
    app.dependency_overrides[app_deps.get_sentiment_classifier] = lambda: sentiment
    app.dependency_overrides[app_deps.get_chat_service] = lambda: chat_service
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def bearer(role: str, user_id: int = 1, username: str = "tester") -> dict:
    token = issue_jwt(user_id=user_id, username=username, role=role, ttl_seconds=600, secret=jwt_secret())
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers():
    return bearer("admin", username="admin")


@pytest.fixture
def staff_headers():
    return bearer("staff", user_id=2, username="staff")

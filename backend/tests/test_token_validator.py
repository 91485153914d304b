from datetime import datetime, timedelta, timezone

import pytest

from backend.app.services import token_validator as tv
from backend.app.services.token_validator import FeedbackTokenValidator
from backend.core.repos.feedback_tokens_repo_db import FeedbackTokensRepoDB


class Clock:
    def __init__(self):
        self.now = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return Clock()


@pytest.fixture
def validator(db_session, clock):
    return FeedbackTokenValidator(FeedbackTokensRepoDB(db_session), clock=clock)


def test_issue_then_validate(validator, clock):
    row = validator.issue("room", context_id="204", guest_name="Sara")

    assert row.token
    assert row.expires_at == clock.now + timedelta(hours=tv.DEFAULT_TTL_HOURS)
    check = validator.validate(row.token, loc="room", context_id="204")
    assert check.valid is True
    assert check.context.loc == "room"
    assert check.context.id == "204"
    assert check.context.guest_name == "Sara"


def test_unknown_token(validator):
    check = validator.validate("nope")

    assert check.valid is False
    assert check.message == tv.MSG_NOT_FOUND


def test_expired_token(validator, clock):
    row = validator.issue("room", ttl_hours=1)
    clock.now += timedelta(hours=2)

    assert validator.validate(row.token).message == tv.MSG_NOT_FOUND


def test_location_mismatch(validator):
    row = validator.issue("room", context_id="204")

    assert validator.validate(row.token, loc="checkout").message == tv.MSG_MISMATCH
    assert validator.validate(row.token, loc="room", context_id="999").message == tv.MSG_MISMATCH
    assert validator.validate(row.token).valid is True


def test_consume_is_single_use(validator, db_session):
    row = validator.issue("dining_table", context_id="7")

    first = validator.consume(row.token, loc="dining_table", context_id="7")
    db_session.commit()
    second = validator.consume(row.token, loc="dining_table", context_id="7")

    assert first.valid is True
    assert second.valid is False
    assert second.message == tv.MSG_USED

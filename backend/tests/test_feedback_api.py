from datetime import datetime, timedelta, timezone

import pytest

from backend.app.routers import feedback as feedback_router
from backend.core.enums import Sentiment
from backend.core.models.tokens import FeedbackToken

API = "/api/feedback"


def test_guest_feedback_round_trip(client, admin_headers, sender):
    res = client.post(f"{API}/guest", json={"rating": 5, "comment": "Lovely stay", "roomNumber": "101", "language": "en"})

    assert res.status_code == 201
    body = res.json()
    assert body["id"] > 0
    assert body["source"] == "Guest"
    assert body["sentiment"] == "Neutral"
    assert body["isNegative"] is False
    assert body["roomNumber"] == "101"
    assert sender.messages == []

    listed = client.get(API, headers=admin_headers).json()
    assert [r["id"] for r in listed] == [body["id"]]
    assert listed[0]["comment"] == "Lovely stay"
    assert listed[0]["rating"] == 5


def test_guest_negative_by_keyword_sends_one_alert(client, sender):
    res = client.post(f"{API}/guest", json={"rating": 1, "comment": "The bathroom was dirty"})

    assert res.status_code == 201
    assert res.json()["sentiment"] == "Negative"
    assert res.json()["isNegative"] is True
    assert len(sender.messages) == 1
    assert "Details: The bathroom was dirty" in sender.messages[0]["body"]


def test_guest_classifier_verdict_is_used(client, sentiment, sender):
    sentiment.verdict = Sentiment.POSITIVE

    res = client.post(f"{API}/guest", json={"comment": "the room was a bit cold"})

    assert res.json()["sentiment"] == "Positive"
    assert res.json()["isNegative"] is False
    assert sentiment.calls == ["the room was a bit cold"]
    assert sender.messages == []


def test_guest_empty_comment_is_neutral(client, sentiment):
    res = client.post(f"{API}/guest", json={"rating": 1})

    assert res.status_code == 201
    assert res.json()["sentiment"] == "Neutral"
    assert sentiment.calls == []


@pytest.mark.parametrize(
    "payload",
    [
        {"rating": 0},
        {"rating": 6},
        {"comment": "x" * 1001},
    ],
)
def test_guest_validation_errors(client, payload):
    res = client.post(f"{API}/guest", json=payload)

    assert res.status_code == 400
    body = res.json()
    assert body["message"] == "Validation Failed"
    assert body["errors"] and "field" in body["errors"][0]


def test_staff_high_severity_is_negative(client, sender):
    res = client.post(
        f"{API}/staff",
        json={"category": "Maintenance", "severity": "High", "location": "Lobby", "details": "Water leak"},
    )

    assert res.status_code == 201
    body = res.json()
    assert body["source"] == "Staff"
    assert body["isNegative"] is True
    assert body["sentiment"] == "Negative"
    assert len(sender.messages) == 1
    assert "Severity: High" in sender.messages[0]["body"]


def test_staff_medium_severity_is_not_negative(client, sender):
    res = client.post(f"{API}/staff", json={"category": "Room", "severity": "Medium", "details": "dirty carpet"})

    assert res.status_code == 201
    assert res.json()["isNegative"] is False
    assert sender.messages == []


def test_staff_rejects_unknown_category(client):
    res = client.post(f"{API}/staff", json={"category": "Spa", "severity": "Low"})
    assert res.status_code == 400


def test_contextual_low_rating_is_negative(client, sender):
    payload = {
        "context": {"loc": "room", "id": 204, "guestName": "Sara"},
        "roomCleanliness": 2,
        "roomComments": "Nice view",
        "contactConsent": True,
        "simulatedFileNames": ["photo1.jpg"],
    }

    res = client.post(f"{API}/contextual", json=payload)

    assert res.status_code == 201
    body = res.json()
    assert body["isNegative"] is True
    assert body["source"] == "Guest"
    assert body["feedbackArea"] == "room"
    assert body["contextLoc"] == "room"
    assert body["contextId"] == "204"
    assert body["contextGuestName"] == "Sara"
    assert body["contactConsent"] is True
    assert body["simulatedFileNames"] == ["photo1.jpg"]
    assert len(sender.messages) == 1
    assert "Context: room 204" in sender.messages[0]["body"]


def test_contextual_comment_keyword_is_negative(client):
    payload = {"context": {"loc": "pool"}, "poolCleanliness": 5, "amenitiesComments": "Towels smell"}

    res = client.post(f"{API}/contextual", json=payload)

    assert res.status_code == 201
    assert res.json()["isNegative"] is True


def test_contextual_positive(client, sender):
    payload = {"context": {"loc": "checkout"}, "checkoutSpeed": 4, "billingAccuracy": 5, "feedbackType": "compliment"}

    res = client.post(f"{API}/contextual", json=payload)

    assert res.status_code == 201
    assert res.json()["isNegative"] is False
    assert res.json()["feedbackType"] == "compliment"
    assert sender.messages == []


@pytest.mark.parametrize("payload", [{"roomCleanliness": 3}, {"context": {"id": "12"}}, {"context": {"loc": ""}}])
def test_contextual_requires_location(client, admin_headers, payload):
    res = client.post(f"{API}/contextual", json=payload)

    assert res.status_code == 400
    assert client.get(API, headers=admin_headers).json() == []


def test_contextual_rejects_out_of_range_rating(client):
    res = client.post(f"{API}/contextual", json={"context": {"loc": "room"}, "roomCleanliness": 9})
    assert res.status_code == 400


def test_listing_requires_admin(client, staff_headers):
    assert client.get(API).status_code == 401
    assert client.get(API, headers={"Authorization": "Bearer not.a.token"}).status_code == 401
    assert client.get(API, headers=staff_headers).status_code == 403


def test_listing_newest_first(client, admin_headers):
    ids = [client.post(f"{API}/guest", json={"rating": r}).json()["id"] for r in (3, 4, 5)]

    listed = client.get(API, headers=admin_headers).json()

    assert [r["id"] for r in listed] == list(reversed(ids))


def test_alert_failure_does_not_fail_submission(client, sender):
    sender.fail = True

    res = client.post(f"{API}/guest", json={"comment": "broken shower"})

    assert res.status_code == 201
    assert res.json()["isNegative"] is True


# ---------------- tokens ----------------

def _issue(client, admin_headers, **body):
    res = client.post(f"{API}/tokens", json=body, headers=admin_headers)
    assert res.status_code == 201
    return res.json()


def test_token_issue_requires_admin(client, staff_headers):
    assert client.post(f"{API}/tokens", json={"loc": "room"}).status_code == 401
    assert client.post(f"{API}/tokens", json={"loc": "room"}, headers=staff_headers).status_code == 403


def test_validate_token(client, admin_headers):
    issued = _issue(client, admin_headers, loc="room", id="204", guestName="Sara")

    res = client.get(f"{API}/validate-token", params={"tok": issued["token"], "loc": "room", "id": "204"})

    assert res.status_code == 200
    assert res.json() == {"valid": True, "context": {"loc": "room", "id": "204", "guestName": "Sara"}}


def test_validate_token_missing(client):
    res = client.get(f"{API}/validate-token")

    assert res.status_code == 400
    assert res.json()["valid"] is False


def test_validate_token_unknown_or_mismatched(client, admin_headers):
    issued = _issue(client, admin_headers, loc="room", id="204")

    unknown = client.get(f"{API}/validate-token", params={"tok": "nope"})
    mismatch = client.get(f"{API}/validate-token", params={"tok": issued["token"], "loc": "checkout"})

    assert unknown.status_code == 404
    assert unknown.json()["valid"] is False
    assert "message" in unknown.json()
    assert mismatch.status_code == 404


def test_validate_token_expired(client, admin_headers, db_engine):
    issued = _issue(client, admin_headers, loc="room")
    with db_engine.begin() as conn:
        conn.execute(
            FeedbackToken.__table__.update()
            .where(FeedbackToken.token == issued["token"])
            .values(expires_at=datetime.now(timezone.utc) - timedelta(hours=1))
        )

    res = client.get(f"{API}/validate-token", params={"tok": issued["token"]})

    assert res.status_code == 404


def test_contextual_consumes_token(client, admin_headers):
    issued = _issue(client, admin_headers, loc="dining_table", id="7", guestName="Liya")
    payload = {"context": {"loc": "dining_table", "id": "7", "token": issued["token"]}, "foodQuality": 4}

    res = client.post(f"{API}/contextual", json=payload)

    assert res.status_code == 201
    assert res.json()["contextGuestName"] == "Liya"
    after = client.get(f"{API}/validate-token", params={"tok": issued["token"]})
    assert after.status_code == 404
    assert "already been used" in after.json()["message"]


def test_required_token_is_enforced(client, admin_headers, monkeypatch):
    monkeypatch.setattr(feedback_router, "_feedback_cfg", lambda: {"require_token": True})

    missing = client.post(f"{API}/contextual", json={"context": {"loc": "room"}})
    unknown = client.post(f"{API}/contextual", json={"context": {"loc": "room", "token": "nope"}})
    issued = _issue(client, admin_headers, loc="room")
    ok = client.post(f"{API}/contextual", json={"context": {"loc": "room", "token": issued["token"]}})
    reused = client.post(f"{API}/contextual", json={"context": {"loc": "room", "token": issued["token"]}})

    assert missing.status_code == 400
    assert unknown.status_code == 404
    assert ok.status_code == 201
    assert reused.status_code == 404
    assert len(client.get(API, headers=admin_headers).json()) == 1

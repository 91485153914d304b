from backend.app.routers import health


def test_healthz_reports_services(client):
    res = client.get("/healthz")

    assert res.status_code == 200
    body = res.json()
    assert body["ok"] is True
    assert body["services"]["database"] == "up"
    assert body["services"]["sentiment"].startswith("disabled")
    assert body["services"]["chat"].startswith("disabled")
    assert body["services"]["sms"].startswith("disabled")


def test_healthz_reports_database_down(client, monkeypatch):
    def broken_engine():
        raise RuntimeError("no db")

    monkeypatch.setattr(health, "get_engine", broken_engine)

    body = client.get("/healthz").json()

    assert body["ok"] is False
    assert body["services"]["database"] == "down (RuntimeError)"


def test_root(client):
    res = client.get("/")
    assert res.status_code == 200
    assert res.json()["docs"] == "/docs"

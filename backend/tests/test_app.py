import os
import sys

import pytest
from fastapi.testclient import TestClient

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from scorekeeper.db import get_session
from scorekeeper.main import app


@pytest.fixture()
def client():
    async def no_session():
        yield None

    app.dependency_overrides[get_session] = no_session
    try:
        with TestClient(app) as client:
            yield client
    finally:
        app.dependency_overrides.pop(get_session, None)


def test_health_checks(client):
    assert client.get("/healthz").json() == {"status": "ok"}
    assert client.get("/api/healthz").json() == {"status": "ok"}
    assert "Scorekeeper" in client.get("/api").json()["message"]


def test_request_validation_is_problem_detail(client):
    resp = client.post("/api/v0/matches/m1/points", json={"team": "teamZ"})
    assert resp.status_code == 422
    assert resp.headers["content-type"].startswith("application/problem+json")
    body = resp.json()
    assert body["code"] == "request_invalid"
    assert body["instance"] == "/api/v0/matches/m1/points"
    assert "team" in body["detail"]


def test_sentry_test_requires_dsn(client, monkeypatch):
    monkeypatch.delenv("SENTRY_DSN", raising=False)
    resp = client.post("/api/sentry-test")
    assert resp.status_code == 400
    assert resp.json()["code"] == "http_400"

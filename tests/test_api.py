import pytest
from fastapi.testclient import TestClient

from apps.api import main as api
from pgprobe.models.probe import ConnectionConfig, Outcome, ProbeResult


@pytest.fixture
def client():
    api.app.dependency_overrides[api.get_connection_config] = lambda: ConnectionConfig(
        host="localhost", database="testdb", username="u", password="p",
    )
    yield TestClient(api.app)
    api.app.dependency_overrides.clear()


def test_healthz(client):
    r = client.get("/healthz")
    assert r.status_code == 200
    assert r.json() == {"ok": True}


def test_db_health_ok(client, monkeypatch):
    monkeypatch.setattr(api, "run", lambda config: ProbeResult(
        outcome=Outcome.SUCCESS, server_version="PostgreSQL 16", database=config.database, user="u",
    ))
    r = client.get("/healthz/db")
    assert r.status_code == 200
    assert r.json()["database"] == "testdb"


def test_db_health_failure_is_503(client, monkeypatch):
    monkeypatch.setattr(api, "run", lambda config: ProbeResult(
        outcome=Outcome.CONNECTION_ERROR, error_code="OperationalError",
        error_message="connection refused", error_detail="Traceback",
    ))
    r = client.get("/healthz/db")
    assert r.status_code == 503
    body = r.json()
    assert body["outcome"] == "connection-error"
    assert "error_detail" not in body


def test_db_health_unexpected_fault_is_503(client, monkeypatch):
    def boom(config):
        raise RuntimeError("kaput")
    monkeypatch.setattr(api, "run", boom)

    r = client.get("/healthz/db")
    assert r.status_code == 503
    body = r.json()
    assert body["outcome"] == "connection-error"
    assert body["error_code"] == "RuntimeError"
    assert body["error_message"] == "kaput"


def test_db_health_invalid_settings_is_503(clean_env, tmp_path):
    clean_env.chdir(tmp_path)
    clean_env.setenv("DB_PORT", "abc")
    try:
        with TestClient(api.app) as c:
            r = c.get("/healthz/db")
    finally:
        api.app.state.connection_config = None

    assert r.status_code == 503
    body = r.json()
    assert body["outcome"] == "configuration-error"
    assert "DB_PORT" in body["error_message"]


def test_settings_are_read_once_at_startup(clean_env, tmp_path, monkeypatch):
    clean_env.chdir(tmp_path)
    calls = []
    real = api.load_connection_config

    def counting():
        calls.append(1)
        return real()
    monkeypatch.setattr(api, "load_connection_config", counting)
    monkeypatch.setattr(api, "run", lambda config: ProbeResult(outcome=Outcome.SUCCESS))
    try:
        with TestClient(api.app) as c:
            c.get("/healthz/db")
            c.get("/healthz/db")
    finally:
        api.app.state.connection_config = None

    assert len(calls) == 1

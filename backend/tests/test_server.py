from fastapi.testclient import TestClient

from redrelief.config import Settings
from redrelief.server import create_app
from .conftest import InMemoryStore


def test_health(client):
    body = client.get("/api/health").json()
    assert body["status"] == "OK"
    assert body["version"] == "1.0.0"
    assert "timestamp" in body


def test_docs_lists_endpoints(client):
    body = client.get("/api/docs").json()
    assert body["endpoints"]["search"]["combined"] == "GET /api/search"
    assert "getByCity" in body["endpoints"]["campaigns"]


def test_unknown_route(client):
    r = client.get("/api/nothing-here")
    assert r.status_code == 404
    body = r.json()
    assert body["error"] == "API endpoint not found"
    assert "/api/search" in body["availableEndpoints"]


def test_unexpected_errors_hide_message_outside_development():
    store = InMemoryStore()
    store.failure = RuntimeError("boom")
    app = create_app(store=store, settings=Settings(environment="production", log_level="WARNING"))
    client = TestClient(app, raise_server_exceptions=False)

    r = client.get("/api/search/cities")
    assert r.status_code == 500
    assert r.json() == {"success": False, "error": "Something went wrong!", "message": "Internal server error"}


def test_unexpected_errors_show_message_in_development():
    store = InMemoryStore()
    store.failure = RuntimeError("boom")
    app = create_app(store=store, settings=Settings(environment="development", log_level="WARNING"))
    client = TestClient(app, raise_server_exceptions=False)

    assert client.get("/api/search/cities").json()["message"] == "boom"


def test_cors_allows_configured_origin(client):
    r = client.get("/api/health", headers={"Origin": "http://localhost:3000"})
    assert r.headers["access-control-allow-origin"] == "http://localhost:3000"


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("COMPOUND_QUERIES_ENABLED", "false")
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example, https://b.example")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    settings = Settings.from_env()
    assert settings.compound_queries_enabled is False
    assert settings.cors_origins == ["https://a.example", "https://b.example"]
    assert settings.log_level == "DEBUG"


def test_security_headers_on_every_response(client):
    for path in ("/api/health", "/api/nothing-here"):
        r = client.get(path)
        assert r.headers["x-content-type-options"] == "nosniff"
        assert r.headers["x-frame-options"] == "SAMEORIGIN"
        assert r.headers["referrer-policy"] == "no-referrer"


def test_requests_over_the_limit_get_429(client):
    for _ in range(100):
        assert client.get("/api/health").status_code == 200

    r = client.get("/api/search/cities")
    assert r.status_code == 429
    assert r.json() == {"success": False, "error": "Too many requests, please try again later."}
    assert r.headers["x-content-type-options"] == "nosniff"


def test_rate_limit_follows_settings():
    settings = Settings(log_level="WARNING", rate_limit="2 per minute")
    client = TestClient(create_app(store=InMemoryStore(), settings=settings))
    assert [client.get("/api/health").status_code for _ in range(3)] == [200, 200, 429]

    settings = Settings(log_level="WARNING", rate_limit="2 per minute", rate_limit_enabled=False)
    client = TestClient(create_app(store=InMemoryStore(), settings=settings))
    assert {client.get("/api/health").status_code for _ in range(5)} == {200}


def test_rate_limit_settings_from_env(monkeypatch):
    monkeypatch.setenv("RATE_LIMIT", "10 per minute")
    monkeypatch.setenv("RATE_LIMIT_ENABLED", "no")
    settings = Settings.from_env()
    assert settings.rate_limit == "10 per minute"
    assert settings.rate_limit_enabled is False

"""
tests/test_app.py -- Tests for api/main.py application assembly.

Covers:
  - create_app() honours API_PREFIX for every router
  - Error envelope for unknown routes and unexpected exceptions
  - Unexpected exceptions never leak internals to the client
  - CORS headers for configured origins
"""

from __future__ import annotations

from fastapi.testclient import TestClient

from api.main import create_app
from conftest import make_settings


def test_api_prefix_mounts_all_routes() -> None:
    app = create_app(make_settings(api_prefix="/api"))
    with TestClient(app) as client:
        resp = client.post("/api/auth/register", json={"email": "prefixed@example.com", "password": "pw123456"})
        assert resp.status_code == 201
        headers = {"Authorization": f"Bearer {resp.json()['token']}"}
        assert client.get("/api/tasks", headers=headers).status_code == 200
        assert client.get("/api/health").status_code == 200
        assert client.get("/tasks", headers=headers).status_code == 404


def test_unknown_route_uses_error_envelope(api_client: TestClient) -> None:
    resp = api_client.get("/does-not-exist")
    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "http_404"


def test_unexpected_exception_is_generic_500() -> None:
    app = create_app(make_settings())
    with TestClient(app, raise_server_exceptions=False) as client:
        resp = client.post("/auth/register", json={"identifier": "boom@example.com", "password": "pw123456"})
        headers = {"Authorization": f"Bearer {resp.json()['token']}"}

        def explode(owner: int):
            raise RuntimeError("connection string postgres://secret@db")

        client.app.state.task_store.list_tasks = explode
        resp = client.get("/tasks", headers=headers)

    assert resp.status_code == 500
    assert resp.json() == {"error": {"code": "internal_error", "message": "An unexpected error occurred."}}
    assert "secret" not in resp.text


def test_cors_allows_configured_origin() -> None:
    app = create_app(make_settings(cors_origins=["http://localhost:3000"]))
    with TestClient(app) as client:
        resp = client.options(
            "/tasks",
            headers={
                "Origin": "http://localhost:3000",
                "Access-Control-Request-Method": "GET",
                "Access-Control-Request-Headers": "Authorization",
            },
        )
    assert resp.status_code == 200
    assert resp.headers["access-control-allow-origin"] == "http://localhost:3000"

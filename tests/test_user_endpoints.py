"""Tests for the user HTTP endpoints."""

import logging
from datetime import datetime

from fastapi.testclient import TestClient

from user_management.api.app import create_app
from user_management.containers import build_container
from tests.conftest import InMemoryUserRepository

ANN = {"name": "Ann", "phone": "555-1111", "email": "ann@x.com"}


def test_create_returns_201_and_appears_in_list(container) -> None:
    client = TestClient(create_app(container))

    response = client.post("/api/users", json=ANN)

    assert response.status_code == 201
    body = response.json()
    assert isinstance(body["id"], int)
    assert {key: body[key] for key in ANN} == ANN
    listed = client.get("/api/users")
    assert listed.status_code == 200
    assert listed.json() == [body]


def test_create_with_empty_name_is_rejected(
    container, user_repository: InMemoryUserRepository
) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/api/users", json={"name": "", "phone": "555-2222", "email": "b@x.com"}
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Name, phone, and email are required"}
    assert user_repository.users == {}


def test_create_with_non_string_field_is_rejected(container) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/api/users", json={"name": 7, "phone": "555-2222", "email": "b@x.com"}
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Name, phone, and email are required"}


def test_create_without_body_is_rejected(container) -> None:
    client = TestClient(create_app(container))

    response = client.post("/api/users")

    assert response.status_code == 400
    assert response.json() == {"error": "Name, phone, and email are required"}


def test_create_duplicate_email_returns_400(container) -> None:
    client = TestClient(create_app(container))
    payload = {"name": "Bo", "phone": "1", "email": "dup@x.com"}

    first = client.post("/api/users", json=payload)
    second = client.post("/api/users", json=payload)

    assert first.status_code == 201
    assert second.status_code == 400
    assert second.json() == {"error": "Email already exists"}
    assert len(client.get("/api/users").json()) == 1


def test_get_unknown_id_returns_404(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/api/users/9999")

    assert response.status_code == 404
    assert response.json() == {"error": "User not found"}


def test_get_non_numeric_id_returns_404(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/api/users/abc")

    assert response.status_code == 404
    assert response.json() == {"error": "User not found"}


def test_out_of_range_id_returns_404(settings) -> None:
    client = TestClient(create_app(build_container(settings)))
    url = "/api/users/99999999999999999999"

    responses = [
        client.get(url),
        client.put(url, json=ANN),
        client.delete(url),
    ]

    for response in responses:
        assert response.status_code == 404
        assert response.json() == {"error": "User not found"}


def test_get_existing_user(container) -> None:
    client = TestClient(create_app(container))
    created = client.post("/api/users", json=ANN).json()

    response = client.get(f"/api/users/{created['id']}")

    assert response.status_code == 200
    assert response.json() == created


def test_delete_then_get_returns_404(container) -> None:
    client = TestClient(create_app(container))
    created = client.post("/api/users", json=ANN).json()

    response = client.delete(f"/api/users/{created['id']}")

    assert response.status_code == 200
    assert response.json() == {"message": "User deleted successfully"}
    assert client.get(f"/api/users/{created['id']}").status_code == 404
    assert client.delete(f"/api/users/{created['id']}").status_code == 404


def test_update_user(container) -> None:
    client = TestClient(create_app(container))
    created = client.post("/api/users", json=ANN).json()

    response = client.put(
        f"/api/users/{created['id']}",
        json={"name": "Ann B", "phone": "555-0000", "email": "annb@x.com"},
    )

    assert response.status_code == 200
    assert response.json() == {
        "id": created["id"],
        "name": "Ann B",
        "phone": "555-0000",
        "email": "annb@x.com",
    }


def test_update_unknown_id_returns_404_without_creating(
    container, user_repository: InMemoryUserRepository
) -> None:
    client = TestClient(create_app(container))

    response = client.put("/api/users/5", json=ANN)

    assert response.status_code == 404
    assert response.json() == {"error": "User not found"}
    assert user_repository.users == {}


def test_update_with_missing_field_returns_400(container) -> None:
    client = TestClient(create_app(container))
    created = client.post("/api/users", json=ANN).json()

    response = client.put(
        f"/api/users/{created['id']}", json={"name": "Ann", "phone": "1"}
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Name, phone, and email are required"}


def test_update_to_taken_email_returns_400(container) -> None:
    client = TestClient(create_app(container))
    client.post("/api/users", json=ANN)
    other = client.post(
        "/api/users", json={"name": "Bo", "phone": "2", "email": "bo@x.com"}
    ).json()

    response = client.put(
        f"/api/users/{other['id']}",
        json={"name": "Bo", "phone": "2", "email": "ann@x.com"},
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Email already exists"}
    assert client.get(f"/api/users/{other['id']}").json()["email"] == "bo@x.com"


def test_store_failure_returns_500_without_details(
    container, user_repository: InMemoryUserRepository
) -> None:
    client = TestClient(create_app(container))
    user_repository.fail_with = ConnectionError("password authentication failed")

    response = client.get("/api/users")

    assert response.status_code == 500
    assert response.json() == {"error": "Server error"}


def test_health_reports_ok_with_timestamp(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "OK"
    assert datetime.fromisoformat(body["timestamp"]).tzinfo is not None


def test_unknown_route_uses_error_body(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/api/unknown")

    assert response.status_code == 404
    assert "error" in response.json()


def test_startup_prepares_schema(
    container, user_repository: InMemoryUserRepository
) -> None:
    with TestClient(create_app(container)) as client:
        client.get("/health")

    assert user_repository.schema_calls == 1


def test_cors_headers_present(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/api/users", headers={"Origin": "http://localhost:3000"})

    assert response.headers["access-control-allow-origin"] == "*"


class _ListHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__()
        self.messages: list[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.messages.append(record.getMessage())


def test_request_log_written_for_unhandled_errors(container) -> None:
    app = create_app(container)

    @app.get("/explode")
    async def explode() -> None:
        raise RuntimeError("unexpected")

    handler = _ListHandler()
    app_logger = logging.getLogger("user_management.api.app")
    app_logger.addHandler(handler)
    try:
        client = TestClient(app, raise_server_exceptions=False)
        response = client.get("/explode")
    finally:
        app_logger.removeHandler(handler)

    assert response.status_code == 500
    assert response.json() == {"error": "Server error"}
    assert any(
        message.startswith("GET /explode - 500 - ") for message in handler.messages
    )

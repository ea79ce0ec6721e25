"""Test error handling functionality.

Verifies that custom exceptions carry the right status codes and that the
API turns every failure into the same JSON error envelope.
"""
import uuid

import pytest
from fastapi.testclient import TestClient

from core.exceptions import (
    AuthenticationError,
    ConfigurationError,
    ConflictError,
    DatabaseError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from core.repository import load_json
from main import app


@pytest.fixture(scope="module")
def client():
    with TestClient(app) as c:
        yield c


def _register(client, role):
    tag = uuid.uuid4().hex[:8]
    res = client.post("/api/users", json={"name": f"{role} {tag}", "email": f"{tag}@example.com", "role": role})
    assert res.status_code == 201
    return {"X-User-Id": str(res.json()["id"])}


def test_exception_classes_have_proper_attributes():
    exc = NotFoundError("Client", 123)
    assert exc.status_code == 404
    assert "Client" in exc.message and "123" in exc.message

    exc = ValidationError("Invalid input", field="quantity")
    assert exc.status_code == 400
    assert exc.details == {"field": "quantity"}

    assert AuthenticationError().status_code == 401
    exc = PermissionDeniedError("edit plan 3", role="client")
    assert exc.status_code == 403
    assert exc.message == "Not allowed to edit plan 3"
    assert ConflictError("taken").status_code == 409
    assert DatabaseError("bad row", operation="decode").details == {"operation": "decode"}
    assert ConfigurationError("bad", config_key="LOG_LEVEL").details == {"config_key": "LOG_LEVEL"}


def test_malformed_json_column_raises_database_error():
    with pytest.raises(DatabaseError) as exc_info:
        load_json("{not json", [], "daily_plans")
    assert exc_info.value.details["column"] == "daily_plans"
    assert load_json(None, []) == []


def test_missing_user_header_returns_401_envelope(client):
    res = client.get("/api/foods")
    assert res.status_code == 401
    body = res.json()
    assert body["error"]["status_code"] == 401
    assert "X-User-Id" in body["error"]["message"]


def test_unknown_user_header_returns_401(client):
    res = client.get("/api/foods", headers={"X-User-Id": "999999"})
    assert res.status_code == 401


def test_request_validation_returns_422_with_fields(client):
    headers = _register(client, "nutritionist")
    res = client.post("/api/foods", json={"name": "Nothing else"}, headers=headers)
    assert res.status_code == 422
    fields = {e["field"] for e in res.json()["error"]["details"]["validation_errors"]}
    assert "body.calories" in fields


def test_permission_error_and_request_id_echo(client):
    headers = _register(client, "client")
    headers["X-Request-ID"] = "req-42"
    res = client.post("/api/foods", headers=headers, json={
        "name": "Forbidden fruit", "category": "fruit", "calories": 1, "protein": 0,
        "carbs": 0, "fat": 0, "serving_size": 1})
    assert res.status_code == 403
    assert res.json()["error"]["request_id"] == "req-42"


def test_not_found_envelope(client):
    headers = _register(client, "nutritionist")
    res = client.get("/api/nutrition-plans/987654", headers=headers)
    assert res.status_code == 404
    assert res.json()["error"]["details"]["resource"] == "NutritionPlan"


def test_health(client):
    res = client.get("/health")
    assert res.status_code == 200
    assert res.json()["database"] == "connected"

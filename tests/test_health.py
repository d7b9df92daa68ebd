import pytest
from fastapi import status
from slowapi.middleware import SlowAPIMiddleware

from app.core.limiter import limiter
from app.main import app as fastapi_app

def test_health_check(client):
    """Test the /health endpoint returns 200 and up status."""
    response = client.get("/health")
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["status"] == "up"
    assert "version" in data
    assert "timestamp" in data

def test_readiness_check(client):
    """Test the /readiness endpoint returns 200 and database status."""
    response = client.get("/readiness")
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["status"] == "ready"
    assert data["components"]["database"] == "connected"

def test_root_endpoint(client):
    """Test the API root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    assert "HRMS Platform API" in response.json()["message"]

def test_request_id_is_echoed(client):
    """The correlation id sent by the caller comes back on the response."""
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"

def test_liveness_check(client):
    response = client.get("/liveness")
    assert response.status_code == 200
    assert response.json()["status"] == "up"

def test_unknown_route_uses_error_envelope(client):
    response = client.get("/api/does-not-exist")
    assert response.status_code == 404
    assert response.json() == {"success": False, "errors": [{"msg": "Not Found", "code": "NOT_FOUND"}]}

def test_validation_errors_name_the_field(client, admin_user, auth_headers):
    response = client.post("/api/payroll/runs", json={"month": 13, "year": 2024}, headers=auth_headers(admin_user))
    assert response.status_code == 422
    error = response.json()["errors"][0]
    assert error["field"] == "month"
    assert error["code"] == "VALIDATION_ERROR"

def test_default_rate_limit_is_installed():
    assert SlowAPIMiddleware in [m.cls for m in fastapi_app.user_middleware]
    assert fastapi_app.state.limiter is limiter
    assert limiter._default_limits

import pytest
from datetime import timedelta
from fastapi import status
import jwt
from app.core.config import settings
from app.core.security import hash_password, verify_password
from app.services import auth as auth_service
from app.models.user import UserRole

def test_password_hashing():
    """Test that password hashing and verification works correctly."""
    password = "MySecurePassword123!"
    hashed = hash_password(password)
    assert hashed != password
    assert verify_password(password, hashed)
    assert not verify_password("WrongPassword", hashed)

def test_token_round_trip(admin_user):
    token = auth_service.token_for_user(admin_user)
    payload = auth_service.decode_access_token(token)
    assert payload["sub"] == admin_user.email
    assert payload["tenant_id"] == admin_user.tenant_id
    assert payload["role"] == "HR_ADMIN"
    assert payload["type"] == "access"

def test_expired_token_is_reported():
    token = auth_service.create_access_token({"sub": "a@alphacorp.com"}, expires_delta=timedelta(minutes=-1))
    assert auth_service.decode_access_token(token) == {"error": "TOKEN_EXPIRED"}

def test_garbage_token_is_rejected():
    assert auth_service.decode_access_token("not-a-token") is None

def test_token_is_a_signed_jwt(admin_user):
    token = auth_service.token_for_user(admin_user)
    claims = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    assert claims["user_id"] == admin_user.id
    assert claims["exp"] > claims["iat"]

def test_token_signed_with_other_key_is_rejected(admin_user):
    forged = jwt.encode(
        {"sub": admin_user.email, "user_id": admin_user.id, "tenant_id": admin_user.tenant_id,
         "role": "SUPER_ADMIN", "type": "access"},
        "another-secret-key-that-is-long-enough-for-hs256",
        algorithm="HS256",
    )
    assert auth_service.decode_access_token(forged) is None

def test_expired_token_is_rejected_by_api(client, admin_user):
    token = auth_service.create_access_token(
        {"sub": admin_user.email, "user_id": admin_user.id, "tenant_id": admin_user.tenant_id, "role": "HR_ADMIN"},
        expires_delta=timedelta(minutes=-1),
    )
    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["errors"][0]["msg"] == "TOKEN_EXPIRED"

def test_login_success(client, admin_user):
    """Test successful login with valid credentials."""
    login_data = {
        "email": admin_user.email,
        "password": "Password123!"
    }

    response = client.post("/api/auth/login", json=login_data)
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert "access_token" in data
    assert data["token_type"] == "bearer"
    assert data["user"]["tenant_id"] == admin_user.tenant_id
    assert data["user"]["employee_id"] == admin_user.employee_id

def test_login_invalid_credentials(client):
    """Test login failure with wrong password."""
    response = client.post("/api/auth/login", json={"email": "nonexistent@alphacorp.com", "password": "wrong"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["errors"][0]["code"] == "AUTH_FAILED"

def test_login_rejected_for_inactive_company(client, db_session, admin_user):
    admin_user.tenant.is_active = False
    db_session.commit()

    response = client.post("/api/auth/login", json={"email": admin_user.email, "password": "Password123!"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED

def test_me_returns_identity(client, admin_user, auth_headers):
    response = client.get("/api/auth/me", headers=auth_headers(admin_user))
    assert response.status_code == 200
    data = response.json()
    assert data["user_id"] == admin_user.id
    assert data["role"] == UserRole.HR_ADMIN.value

def test_protected_route_requires_token(client):
    response = client.get("/api/auth/me")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED

def test_role_gate_rejects_employee(client, tenant, make_employee, make_user, auth_headers):
    employee = make_employee(tenant, "E100", "Eve")
    user = make_user(tenant, UserRole.EMPLOYEE, employee)

    response = client.get("/api/admin/settings/ot-rules", headers=auth_headers(user))
    assert response.status_code == status.HTTP_403_FORBIDDEN

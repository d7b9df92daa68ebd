import pytest
import os
import uuid
from datetime import date
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set env before importing app components
os.environ["APP_ENV"] = "testing"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"

from app.core.config import settings
from app.database import Base, get_db
from app.main import app
from fastapi.testclient import TestClient

# SQLite in-memory database configuration
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

@pytest.fixture(scope="session", autouse=True)
def setup_database():
    """Create tables once for the whole test session."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)

@pytest.fixture(scope="function")
def db_session():
    """Get a clean database session for each test function with rollback safety."""
    connection = engine.connect()
    transaction = connection.begin()
    # Use sessionmaker with the active connection
    session = TestingSessionLocal(bind=connection)

    yield session

    session.close()
    transaction.rollback()
    connection.close()

@pytest.fixture(scope="function")
def upload_dir(tmp_path, monkeypatch):
    """Point logo storage at a per-test directory."""
    monkeypatch.setattr(settings, "upload_dir", str(tmp_path))
    return tmp_path

@pytest.fixture(scope="function")
def make_tenant(db_session):
    """Factory for tenants with unique codes."""
    from app.models.tenant import Tenant

    def _make_tenant(name="Alpha Corp", **kwargs):
        kwargs.setdefault("timezone", "UTC")
        tenant = Tenant(name=name, code=f"T-{uuid.uuid4().hex[:8].upper()}", **kwargs)
        db_session.add(tenant)
        db_session.commit()
        return tenant
    return _make_tenant

@pytest.fixture(scope="function")
def tenant(make_tenant):
    return make_tenant()

@pytest.fixture(scope="function")
def make_employee(db_session):
    """Factory for employees of a tenant."""
    from app.models.employee import Employee

    def _make_employee(tenant, code, first_name, last_name="Doe", **kwargs):
        kwargs.setdefault("join_date", date(2023, 1, 1))
        employee = Employee(
            tenant_id=tenant.id,
            employee_code=code,
            first_name=first_name,
            last_name=last_name,
            email=f"{first_name.lower()}.{uuid.uuid4().hex[:6]}@alphacorp.com",
            **kwargs,
        )
        db_session.add(employee)
        db_session.commit()
        return employee
    return _make_employee

@pytest.fixture(scope="function")
def make_user(db_session):
    """Factory for login accounts."""
    from app.models.user import User
    from app.core.security import hash_password

    def _make_user(tenant, role, employee=None, password="Password123!"):
        user = User(
            tenant_id=tenant.id,
            email=f"{role.value.lower()}.{uuid.uuid4().hex[:6]}@alphacorp.com",
            hashed_password=hash_password(password),
            role=role,
            employee_id=employee.id if employee else None,
            is_active=True,
        )
        db_session.add(user)
        db_session.commit()
        return user
    return _make_user

@pytest.fixture(scope="function")
def admin_user(tenant, make_employee, make_user):
    """Default HR admin with an employee profile."""
    from app.models.user import UserRole

    employee = make_employee(tenant, "ADMIN-001", "Hana")
    return make_user(tenant, UserRole.HR_ADMIN, employee)

@pytest.fixture(scope="function")
def super_admin(tenant, make_user):
    from app.models.user import UserRole
    return make_user(tenant, UserRole.SUPER_ADMIN)

@pytest.fixture(scope="function")
def get_token():
    """Helper fixture to mint access tokens for a user."""
    from app.services.auth import token_for_user

    def _get_token(user):
        return token_for_user(user)
    return _get_token

@pytest.fixture(scope="function")
def auth_headers(get_token):
    def _auth_headers(user):
        return {"Authorization": f"Bearer {get_token(user)}"}
    return _auth_headers

@pytest.fixture(scope="function")
def client(db_session):
    """Get a TestClient that uses the test database session via dependency override."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()

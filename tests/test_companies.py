import pytest
from fastapi import status

from app.core.exceptions import ConflictError
from app.models.employee import Employee
from app.models.leave_type import LeaveType
from app.models.ot_rule import OtRule
from app.models.tenant import Tenant
from app.models.user import User, UserRole
from app.services import company_service
from app.services.company_service import CompanyService

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def _company_payload(code="ACME", email="owner@acme.com"):
    return {
        "name": "Acme Industries",
        "code": code,
        "admin_email": email,
        "admin_password": "Secret123",
        "admin_first_name": "Olive",
        "admin_last_name": "Owner",
    }


def test_create_company_seeds_defaults(client, db_session, super_admin, auth_headers):
    response = client.post("/api/companies", json=_company_payload(), headers=auth_headers(super_admin))
    assert response.status_code == 200
    data = response.json()
    assert data["company"]["code"] == "ACME"
    assert data["admin"]["email"] == "owner@acme.com"
    assert data["admin"]["role"] == "HR_ADMIN"

    company_id = data["company"]["id"]
    admin = db_session.query(User).filter(User.email == "owner@acme.com").one()
    assert admin.tenant_id == company_id
    employee = db_session.get(Employee, admin.employee_id)
    assert employee.employee_code == "ADMIN-001"

    codes = {lt.code: lt for lt in db_session.query(LeaveType).filter(LeaveType.tenant_id == company_id)}
    assert set(codes) == {"AL", "SL", "CL"}
    assert codes["AL"].default_days == 20
    assert codes["AL"].max_carry_forward == 5

    rule = db_session.query(OtRule).filter(OtRule.tenant_id == company_id).one()
    assert rule.name == "Standard OT Rule"
    assert rule.employment_type is None
    assert (rule.daily_threshold_minutes, rule.rounding_interval_minutes) == (480, 15)


def test_new_company_admin_can_log_in(client, super_admin, auth_headers):
    client.post("/api/companies", json=_company_payload(), headers=auth_headers(super_admin))
    response = client.post("/api/auth/login", json={"email": "owner@acme.com", "password": "Secret123"})
    assert response.status_code == 200
    assert response.json()["user"]["role"] == "HR_ADMIN"


def test_duplicate_company_code_conflicts(client, super_admin, auth_headers):
    headers = auth_headers(super_admin)
    client.post("/api/companies", json=_company_payload(), headers=headers)

    response = client.post("/api/companies", json=_company_payload(email="other@acme.com"), headers=headers)
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["errors"][0]["msg"] == "Company code already exists"


def test_duplicate_admin_email_conflicts(client, super_admin, auth_headers):
    headers = auth_headers(super_admin)
    response = client.post("/api/companies", json=_company_payload(email=super_admin.email), headers=headers)
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["errors"][0]["msg"] == "Admin email already exists in the system"


def test_invalid_company_code_is_rejected(client, super_admin, auth_headers):
    response = client.post("/api/companies", json=_company_payload(code="acme corp"), headers=auth_headers(super_admin))
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_companies_require_super_admin(client, admin_user, auth_headers):
    response = client.get("/api/companies", headers=auth_headers(admin_user))
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_list_search_and_counts(client, super_admin, auth_headers):
    headers = auth_headers(super_admin)
    client.post("/api/companies", json=_company_payload(), headers=headers)

    response = client.get("/api/companies", params={"search": "acme"}, headers=headers)
    assert response.status_code == 200
    companies = response.json()
    assert [c["code"] for c in companies] == ["ACME"]
    assert companies[0]["counts"] == {"employees": 1, "users": 1, "departments": 0}


def test_company_detail_counts(client, super_admin, auth_headers):
    headers = auth_headers(super_admin)
    company_id = client.post("/api/companies", json=_company_payload(), headers=headers).json()["company"]["id"]

    data = client.get(f"/api/companies/{company_id}", headers=headers).json()
    assert data["active_employee_count"] == 1
    assert data["leave_type_count"] == 3
    assert data["ot_rule_count"] == 1


def test_toggle_status(client, super_admin, make_tenant, auth_headers):
    company = make_tenant("Gamma Ltd")
    response = client.put(f"/api/companies/{company.id}/toggle-status", headers=auth_headers(super_admin))
    assert response.status_code == 200
    assert response.json()["is_active"] is False


def test_delete_company_with_employees_is_forbidden(client, db_session, super_admin, auth_headers):
    headers = auth_headers(super_admin)
    company_id = client.post("/api/companies", json=_company_payload(), headers=headers).json()["company"]["id"]

    response = client.delete(f"/api/companies/{company_id}", headers=headers)
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["errors"][0]["msg"] == "Cannot delete company with existing employees. Deactivate it instead."
    assert db_session.get(Tenant, company_id) is not None


def test_delete_empty_company(client, db_session, super_admin, make_tenant, auth_headers):
    company = make_tenant("Empty Co")
    company_id = company.id
    db_session.add(OtRule(tenant_id=company_id, name="Default"))
    db_session.commit()

    response = client.delete(f"/api/companies/{company_id}", headers=auth_headers(super_admin))
    assert response.status_code == 200
    assert response.json() == {"message": "Company deleted successfully"}
    assert db_session.get(Tenant, company_id) is None
    assert db_session.query(OtRule).filter(OtRule.tenant_id == company_id).count() == 0


def test_delete_missing_company(client, super_admin, auth_headers):
    response = client.delete("/api/companies/does-not-exist", headers=auth_headers(super_admin))
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_stats_summary(client, super_admin, make_tenant, auth_headers):
    make_tenant("Inactive Co", is_active=False)
    data = client.get("/api/companies/stats/summary", headers=auth_headers(super_admin)).json()
    assert data["total_companies"] == data["active_companies"] + data["inactive_companies"]
    assert data["inactive_companies"] >= 1


# --- Logo ---

def test_logo_upload_and_public_download(client, upload_dir, super_admin, make_tenant, auth_headers):
    company = make_tenant("Logo Co")
    response = client.post(
        f"/api/companies/{company.id}/logo",
        files={"logo": ("logo.png", PNG_BYTES, "image/png")},
        headers=auth_headers(super_admin),
    )
    assert response.status_code == 200
    logo_url = response.json()["logo_url"]
    assert logo_url.startswith(f"logos/{company.id}-")
    assert (upload_dir / logo_url).read_bytes() == PNG_BYTES

    # No Authorization header: logos are public.
    download = client.get(f"/api/companies/{company.id}/logo")
    assert download.status_code == 200
    assert download.content == PNG_BYTES
    assert download.headers["content-type"] == "image/png"
    assert download.headers["cache-control"] == "public, max-age=3600"


def test_logo_replacement_removes_previous_file(client, upload_dir, super_admin, make_tenant, auth_headers):
    company = make_tenant("Logo Co")
    headers = auth_headers(super_admin)
    first = client.post(
        f"/api/companies/{company.id}/logo", files={"logo": ("a.png", PNG_BYTES, "image/png")}, headers=headers
    ).json()["logo_url"]
    second = client.post(
        f"/api/companies/{company.id}/logo", files={"logo": ("b.gif", b"GIF89a", "image/gif")}, headers=headers
    ).json()["logo_url"]

    assert second.endswith(".gif")
    assert not (upload_dir / first).exists()
    assert (upload_dir / second).exists()


def test_failed_logo_commit_leaves_no_file(db_session, upload_dir, make_tenant, monkeypatch):
    company = make_tenant("Logo Co")

    def conflict(db, conflict_message="Resource already exists"):
        raise ConflictError(conflict_message)

    monkeypatch.setattr(company_service, "commit_or_conflict", conflict)
    with pytest.raises(ConflictError):
        CompanyService(db_session).upload_logo(company.id, PNG_BYTES, "image/png")

    assert list((upload_dir / "logos").iterdir()) == []


def test_logo_rejects_non_images(client, upload_dir, super_admin, make_tenant, auth_headers):
    company = make_tenant("Logo Co")
    response = client.post(
        f"/api/companies/{company.id}/logo",
        files={"logo": ("notes.txt", b"hello", "text/plain")},
        headers=auth_headers(super_admin),
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_logo_rejects_oversized_files(client, upload_dir, super_admin, make_tenant, auth_headers):
    company = make_tenant("Logo Co")
    response = client.post(
        f"/api/companies/{company.id}/logo",
        files={"logo": ("big.png", b"\x00" * (2 * 1024 * 1024 + 1), "image/png")},
        headers=auth_headers(super_admin),
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_missing_logo_is_not_found(client, upload_dir, make_tenant):
    company = make_tenant("No Logo Co")
    assert client.get(f"/api/companies/{company.id}/logo").status_code == status.HTTP_404_NOT_FOUND


# --- Tenant info ---

def test_tenant_info_for_any_role(client, tenant, make_employee, make_user, auth_headers):
    employee = make_employee(tenant, "E001", "Ana")
    user = make_user(tenant, UserRole.EMPLOYEE, employee)

    response = client.get("/api/tenant-info", headers=auth_headers(user))
    assert response.status_code == 200
    assert response.json() == {"id": tenant.id, "name": tenant.name, "code": tenant.code, "logo_url": None}

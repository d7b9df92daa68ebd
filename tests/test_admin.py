import pytest
from datetime import date
from fastapi import status

from app.core.requester import HrAdmin, Manager
from app.models.attendance import AttendanceRecord, AttendanceStatus
from app.models.employee import EmploymentType
from app.models.leave_request import LeaveRequest, LeaveRequestStatus
from app.models.leave_type import LeaveType
from app.models.user import UserRole
from app.schemas.admin import OtRuleCreate
from app.services.admin_service import AdminService


def _attendance(db_session, employee, status=AttendanceStatus.PRESENT, **kwargs):
    record = AttendanceRecord(
        tenant_id=employee.tenant_id,
        employee_id=employee.id,
        date=kwargs.pop("day", date.today()),
        status=status,
        **kwargs,
    )
    db_session.add(record)
    db_session.commit()
    return record


# --- OT rules ---

def test_create_ot_rule_applies_defaults(client, admin_user, auth_headers):
    response = client.post(
        "/api/admin/settings/ot-rules",
        json={"name": "Contract OT", "employment_type": "CONTRACT"},
        headers=auth_headers(admin_user),
    )
    assert response.status_code == 200
    data = response.json()
    assert data["daily_threshold_minutes"] == 480
    assert data["rounding_interval_minutes"] == 15
    assert data["requires_manager_approval"] is True
    assert data["tenant_id"] == admin_user.tenant_id


def test_duplicate_employment_type_conflicts(client, admin_user, auth_headers):
    headers = auth_headers(admin_user)
    payload = {"name": "Intern OT", "employment_type": "INTERN"}
    assert client.post("/api/admin/settings/ot-rules", json=payload, headers=headers).status_code == 200

    response = client.post("/api/admin/settings/ot-rules", json=payload, headers=headers)
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["errors"][0]["msg"] == "OT rule for INTERN already exists"


def test_default_rules_never_conflict(db_session, tenant):
    service = AdminService(db_session, tenant.id)

    service.create_ot_rule(OtRuleCreate(name="Default A"))
    service.create_ot_rule(OtRuleCreate(name="Default B"))
    assert len(service.list_ot_rules()) == 2


def test_ot_rules_are_tenant_scoped(client, db_session, admin_user, make_tenant, auth_headers):
    other_service = AdminService(db_session, make_tenant("Beta Inc").id)
    foreign_rule = other_service.create_ot_rule(OtRuleCreate(name="Beta rule", employment_type=EmploymentType.CONTRACT))

    headers = auth_headers(admin_user)
    assert client.get(f"/api/admin/settings/ot-rules/{foreign_rule.id}", headers=headers).status_code == 404
    assert client.delete(f"/api/admin/settings/ot-rules/{foreign_rule.id}", headers=headers).status_code == 404
    assert client.get("/api/admin/settings/ot-rules", headers=headers).json() == []


def test_update_and_delete_ot_rule(client, admin_user, auth_headers):
    headers = auth_headers(admin_user)
    rule_id = client.post(
        "/api/admin/settings/ot-rules", json={"name": "Temp OT", "employment_type": "TEMPORARY"}, headers=headers
    ).json()["id"]

    response = client.put(
        f"/api/admin/settings/ot-rules/{rule_id}",
        json={"max_ot_per_month_minutes": 1200, "is_active": False},
        headers=headers,
    )
    assert response.status_code == 200
    assert response.json()["max_ot_per_month_minutes"] == 1200
    assert response.json()["employment_type"] == "TEMPORARY"

    assert client.delete(f"/api/admin/settings/ot-rules/{rule_id}", headers=headers).status_code == 200
    assert client.get(f"/api/admin/settings/ot-rules/{rule_id}", headers=headers).status_code == 404


# --- Dashboard ---

def test_tenant_dashboard_counts(client, db_session, tenant, admin_user, make_employee, auth_headers):
    worker = make_employee(tenant, "E001", "Ana")
    _attendance(db_session, worker, ot_minutes_calculated=60)

    response = client.get("/api/admin/dashboard", headers=auth_headers(admin_user))
    assert response.status_code == 200
    data = response.json()
    assert data["total_employees"] == 2
    assert data["active_employees"] == 2
    assert data["present_today"] == 1
    assert data["pending_ot_approvals"] == 1


def test_manager_dashboard_only_counts_direct_reports(client, db_session, tenant, make_employee, make_user, auth_headers):
    boss = make_employee(tenant, "M001", "Mia")
    report = make_employee(tenant, "E001", "Ana", manager_id=boss.id)
    outsider = make_employee(tenant, "E002", "Bob")
    _attendance(db_session, report)
    _attendance(db_session, outsider)

    leave_type = LeaveType(tenant_id=tenant.id, name="Annual Leave", code="AL")
    db_session.add(leave_type)
    db_session.commit()
    db_session.add(LeaveRequest(
        tenant_id=tenant.id, employee_id=outsider.id, leave_type_id=leave_type.id,
        start_date=date.today(), end_date=date.today(), total_days=1,
        status=LeaveRequestStatus.PENDING,
    ))
    db_session.commit()

    manager = make_user(tenant, UserRole.MANAGER, boss)
    response = client.get("/api/admin/dashboard", headers=auth_headers(manager))
    assert response.status_code == 200
    assert response.json() == {
        "team_size": 1,
        "present_today": 1,
        "on_leave_today": 0,
        "pending_leave_requests": 0,
        "pending_ot_approvals": 0,
    }


def test_manager_without_profile_has_empty_team(db_session, tenant, make_employee):
    make_employee(tenant, "E001", "Ana")
    stats = AdminService(db_session, tenant.id).get_dashboard(Manager(None))
    assert stats["team_size"] == 0
    assert stats["present_today"] == 0


def test_admin_dispatch_is_tenant_wide(db_session, tenant, make_employee):
    make_employee(tenant, "E001", "Ana")
    stats = AdminService(db_session, tenant.id).get_dashboard(HrAdmin())
    assert stats["total_employees"] == 1


# --- Analytics ---

def test_analytics_groups_unassigned_department(client, tenant, admin_user, make_employee, auth_headers):
    make_employee(tenant, "C001", "Cal", employment_type=EmploymentType.CONTRACT, join_date=date.today())

    response = client.get("/api/admin/analytics", headers=auth_headers(admin_user))
    assert response.status_code == 200
    data = response.json()
    assert data["headcount_by_department"] == [{"department": "Unassigned", "count": 2}]
    types = {row["type"]: row["count"] for row in data["employment_type_distribution"]}
    assert types == {"PERMANENT": 1, "CONTRACT": 1}
    assert len(data["monthly_joins"]) == 6
    assert data["monthly_joins"][-1] == {"month": date.today().strftime("%b %y"), "count": 1}

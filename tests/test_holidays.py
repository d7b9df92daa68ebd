import pytest
from datetime import date, timedelta
from fastapi import status

from app.models.user import UserRole
from app.schemas.holiday import HolidayCreate
from app.services.holiday_service import HolidayService


def test_create_and_list_holidays(client, admin_user, auth_headers):
    headers = auth_headers(admin_user)
    response = client.post(
        "/api/holidays",
        json={"name": "Republic Day", "date": "2024-01-26"},
        headers=headers,
    )
    assert response.status_code == 200
    assert response.json()["type"] == "NATIONAL"
    assert response.json()["is_optional"] is False

    listed = client.get("/api/holidays", params={"year": 2024}, headers=headers).json()
    assert [h["name"] for h in listed] == ["Republic Day"]
    assert client.get("/api/holidays", params={"year": 2025}, headers=headers).json() == []


def test_duplicate_holiday_conflicts(client, admin_user, auth_headers):
    headers = auth_headers(admin_user)
    payload = {"name": "Republic Day", "date": "2024-01-26"}
    client.post("/api/holidays", json=payload, headers=headers)

    response = client.post("/api/holidays", json=payload, headers=headers)
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["errors"][0]["msg"] == 'Holiday "Republic Day" already exists on 2024-01-26'


def test_bulk_create_reports_each_item(client, admin_user, auth_headers):
    headers = auth_headers(admin_user)
    client.post("/api/holidays", json={"name": "Holi", "date": "2024-03-25"}, headers=headers)

    response = client.post(
        "/api/holidays/bulk",
        json={"holidays": [
            {"name": "Holi", "date": "2024-03-25"},
            {"name": "Diwali", "date": "2024-11-01", "type": "NATIONAL"},
            {"name": "Founders Day", "date": "2024-06-01", "type": "COMPANY", "is_optional": True},
        ]},
        headers=headers,
    )
    assert response.status_code == 200
    results = response.json()
    assert [r["success"] for r in results] == [False, True, True]
    assert results[0]["name"] == "Holi"
    assert results[0]["date"] == "2024-03-25"
    assert "already exists" in results[0]["error"]
    assert results[2]["holiday"]["is_optional"] is True


def test_soft_delete_hides_holiday(client, admin_user, auth_headers):
    headers = auth_headers(admin_user)
    holiday_id = client.post(
        "/api/holidays", json={"name": "Holi", "date": "2024-03-25"}, headers=headers
    ).json()["id"]

    response = client.delete(f"/api/holidays/{holiday_id}", headers=headers)
    assert response.status_code == 200
    assert response.json()["is_active"] is False
    assert client.get("/api/holidays", headers=headers).json() == []


def test_update_holiday(client, admin_user, auth_headers):
    headers = auth_headers(admin_user)
    holiday_id = client.post(
        "/api/holidays", json={"name": "Holi", "date": "2024-03-25"}, headers=headers
    ).json()["id"]

    response = client.put(f"/api/holidays/{holiday_id}", json={"region": "North"}, headers=headers)
    assert response.status_code == 200
    assert response.json()["region"] == "North"
    assert response.json()["name"] == "Holi"


def test_employees_can_read_but_not_write(client, tenant, make_employee, make_user, auth_headers):
    user = make_user(tenant, UserRole.EMPLOYEE, make_employee(tenant, "E001", "Ana"))
    headers = auth_headers(user)
    assert client.get("/api/holidays", headers=headers).status_code == 200
    response = client.post("/api/holidays", json={"name": "Holi", "date": "2024-03-25"}, headers=headers)
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_holiday_from_other_tenant_is_not_found(client, db_session, admin_user, make_tenant, auth_headers):
    other = HolidayService(db_session, make_tenant("Beta Inc").id)
    foreign = other.create(HolidayCreate(name="Beta Day", date=date(2024, 5, 1)))
    response = client.get(f"/api/holidays/{foreign.id}", headers=auth_headers(admin_user))
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_upcoming_and_lookups(db_session, tenant):
    service = HolidayService(db_session, tenant.id)
    today = date.today()
    service.create(HolidayCreate(name="Past", date=today - timedelta(days=3)))
    service.create(HolidayCreate(name="Soon", date=today + timedelta(days=3)))
    service.create(HolidayCreate(name="Optional", date=today + timedelta(days=4), is_optional=True))

    assert [h.name for h in service.find_upcoming()] == ["Soon", "Optional"]
    between = service.get_holidays_between(today - timedelta(days=10), today + timedelta(days=10))
    assert [h.name for h in between] == ["Past", "Soon"]

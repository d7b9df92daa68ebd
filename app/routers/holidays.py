from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from app.database import get_db
from app.models.holiday import HolidayType
from app.routers.auth_deps import get_current_user, require_admin
from app.schemas.auth import AuthenticatedUser
from app.schemas.holiday import (
    HolidayBulkCreate, HolidayBulkResult, HolidayCreate, HolidayResponse, HolidayUpdate,
)
from app.services.holiday_service import HolidayService

router = APIRouter(
    prefix="/holidays",
    tags=["holidays"]
)


def get_holiday_service(
    db: Session = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user),
) -> HolidayService:
    return HolidayService(db, current_user.tenant_id)


@router.get("", response_model=List[HolidayResponse])
def list_holidays(
    year: Optional[int] = None,
    type: Optional[HolidayType] = None,
    is_optional: Optional[bool] = None,
    service: HolidayService = Depends(get_holiday_service),
):
    return service.find_all(year=year, holiday_type=type, is_optional=is_optional)


@router.get("/upcoming", response_model=List[HolidayResponse])
def list_upcoming_holidays(
    limit: int = Query(5, ge=1, le=50),
    service: HolidayService = Depends(get_holiday_service),
):
    return service.find_upcoming(limit)


@router.get("/{holiday_id}", response_model=HolidayResponse)
def get_holiday(holiday_id: str, service: HolidayService = Depends(get_holiday_service)):
    return service.find_by_id(holiday_id)


@router.post("", response_model=HolidayResponse, dependencies=[Depends(require_admin())])
def create_holiday(data: HolidayCreate, service: HolidayService = Depends(get_holiday_service)):
    return service.create(data)


@router.post("/bulk", response_model=List[HolidayBulkResult], dependencies=[Depends(require_admin())])
def bulk_create_holidays(data: HolidayBulkCreate, service: HolidayService = Depends(get_holiday_service)):
    return service.bulk_create(data.holidays)


@router.put("/{holiday_id}", response_model=HolidayResponse, dependencies=[Depends(require_admin())])
def update_holiday(holiday_id: str, data: HolidayUpdate, service: HolidayService = Depends(get_holiday_service)):
    return service.update(holiday_id, data)


@router.delete("/{holiday_id}", response_model=HolidayResponse, dependencies=[Depends(require_admin())])
def delete_holiday(holiday_id: str, service: HolidayService = Depends(get_holiday_service)):
    return service.delete(holiday_id)

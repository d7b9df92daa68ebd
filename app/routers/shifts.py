from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional

from app.database import get_db
from app.routers.auth_deps import get_current_user, require_admin, require_manager
from app.schemas.auth import AuthenticatedUser
from app.schemas.shift import (
    AssignShiftRequest, BulkAssignResult, BulkAssignShiftRequest,
    ShiftAssignmentResponse, ShiftCreate, ShiftResponse, ShiftUpdate,
)
from app.services.shift_service import ShiftService

router = APIRouter(
    prefix="/shifts",
    tags=["shifts"]
)


def get_shift_service(
    db: Session = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user),
) -> ShiftService:
    return ShiftService(db, current_user.tenant_id)


# Assignment routes are declared first so "/assignments/..." never matches "/{shift_id}".

@router.get("/assignments/list", response_model=List[ShiftAssignmentResponse], dependencies=[Depends(require_manager())])
def list_assignments(active_only: bool = True, service: ShiftService = Depends(get_shift_service)):
    return service.get_assignments(active_only)


@router.get("/assignments/employee/{employee_id}", response_model=List[ShiftAssignmentResponse])
def get_employee_shift_history(employee_id: str, service: ShiftService = Depends(get_shift_service)):
    return service.get_employee_shift_history(employee_id)


@router.get("/assignments/employee/{employee_id}/current", response_model=Optional[ShiftResponse])
def get_current_shift(employee_id: str, service: ShiftService = Depends(get_shift_service)):
    return service.get_current_shift(employee_id)


@router.post("/assignments", response_model=ShiftAssignmentResponse, dependencies=[Depends(require_admin())])
def assign_shift(data: AssignShiftRequest, service: ShiftService = Depends(get_shift_service)):
    return service.assign_shift(data)


@router.post("/assignments/bulk", response_model=List[BulkAssignResult], dependencies=[Depends(require_admin())])
def bulk_assign_shift(data: BulkAssignShiftRequest, service: ShiftService = Depends(get_shift_service)):
    return service.bulk_assign_shift(data.shift_id, data.employee_ids, data.start_date, data.end_date)


@router.get("", response_model=List[ShiftResponse])
def list_shifts(service: ShiftService = Depends(get_shift_service)):
    return service.find_all_shifts()


@router.get("/{shift_id}", response_model=ShiftResponse)
def get_shift(shift_id: str, service: ShiftService = Depends(get_shift_service)):
    return service.find_shift_by_id(shift_id)


@router.post("", response_model=ShiftResponse, dependencies=[Depends(require_admin())])
def create_shift(data: ShiftCreate, service: ShiftService = Depends(get_shift_service)):
    return service.create_shift(data)


@router.put("/{shift_id}", response_model=ShiftResponse, dependencies=[Depends(require_admin())])
def update_shift(shift_id: str, data: ShiftUpdate, service: ShiftService = Depends(get_shift_service)):
    return service.update_shift(shift_id, data)


@router.delete("/{shift_id}", response_model=ShiftResponse, dependencies=[Depends(require_admin())])
def delete_shift(shift_id: str, service: ShiftService = Depends(get_shift_service)):
    return service.delete_shift(shift_id)

"""
Shift definitions and employee shift assignments.

An employee has at most one active assignment. Assigning a new
shift closes the current one (end_date = new start_date) in the same commit.
"""
from datetime import date
from typing import Any, Dict, List, Optional

from app.core.exceptions import AppException, ConflictError, NotFoundError
from app.models.employee import Employee
from app.models.shift import Shift, ShiftAssignment
from app.schemas.shift import AssignShiftRequest, ShiftCreate, ShiftUpdate
from app.services.base import BaseService


class ShiftService(BaseService):

    # --- Shifts ---

    def create_shift(self, data: ShiftCreate) -> Shift:
        conflict_message = f'Shift with code "{data.code}" already exists'
        if self._scoped(Shift).filter(Shift.code == data.code).first():
            raise ConflictError(conflict_message)

        shift = Shift(
            tenant_id=self.tenant_id,
            name=data.name,
            code=data.code,
            start_time=data.start_time,
            end_time=data.end_time,
            break_minutes=data.break_minutes if data.break_minutes is not None else 60,
            standard_work_minutes=data.standard_work_minutes if data.standard_work_minutes is not None else 480,
            grace_minutes=data.grace_minutes if data.grace_minutes is not None else 15,
        )
        self.db.add(shift)
        self._commit(conflict_message)
        self.db.refresh(shift)
        return shift

    def find_all_shifts(self) -> List[Shift]:
        return self._scoped(Shift).filter(Shift.is_active.is_(True)).order_by(Shift.name.asc()).all()

    def find_shift_by_id(self, shift_id: str) -> Shift:
        return self._get_or_404(Shift, shift_id, "Shift not found")

    def update_shift(self, shift_id: str, data: ShiftUpdate) -> Shift:
        shift = self.find_shift_by_id(shift_id)
        conflict_message = f'Shift with code "{data.code}" already exists'
        if data.code:
            duplicate = self._scoped(Shift).filter(Shift.code == data.code, Shift.id != shift_id).first()
            if duplicate:
                raise ConflictError(conflict_message)

        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(shift, field, value)
        self._commit(conflict_message)
        self.db.refresh(shift)
        return shift

    def delete_shift(self, shift_id: str) -> Shift:
        shift = self.find_shift_by_id(shift_id)
        shift.is_active = False
        self._commit()
        self.db.refresh(shift)
        return shift

    # --- Assignments ---

    def assign_shift(self, data: AssignShiftRequest) -> ShiftAssignment:
        self._get_or_404(Employee, data.employee_id, "Employee not found")
        if not self.find_shift_by_id(data.shift_id).is_active:
            raise NotFoundError("Shift not found")

        try:
            self._scoped(ShiftAssignment).filter(
                ShiftAssignment.employee_id == data.employee_id,
                ShiftAssignment.is_active.is_(True),
            ).update(
                {ShiftAssignment.is_active: False, ShiftAssignment.end_date: data.start_date},
                synchronize_session="fetch",
            )

            assignment = ShiftAssignment(
                tenant_id=self.tenant_id,
                employee_id=data.employee_id,
                shift_id=data.shift_id,
                start_date=data.start_date,
                end_date=data.end_date,
            )
            self.db.add(assignment)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(assignment)
        self._logger.info(f"Employee {data.employee_id} assigned to shift {data.shift_id}")
        return assignment

    def bulk_assign_shift(
        self,
        shift_id: str,
        employee_ids: List[str],
        start_date: date,
        end_date: Optional[date] = None,
    ) -> List[Dict[str, Any]]:
        results = []
        for employee_id in employee_ids:
            try:
                assignment = self.assign_shift(AssignShiftRequest(
                    employee_id=employee_id,
                    shift_id=shift_id,
                    start_date=start_date,
                    end_date=end_date,
                ))
                results.append({"success": True, "assignment": assignment})
            except AppException as e:
                self._logger.warning(f"Shift assignment failed for employee {employee_id}: {e.message}")
                results.append({"success": False, "employee_id": employee_id, "error": e.message})
        return results

    def get_assignments(self, active_only: bool = True) -> List[ShiftAssignment]:
        query = self._scoped(ShiftAssignment)
        if active_only:
            query = query.filter(ShiftAssignment.is_active.is_(True))
        return query.order_by(ShiftAssignment.created_at.desc()).all()

    def get_employee_shift_history(self, employee_id: str) -> List[ShiftAssignment]:
        return (
            self._scoped(ShiftAssignment)
            .filter(ShiftAssignment.employee_id == employee_id)
            .order_by(ShiftAssignment.start_date.desc())
            .all()
        )

    def get_current_shift(self, employee_id: str) -> Optional[Shift]:
        assignment = (
            self._scoped(ShiftAssignment)
            .filter(ShiftAssignment.employee_id == employee_id, ShiftAssignment.is_active.is_(True))
            .order_by(ShiftAssignment.start_date.desc())
            .first()
        )
        return assignment.shift if assignment else None

"""
Salary structures and employee salary assignments.
"""
from typing import Any, Dict, List

from sqlalchemy import func

from app.core.exceptions import ConflictError, NotFoundError
from app.models.employee import Employee
from app.models.payroll import EmployeeSalary, SalaryStructure
from app.schemas.payroll import AssignSalaryRequest, SalaryStructureCreate, SalaryStructureUpdate
from app.services.base import BaseService


class SalaryService(BaseService):

    # --- Structures ---

    def list_structures(self) -> List[Dict[str, Any]]:
        assigned = (
            self.db.query(func.count(EmployeeSalary.id))
            .filter(EmployeeSalary.salary_structure_id == SalaryStructure.id)
            .correlate(SalaryStructure)
            .scalar_subquery()
        )
        rows = self._scoped(SalaryStructure).add_columns(assigned).order_by(SalaryStructure.name.asc()).all()
        return [
            {**{c.name: getattr(structure, c.name) for c in SalaryStructure.__table__.columns}, "employee_count": count}
            for structure, count in rows
        ]

    def get_structure(self, structure_id: str) -> SalaryStructure:
        return self._get_or_404(SalaryStructure, structure_id, "Salary structure not found")

    def create_structure(self, data: SalaryStructureCreate) -> SalaryStructure:
        conflict_message = f'Salary structure "{data.name}" already exists'
        if self._scoped(SalaryStructure).filter(SalaryStructure.name == data.name).first():
            raise ConflictError(conflict_message)

        structure = SalaryStructure(
            tenant_id=self.tenant_id,
            name=data.name,
            description=data.description,
            components=[c.model_dump() for c in data.components],
        )
        self.db.add(structure)
        self._commit(conflict_message)
        self.db.refresh(structure)
        return structure

    def update_structure(self, structure_id: str, data: SalaryStructureUpdate) -> SalaryStructure:
        structure = self.get_structure(structure_id)
        conflict_message = f'Salary structure "{data.name}" already exists'
        if data.name and data.name != structure.name:
            duplicate = self._scoped(SalaryStructure).filter(SalaryStructure.name == data.name).first()
            if duplicate:
                raise ConflictError(conflict_message)

        updates = data.model_dump(exclude_unset=True)
        if "components" in updates and updates["components"] is not None:
            updates["components"] = [c.model_dump() for c in data.components]
        for field, value in updates.items():
            setattr(structure, field, value)
        self._commit(conflict_message)
        self.db.refresh(structure)
        return structure

    def delete_structure(self, structure_id: str) -> Dict[str, str]:
        structure = self.get_structure(structure_id)
        in_use = self._scoped(EmployeeSalary).filter(EmployeeSalary.salary_structure_id == structure.id).count()
        if in_use:
            raise ConflictError(
                f"Salary structure is assigned to {in_use} employee salary record(s) and cannot be deleted",
                details={"assigned_salaries": in_use},
            )
        self.db.delete(structure)
        self._commit()
        return {"message": "Salary structure deleted successfully"}

    # --- Employee salaries ---

    def get_employee_salaries(self, employee_id: str) -> List[EmployeeSalary]:
        return (
            self._scoped(EmployeeSalary)
            .filter(EmployeeSalary.employee_id == employee_id)
            .order_by(EmployeeSalary.effective_from.desc())
            .all()
        )

    def assign_salary(self, data: AssignSalaryRequest) -> EmployeeSalary:
        """Close the employee's active salary and open a new one in one commit."""
        self._get_or_404(Employee, data.employee_id, "Employee not found")
        structure = self._scoped(SalaryStructure).filter(
            SalaryStructure.id == data.salary_structure_id,
            SalaryStructure.is_active.is_(True),
        ).first()
        if structure is None:
            raise NotFoundError("Salary structure not found")

        try:
            self._scoped(EmployeeSalary).filter(
                EmployeeSalary.employee_id == data.employee_id,
                EmployeeSalary.is_active.is_(True),
            ).update(
                {EmployeeSalary.is_active: False, EmployeeSalary.effective_to: data.effective_from},
                synchronize_session="fetch",
            )

            salary = EmployeeSalary(
                tenant_id=self.tenant_id,
                employee_id=data.employee_id,
                salary_structure_id=structure.id,
                base_pay=data.base_pay,
                effective_from=data.effective_from,
            )
            self.db.add(salary)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(salary)
        self._logger.info(f"Salary assigned to employee {data.employee_id} from {data.effective_from}")
        return salary

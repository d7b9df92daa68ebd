"""
Admin Service Layer

OT rule settings, dashboard counters and analytics for one tenant.
"""
from datetime import date
from typing import Any, Dict, List

from sqlalchemy import func, select

from app.core.exceptions import ConflictError
from app.core.requester import Manager, Requester
from app.models.attendance import AttendanceRecord, AttendanceStatus
from app.models.department import Department
from app.models.employee import Employee, EmployeeStatus
from app.models.leave_request import LeaveRequest, LeaveRequestStatus
from app.models.leave_type import LeaveType
from app.models.ot_rule import OtRule
from app.schemas.admin import OtRuleCreate, OtRuleUpdate
from app.services.base import BaseService


def _shift_month(year: int, month: int, delta: int) -> date:
    index = year * 12 + (month - 1) + delta
    return date(index // 12, index % 12 + 1, 1)


class AdminService(BaseService):

    # --- OT rules ---

    def list_ot_rules(self) -> List[OtRule]:
        return self._scoped(OtRule).order_by(OtRule.created_at.desc()).all()

    def get_ot_rule(self, rule_id: str) -> OtRule:
        return self._get_or_404(OtRule, rule_id, "OT rule not found")

    def create_ot_rule(self, data: OtRuleCreate) -> OtRule:
        conflict_message = f"OT rule for {data.employment_type.value if data.employment_type else 'default'} already exists"
        # Only typed rules are unique; a default rule never collides.
        if data.employment_type is not None:
            existing = self._scoped(OtRule).filter(OtRule.employment_type == data.employment_type).first()
            if existing:
                raise ConflictError(conflict_message)

        rule = OtRule(
            tenant_id=self.tenant_id,
            name=data.name,
            employment_type=data.employment_type,
            daily_threshold_minutes=data.daily_threshold_minutes if data.daily_threshold_minutes is not None else 480,
            weekly_threshold_minutes=data.weekly_threshold_minutes,
            rounding_interval_minutes=data.rounding_interval_minutes if data.rounding_interval_minutes is not None else 15,
            requires_manager_approval=data.requires_manager_approval is not False,
            max_ot_per_day_minutes=data.max_ot_per_day_minutes,
            max_ot_per_month_minutes=data.max_ot_per_month_minutes,
        )
        self.db.add(rule)
        self._commit(conflict_message)
        self.db.refresh(rule)
        self._logger.info(f"OT rule {rule.id} created for tenant {self.tenant_id}")
        return rule

    def update_ot_rule(self, rule_id: str, data: OtRuleUpdate) -> OtRule:
        rule = self.get_ot_rule(rule_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(rule, field, value)
        self._commit()
        self.db.refresh(rule)
        return rule

    def delete_ot_rule(self, rule_id: str) -> Dict[str, str]:
        rule = self.get_ot_rule(rule_id)
        self.db.delete(rule)
        self._commit()
        return {"message": "OT rule deleted successfully"}

    # --- Dashboard ---

    def get_dashboard(self, requester: Requester) -> Dict[str, int]:
        match requester:
            case Manager(employee_id=employee_id):
                return self.get_manager_dashboard_stats(employee_id)
            case _:
                return self.get_dashboard_stats()

    def _count(self, model, *criteria):
        return (
            select(func.count())
            .select_from(model)
            .where(model.tenant_id == self.tenant_id, *criteria)
            .correlate(None)
            .scalar_subquery()
        )

    def _fetch_counts(self, **counts) -> Dict[str, int]:
        # Every counter travels in a single SELECT.
        row = self.db.execute(
            select(*[subquery.label(name) for name, subquery in counts.items()])
        ).one()
        return {name: int(row._mapping[name] or 0) for name in counts}

    def get_dashboard_stats(self) -> Dict[str, int]:
        today = date.today()
        return self._fetch_counts(
            total_employees=self._count(Employee),
            active_employees=self._count(Employee, Employee.status == EmployeeStatus.ACTIVE),
            present_today=self._count(
                AttendanceRecord,
                AttendanceRecord.date == today,
                AttendanceRecord.status == AttendanceStatus.PRESENT,
            ),
            on_leave_today=self._count(
                AttendanceRecord,
                AttendanceRecord.date == today,
                AttendanceRecord.status == AttendanceStatus.LEAVE,
            ),
            pending_leave_requests=self._count(LeaveRequest, LeaveRequest.status == LeaveRequestStatus.PENDING),
            pending_ot_approvals=self._count(
                AttendanceRecord,
                AttendanceRecord.ot_minutes_calculated > 0,
                AttendanceRecord.ot_minutes_approved.is_(None),
            ),
        )

    def get_manager_dashboard_stats(self, manager_id: str | None) -> Dict[str, int]:
        today = date.today()
        team_ids = [
            row.id
            for row in self._scoped(Employee).with_entities(Employee.id).filter(
                Employee.manager_id == manager_id,
                Employee.status == EmployeeStatus.ACTIVE,
            )
        ] if manager_id else []

        counts = self._fetch_counts(
            present_today=self._count(
                AttendanceRecord,
                AttendanceRecord.employee_id.in_(team_ids),
                AttendanceRecord.date == today,
                AttendanceRecord.status == AttendanceStatus.PRESENT,
            ),
            on_leave_today=self._count(
                AttendanceRecord,
                AttendanceRecord.employee_id.in_(team_ids),
                AttendanceRecord.date == today,
                AttendanceRecord.status == AttendanceStatus.LEAVE,
            ),
            pending_leave_requests=self._count(
                LeaveRequest,
                LeaveRequest.employee_id.in_(team_ids),
                LeaveRequest.status == LeaveRequestStatus.PENDING,
            ),
            pending_ot_approvals=self._count(
                AttendanceRecord,
                AttendanceRecord.employee_id.in_(team_ids),
                AttendanceRecord.ot_minutes_calculated > 0,
                AttendanceRecord.ot_minutes_approved.is_(None),
            ),
        )
        return {"team_size": len(team_ids), **counts}

    # --- Analytics ---

    def get_analytics(self) -> Dict[str, Any]:
        today = date.today()
        window_start = _shift_month(today.year, today.month, -5)

        headcount_rows = (
            self.db.query(Department.name, func.count(Employee.id))
            .select_from(Employee)
            .outerjoin(Department, Employee.department_id == Department.id)
            .filter(Employee.tenant_id == self.tenant_id, Employee.status == EmployeeStatus.ACTIVE)
            .group_by(Employee.department_id, Department.name)
            .all()
        )
        headcount_by_department = [
            {"department": name or "Unassigned", "count": count}
            for name, count in headcount_rows
        ]

        type_rows = (
            self._scoped(Employee)
            .with_entities(Employee.employment_type, func.count(Employee.id))
            .filter(Employee.status == EmployeeStatus.ACTIVE)
            .group_by(Employee.employment_type)
            .all()
        )
        employment_type_distribution = [
            {"type": employment_type.value, "count": count}
            for employment_type, count in type_rows
        ]

        join_dates = [
            row.join_date
            for row in self._scoped(Employee).with_entities(Employee.join_date).filter(
                Employee.join_date >= window_start
            )
        ]
        monthly_joins = []
        for offset in range(-5, 1):
            start = _shift_month(today.year, today.month, offset)
            end = _shift_month(today.year, today.month, offset + 1)
            monthly_joins.append({
                "month": start.strftime("%b %y"),
                "count": sum(1 for d in join_dates if start <= d < end),
            })

        usage_rows = (
            self.db.query(LeaveType.name, func.coalesce(func.sum(LeaveRequest.total_days), 0))
            .select_from(LeaveRequest)
            .join(LeaveType, LeaveRequest.leave_type_id == LeaveType.id)
            .filter(
                LeaveRequest.tenant_id == self.tenant_id,
                LeaveRequest.status == LeaveRequestStatus.APPROVED,
                LeaveRequest.start_date >= date(today.year, 1, 1),
            )
            .group_by(LeaveType.id, LeaveType.name)
            .all()
        )
        leave_utilization = [{"type": name, "days": float(days)} for name, days in usage_rows]

        return {
            "headcount_by_department": headcount_by_department,
            "employment_type_distribution": employment_type_distribution,
            "monthly_joins": monthly_joins,
            "leave_utilization": leave_utilization,
        }

"""
Report Service Layer

Builds human-readable rows for the attendance, leave-balance, employee and
payroll-register reports and hands them to the file serializer.

Managers are always restricted to their direct reports, whatever filters
they send.
"""
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from sqlalchemy.orm import Query, aliased, joinedload

from app.core.config import settings
from app.core.requester import Requester, team_scope
from app.models.attendance import AttendanceRecord
from app.models.employee import Employee
from app.models.leave_balance import LeaveBalance
from app.models.leave_type import LeaveType
from app.models.payroll import PayrollRun, Payslip
from app.models.tenant import Tenant
from app.schemas.report import (
    AttendanceReportRequest, EmployeeReportRequest, LeaveReportRequest, ReportFormat,
)
from app.services.base import BaseService
from app.services.report_export import ReportFile, build_report_file

EM_DASH = "—"


def minutes_to_hours(minutes: int) -> str:
    """480 -> "8h", 495 -> "8h 15m"."""
    hours, mins = divmod(minutes or 0, 60)
    return f"{hours}h {mins}m" if mins > 0 else f"{hours}h"


def format_date(value: Optional[date]) -> str:
    return value.strftime("%d/%m/%Y") if value else EM_DASH


def _or_dash(value: Optional[Any]) -> Any:
    return value if value not in (None, "") else EM_DASH


class ReportService(BaseService):

    def _zone(self) -> ZoneInfo:
        tenant = self.db.get(Tenant, self.tenant_id)
        name = (tenant.timezone if tenant else None) or settings.default_timezone
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError):
            self._logger.warning(f"Unknown timezone {name!r}, reporting in UTC")
            return ZoneInfo("UTC")

    @staticmethod
    def _format_time(value: Optional[datetime], zone: ZoneInfo) -> str:
        if value is None:
            return EM_DASH
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(zone).strftime("%H:%M")

    @staticmethod
    def _restrict_to_team(query: Query, requester: Requester) -> Query:
        manager_id = team_scope(requester)
        if manager_id is not None:
            query = query.filter(Employee.manager_id == manager_id)
        return query

    # ============================================================
    # ATTENDANCE REPORT
    # ============================================================
    def generate_attendance_report(self, filters: AttendanceReportRequest, requester: Requester) -> ReportFile:
        query = (
            self._scoped(AttendanceRecord)
            .join(Employee, AttendanceRecord.employee_id == Employee.id)
            .options(joinedload(AttendanceRecord.employee).joinedload(Employee.department))
            .filter(AttendanceRecord.date >= filters.date_from, AttendanceRecord.date <= filters.date_to)
        )
        if filters.employee_id:
            query = query.filter(AttendanceRecord.employee_id == filters.employee_id)
        if filters.department_id:
            query = query.filter(Employee.department_id == filters.department_id)
        query = self._restrict_to_team(query, requester)

        records = query.order_by(AttendanceRecord.date.asc(), Employee.first_name.asc()).all()
        zone = self._zone()

        rows = [
            {
                "Employee Code": r.employee.employee_code,
                "Employee Name": r.employee.full_name,
                "Department": r.employee.department.name if r.employee.department else EM_DASH,
                "Date": format_date(r.date),
                "Status": r.status.value,
                "Clock In": self._format_time(r.clock_in_time, zone),
                "Clock Out": self._format_time(r.clock_out_time, zone),
                "Worked Hours": minutes_to_hours(r.worked_minutes),
                "Break Hours": minutes_to_hours(r.break_minutes),
                "Standard Hours": minutes_to_hours(r.standard_work_minutes),
                "OT Calculated": minutes_to_hours(r.ot_minutes_calculated) if r.ot_minutes_calculated is not None else EM_DASH,
                "OT Approved": minutes_to_hours(r.ot_minutes_approved) if r.ot_minutes_approved is not None else EM_DASH,
                "Remarks": r.remarks or "",
            }
            for r in records
        ]

        base_name = f"attendance_report_{filters.date_from.isoformat()}_to_{filters.date_to.isoformat()}"
        return build_report_file(rows, base_name, filters.format, "Attendance Report")

    # ============================================================
    # LEAVE REPORT
    # ============================================================
    def generate_leave_report(self, filters: LeaveReportRequest, requester: Requester) -> ReportFile:
        year = filters.year or date.today().year
        query = (
            self._scoped(LeaveBalance)
            .join(Employee, LeaveBalance.employee_id == Employee.id)
            .join(LeaveType, LeaveBalance.leave_type_id == LeaveType.id)
            .options(
                joinedload(LeaveBalance.employee).joinedload(Employee.department),
                joinedload(LeaveBalance.leave_type),
            )
            .filter(LeaveBalance.year == year)
        )
        if filters.employee_id:
            query = query.filter(LeaveBalance.employee_id == filters.employee_id)
        if filters.department_id:
            query = query.filter(Employee.department_id == filters.department_id)
        query = self._restrict_to_team(query, requester)

        balances = query.order_by(Employee.first_name.asc(), LeaveType.name.asc()).all()

        rows = [
            {
                "Employee Code": b.employee.employee_code,
                "Employee Name": b.employee.full_name,
                "Department": b.employee.department.name if b.employee.department else EM_DASH,
                "Year": b.year,
                "Leave Type": b.leave_type.name,
                "Leave Code": b.leave_type.code,
                "Total Days": b.total_days,
                "Used Days": b.used_days,
                "Pending Days": b.pending_days,
                "Carried Over": b.carried_over,
                "Available": b.available_days,
            }
            for b in balances
        ]

        return build_report_file(rows, f"leave_report_{year}", filters.format, "Leave Balances")

    # ============================================================
    # EMPLOYEE REPORT
    # ============================================================
    def generate_employee_report(self, filters: EmployeeReportRequest, requester: Requester) -> ReportFile:
        query = self._scoped(Employee).options(
            joinedload(Employee.department),
            joinedload(Employee.manager),
        )
        if filters.department_id:
            query = query.filter(Employee.department_id == filters.department_id)
        if filters.status:
            query = query.filter(Employee.status == filters.status)
        if filters.employment_type:
            query = query.filter(Employee.employment_type == filters.employment_type)
        query = self._restrict_to_team(query, requester)

        employees = query.order_by(Employee.first_name.asc(), Employee.last_name.asc()).all()

        rows = [
            {
                "Employee Code": e.employee_code,
                "First Name": e.first_name,
                "Last Name": e.last_name,
                "Email": e.email,
                "Phone": _or_dash(e.phone),
                "Department": e.department.name if e.department else EM_DASH,
                "Designation": _or_dash(e.designation),
                "Employment Type": e.employment_type.value,
                "Pay Type": e.pay_type.value,
                "Status": e.status.value,
                "Join Date": format_date(e.join_date),
                "Exit Date": format_date(e.exit_date),
                "Manager": e.manager.full_name if e.manager else EM_DASH,
                "Hourly Rate": e.hourly_rate if e.hourly_rate is not None else EM_DASH,
                "OT Multiplier": e.ot_multiplier,
            }
            for e in employees
        ]

        return build_report_file(rows, "employee_report", filters.format, "Employees")

    # ============================================================
    # PAYROLL REGISTER
    # ============================================================
    def generate_payroll_report(self, run_id: str, fmt: ReportFormat) -> ReportFile:
        run = self._get_or_404(PayrollRun, run_id, "Payroll run not found")
        payslip_employee = aliased(Employee)
        payslips = (
            self._scoped(Payslip)
            .join(payslip_employee, Payslip.employee_id == payslip_employee.id)
            .options(joinedload(Payslip.employee).joinedload(Employee.department))
            .filter(Payslip.payroll_run_id == run.id)
            .order_by(payslip_employee.first_name.asc(), payslip_employee.last_name.asc())
            .all()
        )

        rows: List[Dict[str, Any]] = [
            {
                "Employee Code": p.employee.employee_code,
                "Employee Name": p.employee.full_name,
                "Department": p.employee.department.name if p.employee.department else EM_DASH,
                "Working Days": p.working_days,
                "Present Days": p.present_days,
                "Leave Days": p.leave_days,
                "LOP Days": p.lop_days,
                "OT Hours": p.ot_hours,
                "Base Pay": p.base_pay,
                "OT Pay": p.ot_pay,
                "Gross Pay": p.gross_pay,
                "Deductions": p.total_deductions,
                "Net Pay": p.net_pay,
            }
            for p in payslips
        ]

        return build_report_file(rows, f"payroll_report_{run.year}_{run.month:02d}", fmt, "Payroll Register")

"""
Payroll Calculation

Computes one employee's payslip figures for a month from their active salary,
attendance, approved leave, tenant holidays and the applicable OT rule.

Pipeline:
- working days = weekdays in the month minus mandatory holidays on weekdays
- present days from attendance (PRESENT/WFH count 1, HALF_DAY counts 0.5)
- paid leave tops up presence; unpaid leave is reported as LOP
- base pay and fixed components are pro-rated by effective presence
- overtime is paid at the hourly rate times the employee's OT multiplier
"""
import calendar
from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from sqlalchemy import or_

from app.models.attendance import AttendanceRecord, AttendanceStatus
from app.models.employee import Employee, PayType
from app.models.leave_request import LeaveRequest, LeaveRequestStatus
from app.models.payroll import EmployeeSalary
from app.services.base import BaseService
from app.services.holiday_service import HolidayService
from app.services.ot_service import OtService, apply_monthly_cap

STANDARD_HOURS_PER_DAY = 8

PRESENCE_WEIGHTS = {
    AttendanceStatus.PRESENT: 1.0,
    AttendanceStatus.WFH: 1.0,
    AttendanceStatus.HALF_DAY: 0.5,
}


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    return date(year, month, 1), date(year, month, calendar.monthrange(year, month)[1])


def _days(start: date, end: date) -> Iterable[date]:
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def is_weekend(day: date) -> bool:
    return day.weekday() >= 5


def count_working_days(start: date, end: date, holidays: Set[date]) -> int:
    """Weekdays in the inclusive range that are not holidays."""
    return sum(1 for day in _days(start, end) if not is_weekend(day) and day not in holidays)


def apply_components(components: List[Dict[str, Any]], base_pay: float, pro_rate: float) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
    """
    Split structure components into earning and deduction lines.

    Percentage components apply to the already pro-rated base; fixed amounts
    are pro-rated themselves.
    """
    earnings, deductions = [], []
    for component in components or []:
        value = float(component.get("value") or 0)
        if component.get("calc_type") == "percentage":
            amount = round(base_pay * value / 100, 2)
        else:
            amount = round(value * pro_rate, 2)
        line = {"name": component.get("name"), "amount": amount}
        if component.get("type") == "deduction":
            deductions.append(line)
        else:
            earnings.append(line)
    return earnings, deductions


class PayrollCalculator(BaseService):

    def __init__(self, db, tenant_id: str):
        super().__init__(db, tenant_id)
        self.ot_service = OtService(db, tenant_id)
        self.holiday_service = HolidayService(db, tenant_id)

    def get_active_salary(self, employee_id: str, month_start: date, month_end: date) -> Optional[EmployeeSalary]:
        return (
            self._scoped(EmployeeSalary)
            .filter(
                EmployeeSalary.employee_id == employee_id,
                EmployeeSalary.is_active.is_(True),
                EmployeeSalary.effective_from <= month_end,
                or_(EmployeeSalary.effective_to.is_(None), EmployeeSalary.effective_to >= month_start),
            )
            .order_by(EmployeeSalary.effective_from.desc())
            .first()
        )

    def holiday_dates(self, month_start: date, month_end: date) -> Set[date]:
        return {h.date for h in self.holiday_service.get_holidays_between(month_start, month_end)}

    def _attendance(self, employee_id: str, month_start: date, month_end: date) -> Tuple[float, int]:
        records = self._scoped(AttendanceRecord).filter(
            AttendanceRecord.employee_id == employee_id,
            AttendanceRecord.date >= month_start,
            AttendanceRecord.date <= month_end,
        ).all()

        present_days = sum(PRESENCE_WEIGHTS.get(r.status, 0.0) for r in records)
        ot_minutes = sum(
            r.ot_minutes_approved if r.ot_minutes_approved is not None else (r.ot_minutes_calculated or 0)
            for r in records
        )
        return present_days, ot_minutes

    def _leave(self, employee_id: str, month_start: date, month_end: date, holidays: Set[date]) -> Tuple[float, float]:
        requests = self._scoped(LeaveRequest).filter(
            LeaveRequest.employee_id == employee_id,
            LeaveRequest.status == LeaveRequestStatus.APPROVED,
            LeaveRequest.start_date <= month_end,
            LeaveRequest.end_date >= month_start,
        ).all()

        paid_days, lop_days = 0.0, 0.0
        for request in requests:
            start = max(request.start_date, month_start)
            end = min(request.end_date, month_end)
            # Half-day requests cover a single day but count as half of it.
            days = min(float(count_working_days(start, end, holidays)), request.total_days)
            if request.leave_type is None or request.leave_type.is_paid:
                paid_days += days
            else:
                lop_days += days
        return paid_days, lop_days

    def calculate(self, employee: Employee, month: int, year: int) -> Optional[Dict[str, Any]]:
        """Payslip figures for the employee, or None when no salary covers the month."""
        month_start, month_end = month_bounds(year, month)
        salary = self.get_active_salary(employee.id, month_start, month_end)
        if salary is None:
            self._logger.info(f"Skipping employee {employee.employee_code}: no active salary for {month}/{year}")
            return None

        holidays = self.holiday_dates(month_start, month_end)
        working_days = count_working_days(month_start, month_end, holidays)

        present_days, ot_minutes = self._attendance(employee.id, month_start, month_end)
        rule = self.ot_service.get_applicable_rule(employee.employment_type)
        ot_minutes = apply_monthly_cap(ot_minutes, rule)

        paid_leave_days, lop_days = self._leave(employee.id, month_start, month_end, holidays)

        effective_days = min(present_days + paid_leave_days, working_days)
        pro_rate = effective_days / working_days if working_days > 0 else 0

        base_pay = round(salary.base_pay * pro_rate, 2)
        components = salary.salary_structure.components if salary.salary_structure else []
        earnings, deductions = apply_components(components, base_pay, pro_rate)

        ot_hours = round(ot_minutes / 60, 2)
        if employee.pay_type == PayType.HOURLY and employee.hourly_rate:
            hourly_rate = employee.hourly_rate
        elif working_days > 0:
            hourly_rate = salary.base_pay / (working_days * STANDARD_HOURS_PER_DAY)
        else:
            hourly_rate = 0
        ot_pay = round(ot_hours * hourly_rate * (employee.ot_multiplier or 1), 2)

        total_earnings = sum(line["amount"] for line in earnings)
        total_deductions = round(sum(line["amount"] for line in deductions), 2)
        gross_pay = round(base_pay + total_earnings + ot_pay, 2)
        net_pay = round(gross_pay - total_deductions, 2)

        return {
            "employee_id": employee.id,
            "working_days": working_days,
            "present_days": present_days,
            "leave_days": paid_leave_days,
            "lop_days": lop_days,
            "ot_hours": ot_hours,
            "base_pay": base_pay,
            "earnings": earnings,
            "deductions": deductions,
            "ot_pay": ot_pay,
            "gross_pay": gross_pay,
            "total_deductions": total_deductions,
            "net_pay": net_pay,
        }

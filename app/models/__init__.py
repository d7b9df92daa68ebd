# Models package
# Importing modules here ensures they are registered with SQLAlchemy Base
from . import (
    tenant, user, department, employee, attendance,
    leave_type, leave_balance, leave_request,
    ot_rule, holiday, shift, payroll,
)

# Explicit class exports for cleaner imports
from .tenant import Tenant
from .user import User, UserRole
from .department import Department
from .employee import Employee, EmploymentType, PayType, EmployeeStatus
from .attendance import AttendanceRecord, AttendanceStatus
from .leave_type import LeaveType
from .leave_balance import LeaveBalance
from .leave_request import LeaveRequest, LeaveRequestStatus
from .ot_rule import OtRule
from .holiday import Holiday, HolidayType
from .shift import Shift, ShiftAssignment
from .payroll import SalaryStructure, EmployeeSalary, PayrollRun, PayrollRunStatus, Payslip

__all__ = [
    "Tenant",
    "User",
    "UserRole",
    "Department",
    "Employee",
    "EmploymentType",
    "PayType",
    "EmployeeStatus",
    "AttendanceRecord",
    "AttendanceStatus",
    "LeaveType",
    "LeaveBalance",
    "LeaveRequest",
    "LeaveRequestStatus",
    "OtRule",
    "Holiday",
    "HolidayType",
    "Shift",
    "ShiftAssignment",
    "SalaryStructure",
    "EmployeeSalary",
    "PayrollRun",
    "PayrollRunStatus",
    "Payslip",
]

"""
Requester variants.

Role-dependent behaviour (dashboard scope, report scope) dispatches on these
with ``match`` instead of comparing role strings at each call site.
"""
from dataclasses import dataclass
from typing import Optional, Union

from app.models.user import UserRole


@dataclass(frozen=True)
class SuperAdmin:
    pass


@dataclass(frozen=True)
class HrAdmin:
    pass


@dataclass(frozen=True)
class Manager:
    employee_id: Optional[str]


@dataclass(frozen=True)
class Employee:
    employee_id: Optional[str]


Requester = Union[SuperAdmin, HrAdmin, Manager, Employee]


def requester_from(role: UserRole, employee_id: Optional[str]) -> Requester:
    match role:
        case UserRole.SUPER_ADMIN:
            return SuperAdmin()
        case UserRole.HR_ADMIN:
            return HrAdmin()
        case UserRole.MANAGER:
            return Manager(employee_id)
        case _:
            return Employee(employee_id)


def team_scope(requester: Requester) -> Optional[str]:
    """Manager id whose direct reports bound the result, or None for tenant-wide access."""
    match requester:
        case SuperAdmin() | HrAdmin():
            return None
        case Manager(employee_id=employee_id):
            # A manager without an employee profile manages nobody.
            return employee_id or ""
        case Employee():
            return ""

"""
Company (tenant) administration for platform super admins.

Creating a company seeds everything a fresh tenant needs to operate:
an HR admin login, default leave types and a default OT rule.
"""
import logging
import os
import re
import uuid
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import AccessDeniedError, BadRequestError, ConflictError, NotFoundError
from app.core.security import hash_password
from app.models.department import Department
from app.models.employee import Employee, EmployeeStatus, EmploymentType, PayType
from app.models.holiday import Holiday
from app.models.leave_type import LeaveType
from app.models.ot_rule import OtRule
from app.models.payroll import PayrollRun, SalaryStructure
from app.models.shift import Shift
from app.models.tenant import Tenant
from app.models.user import User, UserRole
from app.schemas.company import CompanyCreate, CompanyUpdate
from app.services.base import commit_or_conflict

logger = logging.getLogger(__name__)

LOGO_MIME_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".svg": "image/svg+xml",
}
_LOGO_CONTENT_TYPE = re.compile(r"^image/(jpeg|png|gif|webp|svg\+xml)$")
_EXTENSION_FOR_TYPE = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
    "image/svg+xml": ".svg",
}

DEFAULT_LEAVE_TYPES = [
    {"name": "Annual Leave", "code": "AL", "description": "Paid annual leave", "default_days": 20,
     "carry_forward": True, "max_carry_forward": 5, "is_paid": True},
    {"name": "Sick Leave", "code": "SL", "description": "Paid sick leave", "default_days": 10,
     "carry_forward": False, "max_carry_forward": 0, "is_paid": True},
    {"name": "Casual Leave", "code": "CL", "description": "Casual leave for personal matters", "default_days": 5,
     "carry_forward": False, "max_carry_forward": 0, "is_paid": True},
]


def _count_for(model, *criteria):
    return (
        select(func.count(model.id))
        .where(model.tenant_id == Tenant.id, *criteria)
        .correlate(Tenant)
        .scalar_subquery()
    )


class CompanyService:
    def __init__(self, db: Session):
        self.db = db

    def create(self, data: CompanyCreate) -> Dict[str, Any]:
        if self.db.query(Tenant).filter(Tenant.code == data.code).first():
            raise ConflictError("Company code already exists")
        # Login emails are unique platform-wide.
        if self.db.query(User).filter(User.email == data.admin_email).first():
            raise ConflictError("Admin email already exists in the system")

        tenant = Tenant(name=data.name, code=data.code)
        self.db.add(tenant)
        self.db.flush()

        admin_employee = Employee(
            tenant_id=tenant.id,
            employee_code="ADMIN-001",
            first_name=data.admin_first_name,
            last_name=data.admin_last_name,
            email=data.admin_email,
            employment_type=EmploymentType.PERMANENT,
            pay_type=PayType.MONTHLY,
            status=EmployeeStatus.ACTIVE,
            join_date=date.today(),
        )
        self.db.add(admin_employee)
        self.db.flush()

        admin_user = User(
            tenant_id=tenant.id,
            email=data.admin_email,
            hashed_password=hash_password(data.admin_password),
            role=UserRole.HR_ADMIN,
            employee_id=admin_employee.id,
        )
        self.db.add(admin_user)

        for leave_type in DEFAULT_LEAVE_TYPES:
            self.db.add(LeaveType(tenant_id=tenant.id, **leave_type))

        self.db.add(OtRule(
            tenant_id=tenant.id,
            name="Standard OT Rule",
            daily_threshold_minutes=480,
            rounding_interval_minutes=15,
            requires_manager_approval=True,
        ))

        commit_or_conflict(self.db, "Company code or admin email already exists")
        self.db.refresh(tenant)
        self.db.refresh(admin_user)
        logger.info(f"Company {tenant.code} created with admin {admin_user.id}")

        return {
            "company": tenant,
            "admin": {"id": admin_user.id, "email": admin_user.email, "role": admin_user.role},
        }

    def find_all(self, search: Optional[str] = None, is_active: Optional[bool] = None) -> List[Dict[str, Any]]:
        query = self.db.query(
            Tenant,
            _count_for(Employee).label("employees"),
            _count_for(User).label("users"),
            _count_for(Department).label("departments"),
        )
        if search:
            pattern = f"%{search.lower()}%"
            query = query.filter(or_(func.lower(Tenant.name).like(pattern), func.lower(Tenant.code).like(pattern)))
        if is_active is not None:
            query = query.filter(Tenant.is_active.is_(is_active))

        return [
            self._with_counts(tenant, employees, users, departments)
            for tenant, employees, users, departments in query.order_by(Tenant.created_at.desc()).all()
        ]

    def _get_tenant(self, company_id: str) -> Tenant:
        tenant = self.db.get(Tenant, company_id)
        if tenant is None:
            raise NotFoundError("Company not found")
        return tenant

    def _counts(self, company_id: str) -> Tuple[int, int, int]:
        row = self.db.query(
            _count_for(Employee).label("employees"),
            _count_for(User).label("users"),
            _count_for(Department).label("departments"),
        ).filter(Tenant.id == company_id).one()
        return row.employees, row.users, row.departments

    @staticmethod
    def _with_counts(tenant: Tenant, employees: int, users: int, departments: int) -> Dict[str, Any]:
        payload = {column.name: getattr(tenant, column.name) for column in Tenant.__table__.columns}
        payload["counts"] = {"employees": employees, "users": users, "departments": departments}
        return payload

    def find_one(self, company_id: str) -> Dict[str, Any]:
        tenant = self._get_tenant(company_id)
        employees, users, departments = self._counts(company_id)

        payload = self._with_counts(tenant, employees, users, departments)
        payload["active_employee_count"] = self.db.query(Employee).filter(
            Employee.tenant_id == company_id, Employee.status == EmployeeStatus.ACTIVE
        ).count()
        payload["leave_type_count"] = self.db.query(LeaveType).filter(LeaveType.tenant_id == company_id).count()
        payload["ot_rule_count"] = self.db.query(OtRule).filter(OtRule.tenant_id == company_id).count()
        return payload

    def update(self, company_id: str, data: CompanyUpdate) -> Tenant:
        tenant = self._get_tenant(company_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(tenant, field, value)
        commit_or_conflict(self.db)
        self.db.refresh(tenant)
        return tenant

    def toggle_status(self, company_id: str) -> Tenant:
        tenant = self._get_tenant(company_id)
        tenant.is_active = not tenant.is_active
        commit_or_conflict(self.db)
        self.db.refresh(tenant)
        logger.info(f"Company {tenant.code} {'activated' if tenant.is_active else 'deactivated'}")
        return tenant

    def remove(self, company_id: str) -> Dict[str, str]:
        tenant = self._get_tenant(company_id)
        employee_count = self.db.query(Employee).filter(Employee.tenant_id == company_id).count()
        if employee_count > 0:
            raise AccessDeniedError("Cannot delete company with existing employees. Deactivate it instead.")

        try:
            self.db.query(OtRule).filter(OtRule.tenant_id == company_id).delete(synchronize_session=False)
            self.db.query(LeaveType).filter(LeaveType.tenant_id == company_id).delete(synchronize_session=False)
            self.db.query(User).filter(User.tenant_id == company_id).delete(synchronize_session=False)
            self.db.query(Department).filter(Department.tenant_id == company_id).delete(synchronize_session=False)
            self.db.query(Holiday).filter(Holiday.tenant_id == company_id).delete(synchronize_session=False)
            self.db.query(Shift).filter(Shift.tenant_id == company_id).delete(synchronize_session=False)
            self.db.query(PayrollRun).filter(PayrollRun.tenant_id == company_id).delete(synchronize_session=False)
            self.db.query(SalaryStructure).filter(SalaryStructure.tenant_id == company_id).delete(synchronize_session=False)
            self.db.delete(tenant)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"Company {company_id} deleted")
        return {"message": "Company deleted successfully"}

    def stats(self) -> Dict[str, int]:
        total = self.db.query(Tenant).count()
        active = self.db.query(Tenant).filter(Tenant.is_active.is_(True)).count()
        return {
            "total_companies": total,
            "active_companies": active,
            "inactive_companies": total - active,
            "total_employees": self.db.query(Employee).count(),
            "total_users": self.db.query(User).count(),
        }

    # --- Logo ---

    def upload_logo(self, company_id: str, content: bytes, content_type: Optional[str]) -> Dict[str, str]:
        tenant = self._get_tenant(company_id)
        if not content_type or not _LOGO_CONTENT_TYPE.match(content_type):
            raise BadRequestError("Logo must be a JPEG, PNG, GIF, WEBP or SVG image")
        if len(content) > settings.max_logo_size_bytes:
            raise BadRequestError("Logo exceeds the 2MB size limit")

        logo_dir = Path(settings.upload_dir) / "logos"
        logo_dir.mkdir(parents=True, exist_ok=True)
        key = f"logos/{tenant.id}-{uuid.uuid4().hex}{_EXTENSION_FOR_TYPE[content_type]}"
        logo_path = Path(settings.upload_dir) / key
        logo_path.write_bytes(content)

        previous = tenant.logo_url
        tenant.logo_url = key
        try:
            commit_or_conflict(self.db)
        except Exception:
            logo_path.unlink(missing_ok=True)
            raise

        if previous:
            previous_path = Path(settings.upload_dir) / previous
            if previous_path.is_file():
                os.remove(previous_path)

        return {"logo_url": key}

    def logo_file(self, company_id: str) -> Tuple[Path, str]:
        """Path and MIME type of a company logo; NotFound when none is stored."""
        tenant = self.db.get(Tenant, company_id)
        if tenant is None or not tenant.logo_url:
            raise NotFoundError("Logo not found")
        path = Path(settings.upload_dir) / tenant.logo_url
        if not path.is_file():
            raise NotFoundError("Logo not found")
        return path, LOGO_MIME_TYPES.get(path.suffix.lower(), "application/octet-stream")


def get_tenant_info(db: Session, tenant_id: str) -> Tenant:
    tenant = db.get(Tenant, tenant_id)
    if tenant is None:
        raise NotFoundError("Tenant not found")
    return tenant

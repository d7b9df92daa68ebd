"""
User Model with RBAC.
Login accounts belong to exactly one tenant and optionally link to an employee profile.
"""
from sqlalchemy import Column, String, Enum, DateTime, Boolean, ForeignKey
from sqlalchemy.orm import relationship
import enum
from app.database import Base, generate_id, utcnow


class UserRole(str, enum.Enum):
    """
    User roles, most to least permissions:
    - SUPER_ADMIN: Platform-wide access (company management)
    - HR_ADMIN: Full HR access within a tenant
    - MANAGER: Team manager, sees direct reports
    - EMPLOYEE: Self-service access
    """
    SUPER_ADMIN = "SUPER_ADMIN"
    HR_ADMIN = "HR_ADMIN"
    MANAGER = "MANAGER"
    EMPLOYEE = "EMPLOYEE"


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_id)
    tenant_id = Column(String(36), ForeignKey("tenants.id"), nullable=False, index=True)
    # Email is unique across the whole platform, not per tenant.
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)

    role = Column(Enum(UserRole), default=UserRole.EMPLOYEE, nullable=False)
    employee_id = Column(String(36), ForeignKey("employees.id"), nullable=True, unique=True)

    is_active = Column(Boolean, default=True, nullable=False)
    last_login_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    tenant = relationship("Tenant", back_populates="users")
    employee = relationship("Employee", back_populates="user")

    def __repr__(self):
        return f"<User {self.email} ({self.role.value})>"

from sqlalchemy import Column, String, Date, DateTime, Enum, Float, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
import enum
from app.database import Base, generate_id, utcnow


class EmploymentType(str, enum.Enum):
    PERMANENT = "PERMANENT"
    CONTRACT = "CONTRACT"
    TEMPORARY = "TEMPORARY"
    INTERN = "INTERN"


class PayType(str, enum.Enum):
    MONTHLY = "MONTHLY"
    HOURLY = "HOURLY"


class EmployeeStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class Employee(Base):
    __tablename__ = "employees"
    __table_args__ = (UniqueConstraint("tenant_id", "employee_code", name="uq_employee_tenant_code"),)

    id = Column(String(36), primary_key=True, default=generate_id)
    tenant_id = Column(String(36), ForeignKey("tenants.id"), nullable=False, index=True)
    employee_code = Column(String, nullable=False)

    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    phone = Column(String, nullable=True)

    department_id = Column(String(36), ForeignKey("departments.id"), nullable=True, index=True)
    designation = Column(String, nullable=True)
    manager_id = Column(String(36), ForeignKey("employees.id"), nullable=True, index=True)

    employment_type = Column(Enum(EmploymentType), default=EmploymentType.PERMANENT, nullable=False)
    pay_type = Column(Enum(PayType), default=PayType.MONTHLY, nullable=False)
    hourly_rate = Column(Float, nullable=True)
    ot_multiplier = Column(Float, default=1.5, nullable=False)

    status = Column(Enum(EmployeeStatus), default=EmployeeStatus.ACTIVE, nullable=False, index=True)
    join_date = Column(Date, nullable=False)
    exit_date = Column(Date, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    tenant = relationship("Tenant", back_populates="employees")
    department = relationship("Department", back_populates="employees")
    manager = relationship("Employee", remote_side=[id], back_populates="direct_reports")
    direct_reports = relationship("Employee", back_populates="manager")
    user = relationship("User", back_populates="employee", uselist=False)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self):
        return f"<Employee {self.employee_code}: {self.full_name}>"

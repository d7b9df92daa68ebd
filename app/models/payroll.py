from sqlalchemy import (
    Column, Integer, String, Float, Date, DateTime, Enum, Boolean, ForeignKey, JSON, Text, UniqueConstraint
)
from sqlalchemy.orm import relationship
from app.database import Base, generate_id, utcnow
import enum

class PayrollRunStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    PROCESSING = "PROCESSING"
    COMPUTED = "COMPUTED"
    APPROVED = "APPROVED"
    PAID = "PAID"

class SalaryStructure(Base):
    """
    Named pay template. ``components`` is a list of
    ``{"name", "type": "earning"|"deduction", "calc_type": "fixed"|"percentage", "value"}``.
    """
    __tablename__ = "salary_structures"
    __table_args__ = (UniqueConstraint("tenant_id", "name", name="uq_salary_structure_tenant_name"),)

    id = Column(String(36), primary_key=True, default=generate_id)
    tenant_id = Column(String(36), ForeignKey("tenants.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    components = Column(JSON, default=list, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    employee_salaries = relationship("EmployeeSalary", back_populates="salary_structure")

class EmployeeSalary(Base):
    __tablename__ = "employee_salaries"

    id = Column(String(36), primary_key=True, default=generate_id)
    tenant_id = Column(String(36), ForeignKey("tenants.id"), nullable=False, index=True)
    employee_id = Column(String(36), ForeignKey("employees.id"), nullable=False, index=True)
    salary_structure_id = Column(String(36), ForeignKey("salary_structures.id"), nullable=False)
    base_pay = Column(Float, nullable=False)
    effective_from = Column(Date, nullable=False)
    effective_to = Column(Date, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    salary_structure = relationship("SalaryStructure", back_populates="employee_salaries")
    employee = relationship("Employee")

class PayrollRun(Base):
    __tablename__ = "payroll_runs"
    __table_args__ = (UniqueConstraint("tenant_id", "month", "year", name="uq_payroll_run_tenant_period"),)

    id = Column(String(36), primary_key=True, default=generate_id)
    tenant_id = Column(String(36), ForeignKey("tenants.id"), nullable=False, index=True)
    month = Column(Integer, nullable=False)
    year = Column(Integer, nullable=False)
    status = Column(Enum(PayrollRunStatus), default=PayrollRunStatus.DRAFT, nullable=False)
    total_gross = Column(Float, default=0.0, nullable=False)
    total_deductions = Column(Float, default=0.0, nullable=False)
    total_net = Column(Float, default=0.0, nullable=False)
    processed_count = Column(Integer, default=0, nullable=False)
    processed_at = Column(DateTime(timezone=True), nullable=True)
    approved_at = Column(DateTime(timezone=True), nullable=True)
    paid_at = Column(DateTime(timezone=True), nullable=True)
    remarks = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    payslips = relationship("Payslip", back_populates="payroll_run", cascade="all, delete-orphan")

class Payslip(Base):
    __tablename__ = "payslips"
    __table_args__ = (UniqueConstraint("payroll_run_id", "employee_id", name="uq_payslip_run_employee"),)

    id = Column(String(36), primary_key=True, default=generate_id)
    tenant_id = Column(String(36), ForeignKey("tenants.id"), nullable=False, index=True)
    payroll_run_id = Column(String(36), ForeignKey("payroll_runs.id"), nullable=False, index=True)
    employee_id = Column(String(36), ForeignKey("employees.id"), nullable=False, index=True)
    working_days = Column(Float, default=0.0, nullable=False)
    present_days = Column(Float, default=0.0, nullable=False)
    leave_days = Column(Float, default=0.0, nullable=False)
    lop_days = Column(Float, default=0.0, nullable=False)
    ot_hours = Column(Float, default=0.0, nullable=False)
    base_pay = Column(Float, default=0.0, nullable=False)
    earnings = Column(JSON, default=list, nullable=False)
    deductions = Column(JSON, default=list, nullable=False)
    ot_pay = Column(Float, default=0.0, nullable=False)
    gross_pay = Column(Float, default=0.0, nullable=False)
    total_deductions = Column(Float, default=0.0, nullable=False)
    net_pay = Column(Float, default=0.0, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    payroll_run = relationship("PayrollRun", back_populates="payslips")
    employee = relationship("Employee")

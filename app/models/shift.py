from sqlalchemy import Column, String, Boolean, Integer, Date, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from app.database import Base, generate_id, utcnow


class Shift(Base):
    __tablename__ = "shifts"
    __table_args__ = (UniqueConstraint("tenant_id", "code", name="uq_shift_tenant_code"),)

    id = Column(String(36), primary_key=True, default=generate_id)
    tenant_id = Column(String(36), ForeignKey("tenants.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    code = Column(String, nullable=False)
    start_time = Column(String(5), nullable=False)  # HH:MM
    end_time = Column(String(5), nullable=False)
    break_minutes = Column(Integer, default=60, nullable=False)
    standard_work_minutes = Column(Integer, default=480, nullable=False)
    grace_minutes = Column(Integer, default=15, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    assignments = relationship("ShiftAssignment", back_populates="shift")


class ShiftAssignment(Base):
    """An employee's shift over a date range. At most one is active per employee."""
    __tablename__ = "shift_assignments"

    id = Column(String(36), primary_key=True, default=generate_id)
    tenant_id = Column(String(36), ForeignKey("tenants.id"), nullable=False, index=True)
    employee_id = Column(String(36), ForeignKey("employees.id"), nullable=False, index=True)
    shift_id = Column(String(36), ForeignKey("shifts.id"), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    shift = relationship("Shift", back_populates="assignments")
    employee = relationship("Employee")

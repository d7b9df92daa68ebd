"""
Daily attendance records.
Written by the attendance-capture process; read here by reports, the dashboard and payroll.
"""
from sqlalchemy import Column, String, Date, DateTime, Enum, Integer, ForeignKey, Text, UniqueConstraint
from sqlalchemy.orm import relationship
import enum
from app.database import Base, generate_id, utcnow


class AttendanceStatus(str, enum.Enum):
    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    HALF_DAY = "HALF_DAY"
    LEAVE = "LEAVE"
    WFH = "WFH"
    HOLIDAY = "HOLIDAY"


class AttendanceRecord(Base):
    __tablename__ = "attendance_records"
    __table_args__ = (UniqueConstraint("employee_id", "date", name="uq_attendance_employee_date"),)

    id = Column(String(36), primary_key=True, default=generate_id)
    tenant_id = Column(String(36), ForeignKey("tenants.id"), nullable=False, index=True)
    employee_id = Column(String(36), ForeignKey("employees.id"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    status = Column(Enum(AttendanceStatus), default=AttendanceStatus.PRESENT, nullable=False)

    clock_in_time = Column(DateTime(timezone=True), nullable=True)
    clock_out_time = Column(DateTime(timezone=True), nullable=True)

    worked_minutes = Column(Integer, default=0, nullable=False)
    break_minutes = Column(Integer, default=0, nullable=False)
    standard_work_minutes = Column(Integer, default=480, nullable=False)
    ot_minutes_calculated = Column(Integer, default=0, nullable=False)
    # Null until a manager has acted on the overtime.
    ot_minutes_approved = Column(Integer, nullable=True)

    remarks = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    employee = relationship("Employee")

from sqlalchemy import Column, String, Boolean, Float, DateTime, ForeignKey, Text, UniqueConstraint
from app.database import Base, generate_id, utcnow

class LeaveType(Base):
    __tablename__ = "leave_types"
    __table_args__ = (UniqueConstraint("tenant_id", "code", name="uq_leave_type_tenant_code"),)

    id = Column(String(36), primary_key=True, default=generate_id)
    tenant_id = Column(String(36), ForeignKey("tenants.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    code = Column(String, nullable=False)  # e.g. "AL", "SL", "CL"
    description = Column(Text, nullable=True)
    default_days = Column(Float, default=0.0, nullable=False)
    carry_forward = Column(Boolean, default=False, nullable=False)
    max_carry_forward = Column(Float, default=0.0, nullable=False)
    is_paid = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)

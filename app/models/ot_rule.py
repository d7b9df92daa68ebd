from sqlalchemy import Column, String, Boolean, Integer, DateTime, Enum, ForeignKey, UniqueConstraint
from app.database import Base, generate_id, utcnow
from app.models.employee import EmploymentType


class OtRule(Base):
    """
    Overtime policy for a tenant.

    A rule with ``employment_type`` set applies to that employment type only;
    the rule without one is the tenant default. Null values never collide in
    the unique constraint, so several default rules may coexist.
    """
    __tablename__ = "ot_rules"
    __table_args__ = (UniqueConstraint("tenant_id", "employment_type", name="uq_ot_rule_tenant_employment_type"),)

    id = Column(String(36), primary_key=True, default=generate_id)
    tenant_id = Column(String(36), ForeignKey("tenants.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    employment_type = Column(Enum(EmploymentType), nullable=True)

    daily_threshold_minutes = Column(Integer, default=480, nullable=False)
    weekly_threshold_minutes = Column(Integer, nullable=True)
    rounding_interval_minutes = Column(Integer, default=15, nullable=False)
    requires_manager_approval = Column(Boolean, default=True, nullable=False)
    max_ot_per_day_minutes = Column(Integer, nullable=True)
    max_ot_per_month_minutes = Column(Integer, nullable=True)

    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

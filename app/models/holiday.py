from sqlalchemy import Column, String, Boolean, Date, DateTime, Enum, ForeignKey, Text, UniqueConstraint
import enum
from app.database import Base, generate_id, utcnow


class HolidayType(str, enum.Enum):
    NATIONAL = "NATIONAL"
    REGIONAL = "REGIONAL"
    COMPANY = "COMPANY"
    OPTIONAL = "OPTIONAL"


class Holiday(Base):
    __tablename__ = "holidays"
    __table_args__ = (UniqueConstraint("tenant_id", "name", "date", name="uq_holiday_tenant_name_date"),)

    id = Column(String(36), primary_key=True, default=generate_id)
    tenant_id = Column(String(36), ForeignKey("tenants.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    date = Column(Date, nullable=False, index=True)
    type = Column(Enum(HolidayType), default=HolidayType.NATIONAL, nullable=False)
    region = Column(String, nullable=True)
    is_optional = Column(Boolean, default=False, nullable=False)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

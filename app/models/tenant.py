"""
Tenant (company) model.
Every tenant-owned row in the system carries a ``tenant_id`` pointing here.
"""
from sqlalchemy import Column, String, Text, DateTime, Boolean, Integer, Float
from sqlalchemy.orm import relationship
from app.database import Base, generate_id, utcnow


class Tenant(Base):
    __tablename__ = "tenants"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String, nullable=False, index=True)
    code = Column(String, nullable=False, unique=True, index=True)
    legal_name = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    website = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    email = Column(String, nullable=True)
    industry = Column(String, nullable=True)

    address_line1 = Column(String, nullable=True)
    address_line2 = Column(String, nullable=True)
    city = Column(String, nullable=True)
    state = Column(String, nullable=True)
    country = Column(String, nullable=True)
    postal_code = Column(String, nullable=True)

    # Settings
    timezone = Column(String, nullable=True)
    currency = Column(String, default="INR", nullable=False)
    work_days_per_week = Column(Integer, default=5, nullable=False)
    standard_work_hours_per_day = Column(Float, default=8, nullable=False)
    payroll_frequency = Column(String, default="MONTHLY", nullable=False)

    logo_url = Column(String, nullable=True)

    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    users = relationship("User", back_populates="tenant")
    employees = relationship("Employee", back_populates="tenant")
    departments = relationship("Department", back_populates="tenant")

    def __repr__(self):
        return f"<Tenant {self.code}: {self.name}>"

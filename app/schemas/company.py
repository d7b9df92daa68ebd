from pydantic import BaseModel, ConfigDict, EmailStr, Field
from datetime import datetime
from typing import Optional
from app.models.user import UserRole

class CompanyCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    code: str = Field(..., min_length=2, max_length=20, pattern=r"^[A-Z0-9_-]+$")
    admin_email: EmailStr
    admin_password: str = Field(..., min_length=6)
    admin_first_name: str = Field(..., min_length=1)
    admin_last_name: str = Field(..., min_length=1)

class CompanyUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    legal_name: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    website: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=20)
    email: Optional[EmailStr] = None
    industry: Optional[str] = Field(None, max_length=100)
    address_line1: Optional[str] = Field(None, max_length=255)
    address_line2: Optional[str] = Field(None, max_length=255)
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    country: Optional[str] = Field(None, max_length=100)
    postal_code: Optional[str] = Field(None, max_length=10)
    timezone: Optional[str] = None
    currency: Optional[str] = Field(None, max_length=3)
    work_days_per_week: Optional[int] = Field(None, ge=1, le=7)
    standard_work_hours_per_day: Optional[float] = Field(None, gt=0, le=24)
    payroll_frequency: Optional[str] = None
    is_active: Optional[bool] = None

class CompanyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    code: str
    legal_name: Optional[str] = None
    description: Optional[str] = None
    website: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    industry: Optional[str] = None
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    postal_code: Optional[str] = None
    timezone: Optional[str] = None
    currency: str
    work_days_per_week: int
    standard_work_hours_per_day: float
    payroll_frequency: str
    logo_url: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None

class CompanyCounts(BaseModel):
    employees: int
    users: int
    departments: int

class CompanyListItem(CompanyResponse):
    counts: CompanyCounts

class CompanyDetail(CompanyResponse):
    counts: CompanyCounts
    active_employee_count: int
    leave_type_count: int
    ot_rule_count: int

class CompanyAdmin(BaseModel):
    id: str
    email: str
    role: UserRole

class CompanyCreated(BaseModel):
    company: CompanyResponse
    admin: CompanyAdmin

class CompanyStats(BaseModel):
    total_companies: int
    active_companies: int
    inactive_companies: int
    total_employees: int
    total_users: int

class TenantInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    code: str
    logo_url: Optional[str] = None

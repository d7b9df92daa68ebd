from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import List, Optional
from app.models.employee import EmploymentType

class OtRuleCreate(BaseModel):
    name: str = Field(..., min_length=1)
    employment_type: Optional[EmploymentType] = None
    daily_threshold_minutes: Optional[int] = Field(None, ge=0)
    weekly_threshold_minutes: Optional[int] = Field(None, ge=0)
    rounding_interval_minutes: Optional[int] = Field(None, ge=0)
    requires_manager_approval: Optional[bool] = None
    max_ot_per_day_minutes: Optional[int] = Field(None, ge=0)
    max_ot_per_month_minutes: Optional[int] = Field(None, ge=0)

class OtRuleUpdate(BaseModel):
    # Employment type is fixed at creation.
    name: Optional[str] = Field(None, min_length=1)
    daily_threshold_minutes: Optional[int] = Field(None, ge=0)
    weekly_threshold_minutes: Optional[int] = Field(None, ge=0)
    rounding_interval_minutes: Optional[int] = Field(None, ge=0)
    requires_manager_approval: Optional[bool] = None
    max_ot_per_day_minutes: Optional[int] = Field(None, ge=0)
    max_ot_per_month_minutes: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None

class OtRuleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    tenant_id: str
    name: str
    employment_type: Optional[EmploymentType] = None
    daily_threshold_minutes: int
    weekly_threshold_minutes: Optional[int] = None
    rounding_interval_minutes: int
    requires_manager_approval: bool
    max_ot_per_day_minutes: Optional[int] = None
    max_ot_per_month_minutes: Optional[int] = None
    is_active: bool
    created_at: Optional[datetime] = None

class DashboardStats(BaseModel):
    total_employees: int
    active_employees: int
    present_today: int
    on_leave_today: int
    pending_leave_requests: int
    pending_ot_approvals: int

class ManagerDashboardStats(BaseModel):
    team_size: int
    present_today: int
    on_leave_today: int
    pending_leave_requests: int
    pending_ot_approvals: int

class DepartmentHeadcount(BaseModel):
    department: str
    count: int

class EmploymentTypeCount(BaseModel):
    type: str
    count: int

class MonthlyJoins(BaseModel):
    month: str
    count: int

class LeaveUtilization(BaseModel):
    type: str
    days: float

class AnalyticsResponse(BaseModel):
    headcount_by_department: List[DepartmentHeadcount]
    employment_type_distribution: List[EmploymentTypeCount]
    monthly_joins: List[MonthlyJoins]
    leave_utilization: List[LeaveUtilization]

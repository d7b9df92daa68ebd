from pydantic import BaseModel, ConfigDict, Field, model_validator
import datetime as dt
import enum
from typing import Optional
from app.models.employee import EmployeeStatus, EmploymentType

class ReportFormat(str, enum.Enum):
    CSV = "csv"
    XLSX = "xlsx"

class AttendanceReportRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    date_from: dt.date = Field(..., alias="from")
    date_to: dt.date = Field(..., alias="to")
    employee_id: Optional[str] = None
    department_id: Optional[str] = None
    format: ReportFormat = ReportFormat.XLSX

    @model_validator(mode="after")
    def check_range(self):
        if self.date_from > self.date_to:
            raise ValueError("'from' must be on or before 'to'")
        return self

class LeaveReportRequest(BaseModel):
    year: Optional[int] = Field(None, ge=2000, le=2100)
    employee_id: Optional[str] = None
    department_id: Optional[str] = None
    format: ReportFormat = ReportFormat.XLSX

class EmployeeReportRequest(BaseModel):
    department_id: Optional[str] = None
    status: Optional[EmployeeStatus] = None
    employment_type: Optional[EmploymentType] = None
    format: ReportFormat = ReportFormat.XLSX

class PayrollReportRequest(BaseModel):
    run_id: str
    format: ReportFormat = ReportFormat.XLSX

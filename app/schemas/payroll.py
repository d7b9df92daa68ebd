from pydantic import BaseModel, ConfigDict, Field
import datetime as dt
from typing import List, Literal, Optional
from app.models.payroll import PayrollRunStatus

class SalaryComponent(BaseModel):
    name: str = Field(..., min_length=1)
    type: Literal["earning", "deduction"]
    calc_type: Literal["fixed", "percentage"]
    value: float = Field(..., ge=0)

class SalaryStructureCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    components: List[SalaryComponent] = []

class SalaryStructureUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    components: Optional[List[SalaryComponent]] = None
    is_active: Optional[bool] = None

class SalaryStructureResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    tenant_id: str
    name: str
    description: Optional[str] = None
    components: List[SalaryComponent]
    is_active: bool
    created_at: Optional[dt.datetime] = None

class SalaryStructureListItem(SalaryStructureResponse):
    employee_count: int = 0

class AssignSalaryRequest(BaseModel):
    employee_id: str
    salary_structure_id: str
    base_pay: float = Field(..., gt=0)
    effective_from: dt.date

class EmployeeSalaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    employee_id: str
    salary_structure_id: str
    base_pay: float
    effective_from: dt.date
    effective_to: Optional[dt.date] = None
    is_active: bool
    salary_structure: Optional[SalaryStructureResponse] = None

class PayrollRunCreate(BaseModel):
    month: int = Field(..., ge=1, le=12)
    year: int = Field(..., ge=2000, le=2100)
    remarks: Optional[str] = None

class PayrollRunResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    tenant_id: str
    month: int
    year: int
    status: PayrollRunStatus
    total_gross: float
    total_deductions: float
    total_net: float
    processed_count: int
    processed_at: Optional[dt.datetime] = None
    approved_at: Optional[dt.datetime] = None
    paid_at: Optional[dt.datetime] = None
    remarks: Optional[str] = None
    created_at: Optional[dt.datetime] = None

class PayslipLine(BaseModel):
    name: str
    amount: float

class PayslipEmployee(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    employee_code: str
    first_name: str
    last_name: str
    designation: Optional[str] = None

class PayslipResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    payroll_run_id: str
    employee_id: str
    working_days: float
    present_days: float
    leave_days: float
    lop_days: float
    ot_hours: float
    base_pay: float
    earnings: List[PayslipLine]
    deductions: List[PayslipLine]
    ot_pay: float
    gross_pay: float
    total_deductions: float
    net_pay: float
    employee: Optional[PayslipEmployee] = None

class PayslipWithRun(PayslipResponse):
    payroll_run: Optional[PayrollRunResponse] = None

class PayrollRunDetail(PayrollRunResponse):
    payslips: List[PayslipResponse] = []

class PaginationMeta(BaseModel):
    total: int
    page: int
    limit: int
    total_pages: int

class PayslipPage(BaseModel):
    data: List[PayslipResponse]
    meta: PaginationMeta

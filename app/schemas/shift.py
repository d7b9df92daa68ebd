from pydantic import BaseModel, ConfigDict, Field
import datetime as dt
from typing import List, Optional, Union

TIME_PATTERN = r"^([01]\d|2[0-3]):([0-5]\d)$"

class ShiftCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    code: str = Field(..., min_length=1, max_length=20)
    start_time: str = Field(..., pattern=TIME_PATTERN)
    end_time: str = Field(..., pattern=TIME_PATTERN)
    break_minutes: Optional[int] = Field(None, ge=0)
    standard_work_minutes: Optional[int] = Field(None, ge=0)
    grace_minutes: Optional[int] = Field(None, ge=0)

class ShiftUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    code: Optional[str] = Field(None, min_length=1, max_length=20)
    start_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    end_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    break_minutes: Optional[int] = Field(None, ge=0)
    standard_work_minutes: Optional[int] = Field(None, ge=0)
    grace_minutes: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None

class ShiftResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    tenant_id: str
    name: str
    code: str
    start_time: str
    end_time: str
    break_minutes: int
    standard_work_minutes: int
    grace_minutes: int
    is_active: bool

class AssignShiftRequest(BaseModel):
    employee_id: str
    shift_id: str
    start_date: dt.date
    end_date: Optional[dt.date] = None

class BulkAssignShiftRequest(BaseModel):
    shift_id: str
    employee_ids: List[str] = Field(..., min_length=1)
    start_date: dt.date
    end_date: Optional[dt.date] = None

class AssignmentEmployee(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    first_name: str
    last_name: str
    employee_code: str

class AssignmentShift(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    code: str
    start_time: str
    end_time: str

class ShiftAssignmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    employee_id: str
    shift_id: str
    start_date: dt.date
    end_date: Optional[dt.date] = None
    is_active: bool
    employee: Optional[AssignmentEmployee] = None
    shift: Optional[AssignmentShift] = None

class BulkAssignSuccess(BaseModel):
    success: bool = True
    assignment: ShiftAssignmentResponse

class BulkAssignFailure(BaseModel):
    success: bool = False
    employee_id: str
    error: str

BulkAssignResult = Union[BulkAssignSuccess, BulkAssignFailure]

from pydantic import BaseModel, ConfigDict, Field
import datetime as dt
from typing import List, Optional, Union
from app.models.holiday import HolidayType

class HolidayCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    date: dt.date
    type: HolidayType = HolidayType.NATIONAL
    region: Optional[str] = None
    is_optional: Optional[bool] = None
    description: Optional[str] = None

class HolidayUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    date: Optional[dt.date] = None
    type: Optional[HolidayType] = None
    region: Optional[str] = None
    is_optional: Optional[bool] = None
    description: Optional[str] = None

class HolidayBulkCreate(BaseModel):
    holidays: List[HolidayCreate]

class HolidayResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    tenant_id: str
    name: str
    date: dt.date
    type: HolidayType
    region: Optional[str] = None
    is_optional: bool
    description: Optional[str] = None
    is_active: bool
    created_at: Optional[dt.datetime] = None

class HolidayBulkSuccess(BaseModel):
    success: bool = True
    holiday: HolidayResponse

class HolidayBulkFailure(BaseModel):
    success: bool = False
    name: str
    date: dt.date
    error: str

HolidayBulkResult = Union[HolidayBulkSuccess, HolidayBulkFailure]

from datetime import date, datetime
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class DailyReportCreate(BaseModel):
    report_date: date
    parameter_values: dict[str, Annotated[float, Field(allow_inf_nan=False)]] = Field(default_factory=dict)
    notes: str | None = None


class DailyReportRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    employee_id: UUID
    report_date: date
    parameter_values: dict
    notes: str | None = None
    created_at: datetime


class HolidayCreate(BaseModel):
    name: str = Field(min_length=1, max_length=160)
    holiday_date: date


class HolidayRead(HolidayCreate):
    model_config = ConfigDict(from_attributes=True)

    id: UUID

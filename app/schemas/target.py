from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.models.target import TargetStatus
from app.schemas.employee import EmployeeSummary

TARGET_MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"


class TargetParameter(BaseModel):
    name: str = Field(min_length=1, max_length=80)
    value: float = Field(allow_inf_nan=False)
    unit: str | None = Field(default=None, max_length=40)


class EmployeeTargetCreate(BaseModel):
    employee_id: UUID
    target_month: str = Field(pattern=TARGET_MONTH_PATTERN, description="Format: YYYY-MM")
    target_data: list[TargetParameter]
    notes: str | None = None


class EmployeeTargetBulkCreate(BaseModel):
    target_month: str = Field(pattern=TARGET_MONTH_PATTERN, description="Format: YYYY-MM")
    employee_ids: list[UUID] = Field(min_length=1)
    target_data: list[TargetParameter]
    notes: str | None = None


class EmployeeTargetUpdate(BaseModel):
    target_data: list[TargetParameter] | None = None
    notes: str | None = None
    is_active: bool | None = None


class EmployeeTargetRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    employee_id: UUID
    target_month: str
    target_data: list[TargetParameter]
    notes: str | None = None
    status: TargetStatus
    is_active: bool
    set_by: UUID | None = None
    created_at: datetime
    updated_at: datetime


class TargetBulkItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    employee_id: UUID
    action: str
    target: EmployeeTargetRead


class TargetBulkError(BaseModel):
    employee_id: UUID
    error: str


class TargetBulkResult(BaseModel):
    results: list[TargetBulkItem]
    errors: list[TargetBulkError]


class TeamMemberTargets(BaseModel):
    employee: EmployeeSummary
    targets: list[EmployeeTargetRead]
    current_target: EmployeeTargetRead | None = None


class TeamTargetStats(BaseModel):
    total_team_members: int
    members_with_targets: int
    members_without_targets: int
    target_month: str

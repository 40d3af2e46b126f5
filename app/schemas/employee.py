from uuid import UUID

from pydantic import BaseModel, ConfigDict


class EmployeeSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    first_name: str
    last_name: str
    email: str
    role_name: str | None = None
    is_active: bool

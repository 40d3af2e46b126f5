from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.models.feedback import FeedbackSubject


class FeedbackCreate(BaseModel):
    subject: FeedbackSubject
    content: str = Field(min_length=1)
    to_id: UUID | None = None
    is_confidential: bool = True


class HRFeedbackCreate(BaseModel):
    to_id: str = Field(min_length=1)
    subject: str = Field(min_length=1, max_length=120)
    content: str = Field(min_length=1)


class BulkHRFeedbackCreate(BaseModel):
    to_ids: list[str] = Field(min_length=1)
    subject: str = Field(min_length=1, max_length=120)
    content: str = Field(min_length=1)


class FeedbackRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    from_id: UUID
    to_id: UUID | None = None
    from_name: str | None = None
    to_name: str | None = None
    subject: str
    content: str
    is_confidential: bool
    created_at: datetime


class BulkHRFeedbackResult(BaseModel):
    sent: int
    failed: int
    feedbacks: list[FeedbackRead]
    invalid_employee_ids: list[str] | None = None


class PageMeta(BaseModel):
    total: int
    page: int
    limit: int
    total_pages: int


class FeedbackPage(BaseModel):
    data: list[FeedbackRead]
    meta: PageMeta


class FeedbackStatistics(BaseModel):
    total: int
    by_subject: dict[str, int]
    confidential_count: int
    recent: list[FeedbackRead]

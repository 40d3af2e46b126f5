import enum
import uuid
from datetime import UTC, datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db import Base


class FeedbackSubject(enum.Enum):
    manager = "Manager"
    company = "Company"
    hr_head = "HR Head"
    director = "Director"
    work_environment = "Work Environment"
    other = "Other"


class Feedback(Base):
    __tablename__ = "feedback"
    __table_args__ = (
        Index("ix_feedback_subject", "subject"),
        Index("ix_feedback_from_id", "from_id"),
        Index("ix_feedback_to_id", "to_id"),
        Index("ix_feedback_created_at", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    from_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("employees.id"), nullable=False)
    to_id: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True), ForeignKey("employees.id"))
    # Free text: HR feedback is not restricted to FeedbackSubject.
    subject: Mapped[str] = mapped_column(String(120), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    is_confidential: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(UTC))

    sender = relationship("Employee", foreign_keys=[from_id])
    recipient = relationship("Employee", foreign_keys=[to_id])

    @property
    def from_name(self) -> str | None:
        return self.sender.full_name if self.sender else None

    @property
    def to_name(self) -> str | None:
        return self.recipient.full_name if self.recipient else None

import enum
import uuid
from datetime import UTC, datetime

from sqlalchemy import JSON, DateTime, Enum, ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.ext.hybrid import hybrid_property
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db import Base


class TargetStatus(enum.Enum):
    active = "active"
    deleted = "deleted"


class EmployeeTarget(Base):
    __tablename__ = "employee_targets"
    __table_args__ = (
        UniqueConstraint("employee_id", "target_month", name="uq_employee_target_month"),
        Index("ix_employee_targets_month_status", "target_month", "status"),
    )

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    employee_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("employees.id"), nullable=False)
    target_month: Mapped[str] = mapped_column(String(7), nullable=False)
    target_data: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    notes: Mapped[str | None] = mapped_column(Text)
    status: Mapped[TargetStatus] = mapped_column(Enum(TargetStatus), default=TargetStatus.active, nullable=False)
    set_by: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True), ForeignKey("employees.id"))

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(UTC))
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    employee = relationship("Employee", foreign_keys=[employee_id])

    @hybrid_property
    def is_active(self) -> bool:
        return self.status == TargetStatus.active

    @is_active.inplace.setter
    def _is_active_setter(self, value: bool) -> None:
        self.status = TargetStatus.active if value else TargetStatus.deleted

    @is_active.inplace.expression
    @classmethod
    def _is_active_expression(cls):
        return cls.status == TargetStatus.active

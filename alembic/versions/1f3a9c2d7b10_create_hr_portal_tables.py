"""Create employees, targets, feedback, daily reports and holidays.

Revision ID: 1f3a9c2d7b10
Revises:
Create Date: 2026-10-19
"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "1f3a9c2d7b10"
down_revision = None
branch_labels = None
depends_on = None


def _uuid():
    return sa.dialects.postgresql.UUID(as_uuid=True)


def upgrade() -> None:
    op.create_table(
        "employees",
        sa.Column("id", _uuid(), primary_key=True),
        sa.Column("first_name", sa.String(length=80), nullable=False),
        sa.Column("last_name", sa.String(length=80), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False, unique=True),
        sa.Column("role_name", sa.String(length=80), nullable=True),
        sa.Column("manager_id", _uuid(), sa.ForeignKey("employees.id"), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_employees_manager_id", "employees", ["manager_id"])

    targetstatus = sa.Enum("active", "deleted", name="targetstatus")
    op.create_table(
        "employee_targets",
        sa.Column("id", _uuid(), primary_key=True),
        sa.Column("employee_id", _uuid(), sa.ForeignKey("employees.id"), nullable=False),
        sa.Column("target_month", sa.String(length=7), nullable=False),
        sa.Column("target_data", sa.JSON(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("status", targetstatus, nullable=False, server_default="active"),
        sa.Column("set_by", _uuid(), sa.ForeignKey("employees.id"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("employee_id", "target_month", name="uq_employee_target_month"),
    )
    op.create_index("ix_employee_targets_month_status", "employee_targets", ["target_month", "status"])

    op.create_table(
        "feedback",
        sa.Column("id", _uuid(), primary_key=True),
        sa.Column("from_id", _uuid(), sa.ForeignKey("employees.id"), nullable=False),
        sa.Column("to_id", _uuid(), sa.ForeignKey("employees.id"), nullable=True),
        sa.Column("subject", sa.String(length=120), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("is_confidential", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_feedback_subject", "feedback", ["subject"])
    op.create_index("ix_feedback_from_id", "feedback", ["from_id"])
    op.create_index("ix_feedback_to_id", "feedback", ["to_id"])
    op.create_index("ix_feedback_created_at", "feedback", ["created_at"])

    op.create_table(
        "daily_reports",
        sa.Column("id", _uuid(), primary_key=True),
        sa.Column("employee_id", _uuid(), sa.ForeignKey("employees.id"), nullable=False),
        sa.Column("report_date", sa.Date(), nullable=False),
        sa.Column("parameter_values", sa.JSON(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("employee_id", "report_date", name="uq_daily_report_employee_date"),
    )
    op.create_index("ix_daily_reports_date", "daily_reports", ["report_date"])

    op.create_table(
        "official_holidays",
        sa.Column("id", _uuid(), primary_key=True),
        sa.Column("name", sa.String(length=160), nullable=False),
        sa.Column("date", sa.Date(), nullable=False, unique=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("official_holidays")
    op.drop_index("ix_daily_reports_date", table_name="daily_reports")
    op.drop_table("daily_reports")
    op.drop_index("ix_feedback_created_at", table_name="feedback")
    op.drop_index("ix_feedback_to_id", table_name="feedback")
    op.drop_index("ix_feedback_from_id", table_name="feedback")
    op.drop_index("ix_feedback_subject", table_name="feedback")
    op.drop_table("feedback")
    op.drop_index("ix_employee_targets_month_status", table_name="employee_targets")
    op.drop_table("employee_targets")
    sa.Enum(name="targetstatus").drop(op.get_bind(), checkfirst=True)
    op.drop_index("ix_employees_manager_id", table_name="employees")
    op.drop_table("employees")

"""Initial pipeline, activity, scorecard and placement tables

Revision ID: 0001_initial_pipeline
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0001_initial_pipeline"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "pipeline_entries",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("cv_submission_id", sa.Uuid(), nullable=False),
        sa.Column("job_id", sa.Uuid(), nullable=False),
        sa.Column("stage", sa.String(length=30), nullable=False, server_default="sourced"),
        sa.Column("priority", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("assigned_to", sa.Uuid(), nullable=True),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
        sa.Column("stage_entered_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        *_timestamps(),
        sa.UniqueConstraint("cv_submission_id", "job_id", name="uq_pipeline_entries_cv_job"),
    )
    op.create_index("ix_pipeline_entries_cv_submission_id", "pipeline_entries", ["cv_submission_id"])
    op.create_index("ix_pipeline_entries_job_id", "pipeline_entries", ["job_id"])
    op.create_index("ix_pipeline_entries_assigned_to", "pipeline_entries", ["assigned_to"])
    op.create_index("ix_pipeline_entries_job_stage", "pipeline_entries", ["job_id", "stage"])

    # No foreign key on pipeline_id: removal records outlive the entry
    op.create_table(
        "pipeline_activity",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("pipeline_id", sa.Uuid(), nullable=False),
        sa.Column("action", sa.String(length=50), nullable=False),
        sa.Column("from_stage", sa.String(length=30), nullable=True),
        sa.Column("to_stage", sa.String(length=30), nullable=True),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("created_by", sa.Uuid(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_pipeline_activity_pipeline_created", "pipeline_activity", ["pipeline_id", "created_at"])
    op.create_index("ix_pipeline_activity_created_by", "pipeline_activity", ["created_by"])

    op.create_table(
        "interview_scorecards",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("pipeline_id", sa.Uuid(), nullable=False),
        sa.Column("stage", sa.String(length=30), nullable=False),
        sa.Column("sequence", sa.Integer(), nullable=False),
        sa.Column("interviewer_name", sa.String(length=255), nullable=True),
        sa.Column("interviewer_role", sa.String(length=255), nullable=True),
        sa.Column("interview_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("interview_type", sa.String(length=30), nullable=False, server_default="video"),
        sa.Column("technical_skills", sa.SmallInteger(), nullable=True),
        sa.Column("communication", sa.SmallInteger(), nullable=True),
        sa.Column("cultural_fit", sa.SmallInteger(), nullable=True),
        sa.Column("motivation", sa.SmallInteger(), nullable=True),
        sa.Column("experience_relevance", sa.SmallInteger(), nullable=True),
        sa.Column("overall_impression", sa.SmallInteger(), nullable=True),
        sa.Column("strengths", sa.Text(), nullable=True),
        sa.Column("concerns", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("questions_asked", sa.Text(), nullable=True),
        sa.Column("candidate_questions", sa.Text(), nullable=True),
        sa.Column("recommendation", sa.String(length=30), nullable=True),
        sa.Column("next_steps", sa.Text(), nullable=True),
        sa.Column("is_client_feedback", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_by", sa.Uuid(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_interview_scorecards_pipeline_stage", "interview_scorecards", ["pipeline_id", "stage"])
    op.create_index("ix_interview_scorecards_pipeline_sequence", "interview_scorecards", ["pipeline_id", "sequence"])

    op.create_table(
        "placements",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("pipeline_id", sa.Uuid(), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("actual_start_date", sa.Date(), nullable=True),
        sa.Column("job_type", sa.String(length=30), nullable=False),
        sa.Column("candidate_name", sa.String(length=255), nullable=True),
        sa.Column("job_title", sa.String(length=255), nullable=True),
        sa.Column("company_name", sa.String(length=255), nullable=True),
        sa.Column("salary", sa.Numeric(12, 2), nullable=True),
        sa.Column("day_rate", sa.Numeric(12, 2), nullable=True),
        sa.Column("fee_percentage", sa.Numeric(5, 2), nullable=True),
        sa.Column("fee_value", sa.Numeric(12, 2), nullable=True),
        sa.Column("fee_currency", sa.String(length=3), nullable=False, server_default="GBP"),
        sa.Column("invoice_date", sa.Date(), nullable=True),
        sa.Column("invoice_number", sa.String(length=100), nullable=True),
        sa.Column("invoice_raised", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("invoice_raised_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("invoice_paid", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("invoice_paid_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("payment_terms_days", sa.Integer(), nullable=False, server_default="30"),
        sa.Column("guarantee_period_days", sa.Integer(), nullable=False, server_default="90"),
        sa.Column("guarantee_expires_at", sa.Date(), nullable=True),
        sa.Column("rebate_triggered", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("rebate_trigger_date", sa.Date(), nullable=True),
        sa.Column("rebate_reason", sa.Text(), nullable=True),
        sa.Column("rebate_amount", sa.Numeric(12, 2), nullable=True),
        sa.Column("rebate_percentage", sa.Numeric(5, 2), nullable=True),
        sa.Column("placed_by", sa.Uuid(), nullable=True),
        sa.Column("sourced_by", sa.Uuid(), nullable=True),
        sa.Column("split_with", sa.Uuid(), nullable=True),
        sa.Column("split_percentage", sa.Numeric(5, 2), nullable=False, server_default="100"),
        sa.Column("status", sa.String(length=30), nullable=False, server_default="confirmed"),
        sa.Column("status_changed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("internal_notes", sa.Text(), nullable=True),
        sa.Column("created_by", sa.Uuid(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("pipeline_id", name="uq_placements_pipeline_id"),
    )
    op.create_index("ix_placements_start_date", "placements", ["start_date"])
    op.create_index("ix_placements_placed_by", "placements", ["placed_by"])
    op.create_index("ix_placements_status", "placements", ["status"])


def downgrade() -> None:
    op.drop_table("placements")
    op.drop_table("interview_scorecards")
    op.drop_table("pipeline_activity")
    op.drop_table("pipeline_entries")

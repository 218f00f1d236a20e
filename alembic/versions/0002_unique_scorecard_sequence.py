"""Make scorecard sequence unique per pipeline entry

Revision ID: 0002_unique_scorecard_sequence
Revises: 0001_initial_pipeline
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0002_unique_scorecard_sequence"
down_revision: Union[str, None] = "0001_initial_pipeline"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.drop_index("ix_interview_scorecards_pipeline_sequence", table_name="interview_scorecards")
    op.create_index(
        "uq_interview_scorecards_pipeline_sequence",
        "interview_scorecards",
        ["pipeline_id", "sequence"],
        unique=True,
    )


def downgrade() -> None:
    op.drop_index("uq_interview_scorecards_pipeline_sequence", table_name="interview_scorecards")
    op.create_index(
        "ix_interview_scorecards_pipeline_sequence",
        "interview_scorecards",
        ["pipeline_id", "sequence"],
    )

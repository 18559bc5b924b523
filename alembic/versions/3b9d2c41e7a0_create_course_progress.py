"""create course_progress

Revision ID: 3b9d2c41e7a0
Revises:
Create Date: 2026-10-16 00:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3b9d2c41e7a0"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "course_progress",
        sa.Column("learner_id", sa.String(length=320), nullable=False),
        sa.Column("course_id", sa.String(length=255), nullable=False),
        sa.Column(
            "completed_item_ids",
            postgresql.ARRAY(sa.String()),
            nullable=False,
            server_default="{}",
        ),
        sa.Column(
            "status", sa.String(length=32), nullable=False, server_default="NotStarted"
        ),
        sa.Column("percent_complete", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_updated", sa.BigInteger(), nullable=True),
        sa.PrimaryKeyConstraint("learner_id", "course_id"),
    )


def downgrade() -> None:
    op.drop_table("course_progress")

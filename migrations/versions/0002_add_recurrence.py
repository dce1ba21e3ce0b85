"""add recurrence flag and pattern"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "0002_add_recurrence"
down_revision = "0001_create_tasks"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.add_column(
        "tasks",
        sa.Column("is_recurring", sa.Boolean(), nullable=False, server_default=sa.text("false")),
    )
    # Holds JSON text; rows imported from older versions may hold a bare keyword.
    op.add_column("tasks", sa.Column("recurring_pattern", sa.Text(), nullable=True))
    op.create_index("ix_tasks_is_recurring", "tasks", ["is_recurring"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_tasks_is_recurring", table_name="tasks")
    op.drop_column("tasks", "recurring_pattern")
    op.drop_column("tasks", "is_recurring")

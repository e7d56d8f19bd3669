"""Initial schema — tasks and users collections.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-18

tasks.assigned_user has no foreign key; the assignment engine clears it when a
user is deleted.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("email", sa.String(320), nullable=False, unique=True),
        sa.Column("pending_tasks", sa.JSON, nullable=False),
        sa.Column("date_created", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "tasks",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("deadline", sa.DateTime(timezone=True), nullable=False),
        sa.Column("completed", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("assigned_user", sa.String(36), nullable=True),
        sa.Column("assigned_user_name", sa.Text, nullable=False, server_default="unassigned"),
        sa.Column("date_created", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_tasks_assigned_user", "tasks", ["assigned_user"])


def downgrade() -> None:
    op.drop_index("ix_tasks_assigned_user", table_name="tasks")
    op.drop_table("tasks")
    op.drop_table("users")

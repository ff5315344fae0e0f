"""Create courses table

Revision ID: 0001_create_courses
Revises:
Create Date: 2026-10-17

"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0001_create_courses"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "courses",
        sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    # Not unique: duplicate names are rejected by the API, not the schema.
    op.create_index("ix_courses_name", "courses", ["name"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_courses_name", table_name="courses")
    op.drop_table("courses")

"""Create herbs and user_roles tables

Revision ID: 001
Revises: None
Create Date: 2026-10-17 00:00:00.000000+00:00

What:  The two tables the catalog reads: `herbs` (catalog rows) and
       `user_roles` (admin flag for signed-in users).
How:   Postgres types as Supabase creates them: uuid keys with
       gen_random_uuid(), text[] benefits, timestamptz.

Rollback: downgrade() drops both tables (all catalog data is lost).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "herbs",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
        ),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("scientific_name", sa.Text(), nullable=True),
        sa.Column("description", sa.Text(), nullable=False, server_default=sa.text("''")),
        sa.Column(
            "category",
            sa.Text(),
            nullable=False,
            comment="Free-form label; the catalog compares it lower-cased",
        ),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.Column(
            "benefits",
            postgresql.ARRAY(sa.Text()),
            nullable=False,
            server_default=sa.text("'{}'::text[]"),
        ),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "user_roles",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
        ),
        sa.Column(
            "user_id",
            postgresql.UUID(as_uuid=True),
            nullable=False,
            comment="auth.users(id) in Supabase",
        ),
        sa.Column(
            "role",
            sa.String(32),
            nullable=False,
            server_default=sa.text("'user'"),
            comment="admin | user",
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_user_roles_user_id", "user_roles", ["user_id"])


def downgrade() -> None:
    op.drop_index("idx_user_roles_user_id", table_name="user_roles")
    op.drop_table("user_roles")
    op.drop_table("herbs")

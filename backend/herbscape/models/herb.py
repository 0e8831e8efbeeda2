"""
HerbScape Backend — Herb and UserRole SQLAlchemy Models
=========================================================

What:  ORM models for the `herbs` and `user_roles` tables in Supabase Postgres.
How:   Inherit from the shared DeclarativeBase; Alembic reads them for migrations.
Who:   HerbService (catalog rows) and AuthService (admin role lookup).

Table Design:
    herbs
        - Read-only from this application; rows are created by admin tooling
        - benefits: text[] (Postgres array) of short benefit strings
        - scientific_name / image_url: optional, NULL when unknown

    user_roles
        - One row per (user, role); role 'admin' grants the "Add Plant" link
        - user_id references auth.users(id) in Supabase (not enforced here)
"""

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import Index, String, Text, text
from sqlalchemy.dialects.postgresql import ARRAY, TIMESTAMP, UUID
from sqlalchemy.orm import Mapped, mapped_column

from herbscape.database import Base


class Herb(Base):
    """
    A catalog entry describing a named plant.

    Query Patterns:
        - Catalog load: SELECT * FROM herbs (no ordering, no filtering)
    """

    __tablename__ = "herbs"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=text("gen_random_uuid()"),
    )

    name: Mapped[str] = mapped_column(Text, nullable=False)

    scientific_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    description: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # Free-form label ("Culinary", "medicinal", ...); compared lower-cased
    category: Mapped[str] = mapped_column(Text, nullable=False)

    image_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    benefits: Mapped[List[str]] = mapped_column(
        ARRAY(Text),
        nullable=False,
        default=list,
        server_default=text("'{}'::text[]"),
    )

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("now()"),
    )

    def __repr__(self) -> str:
        return f"<Herb(id={self.id}, name='{self.name}', category='{self.category}')>"


class UserRole(Base):
    """Role assignment for a Supabase auth user."""

    __tablename__ = "user_roles"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=text("gen_random_uuid()"),
    )

    user_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)

    # Values: 'admin' | 'user'
    role: Mapped[str] = mapped_column(String(32), nullable=False, default="user")

    __table_args__ = (
        Index("idx_user_roles_user_id", "user_id"),
    )

    def __repr__(self) -> str:
        return f"<UserRole(user_id={self.user_id}, role='{self.role}')>"

"""
StuntCheck Gateway — Child SQLAlchemy Model
=============================================

What:  ORM model for the `children` table (child growth profiles).
Who:   Used by ChildService for owner-scoped CRUD and by Alembic.

Table Design:
    - UUID primary key generated by the gateway (uuid4) or the database
    - user_id: the identity provider's opaque user id; every query filters on it
    - gender: "male" | "female" (normalized at the API boundary)
    - age: whole months/years as sent by the client, never negative
    - created_at: UTC, drives the newest-first listing order

Query Patterns:
    - List mine:  WHERE user_id = :uid ORDER BY created_at DESC
      → idx_children_user_created
    - Single op:  WHERE id = :id AND user_id = :uid
      → primary key lookup, owner checked in the same predicate
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, DateTime, Index, Integer, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from stuntcheck.database import Base


class Child(Base):
    """A child profile owned by exactly one identity."""

    __tablename__ = "children"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    user_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        comment="Owner identity id from the identity provider",
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)

    gender: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        comment="male | female",
    )

    age: Mapped[int] = mapped_column(Integer, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        CheckConstraint("age >= 0", name="ck_children_age_non_negative"),
        Index("idx_children_user_created", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Child(id={self.id}, user_id='{self.user_id}', name='{self.name}')>"

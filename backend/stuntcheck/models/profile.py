"""
StuntCheck Gateway — Profile SQLAlchemy Model
===============================================

What:  Public profile row mirroring an identity (`profiles` table).
Why:   The frontend reads display names from this table; the identity
       provider's own user table is not queryable by clients.
When:  Inserted on registration, back-filled on login, renamed on update-me.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, String, text
from sqlalchemy.orm import Mapped, mapped_column

from stuntcheck.database import Base


class Profile(Base):
    __tablename__ = "profiles"

    # Same value as the identity provider's user id
    id: Mapped[str] = mapped_column(String(64), primary_key=True)

    name: Mapped[str] = mapped_column(String(100), nullable=False, default="Unnamed")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    def __repr__(self) -> str:
        return f"<Profile(id='{self.id}', name='{self.name}')>"

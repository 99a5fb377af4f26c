"""
StuntCheck Gateway — Prediction SQLAlchemy Model
==================================================

What:  ORM model for the `predictions` table.
Who:   Written by PredictionService.predict_and_save, read/deleted by the
       prediction history routes.

Lifecycle:
    1. Created only after the inference service answered successfully
    2. Never updated
    3. Deleted explicitly by its owner

Columns mirror the inference contract:
    inputs  → gender, age, height, weight
    outputs → status, confidence, nutrition_recommendation, additional_info

child_id is optional. The foreign key only guarantees that the child
exists; it does not check that the child belongs to the same user.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import JSON, DateTime, Float, ForeignKey, Index, String, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from stuntcheck.database import Base


class Prediction(Base):
    """A stored stunting prediction owned by exactly one identity."""

    __tablename__ = "predictions"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    user_id: Mapped[str] = mapped_column(String(64), nullable=False)

    child_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("children.id", ondelete="SET NULL"),
        nullable=True,
    )

    # ── Inputs ────────────────────────────────────────────────────────────
    gender: Mapped[str] = mapped_column(String(10), nullable=False)
    age: Mapped[float] = mapped_column(Float, nullable=False)
    height: Mapped[float] = mapped_column(Float, nullable=False)
    weight: Mapped[float] = mapped_column(Float, nullable=False)

    # ── Model outputs ─────────────────────────────────────────────────────
    status: Mapped[str] = mapped_column(String(100), nullable=False)
    confidence: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    nutrition_recommendation: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    additional_info: Mapped[Optional[Any]] = mapped_column(JSON, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_predictions_user_created", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<Prediction(id={self.id}, user_id='{self.user_id}', "
            f"status='{self.status}')>"
        )

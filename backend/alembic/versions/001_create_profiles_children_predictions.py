"""Create profiles, children and predictions tables

Revision ID: 001
Revises: None
Create Date: 2026-10-16 00:00:00.000000+00:00

Tables:
    - profiles:    display name per identity (id = identity provider user id)
    - children:    child growth profiles, owned through user_id
    - predictions: stored model outputs, owned through user_id, optionally
                   linked to a child (SET NULL when the child is deleted)

user_id columns hold the identity provider's id as text; the provider's own
user table lives in another schema and is not referenced by a foreign key.
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.TIMESTAMP(timezone=True),
        server_default=sa.text("CURRENT_TIMESTAMP"),
        nullable=False,
    )


def upgrade() -> None:
    op.create_table(
        "profiles",
        sa.Column("id", sa.String(64), nullable=False, comment="Identity provider user id"),
        sa.Column("name", sa.String(100), nullable=False, server_default=sa.text("'Unnamed'")),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "children",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
        ),
        sa.Column("user_id", sa.String(64), nullable=False, comment="Owner identity id from the identity provider"),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("gender", sa.String(10), nullable=False, comment="male | female"),
        sa.Column("age", sa.Integer(), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("age >= 0", name="ck_children_age_non_negative"),
    )
    # Owner listing, newest first
    op.create_index(
        "idx_children_user_created",
        "children",
        ["user_id", sa.text("created_at DESC")],
    )

    op.create_table(
        "predictions",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
        ),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("child_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("gender", sa.String(10), nullable=False),
        sa.Column("age", sa.Float(), nullable=False),
        sa.Column("height", sa.Float(), nullable=False),
        sa.Column("weight", sa.Float(), nullable=False),
        sa.Column("status", sa.String(100), nullable=False),
        sa.Column("confidence", sa.Float(), nullable=True),
        sa.Column("nutrition_recommendation", sa.Text(), nullable=True),
        sa.Column("additional_info", sa.JSON(), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["child_id"], ["children.id"], ondelete="SET NULL"),
    )
    op.create_index(
        "idx_predictions_user_created",
        "predictions",
        ["user_id", sa.text("created_at DESC")],
    )


def downgrade() -> None:
    """Drops all three tables. Destroys every stored child and prediction."""
    op.drop_index("idx_predictions_user_created", table_name="predictions")
    op.drop_table("predictions")
    op.drop_index("idx_children_user_created", table_name="children")
    op.drop_table("children")
    op.drop_table("profiles")

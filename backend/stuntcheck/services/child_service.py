"""
StuntCheck Gateway — Child Service
====================================

What:  Owner-scoped CRUD for child profiles.
How:   Every query carries `user_id = :owner` next to any id predicate, so a
       record owned by another identity is indistinguishable from a missing
       one (both raise NotFoundError → 404).
Who:   Called by the /api/children route handlers.

Error Handling Strategy:
    - NotFoundError propagates as-is (404)
    - ValidationError for an empty partial update, raised before any query
    - SQLAlchemyError is wrapped in StoreError (400 with the store's message)
"""

import logging
from typing import List
from uuid import UUID

from sqlalchemy import desc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from stuntcheck.exceptions import NotFoundError, StoreError, ValidationError
from stuntcheck.models.child import Child
from stuntcheck.schemas.child import ChildCreate, ChildResponse, ChildUpdate

logger = logging.getLogger(__name__)


class ChildService:
    """Stateless; receives the request's session on every call."""

    async def _get_owned(self, db: AsyncSession, owner_id: str, child_id: UUID) -> Child:
        result = await db.execute(
            select(Child).where(Child.id == child_id, Child.user_id == owner_id)
        )
        child = result.scalar_one_or_none()
        if child is None:
            raise NotFoundError(resource="child", resource_id=str(child_id))
        return child

    async def create_child(
        self, db: AsyncSession, owner_id: str, payload: ChildCreate
    ) -> ChildResponse:
        child = Child(
            user_id=owner_id,
            name=payload.name,
            gender=payload.gender.value,
            age=payload.age,
        )
        try:
            db.add(child)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Could not insert child for %s: %s", owner_id, str(e))
            raise StoreError.from_exception(e)

        logger.info("Child %s created for %s", child.id, owner_id)
        return ChildResponse.model_validate(child)

    async def list_children(self, db: AsyncSession, owner_id: str) -> List[ChildResponse]:
        """All children of `owner_id`, newest first."""
        try:
            result = await db.execute(
                select(Child)
                .where(Child.user_id == owner_id)
                .order_by(desc(Child.created_at))
            )
            children = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Could not list children for %s: %s", owner_id, str(e))
            raise StoreError.from_exception(e)
        return [ChildResponse.model_validate(child) for child in children]

    async def get_child(self, db: AsyncSession, owner_id: str, child_id: UUID) -> ChildResponse:
        try:
            child = await self._get_owned(db, owner_id, child_id)
        except SQLAlchemyError as e:
            raise StoreError.from_exception(e)
        return ChildResponse.model_validate(child)

    async def update_child(
        self,
        db: AsyncSession,
        owner_id: str,
        child_id: UUID,
        payload: ChildUpdate,
    ) -> ChildResponse:
        """
        Partial update: only supplied fields are written.

        Raises:
            ValidationError: no field supplied (checked before the store is touched)
            NotFoundError: no such child for this owner
            StoreError: the database rejected the update
        """
        changes = payload.changes()
        if not changes:
            raise ValidationError(message="At least one field is required")

        try:
            child = await self._get_owned(db, owner_id, child_id)
            for field, value in changes.items():
                setattr(child, field, value)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Could not update child %s: %s", child_id, str(e))
            raise StoreError.from_exception(e)

        logger.info("Child %s updated (%s)", child_id, ", ".join(sorted(changes)))
        return ChildResponse.model_validate(child)

    async def delete_child(self, db: AsyncSession, owner_id: str, child_id: UUID) -> None:
        try:
            child = await self._get_owned(db, owner_id, child_id)
            await db.delete(child)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Could not delete child %s: %s", child_id, str(e))
            raise StoreError.from_exception(e)
        logger.info("Child %s deleted", child_id)


# ── Singleton Instance ────────────────────────────────────────────────────
child_service = ChildService()

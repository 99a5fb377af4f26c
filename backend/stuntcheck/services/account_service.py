"""
StuntCheck Gateway — Account Service
======================================

What:  Registration, login and self-service profile updates.
How:   Forwards credentials to the identity provider client and mirrors the
       display name into the `profiles` table.
Who:   Called by the /api/auth route handlers.

Profile rows are best effort: a failure to write one is logged and never
fails the registration/login/update that triggered it. Each profile write
runs in a SAVEPOINT so a failed insert does not poison the request session.
"""

import logging
from typing import Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from stuntcheck.exceptions import NotFoundError, ValidationError
from stuntcheck.models.profile import Profile
from stuntcheck.schemas.auth import (
    Identity,
    LoginRequest,
    RegisterRequest,
    Session,
    UpdateMeRequest,
)
from stuntcheck.services.identity_client import identity_client

logger = logging.getLogger(__name__)

DEFAULT_PROFILE_NAME = "Unnamed"


class AccountService:

    async def _upsert_profile(
        self,
        db: AsyncSession,
        user_id: str,
        name: Optional[str],
        overwrite: bool,
    ) -> None:
        try:
            async with db.begin_nested():
                profile = await db.get(Profile, user_id)
                if profile is None:
                    db.add(Profile(id=user_id, name=name or DEFAULT_PROFILE_NAME))
                elif overwrite and name:
                    profile.name = name
        except SQLAlchemyError as e:
            logger.warning("Failed to write profile for %s: %s", user_id, str(e))

    async def register(
        self, db: AsyncSession, payload: RegisterRequest
    ) -> Optional[Identity]:
        """Creates the identity and its profile row."""
        user = await identity_client.sign_up(
            email=payload.email,
            password=payload.password,
            metadata={"name": payload.name},
        )
        if user is not None:
            await self._upsert_profile(db, user.id, payload.name, overwrite=False)
            logger.info("Registered user %s", user.id)
        return user

    async def login(
        self, db: AsyncSession, payload: LoginRequest
    ) -> Tuple[Session, Identity]:
        """Signs in and back-fills the profile row of older accounts."""
        session, user = await identity_client.sign_in(payload.email, payload.password)
        await self._upsert_profile(db, user.id, user.name, overwrite=False)
        return session, user

    async def update_me(
        self,
        db: AsyncSession,
        principal: Identity,
        access_token: str,
        user_id: str,
        payload: UpdateMeRequest,
    ) -> Identity:
        """
        Updates the caller's own identity.

        A `user_id` other than the caller's is answered like a missing
        record (NotFoundError), the same policy as children/predictions.
        """
        if user_id != principal.id:
            raise NotFoundError(resource="user", resource_id=user_id)

        changes = payload.changes()
        if not changes:
            raise ValidationError(message="At least one field is required")

        attributes = {}
        if "email" in changes:
            attributes["email"] = changes["email"]
        if "password" in changes:
            attributes["password"] = changes["password"]
        if "name" in changes:
            attributes["data"] = {**principal.metadata, "name": changes["name"]}

        user = await identity_client.update_user(access_token, attributes)
        if "name" in changes:
            await self._upsert_profile(db, user.id, changes["name"], overwrite=True)
        logger.info("User %s updated (%s)", user.id, ", ".join(sorted(changes)))
        return user


# ── Singleton Instance ────────────────────────────────────────────────────
account_service = AccountService()

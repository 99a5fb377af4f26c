"""
StuntCheck Gateway — Account Route Handlers
=============================================

What:  /api/auth/register, /api/auth/login, /api/auth/me, /api/auth/me/{id}.
How:   Delegates to AccountService; provider rejections surface as 400 with
       the provider's message (IdentityProviderError).
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from stuntcheck.database import get_db_session
from stuntcheck.dependencies import get_access_token, get_current_principal
from stuntcheck.schemas.auth import (
    Identity,
    LoginRequest,
    LoginResponse,
    MeResponse,
    RegisterRequest,
    RegisterResponse,
    UpdateMeRequest,
    UpdateMeResponse,
)
from stuntcheck.schemas.common import ErrorResponse
from stuntcheck.services.account_service import account_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post(
    "/register",
    status_code=201,
    response_model=RegisterResponse,
    responses={400: {"description": "Rejected by the identity provider", "model": ErrorResponse}},
    summary="Register a new user",
    description="Creates the user in the identity provider and a matching profiles row.",
)
async def register(
    payload: RegisterRequest,
    db: AsyncSession = Depends(get_db_session),
) -> RegisterResponse:
    user = await account_service.register(db, payload)
    return RegisterResponse(user=user)


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={400: {"description": "Invalid credentials", "model": ErrorResponse}},
    summary="User login",
)
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
) -> LoginResponse:
    session, user = await account_service.login(db, payload)
    return LoginResponse(session=session, user=user)


@router.get(
    "/me",
    response_model=MeResponse,
    responses={401: {"description": "Unauthorized", "model": ErrorResponse}},
    summary="Get my identity",
)
async def get_me(principal: Identity = Depends(get_current_principal)) -> MeResponse:
    return MeResponse(user=principal)


@router.put(
    "/me/{user_id}",
    response_model=UpdateMeResponse,
    responses={
        400: {"description": "Invalid input or rejected by the identity provider", "model": ErrorResponse},
        401: {"description": "Unauthorized", "model": ErrorResponse},
        404: {"description": "Not the caller's own id", "model": ErrorResponse},
    },
    summary="Update my name, email or password",
)
async def update_me(
    user_id: str,
    payload: UpdateMeRequest,
    principal: Identity = Depends(get_current_principal),
    access_token: str = Depends(get_access_token),
    db: AsyncSession = Depends(get_db_session),
) -> UpdateMeResponse:
    user = await account_service.update_me(db, principal, access_token, user_id, payload)
    return UpdateMeResponse(user=user)

"""
StuntCheck Gateway — Children Route Handlers
==============================================

What:  /api/children CRUD for the authenticated caller's child profiles.
How:   Resolves the principal, delegates to ChildService, shapes the response.

Every route requires a bearer token (401 otherwise). Single-record routes
answer 404 both for unknown ids and for children owned by someone else.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from stuntcheck.database import get_db_session
from stuntcheck.dependencies import get_current_principal
from stuntcheck.schemas.auth import Identity
from stuntcheck.schemas.child import (
    ChildCreate,
    ChildCreateResponse,
    ChildListResponse,
    ChildResponse,
    ChildUpdate,
    ChildUpdateResponse,
)
from stuntcheck.schemas.common import ErrorResponse, MessageResponse
from stuntcheck.services.child_service import child_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/children", tags=["Children"])

_ERRORS = {
    400: {"description": "Invalid input or store error", "model": ErrorResponse},
    401: {"description": "Missing or invalid bearer token", "model": ErrorResponse},
}
_OWNED_ERRORS = {
    **_ERRORS,
    404: {"description": "Child not found", "model": ErrorResponse},
}


@router.post(
    "",
    status_code=201,
    response_model=ChildCreateResponse,
    responses=_ERRORS,
    summary="Create a child profile",
)
async def create_child(
    payload: ChildCreate,
    principal: Identity = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db_session),
) -> ChildCreateResponse:
    child = await child_service.create_child(db, principal.id, payload)
    return ChildCreateResponse(child=child)


@router.get(
    "",
    response_model=ChildListResponse,
    responses=_ERRORS,
    summary="List my child profiles, newest first",
)
async def list_children(
    response: Response,
    principal: Identity = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db_session),
) -> ChildListResponse:
    children = await child_service.list_children(db, principal.id)
    response.headers["X-Total-Count"] = str(len(children))
    return ChildListResponse(children=children)


@router.get(
    "/{child_id}",
    response_model=ChildResponse,
    responses=_OWNED_ERRORS,
    summary="Get one of my child profiles",
)
async def get_child(
    child_id: UUID,
    principal: Identity = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db_session),
) -> ChildResponse:
    return await child_service.get_child(db, principal.id, child_id)


@router.put(
    "/{child_id}",
    response_model=ChildUpdateResponse,
    responses=_OWNED_ERRORS,
    summary="Partially update one of my child profiles",
    description="Only supplied fields change; at least one of name, gender, age is required.",
)
async def update_child(
    child_id: UUID,
    payload: ChildUpdate,
    principal: Identity = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db_session),
) -> ChildUpdateResponse:
    child = await child_service.update_child(db, principal.id, child_id, payload)
    return ChildUpdateResponse(child=child)


@router.delete(
    "/{child_id}",
    response_model=MessageResponse,
    responses=_OWNED_ERRORS,
    summary="Delete one of my child profiles",
)
async def delete_child(
    child_id: UUID,
    principal: Identity = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await child_service.delete_child(db, principal.id, child_id)
    return MessageResponse(message="Child deleted")

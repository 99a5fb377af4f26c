"""
StuntCheck Gateway — Route Dependencies
=========================================

What:  FastAPI dependencies shared by protected routes.
How:   Read what AuthenticationMiddleware left on `request.state` and raise
       AuthenticationError (→ 401) when no principal was resolved.

Example:
    @router.get("/children")
    async def list_children(principal: Identity = Depends(get_current_principal)):
        ...
"""

from fastapi import Request

from stuntcheck.exceptions import AuthenticationError
from stuntcheck.schemas.auth import Identity


async def get_current_principal(request: Request) -> Identity:
    principal = getattr(request.state, "principal", None)
    if principal is None:
        raise AuthenticationError()
    return principal


async def get_access_token(request: Request) -> str:
    """The verified bearer token, for calls made on the caller's behalf."""
    token = getattr(request.state, "access_token", None)
    if not token:
        raise AuthenticationError()
    return token

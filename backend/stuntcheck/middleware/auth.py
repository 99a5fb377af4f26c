"""
StuntCheck Gateway — Authentication Middleware
================================================

What:  Resolves the `Authorization: Bearer <token>` header to a principal.
How:   Calls the identity provider once per request that carries a bearer
       token and stores the outcome on `request.state`:
           request.state.principal     Identity | None
           request.state.access_token  str | None
Who:   Applied to every request; read by `get_current_principal`.

The middleware never rejects a request. Anonymous routes (/api/predict,
/health...) simply ignore the state, and protected routes enforce 401
through the `get_current_principal` dependency.
"""

import logging
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from stuntcheck.exceptions import StuntCheckError
from stuntcheck.services.identity_client import identity_client

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Returns the token of a `Bearer <token>` header value, else None."""
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        return None
    token = authorization[len(BEARER_PREFIX):].strip()
    return token or None


class AuthenticationMiddleware(BaseHTTPMiddleware):
    """Attaches the verified identity (or None) to every request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request.state.principal = None
        request.state.access_token = None

        token = extract_bearer_token(request.headers.get("Authorization"))
        if token:
            try:
                request.state.principal = await identity_client.get_user(token)
                request.state.access_token = token
            except StuntCheckError as e:
                logger.warning("Bearer token not accepted: %s", e.message)

        return await call_next(request)

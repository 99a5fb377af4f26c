"""
StuntCheck Gateway — Identity Provider Client
===============================================

What:  Thin adapter over the Supabase Auth (GoTrue) REST API.
How:   Each public method performs exactly one HTTP request with
       httpx.AsyncClient and maps the answer to an Identity / Session or to
       a typed exception. Nothing is cached.
Who:   Singleton `identity_client`, used by the authentication middleware
       (token verification) and AccountService (sign-up, sign-in, update).

GoTrue endpoints:
    GET  /auth/v1/user                          verify bearer token
    POST /auth/v1/signup                        create identity
    POST /auth/v1/token?grant_type=password     issue session
    PUT  /auth/v1/user                          update own identity

Every request carries the project anon key in the `apikey` header. Bearer
tokens and passwords are never logged.
"""

import logging
from typing import Any, Dict, Optional, Tuple

import httpx

from stuntcheck.config import settings
from stuntcheck.exceptions import AuthenticationError, IdentityProviderError
from stuntcheck.schemas.auth import Identity, Session

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> str:
    """Extracts the human message from a GoTrue error body."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:200] or f"Identity provider answered {response.status_code}"
    if isinstance(body, dict):
        for key in ("msg", "message", "error_description", "error"):
            if body.get(key):
                return str(body[key])
    return f"Identity provider answered {response.status_code}"


INVALID_USER_MESSAGE = "Identity provider returned an invalid user"


def _json_object(response: httpx.Response) -> Dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        raise IdentityProviderError(message=INVALID_USER_MESSAGE, status_code=response.status_code)
    if not isinstance(body, dict):
        raise IdentityProviderError(message=INVALID_USER_MESSAGE, status_code=response.status_code)
    return body


def _identity(user: Any) -> Identity:
    """Identity from a GoTrue user object; a malformed one is a provider error."""
    try:
        return Identity.from_provider(user)
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        logger.error("Identity provider returned a malformed user: %s", type(e).__name__)
        raise IdentityProviderError(message=INVALID_USER_MESSAGE)


class IdentityProviderClient:
    """
    Pass-through adapter for the managed identity provider.

    Raises:
        AuthenticationError: a bearer token was rejected (verify / update)
        IdentityProviderError: the provider refused the request or was unreachable
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url if base_url is not None else settings.supabase_url).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.supabase_anon_key
        self.timeout = timeout if timeout is not None else settings.identity_timeout
        self._transport = transport

    def _headers(self, bearer: Optional[str] = None) -> Dict[str, str]:
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {bearer or self.api_key}",
            "Content-Type": "application/json",
        }

    async def _request(
        self,
        method: str,
        path: str,
        *,
        bearer: Optional[str] = None,
        params: Optional[Dict[str, str]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        url = f"{self.base_url}/auth/v1{path}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                return await client.request(
                    method,
                    url,
                    params=params,
                    json=json,
                    headers=self._headers(bearer),
                )
        except httpx.HTTPError as e:
            logger.error("Identity provider unreachable (%s %s): %s", method, path, str(e))
            raise IdentityProviderError(
                message="Identity provider is unreachable",
                context={"error_type": type(e).__name__},
            )

    async def get_user(self, access_token: str) -> Identity:
        """Resolves a bearer token to the identity that owns it."""
        response = await self._request("GET", "/user", bearer=access_token)
        if response.status_code in (401, 403):
            raise AuthenticationError(context={"reason": _error_message(response)})
        if response.status_code >= 400:
            raise IdentityProviderError(
                message=_error_message(response),
                status_code=response.status_code,
            )
        return _identity(_json_object(response))

    async def sign_up(
        self,
        email: str,
        password: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Optional[Identity]:
        """
        Creates a new identity.

        Returns None when the provider accepted the request without exposing
        a user object (e.g. email confirmation pending on an existing address).
        """
        response = await self._request(
            "POST",
            "/signup",
            json={"email": email, "password": password, "data": metadata or {}},
        )
        if response.status_code >= 400:
            message = _error_message(response)
            logger.warning("Sign-up rejected: %s", message)
            raise IdentityProviderError(message=message, status_code=response.status_code)

        body = _json_object(response)
        # Autoconfirm projects answer with a session wrapping the user
        user = body.get("user") if isinstance(body.get("user"), dict) else body
        if not user or not user.get("id"):
            return None
        return _identity(user)

    async def sign_in(self, email: str, password: str) -> Tuple[Session, Identity]:
        """Exchanges email + password for a session."""
        response = await self._request(
            "POST",
            "/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        if response.status_code >= 400:
            message = _error_message(response)
            logger.warning("Sign-in rejected: %s", message)
            raise IdentityProviderError(message=message, status_code=response.status_code)

        body = _json_object(response)
        if not body.get("access_token"):
            raise IdentityProviderError(message="Identity provider returned no session")
        session = Session(
            access_token=body["access_token"],
            refresh_token=body.get("refresh_token"),
            token_type=body.get("token_type", "bearer"),
            expires_in=body.get("expires_in"),
        )
        return session, _identity(body.get("user"))

    async def update_user(self, access_token: str, attributes: Dict[str, Any]) -> Identity:
        """
        Updates the identity owning `access_token`.

        attributes: any of {"email", "password", "data"} as understood by GoTrue.
        """
        response = await self._request("PUT", "/user", bearer=access_token, json=attributes)
        if response.status_code == 401:
            raise AuthenticationError(context={"reason": _error_message(response)})
        if response.status_code >= 400:
            message = _error_message(response)
            logger.warning("User update rejected: %s", message)
            raise IdentityProviderError(message=message, status_code=response.status_code)
        return _identity(_json_object(response))


# ── Singleton Instance ────────────────────────────────────────────────────
identity_client = IdentityProviderClient()

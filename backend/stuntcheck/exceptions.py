"""
StuntCheck Gateway — Custom Exception Hierarchy
=================================================

What:  Application-specific exceptions for every failure the gateway reports.
How:   Each exception carries a client-safe message and an optional context
       dict. Global exception handlers (registered in main.py) catch these
       and return the canonical JSON error envelope with the right status.
Who:   Raised by clients, services and dependencies; caught by global handlers.

Exception Hierarchy:
    StuntCheckError (base)                → 500
    ├── ValidationError                  → 400 Bad Request
    ├── AuthenticationError              → 401 Unauthorized
    ├── NotFoundError                    → 404 Not Found (also "not yours")
    ├── StoreError                       → 400 (managed database rejected the operation)
    ├── IdentityProviderError            → 400 (identity provider rejected the request)
    └── InferenceServiceError            → 500 (prediction model unreachable/invalid)
        └── InferenceUnavailableError    → 500 (status probe failed, detail exposed)

Error envelope returned by every handler:
    {
        "error": "not_found",
        "message": "child not found",
        "details": {...},          # optional
        "request_id": "a1b2c3d4"
    }
"""

from typing import Any, Dict, Optional


class StuntCheckError(Exception):
    """
    Base exception for all gateway errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, only returned where a handler opts in)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(StuntCheckError):
    """
    Raised when client input fails a business-rule check that the request
    schema cannot express (e.g. "at least one field", "all fields required").

    HTTP: 400 Bad Request
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class AuthenticationError(StuntCheckError):
    """
    Raised when a protected operation has no verified principal, or when the
    identity provider rejects a bearer token.

    HTTP: 401 Unauthorized
    """

    def __init__(
        self,
        message: str = "Unauthorized",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(StuntCheckError):
    """
    Raised when a record does not exist OR belongs to another identity.

    HTTP: 404 Not Found

    The message never includes the requested id, so a record owned by
    somebody else produces a body identical to a record that never existed.
    The id is kept in `context` for server-side logging only.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=f"{resource} not found", context=ctx)
        self.resource = resource


class StoreError(StuntCheckError):
    """
    Raised when the managed database rejects or fails an operation
    (constraint violation, bad foreign key, connection failure).

    HTTP: 400 Bad Request, carrying the store's own message.
    """

    def __init__(
        self,
        message: str = "The data store rejected the operation",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)

    @classmethod
    def from_exception(cls, exc: Exception) -> "StoreError":
        """
        Wraps a driver/ORM exception, keeping the database's own message.

        SQLAlchemy DBAPIError exposes the driver error as `.orig`; its text
        is what the client gets (e.g. a foreign key violation).
        """
        orig = getattr(exc, "orig", None)
        message = str(orig if orig is not None else exc).strip().splitlines()
        return cls(
            message=message[0] if message else "The data store rejected the operation",
            context={"error_type": type(exc).__name__},
        )


class IdentityProviderError(StuntCheckError):
    """
    Raised when the identity provider refuses a sign-up, sign-in or user
    update (duplicate email, wrong password, weak password...), or cannot be
    reached.

    HTTP: 400 Bad Request, carrying the provider's message.
    """

    def __init__(
        self,
        message: str = "Identity provider request failed",
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if status_code is not None:
            ctx["provider_status"] = status_code
        super().__init__(message=message, context=ctx)
        self.status_code = status_code


class InferenceServiceError(StuntCheckError):
    """
    Raised when the prediction model server cannot be reached, times out,
    answers with an error status, or returns a payload that does not follow
    the inference contract.

    HTTP: 500 Internal Server Error. The client only ever sees the generic
    message; the transport detail stays in `context` and the logs.
    """

    def __init__(
        self,
        message: str = "Could not reach the prediction model.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class InferenceUnavailableError(InferenceServiceError):
    """
    Raised by the status probe when the model server cannot be reached.

    HTTP: 500. Unlike prediction failures, the diagnostic routes report the
    transport error (`details.error`) since they exist to debug connectivity.
    """

    def __init__(
        self,
        message: str = "Could not reach the prediction service",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)

"""
StuntCheck Gateway — Account Schemas
======================================

What:  Request/response contracts for /api/auth/* and the Identity type
       produced by the identity provider client.

Identity is read-only for the gateway: it is built from the provider's user
object and forwarded, never stored locally (only the display name is
mirrored into `profiles`).
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, EmailStr, Field


class Identity(BaseModel):
    """A user as reported by the identity provider."""
    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_provider(cls, user: Dict[str, Any]) -> "Identity":
        """Builds an Identity from a GoTrue user object."""
        metadata = dict(user.get("user_metadata") or {})
        return cls(
            id=str(user["id"]),
            email=user.get("email"),
            name=metadata.get("name"),
            metadata=metadata,
        )


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    name: str = Field(min_length=2, max_length=100)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class UpdateMeRequest(BaseModel):
    """At least one field is required; AccountService enforces it."""
    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(default=None, min_length=6)

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True, exclude_none=True)


class Session(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "bearer"
    expires_in: Optional[int] = None


class RegisterResponse(BaseModel):
    message: str = "Registration successful"
    user: Optional[Identity] = None


class LoginResponse(BaseModel):
    message: str = "Login successful"
    session: Session
    user: Identity


class MeResponse(BaseModel):
    user: Identity


class UpdateMeResponse(BaseModel):
    message: str = "Profile updated"
    user: Identity

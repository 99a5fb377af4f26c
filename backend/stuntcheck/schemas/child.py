"""
StuntCheck Gateway — Child Profile Schemas
============================================

What:  Request/response contracts for /api/children.

Notes:
    - The owner is never part of a request body. Any `user_id` a client
      sends is ignored; the owner always comes from the verified principal.
    - `sex` is accepted as a legacy spelling of `gender`.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator

from stuntcheck.schemas.common import Gender, normalize_gender


class ChildCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    gender: Gender = Field(validation_alias=AliasChoices("gender", "sex"))
    age: int = Field(ge=0, description="Age of the child, never negative")

    @field_validator("gender", mode="before")
    @classmethod
    def normalize_gender_label(cls, v):
        return normalize_gender(v)


class ChildUpdate(BaseModel):
    """
    Partial update. Omitted (or null) fields are left untouched; at least one
    field must be present, which ChildService checks before touching the store.
    """
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    gender: Optional[Gender] = Field(
        default=None, validation_alias=AliasChoices("gender", "sex")
    )
    age: Optional[int] = Field(default=None, ge=0)

    @field_validator("gender", mode="before")
    @classmethod
    def normalize_gender_label(cls, v):
        return normalize_gender(v)

    def changes(self) -> dict:
        """Only the fields the client actually supplied with a value."""
        return self.model_dump(exclude_unset=True, exclude_none=True, mode="json")


class ChildResponse(BaseModel):
    id: uuid.UUID
    user_id: str = Field(description="Owner identity id")
    name: str
    gender: Gender
    age: int
    created_at: datetime

    model_config = {"from_attributes": True}


class ChildCreateResponse(BaseModel):
    message: str = "Child added"
    child: ChildResponse


class ChildUpdateResponse(BaseModel):
    message: str = "Child updated"
    child: ChildResponse


class ChildListResponse(BaseModel):
    children: List[ChildResponse]

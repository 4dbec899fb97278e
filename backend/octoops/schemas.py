"""Shared API schemas.

Request and response bodies are camelCase on the wire; Python code uses the
snake_case attribute names.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema serialised with camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class UserResponse(CamelModel):
    """Full user record."""

    id: UUID
    name: str
    email: str
    role: str
    status: str
    avatar: str | None = None
    invited_by: UUID | None = None
    invited_at: datetime | None = None
    accepted_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class UserSummary(CamelModel):
    """Populated user reference (assignee, inviter)."""

    id: UUID
    name: str
    email: str
    avatar: str | None = None
    role: str | None = None


class UserRef(CamelModel):
    """Minimal populated user reference (creator)."""

    id: UUID
    name: str
    email: str


class MessageResponse(CamelModel):
    message: str

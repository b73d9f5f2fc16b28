"""Authenticated request context."""

from uuid import UUID

from pydantic import BaseModel, Field


class UserContext(BaseModel):
    """Identity of the signed-in user, taken from the bearer token."""

    user_id: UUID = Field(..., description="Token subject")
    email: str | None = Field(default=None, description="Email claim")
    full_name: str | None = Field(default=None, description="Display name claim")

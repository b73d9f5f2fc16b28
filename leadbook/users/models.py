"""User directory models."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field

from leadbook.utils.time import utc_now


class UserRole(str, Enum):
    """Role held by a user in the directory."""

    USER = "user"
    ADMIN = "admin"


class User(BaseModel):
    """A user known to the directory.

    Identities come from the external identity provider; the directory
    only keeps the role used for edit permissions.
    """

    id: UUID = Field(..., description="Identity provider subject")
    email: str = Field(..., description="Sign-in email")
    full_name: str | None = Field(default=None, description="Display name")
    role: UserRole = Field(default=UserRole.USER, description="Directory role")
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

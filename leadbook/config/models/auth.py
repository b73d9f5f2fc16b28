"""Bearer token verification configuration.

Tokens are issued by the external identity provider. The signing
secret is read from LEADBOOK_JWT_SECRET, never from config files.
"""

from pydantic import BaseModel, Field


class AuthConfig(BaseModel):
    """JWT verification settings."""

    algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    audience: str | None = Field(
        default="authenticated",
        description="Expected aud claim, None to skip the check",
    )
    provision_users: bool = Field(
        default=True,
        description="Create a user directory entry on first authenticated request",
    )

"""JWT authentication for API requests."""

import os
from typing import Annotated
from uuid import UUID

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from leadbook.api.dependencies import SettingsDep, UserDirectoryDep
from leadbook.api.models.context import UserContext
from leadbook.observability.logging import get_logger

logger = get_logger(__name__)

# Security scheme for OpenAPI docs
security_scheme = HTTPBearer(auto_error=False)


def get_jwt_secret() -> str:
    """Get JWT secret from environment."""
    secret = os.environ.get("LEADBOOK_JWT_SECRET")
    if not secret:
        raise RuntimeError("LEADBOOK_JWT_SECRET environment variable not set")
    return secret


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_user_context(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security_scheme)],
    settings: SettingsDep,
    directory: UserDirectoryDep,
) -> UserContext:
    """Extract and validate the signed-in user from the bearer token.

    The `sub` claim is the user id. When provisioning is enabled the
    user is added to the directory on first sight, as a plain user.

    Raises:
        HTTPException: 401 if token is missing, invalid, or expired
    """
    if credentials is None:
        logger.warning("auth_missing_token", path=request.url.path)
        raise _unauthorized("Missing authentication token")

    auth = settings.auth
    options = {"verify_aud": auth.audience is not None}
    try:
        payload = jwt.decode(
            credentials.credentials,
            get_jwt_secret(),
            algorithms=[auth.algorithm],
            audience=auth.audience,
            options=options,
        )
    except JWTError as e:
        logger.warning("auth_jwt_error", error=str(e), path=request.url.path)
        raise _unauthorized("Invalid or expired token") from None

    try:
        user_id = UUID(str(payload.get("sub")))
    except ValueError:
        logger.warning("auth_invalid_subject", path=request.url.path)
        raise _unauthorized("Token subject is not a user id") from None

    email = payload.get("email")
    metadata = payload.get("user_metadata") or {}
    full_name = metadata.get("full_name") or payload.get("name")
    context = UserContext(user_id=user_id, email=email, full_name=full_name)

    if auth.provision_users and email:
        await directory.ensure_user(user_id, email, full_name)

    logger.debug("auth_success", user_id=str(user_id))
    return context


# Type alias for dependency injection
UserContextDep = Annotated[UserContext, Depends(get_user_context)]

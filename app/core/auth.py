"""JWT verification and authentication utilities.

Tokens are HS256-signed with the shared ``AUTH_SECRET_KEY`` and carry the
username in ``sub`` plus an ``is_admin`` flag.
"""

import logging
from datetime import UTC, datetime, timedelta
from typing import Annotated, Any

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pydantic import BaseModel

from app.core.config import AppEnvironment, get_settings
from app.core.errors import UnauthorizedError

logger = logging.getLogger(__name__)

INVALID_OR_EXPIRED_TOKEN_MSG = "Invalid or expired token"

_optional_security = HTTPBearer(auto_error=False)


class TokenPayload(BaseModel):
    """JWT token payload."""

    sub: str
    is_admin: bool = False
    exp: int


class AuthenticatedUser(BaseModel):
    """Authenticated user information."""

    username: str
    is_admin: bool = False


def create_access_token(username: str, is_admin: bool = False) -> str:
    """Sign a token for ``username`` with the configured secret and TTL."""
    settings = get_settings()
    expires_at = datetime.now(UTC) + timedelta(minutes=settings.auth.token_ttl_minutes)
    claims = {"sub": username, "is_admin": is_admin, "exp": expires_at}
    return jwt.encode(
        claims,
        settings.auth.secret_key.get_secret_value(),
        algorithm=settings.auth.algorithm,
    )


def verify_token(token: str) -> dict[str, Any]:
    """Decode and validate a token, raising UnauthorizedError on any failure."""
    settings = get_settings()

    try:
        payload = jwt.decode(
            token,
            settings.auth.secret_key.get_secret_value(),
            algorithms=[settings.auth.algorithm],
        )
        return TokenPayload.model_validate(payload).model_dump()
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError(INVALID_OR_EXPIRED_TOKEN_MSG) from None
    except JWTError as e:
        logger.warning(f"JWT verification failed: {e}")
        raise UnauthorizedError(INVALID_OR_EXPIRED_TOKEN_MSG) from e
    except ValueError as e:
        logger.warning(f"JWT payload rejected: {e}")
        raise UnauthorizedError(INVALID_OR_EXPIRED_TOKEN_MSG) from e


def _create_bypass_user() -> AuthenticatedUser:
    """Create mock user for local development."""
    return AuthenticatedUser(username="local-dev-user", is_admin=True)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_optional_security),
) -> AuthenticatedUser:
    """Extract and verify the bearer token, returning the AuthenticatedUser."""
    settings = get_settings()

    if settings.security.skip_jwt_validation:
        if settings.app.env != AppEnvironment.LOCAL:
            logger.error(
                "Refusing JWT bypass outside local environment",
                extra={"app_env": settings.app.env.value},
            )
            raise UnauthorizedError("JWT bypass is only allowed in local environment")
        logger.info("JWT validation bypassed - returning mock user")
        return _create_bypass_user()

    if credentials is None:
        raise UnauthorizedError("Missing authorization header")

    payload = verify_token(credentials.credentials)
    return AuthenticatedUser(username=payload["sub"], is_admin=payload["is_admin"])


def require_admin(user: AuthenticatedUser = Depends(get_current_user)) -> AuthenticatedUser:
    if not user.is_admin:
        logger.warning(f"Access denied - user {user.username} is not an admin")
        raise UnauthorizedError("Admin access required")
    return user


RequireAdmin = Annotated[AuthenticatedUser, Depends(require_admin)]

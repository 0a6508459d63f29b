"""
Authentication dependencies for FastAPI route protection.

This module provides dependency functions for:
- Extracting and verifying JWT tokens from the access_token cookie or a Bearer header
- Loading the current user from the database
- Rejecting banned accounts and non-admins
"""

from typing import Annotated

from fastapi import Cookie, Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from nexus.core.database import get_db
from nexus.core.errors import AuthorizationError, UnauthenticatedError
from nexus.core.logging import set_user_context
from nexus.core.security import verify_access_token
from nexus.models.user import Users
from nexus.services.authorization import ensure_admin

bearer_scheme = HTTPBearer(auto_error=False)


def _extract_token(
    access_token: str | None, credentials: HTTPAuthorizationCredentials | None
) -> str | None:
    """Cookie wins; the Authorization header is the fallback for non-browser clients."""
    if access_token:
        return access_token
    if credentials and credentials.scheme.lower() == "bearer":
        return credentials.credentials
    return None


async def get_current_user_id(
    access_token: Annotated[str | None, Cookie()] = None,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)] = None,
) -> int:
    """
    Extract and verify the JWT access token.

    Raises:
        UnauthenticatedError: if the token is missing, invalid, or expired
    """
    token = _extract_token(access_token, credentials)
    if not token:
        raise UnauthenticatedError()

    user_id = verify_access_token(token)
    if user_id is None:
        raise UnauthenticatedError("Could not validate credentials")

    return user_id


async def get_current_user(
    user_id: Annotated[int, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Users:
    """
    Load current user from database using verified token.

    Raises:
        UnauthenticatedError: if the user no longer exists
        AuthorizationError: if the account is banned
    """
    user = await db.get(Users, user_id)

    if user is None:
        raise UnauthenticatedError("User not found")

    if user.is_banned:
        raise AuthorizationError("Account is banned")

    set_user_context(user.id)  # type: ignore[arg-type]
    return user


async def get_optional_current_user(
    db: Annotated[AsyncSession, Depends(get_db)],
    access_token: Annotated[str | None, Cookie()] = None,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)] = None,
) -> Users | None:
    """
    Get current user if authenticated, otherwise return None.

    Invalid tokens and banned accounts are treated as anonymous.
    """
    token = _extract_token(access_token, credentials)
    if not token:
        return None

    user_id = verify_access_token(token)
    if user_id is None:
        return None

    user = await db.get(Users, user_id)
    return user if user and not user.is_banned else None


async def require_admin(
    current_user: Annotated[Users, Depends(get_current_user)],
) -> Users:
    """
    Require current user to be an admin.

    Raises:
        AuthorizationError: if user is not an admin
    """
    ensure_admin(current_user)
    return current_user


# Type aliases for cleaner route signatures
CurrentUser = Annotated[Users, Depends(get_current_user)]
OptionalCurrentUser = Annotated[Users | None, Depends(get_optional_current_user)]
AdminUser = Annotated[Users, Depends(require_admin)]

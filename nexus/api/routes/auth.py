"""
Authentication API endpoints.

This module provides endpoints for:
- Registration (logs the new user in)
- Login (JWT access token in an HTTPOnly cookie)
- Logout (clears the cookie)
- Current user lookup
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from nexus.config import settings
from nexus.core.auth import CurrentUser
from nexus.core.database import get_db
from nexus.core.errors import AuthorizationError, UnauthenticatedError
from nexus.core.logging import get_logger
from nexus.core.security import create_access_token, verify_password
from nexus.schemas.auth import LoginRequest, MessageResponse, TokenResponse, UserRegisterRequest
from nexus.schemas.user import UserResponse
from nexus.services import user_store

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _set_auth_cookie(response: Response, access_token: str) -> None:
    """Set the access token as an HTTPOnly cookie."""
    response.set_cookie(
        key="access_token",
        value=access_token,
        httponly=True,  # Prevent JavaScript access (XSS protection)
        secure=settings.ENVIRONMENT == "production",  # HTTPS only in production
        samesite="lax",
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,  # Match JWT expiration
    )


def _clear_auth_cookie(response: Response) -> None:
    # Match set_cookie params
    response.delete_cookie(
        key="access_token",
        path="/",
        httponly=True,
        secure=settings.ENVIRONMENT == "production",
        samesite="lax",
    )


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    body: UserRegisterRequest,
    response: Response,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserResponse:
    """
    Create an account and start a session for it.

    Returns 409 if the username is taken.
    """
    user = await user_store.create_user(db, body)
    assert user.id is not None
    _set_auth_cookie(response, create_access_token(user.id))
    return UserResponse.model_validate(user)


@router.post("/login", response_model=TokenResponse)
async def login(
    body: LoginRequest,
    response: Response,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    """
    Authenticate with username and password.

    The access token is returned in the body and set as an HTTPOnly cookie.
    Banned accounts are refused with 403.
    """
    user = await user_store.get_user_by_username(db, body.username)
    if user is None or not verify_password(body.password, user.password):
        logger.info("login_failed", username=body.username)
        raise UnauthenticatedError("Incorrect username or password")

    if user.is_banned:
        logger.info("login_refused_banned", login_user_id=user.id)
        raise AuthorizationError("Account is banned")

    assert user.id is not None
    access_token = create_access_token(user.id)
    _set_auth_cookie(response, access_token)

    logger.info("login_succeeded", login_user_id=user.id)
    return TokenResponse(
        access_token=access_token,
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        user=UserResponse.model_validate(user),
    )


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response) -> MessageResponse:
    """Clear the session cookie. Tokens are stateless, so nothing is revoked server-side."""
    _clear_auth_cookie(response)
    return MessageResponse(message="Logged out")


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: CurrentUser) -> UserResponse:
    return UserResponse.model_validate(current_user)

"""
Authentication schemas for request/response validation.

This module defines Pydantic models for authentication-related API operations:
- User registration
- Login credentials
- Token responses
"""

import re

from pydantic import Field, field_validator

from nexus.core.security import validate_password_strength
from nexus.schemas.base import ApiModel
from nexus.schemas.user import UserResponse

USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class UserRegisterRequest(ApiModel):
    """Request schema for user registration."""

    username: str = Field(..., min_length=3, max_length=30)
    password: str = Field(..., min_length=8, max_length=255)
    display_name: str | None = Field(default=None, max_length=100)

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        """Letters, digits, underscore, dot and hyphen only."""
        if not USERNAME_PATTERN.match(v):
            raise ValueError("Username may only contain letters, digits, '_', '.' and '-'")
        return v

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        """Validate password strength."""
        is_valid, error_message = validate_password_strength(v)
        if not is_valid:
            raise ValueError(error_message)
        return v


class LoginRequest(ApiModel):
    """Request schema for user login."""

    username: str = Field(..., min_length=3, max_length=30)
    password: str = Field(..., min_length=1, max_length=255)


class TokenResponse(ApiModel):
    """Response schema for successful authentication."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Access token expiration time in seconds from now")
    user: UserResponse


class MessageResponse(ApiModel):
    message: str

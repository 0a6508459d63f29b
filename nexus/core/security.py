"""
Password hashing and access tokens for Furrys Nexus accounts.

Passwords are stored as bcrypt hashes. A session is a signed JWT carrying the
user id; nothing about it is stored server-side, so logging out only drops the
cookie.
"""

import base64
import hashlib
import re
from datetime import UTC, datetime, timedelta

import bcrypt
import jwt

from nexus.config import settings

MIN_PASSWORD_LENGTH = 8
BCRYPT_MAX_BYTES = 72
TOKEN_TYPE = "access"


def validate_password_strength(password: str) -> tuple[bool, str | None]:
    """
    Registration rule: at least 8 characters with a letter and a digit.

    Returns:
        (True, None) or (False, message shown to the user)
    """
    if len(password) < MIN_PASSWORD_LENGTH:
        return False, f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
    if re.search(r"[A-Za-z]", password) is None:
        return False, "Password must contain at least one letter"
    if re.search(r"\d", password) is None:
        return False, "Password must contain at least one digit"
    return True, None


def _bcrypt_input(password: str) -> bytes:
    # bcrypt ignores everything past 72 bytes; longer passwords are digested first
    raw = password.encode("utf-8")
    if len(raw) <= BCRYPT_MAX_BYTES:
        return raw
    return base64.b64encode(hashlib.sha256(raw).digest())


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(_bcrypt_input(password), bcrypt.gensalt(rounds=12)).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """False for a wrong password and for a stored value that is not a bcrypt hash."""
    try:
        return bcrypt.checkpw(_bcrypt_input(plain_password), hashed_password.encode("utf-8"))
    except ValueError:
        return False


def create_access_token(user_id: int, expires_delta: timedelta | None = None) -> str:
    """
    Sign a session token for `user_id`.

    Lifetime defaults to ACCESS_TOKEN_EXPIRE_MINUTES, the same as the cookie's
    max-age. A negative `expires_delta` yields an already-expired token.
    """
    lifetime = expires_delta if expires_delta is not None else timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    claims = {
        "sub": str(user_id),
        "exp": datetime.now(UTC) + lifetime,
        "type": TOKEN_TYPE,
    }
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def verify_access_token(token: str) -> int | None:
    """
    User id from a session token, or None if it is expired, forged or malformed.
    """
    try:
        claims = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except jwt.InvalidTokenError:
        return None

    if claims.get("type") != TOKEN_TYPE:
        return None
    try:
        return int(claims["sub"])
    except (KeyError, TypeError, ValueError):
        return None

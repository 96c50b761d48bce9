"""
Authentication service for FastAPI.

Tokens are HS256 JWTs carrying a `userId` claim. A token may arrive as
`Authorization: Bearer <token>` or as a `?token=` query parameter (used by
download links opened directly in the browser).
"""

from datetime import datetime, timedelta
from typing import Optional

from fastapi import Depends, Query
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError

from core.config import settings
from core.exceptions import AuthenticationError, InvalidTokenError
from core.logging import get_logger

logger = get_logger(__name__)

# === Security schemes ===
security_optional = HTTPBearer(auto_error=False)

# Set from main.py
_db = None


def set_database(db):
    """Inject the database client used for user lookups."""
    global _db
    _db = db


def create_access_token(user_id: str, expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed JWT for user_id."""
    if expires_delta is None:
        expires_delta = timedelta(days=settings.jwt_expiration_days)

    to_encode = {
        "userId": user_id,
        "exp": datetime.utcnow() + expires_delta,
    }
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> str:
    """
    Verify a token and return its userId.

    Raises:
        InvalidTokenError: bad signature, expired, or no userId claim
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        logger.warning(f"JWT verification failed: {e}")
        raise InvalidTokenError()

    user_id = payload.get("userId")
    if not user_id:
        raise InvalidTokenError()
    return str(user_id)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_optional),
    token: Optional[str] = Query(default=None),
) -> dict:
    """
    Require an authenticated user.

    Usage:
        @router.post("/something")
        async def something(user: dict = Depends(get_current_user)):
            print(f"User: {user['email']}")

    Raises:
        AuthenticationError 401 if no token was sent
        InvalidTokenError 403 if the token is invalid or the user is gone
    """
    raw_token = credentials.credentials if credentials else token
    if not raw_token:
        raise AuthenticationError()

    user_id = decode_access_token(raw_token)

    if _db is None:
        logger.error("Auth database not configured")
        raise InvalidTokenError()

    user = await _db.get_user_by_id(user_id)
    if not user:
        logger.warning(f"Token for unknown user {user_id}")
        raise InvalidTokenError()

    return {"id": str(user["id"]), "email": user.get("email")}

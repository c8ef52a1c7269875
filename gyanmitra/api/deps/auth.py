"""
Bearer token authentication.

A valid token yields the caller's user record; anything else (missing
header, bad signature, expiry, malformed subject, unknown user) is the
same AuthError so that clients cannot tell the reasons apart.

Dependencies: fastapi, python-jose, gyanmitra.boundary.db
System role: Request authentication
"""

import logging
from datetime import datetime, timedelta, timezone
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from gyanmitra.boundary.db import get_async_db
from gyanmitra.boundary.db.CRUD.user_crud import user_crud
from gyanmitra.boundary.db.models.user_model import UserModel
from gyanmitra.configs import Settings, get_settings
from gyanmitra.configs.auth import AuthSettings
from gyanmitra.core.exceptions import AuthError

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(
    user_id: UUID | str,
    settings: AuthSettings | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Mint a signed access token (development and tests).

    Args:
        user_id: Subject of the token
        settings: Auth settings, defaults to the application settings
        expires_delta: Lifetime, defaults to access_token_expire_minutes

    Returns:
        str: Encoded JWT
    """
    settings = settings or get_settings().auth
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode = {"exp": expire, "sub": str(user_id)}
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str, settings: AuthSettings) -> UUID:
    """
    Verify a token and return its subject.

    Raises:
        AuthError: On any verification failure
    """
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError as e:
        raise AuthError(f"invalid token: {type(e).__name__}") from e

    try:
        return UUID(str(payload.get("sub")))
    except ValueError as e:
        raise AuthError("malformed subject") from e


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_async_db),
    settings: Settings = Depends(get_settings),
) -> UserModel:
    """
    FastAPI dependency resolving the authenticated user.

    Raises:
        AuthError: If no user identity can be resolved
    """
    if credentials is None or not credentials.credentials:
        raise AuthError("missing bearer token")

    user_id = decode_access_token(credentials.credentials, settings.auth)
    user = await user_crud.get_by_id(db, user_id)
    if user is None:
        raise AuthError("unknown user")
    return user

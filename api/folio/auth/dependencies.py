"""Authentication dependencies for FastAPI endpoints."""

from uuid import UUID

from fastapi import Cookie, Depends, Header, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from folio.auth.jwt import decode_token
from folio.database import get_db
from folio.errors import api_error
from folio.models.user import User


def _unauthorized(message: str) -> HTTPException:
    return api_error(status.HTTP_401_UNAUTHORIZED, "UNAUTHORIZED", message)


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    return token.strip()


async def get_optional_user(
    authorization: str | None = Header(default=None),
    access_token: str | None = Cookie(default=None),
    db: AsyncSession = Depends(get_db),
) -> User | None:
    """
    Resolve the signed-in user from a Bearer header or the access cookie.

    Returns None when no valid session is present.
    """
    token = _bearer_token(authorization) or access_token
    if not token:
        return None

    payload = decode_token(token, expected_type="access")
    if not payload:
        return None

    try:
        user_id = UUID(payload.get("sub", ""))
    except ValueError:
        return None

    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_current_user(
    user: User | None = Depends(get_optional_user),
) -> User:
    """
    Require a signed-in user.

    Raises:
        HTTPException: 401 if the token is missing, invalid or expired
    """
    if user is None:
        raise _unauthorized("Authentication required")
    return user

"""JWT token creation and validation for dashboard sessions."""

from datetime import datetime, timedelta, timezone

from jose import jwt

from folio.config import settings

ALGORITHM = "HS256"


def _create_token(user_id: str, token_type: str, lifetime: timedelta) -> str:
    payload = {
        "sub": user_id,
        "exp": datetime.now(timezone.utc) + lifetime,
        "type": token_type,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=ALGORITHM)


def create_access_token(user_id: str) -> str:
    """Create a short-lived access token."""
    return _create_token(user_id, "access", timedelta(minutes=settings.access_token_expire_minutes))


def create_refresh_token(user_id: str) -> str:
    """Create a long-lived refresh token."""
    return _create_token(user_id, "refresh", timedelta(days=settings.refresh_token_expire_days))


def create_tokens(user_id: str) -> dict[str, str]:
    """Create both access and refresh tokens."""
    return {
        "access_token": create_access_token(user_id),
        "refresh_token": create_refresh_token(user_id),
    }


def decode_token(token: str, expected_type: str | None = None) -> dict | None:
    """
    Decode and validate a JWT token.

    Returns the payload if valid (and of ``expected_type`` when given), None
    if invalid, expired or of the wrong type.
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[ALGORITHM])
    except jwt.JWTError:
        return None
    if expected_type is not None and payload.get("type") != expected_type:
        return None
    return payload

"""Authentication router: registration, sign-in, sign-out and session refresh."""

import logging
from datetime import datetime, timezone
from uuid import UUID

from fastapi import APIRouter, Cookie, Depends, HTTPException, Request, Response, status
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from folio.auth.dependencies import get_current_user, get_optional_user
from folio.auth.jwt import create_tokens, decode_token
from folio.auth.password import hash_password, verify_password
from folio.auth.session_events import SessionEvent, SessionEvents
from folio.config import settings
from folio.database import get_db
from folio.dependencies import get_session_events
from folio.errors import api_error
from folio.middleware.rate_limit import limiter
from folio.models.user import User
from folio.schemas.auth import LoginRequest, RegisterRequest, SessionResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/auth", tags=["Auth"])

REFRESH_COOKIE_PATH = "/api/v1/auth/refresh"


def _unauthorized(message: str) -> HTTPException:
    return api_error(status.HTTP_401_UNAUTHORIZED, "UNAUTHORIZED", message)


def _session(user: User) -> SessionResponse:
    return SessionResponse(user_id=str(user.id), email=user.email, full_name=user.full_name)


def _parse_subject(payload: dict) -> UUID:
    try:
        return UUID(payload.get("sub", ""))
    except ValueError:
        raise _unauthorized("Invalid or expired refresh token")


def _set_session_cookies(response: Response, user: User) -> None:
    tokens = create_tokens(str(user.id))

    # Access token - short TTL matching token expiry
    response.set_cookie(
        key="access_token",
        value=tokens["access_token"],
        httponly=True,
        secure=settings.cookie_secure,
        samesite="strict",
        max_age=settings.access_token_expire_minutes * 60,
    )

    # Refresh token - only sent to the refresh endpoint
    response.set_cookie(
        key="refresh_token",
        value=tokens["refresh_token"],
        httponly=True,
        secure=settings.cookie_secure,
        samesite="strict",
        path=REFRESH_COOKIE_PATH,
        max_age=settings.refresh_token_expire_days * 24 * 60 * 60,
    )


@router.post(
    "/register",
    response_model=SessionResponse,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit(settings.register_rate_limit)
async def register(
    request: Request,
    data: RegisterRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
    events: SessionEvents = Depends(get_session_events),
) -> SessionResponse:
    """Create an account and sign it in."""
    email = data.email.lower()
    existing = await db.execute(select(User).where(func.lower(User.email) == email))
    if existing.scalar_one_or_none():
        raise api_error(status.HTTP_409_CONFLICT, "CONFLICT", "Email already registered")

    user = User(
        email=email,
        password_hash=hash_password(data.password),
        full_name=data.full_name,
        last_sign_in_at=datetime.now(timezone.utc),
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise api_error(status.HTTP_409_CONFLICT, "CONFLICT", "Email already registered")
    await db.refresh(user)

    logger.info("Registered user %s", user.id)
    _set_session_cookies(response, user)
    events.publish(SessionEvent.SIGNED_IN, user.id)
    return _session(user)


@router.post(
    "/login",
    response_model=SessionResponse,
    status_code=status.HTTP_200_OK,
)
@limiter.limit(settings.login_rate_limit)
async def login(
    request: Request,
    data: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
    events: SessionEvents = Depends(get_session_events),
) -> SessionResponse:
    """Authenticate with email and password and set JWT tokens as HttpOnly cookies."""
    result = await db.execute(select(User).where(func.lower(User.email) == data.email.lower()))
    user = result.scalar_one_or_none()

    if not user or not user.password_hash or not verify_password(data.password, user.password_hash):
        raise _unauthorized("Invalid email or password")

    user.last_sign_in_at = datetime.now(timezone.utc)
    await db.commit()
    await db.refresh(user)

    _set_session_cookies(response, user)
    events.publish(SessionEvent.SIGNED_IN, user.id)
    return _session(user)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    response: Response,
    user: User | None = Depends(get_optional_user),
    events: SessionEvents = Depends(get_session_events),
) -> None:
    """
    End the session.

    Always succeeds; subscribers drop any state cached for earlier sessions.
    """
    response.delete_cookie("access_token")
    response.delete_cookie("refresh_token", path=REFRESH_COOKIE_PATH)
    events.publish(SessionEvent.SIGNED_OUT, user.id if user else None)


@router.post(
    "/refresh",
    response_model=SessionResponse,
    status_code=status.HTTP_200_OK,
)
async def refresh(
    response: Response,
    db: AsyncSession = Depends(get_db),
    events: SessionEvents = Depends(get_session_events),
    refresh_token: str | None = Cookie(default=None),
) -> SessionResponse:
    """Issue new access and refresh cookies from the refresh cookie."""
    if not refresh_token:
        raise _unauthorized("Refresh token not provided")

    payload = decode_token(refresh_token, expected_type="refresh")
    if not payload:
        raise _unauthorized("Invalid or expired refresh token")

    user = await db.get(User, _parse_subject(payload))
    if not user:
        raise _unauthorized("User not found")

    _set_session_cookies(response, user)
    events.publish(SessionEvent.TOKEN_REFRESHED, user.id)
    return _session(user)


@router.get("/session", response_model=SessionResponse)
async def get_session(user: User = Depends(get_current_user)) -> SessionResponse:
    """Return the signed-in identity."""
    return _session(user)
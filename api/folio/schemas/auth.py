"""Authentication schemas for request/response validation."""

from pydantic import BaseModel, EmailStr, field_validator


class RegisterRequest(BaseModel):
    """User registration request schema."""

    email: EmailStr
    password: str
    full_name: str | None = None

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        """Validate password length."""
        if len(v) < 6:
            raise ValueError("Password must be at least 6 characters")
        return v


class LoginRequest(BaseModel):
    """User login request schema."""

    email: EmailStr
    password: str


class SessionResponse(BaseModel):
    """
    The signed-in identity.

    Returned by register, login, refresh and the session lookup. Tokens are
    set as HttpOnly cookies, never returned in the body.
    """

    user_id: str
    email: str
    full_name: str | None

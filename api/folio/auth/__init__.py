"""Authentication utilities for the portfolio builder API."""

from folio.auth.jwt import create_access_token, create_refresh_token, create_tokens, decode_token
from folio.auth.password import hash_password, verify_password
from folio.auth.session_events import SessionEvent, SessionEvents

__all__ = [
    "hash_password",
    "verify_password",
    "create_access_token",
    "create_refresh_token",
    "create_tokens",
    "decode_token",
    "SessionEvent",
    "SessionEvents",
]

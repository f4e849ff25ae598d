"""Rate limiting for the identity endpoints using slowapi."""

from slowapi import Limiter
from slowapi.util import get_remote_address

# Keyed by client address; only register and login are limited.
limiter = Limiter(key_func=get_remote_address)


def reset_limiter() -> None:
    """Clear recorded hits. Used between tests."""
    limiter.reset()

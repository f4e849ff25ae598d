"""Username format validation and availability checks."""

import asyncio
import enum
import logging
import re
from collections.abc import Hashable
from dataclasses import dataclass
from uuid import UUID

from folio.services.record_store import RecordStoreError, SqlRecordStore

logger = logging.getLogger(__name__)

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 30
USERNAME_CHARS = re.compile(r"^[A-Za-z0-9_-]+$")


class UsernameStatus(str, enum.Enum):
    AVAILABLE = "available"
    TAKEN = "taken"
    INVALID_FORMAT = "invalid_format"
    CHECK_FAILED = "check_failed"


@dataclass(frozen=True)
class UsernameCheck:
    """Outcome of an availability check."""

    username: str
    status: UsernameStatus
    message: str | None = None

    @property
    def available(self) -> bool:
        return self.status is UsernameStatus.AVAILABLE


def validate_username_format(username: str | None) -> str | None:
    """Return a user-facing error for a malformed username, or None."""
    if not username:
        return "Username is required"
    if len(username) < USERNAME_MIN_LENGTH:
        return f"Username must be at least {USERNAME_MIN_LENGTH} characters"
    if len(username) > USERNAME_MAX_LENGTH:
        return f"Username must be at most {USERNAME_MAX_LENGTH} characters"
    if not USERNAME_CHARS.match(username):
        return "Username can only contain letters, numbers, hyphens, and underscores"
    return None


class Debouncer:
    """
    Trailing-edge debounce keyed per caller.

    ``settle(key)`` sleeps for the delay and reports whether this call is
    still the latest for ``key``. Earlier calls inside the quiet window
    return False and should be dropped.
    """

    def __init__(self, delay: float):
        self.delay = delay
        self._latest: dict[Hashable, int] = {}
        self._counter = 0

    async def settle(self, key: Hashable) -> bool:
        self._counter += 1
        token = self._counter
        self._latest[key] = token
        if self.delay > 0:
            await asyncio.sleep(self.delay)
        if self._latest.get(key) != token:
            return False
        del self._latest[key]
        return True


class UsernameChecker:
    """Checks whether a username is free for a given user."""

    def __init__(self, store: SqlRecordStore, debouncer: Debouncer | None = None):
        self.store = store
        self.debouncer = debouncer

    async def check(self, username: str, user_id: UUID) -> UsernameCheck:
        """
        Check format, then look for another profile holding the name.

        The caller's own profile is excluded, so keeping one's current
        username is always available. Matching is case-sensitive.
        """
        error = validate_username_format(username)
        if error:
            return UsernameCheck(username, UsernameStatus.INVALID_FORMAT, error)

        try:
            rows = await self.store.select(
                "profiles",
                {"username": username},
                exclude={"id": user_id},
                limit=1,
            )
        except RecordStoreError as exc:
            logger.warning("Username availability check failed for %r: %s", username, exc)
            return UsernameCheck(username, UsernameStatus.CHECK_FAILED, "Error checking username availability")

        if rows:
            return UsernameCheck(username, UsernameStatus.TAKEN, "This username is already taken")
        return UsernameCheck(username, UsernameStatus.AVAILABLE)

    async def check_debounced(self, username: str, user_id: UUID) -> UsernameCheck | None:
        """
        Like ``check``, but only the latest call per user within the debounce
        window reaches the store. Superseded calls return None.
        """
        error = validate_username_format(username)
        if error:
            return UsernameCheck(username, UsernameStatus.INVALID_FORMAT, error)
        if self.debouncer is not None and not await self.debouncer.settle(str(user_id)):
            return None
        return await self.check(username, user_id)

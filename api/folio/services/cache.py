"""Process-wide query cache shared by the loaders and the mutation coordinator.

Entries expire after a TTL and can be invalidated by key, by owner or all at
once. ``fetch`` coalesces concurrent loads of the same key into one call of
the loader. All access happens on the event loop, so no locking is needed.
Expired and stale entries are swept out at most once per ``sweep_interval``.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Hashable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

SWEEP_INTERVAL_SECONDS = 1.0


@dataclass
class CacheEntry:
    value: Any
    expires_at: float
    owner: Hashable | None = None
    stale: bool = False


@dataclass
class InFlightLoad:
    generation: int
    task: asyncio.Task
    # None until the load knows whose data it is reading.
    owner: Hashable | None = None
    tracks_owner: bool = False


class QueryCache:
    """Keyed TTL cache with invalidation and in-flight load coalescing."""

    def __init__(
        self,
        default_ttl: float,
        clock: Callable[[], float] = time.monotonic,
        sweep_interval: float = SWEEP_INTERVAL_SECONDS,
    ):
        self.default_ttl = default_ttl
        self._clock = clock
        self._sweep_interval = sweep_interval
        self._next_sweep = clock()
        self._entries: dict[Hashable, CacheEntry] = {}
        self._inflight: dict[Hashable, InFlightLoad] = {}
        # Unfinished loads per key, including ones detached by an invalidation.
        self._running: dict[Hashable, int] = {}
        # Bumped on every invalidation so a load started earlier cannot
        # overwrite what came after it. Only kept while the key has an entry
        # or a running load.
        self._generations: dict[Hashable, int] = {}
        self._epoch = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        return self.get(key) is not None

    def _generation(self, key: Hashable) -> tuple[int, int]:
        return self._epoch, self._generations.get(key, 0)

    def _bump(self, key: Hashable) -> None:
        self._inflight.pop(key, None)
        if key in self._entries or key in self._running:
            self._generations[key] = self._generations.get(key, 0) + 1

    def _drop(self, key: Hashable) -> None:
        self._entries.pop(key, None)
        if key not in self._running:
            self._generations.pop(key, None)

    def _is_fresh(self, entry: CacheEntry, now: float) -> bool:
        return not entry.stale and entry.expires_at > now

    def sweep(self) -> int:
        """Remove expired and stale entries. Returns how many were removed."""
        now = self._clock()
        self._next_sweep = now + self._sweep_interval
        doomed = [key for key, entry in self._entries.items() if not self._is_fresh(entry, now)]
        for key in doomed:
            self._drop(key)
        return len(doomed)

    def _maybe_sweep(self) -> None:
        if self._clock() >= self._next_sweep:
            self.sweep()

    def get(self, key: Hashable) -> Any | None:
        """Return the cached value if present and fresh, else None."""
        entry = self._entries.get(key)
        if entry is None or not self._is_fresh(entry, self._clock()):
            return None
        return entry.value

    def peek(self, key: Hashable) -> Any | None:
        """Return the cached value even if stale or expired, until it is swept."""
        entry = self._entries.get(key)
        return entry.value if entry is not None else None

    def set(self, key: Hashable, value: Any, ttl: float | None = None, *, owner: Hashable | None = None) -> None:
        self._maybe_sweep()
        ttl = self.default_ttl if ttl is None else ttl
        self._entries[key] = CacheEntry(value=value, expires_at=self._clock() + ttl, owner=owner)

    def patch(self, key: Hashable, update: Callable[[Any], Any]) -> bool:
        """Replace a cached value in place, keeping its expiry. Returns False on a miss."""
        entry = self._entries.get(key)
        if entry is None:
            return False
        entry.value = update(entry.value)
        # A write landed after any in-flight read began; that read is now older.
        self._bump(key)
        return True

    def invalidate(self, key: Hashable) -> bool:
        """Mark ``key`` stale so the next read refetches. Returns True if it was cached."""
        self._bump(key)
        entry = self._entries.get(key)
        if entry is None:
            return False
        entry.stale = True
        return True

    def tag(self, key: Hashable, owner: Hashable) -> None:
        """Record the owner of the load running for ``key``."""
        inflight = self._inflight.get(key)
        if inflight is not None:
            inflight.owner = owner
            inflight.tracks_owner = True

    def invalidate_owner(self, owner: Hashable) -> int:
        """
        Invalidate every entry tagged with ``owner``.

        Loads running for ``owner``, and owner-tracking loads that have not
        learned their owner yet, are detached so they can not cache data
        read before the write.
        """
        keys = [key for key, entry in self._entries.items() if entry.owner == owner]
        loads = [
            key for key, load in self._inflight.items()
            if load.tracks_owner and load.owner in (owner, None)
        ]
        for key in loads:
            self._bump(key)
        for key in keys:
            self.invalidate(key)
        return len(keys)

    def clear(self) -> None:
        """Drop every entry and detach all in-flight loads."""
        self._entries.clear()
        self._inflight.clear()
        self._generations.clear()
        self._epoch += 1
        self._next_sweep = self._clock() + self._sweep_interval
        logger.info("Query cache cleared")

    async def fetch(
        self,
        key: Hashable,
        loader: Callable[[], Awaitable[Any]],
        *,
        ttl: float | None = None,
        owner: Hashable | None = None,
        owner_of: Callable[[Any], Hashable | None] | None = None,
    ) -> Any:
        """
        Return the fresh cached value for ``key`` or load it.

        Concurrent callers for the same key await the same load. The load is
        shielded, so a caller going away does not cancel it for the others.
        ``owner_of`` derives the owner tag from the loaded value; a loader can
        also report it earlier through ``tag``.
        """
        cached = self.get(key)
        if cached is not None:
            return cached
        self._maybe_sweep()

        generation = self._generation(key)
        inflight = self._inflight.get(key)
        if inflight is not None and inflight.generation == generation[1]:
            return await asyncio.shield(inflight.task)

        async def _load() -> Any:
            value = await loader()
            if self._generation(key) == generation and value is not None:
                tag = owner_of(value) if owner_of is not None else owner
                self.set(key, value, ttl, owner=tag)
            return value

        task = asyncio.ensure_future(_load())
        self._inflight[key] = InFlightLoad(
            generation[1], task, owner, tracks_owner=owner is not None or owner_of is not None
        )
        self._running[key] = self._running.get(key, 0) + 1
        task.add_done_callback(lambda done: self._forget(key, done))
        return await asyncio.shield(task)

    def _forget(self, key: Hashable, task: asyncio.Task) -> None:
        inflight = self._inflight.get(key)
        if inflight is not None and inflight.task is task:
            del self._inflight[key]
        remaining = self._running.get(key, 1) - 1
        if remaining:
            self._running[key] = remaining
        else:
            self._running.pop(key, None)
            if key not in self._entries:
                self._generations.pop(key, None)
        if not task.cancelled() and task.exception() is not None:
            logger.warning("Cache load for %r failed: %s", key, task.exception())

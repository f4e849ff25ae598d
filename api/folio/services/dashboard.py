"""Aggregated dashboard loader.

One logical load gathers a user's projects, education, experience, blogs and
profile. The five queries run concurrently and settle independently; the
merged snapshot is cached per user and shared by every dashboard endpoint.
"""

import logging
from collections.abc import Sequence
from typing import Any
from uuid import UUID

from folio.schemas.dashboard import (
    BlogRecord,
    DashboardAggregate,
    EducationRecord,
    ExperienceRecord,
    ProfileRecord,
    ProjectRecord,
)
from folio.services.cache import QueryCache
from folio.services.record_store import SqlRecordStore
from folio.services.results import Err, Result, settle, unwrap_or

logger = logging.getLogger(__name__)

AGGREGATE_FIELDS = ("projects", "education", "experience", "blogs", "profile")


def dashboard_key(user_id: UUID | str) -> tuple[str, str]:
    """Cache key for a user's dashboard aggregate."""
    return ("dashboard-data", str(user_id))


def merge_aggregate(
    results: Sequence[Result[Any, BaseException]],
    *,
    context: str = "dashboard",
) -> DashboardAggregate:
    """
    Merge settled sub-query results into an aggregate.

    ``results`` holds, in order, the projects, education, experience, blogs
    and profile outcomes. Every Err degrades its own field to ``[]`` (or
    ``None`` for the profile) and is logged; it never affects the others.
    """
    if len(results) != len(AGGREGATE_FIELDS):
        raise ValueError(f"Expected {len(AGGREGATE_FIELDS)} results, got {len(results)}")

    for field, result in zip(AGGREGATE_FIELDS, results):
        if isinstance(result, Err):
            logger.warning("%s: %s query failed, using empty default: %s", context, field, result.reason)

    projects, education, experience, blogs, profile = results
    return DashboardAggregate(
        projects=unwrap_or(projects, []),
        education=unwrap_or(education, []),
        experience=unwrap_or(experience, []),
        blogs=unwrap_or(blogs, []),
        profile=unwrap_or(profile, None),
    )


class DashboardLoader:
    """Loads and caches the dashboard aggregate for authenticated users."""

    def __init__(self, store: SqlRecordStore, cache: QueryCache, ttl: float | None = None):
        self.store = store
        self.cache = cache
        self.ttl = ttl

    async def load(self, user_id: UUID | None) -> DashboardAggregate | None:
        """
        Return the user's aggregate, from cache when fresh.

        Without a user the loader is disabled and returns None.
        """
        if user_id is None:
            return None
        return await self.cache.fetch(
            dashboard_key(user_id),
            lambda: self._fetch(user_id),
            ttl=self.ttl,
        )

    async def refresh(self, user_id: UUID | None) -> DashboardAggregate | None:
        """Drop the cached aggregate and load it again."""
        if user_id is None:
            return None
        self.cache.invalidate(dashboard_key(user_id))
        return await self.load(user_id)

    async def _collection(self, table: str, record_type, user_id: UUID, order: str) -> list:
        rows = await self.store.select(table, {"user_id": user_id}, order=[order])
        return [record_type.model_validate(row) for row in rows]

    async def _profile(self, user_id: UUID) -> ProfileRecord | None:
        row = await self.store.select_one("profiles", {"id": user_id})
        return ProfileRecord.model_validate(row) if row is not None else None

    async def _fetch(self, user_id: UUID) -> DashboardAggregate:
        results = await settle(
            self._collection("projects", ProjectRecord, user_id, "-created_at"),
            self._collection("education", EducationRecord, user_id, "-start_date"),
            self._collection("experience", ExperienceRecord, user_id, "-start_date"),
            self._collection("blogs", BlogRecord, user_id, "-created_at"),
            self._profile(user_id),
        )
        return merge_aggregate(results, context=f"dashboard user={user_id}")

"""Tests for the aggregated dashboard loader and ``merge_aggregate``."""

import logging
import uuid

import pytest

from folio.schemas.dashboard import ProfileRecord, ProjectRecord
from folio.services.dashboard import DashboardLoader, dashboard_key, merge_aggregate
from folio.services.record_store import RecordStoreError
from folio.services.results import Err, Ok, settle
from factories import (
    FakeClock,
    InMemoryRecordStore,
    blog_row,
    education_row,
    experience_row,
    profile_row,
    project_row,
)


def _project(user_id, title="Demo") -> ProjectRecord:
    return ProjectRecord(id=uuid.uuid4(), user_id=user_id, title=title)


class TestMergeAggregate:
    """The merge is independent of any store."""

    def test_all_ok_fills_every_field(self, user_id):
        profile = ProfileRecord(id=user_id, full_name="Ada")
        project = _project(user_id)
        aggregate = merge_aggregate([Ok([project]), Ok([]), Ok([]), Ok([]), Ok(profile)])
        assert aggregate.projects == [project]
        assert aggregate.profile == profile

    def test_failed_field_degrades_alone(self, user_id, caplog):
        project = _project(user_id)
        with caplog.at_level(logging.WARNING):
            aggregate = merge_aggregate(
                [Ok([project]), Ok([]), Ok([]), Err(RecordStoreError("timeout")), Ok(None)]
            )
        assert aggregate.blogs == []
        assert aggregate.projects == [project]
        assert "blogs query failed" in caplog.text

    def test_failed_profile_becomes_none(self, user_id):
        aggregate = merge_aggregate([Ok([]), Ok([]), Ok([]), Ok([]), Err(RuntimeError("down"))])
        assert aggregate.profile is None

    def test_wrong_number_of_results_is_rejected(self):
        with pytest.raises(ValueError):
            merge_aggregate([Ok([])])


class TestSettle:
    async def test_settle_keeps_order_and_captures_errors(self):
        async def value():
            return 1

        async def boom():
            raise RecordStoreError("nope")

        first, second = await settle(value(), boom())
        assert first == Ok(1)
        assert isinstance(second, Err)
        assert isinstance(second.reason, RecordStoreError)


class TestDashboardLoader:
    """Loading, caching and partial failure."""

    async def test_no_user_returns_none_without_store_calls(self, loader: DashboardLoader, store):
        assert await loader.load(None) is None
        assert store.reads() == 0

    async def test_load_gathers_all_collections(self, loader, store, user_id):
        store.seed("profiles", **profile_row(user_id))
        store.seed("projects", **project_row(user_id))
        store.seed("education", **education_row(user_id))
        store.seed("experience", **experience_row(user_id))
        store.seed("blogs", **blog_row(user_id))

        aggregate = await loader.load(user_id)

        assert len(aggregate.projects) == 1
        assert len(aggregate.education) == 1
        assert len(aggregate.experience) == 1
        assert len(aggregate.blogs) == 1
        assert aggregate.profile.full_name == "Ada Lovelace"

    async def test_second_load_within_ttl_hits_no_store(self, loader, store, user_id):
        store.seed("projects", **project_row(user_id))
        first = await loader.load(user_id)
        reads = store.reads()

        second = await loader.load(user_id)

        assert store.reads() == reads
        assert second == first

    async def test_load_after_ttl_refetches(self, loader, store, clock: FakeClock, user_id):
        await loader.load(user_id)
        reads = store.reads()
        clock.advance(30 * 60 + 1)

        await loader.load(user_id)

        assert store.reads() == reads * 2

    async def test_failing_blogs_query_degrades_only_blogs(self, loader, store: InMemoryRecordStore, user_id):
        store.seed("profiles", **profile_row(user_id))
        store.seed("projects", **project_row(user_id))
        store.seed("blogs", **blog_row(user_id))
        store.fail("blogs")

        aggregate = await loader.load(user_id)

        assert aggregate.blogs == []
        assert len(aggregate.projects) == 1
        assert aggregate.profile is not None

    async def test_projects_are_newest_first(self, loader, store, user_id):
        store.seed("projects", **project_row(user_id, title="Old"))
        store.seed("projects", **project_row(user_id, title="New"))

        aggregate = await loader.load(user_id)

        assert [project.title for project in aggregate.projects] == ["New", "Old"]

    async def test_aggregates_are_per_user(self, loader, store, user_id):
        other = uuid.uuid4()
        store.seed("projects", **project_row(user_id, title="Mine"))
        store.seed("projects", **project_row(other, title="Theirs"))

        mine = await loader.load(user_id)
        theirs = await loader.load(other)

        assert [project.title for project in mine.projects] == ["Mine"]
        assert [project.title for project in theirs.projects] == ["Theirs"]

    async def test_refresh_bypasses_fresh_cache(self, loader, store, cache, user_id):
        await loader.load(user_id)
        store.seed("projects", **project_row(user_id, title="Added elsewhere"))

        assert (await loader.load(user_id)).projects == []
        refreshed = await loader.refresh(user_id)

        assert [project.title for project in refreshed.projects] == ["Added elsewhere"]
        assert cache.get(dashboard_key(user_id)) == refreshed

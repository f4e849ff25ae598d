"""Mutation and cache-invalidation coordinator.

Every write to a user's records goes through an ``EntityMutations``
instance. It validates input before touching the store, injects the owning
user id from the authenticated session, scopes updates and deletes to rows
the user owns, and invalidates the user's cached aggregates on success.
Store failures come back as ``Err`` values and leave the cache untouched.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Generic, Literal, TypeVar
from uuid import UUID

from pydantic import BaseModel

from folio.schemas.dashboard import (
    BlogRecord,
    EducationRecord,
    ExperienceRecord,
    ProfileRecord,
    ProjectRecord,
)
from folio.services.cache import QueryCache
from folio.services.dashboard import dashboard_key
from folio.services.record_store import RecordStoreError, SqlRecordStore, is_duplicate_key
from folio.services.results import Err, Ok, Result
from folio.services.username import UsernameChecker, UsernameStatus, validate_username_format
from folio.services import validation

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)

FailureKind = Literal["validation", "not_found", "conflict", "unauthenticated", "store"]

# Never accepted from callers; the owner comes from the session.
PROTECTED_FIELDS = frozenset({"id", "user_id", "created_at", "updated_at"})


@dataclass(frozen=True)
class MutationFailure:
    """Why a mutation did not happen."""

    kind: FailureKind
    message: str


Validator = Callable[[dict[str, Any]], str | None]
Normalizer = Callable[[dict[str, Any], dict[str, Any] | None], dict[str, Any]]


def _identity(fields: dict[str, Any], existing: dict[str, Any] | None = None) -> dict[str, Any]:
    return dict(fields)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class EntityMutations(Generic[RecordT]):
    """Create, update and delete for one owned table."""

    def __init__(
        self,
        store: SqlRecordStore,
        cache: QueryCache,
        *,
        table: str,
        record_type: type[RecordT],
        label: str,
        validate: Validator,
        normalize: Normalizer = _identity,
        owner_field: str = "user_id",
        touch_updated_at: bool = True,
    ):
        self.store = store
        self.cache = cache
        self.table = table
        self.record_type = record_type
        self.label = label
        self.validate = validate
        self.normalize = normalize
        self.owner_field = owner_field
        self.touch_updated_at = touch_updated_at

    # --- helpers ---

    def _owned(self, user_id: UUID, record_id: UUID) -> dict[str, Any]:
        return {"id": record_id, self.owner_field: user_id}

    @staticmethod
    def _strip(fields: dict[str, Any]) -> dict[str, Any]:
        return {key: value for key, value in fields.items() if key not in PROTECTED_FIELDS}

    def _invalidate(self, user_id: UUID) -> None:
        self.cache.invalidate(dashboard_key(user_id))
        # Public portfolio entries are tagged with the owning user id.
        self.cache.invalidate_owner(str(user_id))

    def _store_failure(self, action: str, exc: RecordStoreError) -> Err[MutationFailure]:
        logger.warning("Error %s %s: %s", action, self.label, exc)
        return Err(MutationFailure("store", exc.message or f"Error {action} {self.label}"))

    @staticmethod
    def _unauthenticated() -> Err[MutationFailure]:
        return Err(MutationFailure("unauthenticated", "Not authenticated"))

    def _not_found(self) -> Err[MutationFailure]:
        return Err(MutationFailure("not_found", f"{self.label.capitalize()} not found"))

    # --- operations ---

    async def create(self, user_id: UUID | None, fields: dict[str, Any]) -> Result[RecordT, MutationFailure]:
        if user_id is None:
            return self._unauthenticated()

        row = self.normalize(self._strip(fields), None)
        error = self.validate(row)
        if error:
            return Err(MutationFailure("validation", error))

        row[self.owner_field] = user_id
        try:
            stored = await self.store.insert(self.table, row)
        except RecordStoreError as exc:
            return self._store_failure("adding", exc)

        self._invalidate(user_id)
        logger.info("Created %s %s for user %s", self.label, stored["id"], user_id)
        return Ok(self.record_type.model_validate(stored))

    async def update(
        self,
        user_id: UUID | None,
        record_id: UUID,
        patch: dict[str, Any],
    ) -> Result[RecordT, MutationFailure]:
        if user_id is None:
            return self._unauthenticated()

        try:
            existing = await self.store.select_one(self.table, self._owned(user_id, record_id))
        except RecordStoreError as exc:
            return self._store_failure("updating", exc)
        if existing is None:
            return self._not_found()

        patched = self._strip(patch)
        merged = self.normalize({**existing, **patched}, existing)
        error = self.validate(merged)
        if error:
            return Err(MutationFailure("validation", error))

        # Only the patched fields and whatever normalizing derived from them.
        changes = {
            key: value
            for key, value in self._strip(merged).items()
            if key in patched or existing.get(key) != value
        }
        if self.touch_updated_at:
            changes["updated_at"] = _now()
        try:
            rows = await self.store.update(self.table, self._owned(user_id, record_id), changes)
        except RecordStoreError as exc:
            return self._store_failure("updating", exc)
        if not rows:
            return self._not_found()

        self._invalidate(user_id)
        logger.info("Updated %s %s for user %s", self.label, record_id, user_id)
        return Ok(self.record_type.model_validate(rows[0]))

    async def delete(self, user_id: UUID | None, record_id: UUID) -> Result[None, MutationFailure]:
        if user_id is None:
            return self._unauthenticated()

        try:
            deleted = await self.store.delete(self.table, self._owned(user_id, record_id))
        except RecordStoreError as exc:
            return self._store_failure("deleting", exc)
        if not deleted:
            return self._not_found()

        self._invalidate(user_id)
        logger.info("Deleted %s %s for user %s", self.label, record_id, user_id)
        return Ok(None)


class ProfileMutations(EntityMutations[ProfileRecord]):
    """
    Profile writes.

    A profile row may not exist yet, so updates are upserts keyed by the user
    id. Successful writes patch the cached dashboard aggregate directly
    instead of forcing a refetch.
    """

    def __init__(self, store: SqlRecordStore, cache: QueryCache, usernames: UsernameChecker):
        super().__init__(
            store,
            cache,
            table="profiles",
            record_type=ProfileRecord,
            label="profile",
            validate=validation.validate_profile,
            owner_field="id",
        )
        self.usernames = usernames

    def _apply(self, user_id: UUID, profile: ProfileRecord) -> None:
        """Optimistically patch the cached aggregate with the stored profile."""
        self.cache.patch(
            dashboard_key(user_id),
            lambda aggregate: aggregate.model_copy(update={"profile": profile}),
        )
        # Public portfolio entries are keyed by username and may be renamed.
        self.cache.invalidate_owner(str(user_id))

    async def _check_username(self, user_id: UUID, username: str) -> Err[MutationFailure] | None:
        error = validate_username_format(username)
        if error:
            return Err(MutationFailure("validation", error))
        outcome = await self.usernames.check(username, user_id)
        if outcome.status is UsernameStatus.TAKEN:
            return Err(MutationFailure("conflict", outcome.message))
        if outcome.status is UsernameStatus.CHECK_FAILED:
            return Err(MutationFailure("store", outcome.message))
        return None

    async def create(self, user_id, fields):
        return await self.update(user_id, user_id, fields)

    async def update(
        self,
        user_id: UUID | None,
        record_id: UUID | None,
        patch: dict[str, Any],
    ) -> Result[ProfileRecord, MutationFailure]:
        if user_id is None:
            return self._unauthenticated()

        changes = self._strip(patch)
        if changes.get("username") == "":
            changes["username"] = None
        error = self.validate(changes)
        if error:
            return Err(MutationFailure("validation", error))
        if changes.get("username") is not None:
            failure = await self._check_username(user_id, changes["username"])
            if failure is not None:
                return failure

        changes["updated_at"] = _now()
        try:
            stored = await self.store.upsert(self.table, {"id": user_id, **changes}, "id")
        except RecordStoreError as exc:
            if is_duplicate_key(exc):
                # Lost a race for the username between the check and the write.
                return Err(MutationFailure("conflict", "This username is already taken"))
            return self._store_failure("updating", exc)

        profile = ProfileRecord.model_validate(stored)
        self._apply(user_id, profile)
        logger.info("Updated profile for user %s", user_id)
        return Ok(profile)

    async def ensure_exists(
        self,
        user_id: UUID | None,
        *,
        full_name: str | None = None,
        email: str | None = None,
    ) -> Result[ProfileRecord, MutationFailure]:
        """
        Create a default profile unless one exists.

        Conflicts with a concurrent creation are expected and ignored.
        """
        if user_id is None:
            return self._unauthenticated()

        default_name = full_name or (email.split("@")[0] if email else "")
        row = {
            "id": user_id,
            "full_name": default_name,
            "headline": "",
            "bio": "",
            "location": "",
            "website": "",
            "github": "",
            "linkedin": "",
            "twitter": "",
            "avatar_url": "",
            "selected_template": validation.DEFAULT_TEMPLATE,
        }
        try:
            stored = await self.store.upsert(self.table, row, "id", ignore_duplicates=True)
        except RecordStoreError as exc:
            if not is_duplicate_key(exc):
                return self._store_failure("creating", exc)
            logger.info("Profile for user %s already exists", user_id)
            stored = None
        if stored is None:
            try:
                stored = await self.store.select_one(self.table, {"id": user_id})
            except RecordStoreError as exc:
                return self._store_failure("creating", exc)
        if stored is None:
            return self._not_found()

        profile = ProfileRecord.model_validate(stored)
        self._apply(user_id, profile)
        return Ok(profile)

    async def delete(self, user_id, record_id):
        return Err(MutationFailure("validation", "Profiles cannot be deleted"))


@dataclass
class Mutations:
    """The coordinator's per-entity mutation sets."""

    projects: EntityMutations[ProjectRecord]
    education: EntityMutations[EducationRecord]
    experience: EntityMutations[ExperienceRecord]
    blogs: EntityMutations[BlogRecord]
    profile: ProfileMutations


def build_mutations(store: SqlRecordStore, cache: QueryCache, usernames: UsernameChecker) -> Mutations:
    return Mutations(
        projects=EntityMutations(
            store,
            cache,
            table="projects",
            record_type=ProjectRecord,
            label="project",
            validate=validation.validate_project,
            normalize=validation.normalize_project,
            touch_updated_at=False,
        ),
        education=EntityMutations(
            store,
            cache,
            table="education",
            record_type=EducationRecord,
            label="education",
            validate=validation.validate_education,
            normalize=validation.normalize_education,
        ),
        experience=EntityMutations(
            store,
            cache,
            table="experience",
            record_type=ExperienceRecord,
            label="experience",
            validate=validation.validate_experience,
            normalize=validation.normalize_experience,
        ),
        blogs=EntityMutations(
            store,
            cache,
            table="blogs",
            record_type=BlogRecord,
            label="blog post",
            validate=validation.validate_blog,
            normalize=validation.normalize_blog,
        ),
        profile=ProfileMutations(store, cache, usernames),
    )

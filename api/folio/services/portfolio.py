"""Public, unauthenticated portfolio read path keyed by username."""

import logging
import re

from folio.schemas.dashboard import (
    BlogRecord,
    EducationRecord,
    ExperienceRecord,
    ProfileRecord,
    ProjectRecord,
)
from folio.schemas.portfolio import PublicPortfolio
from folio.services.cache import QueryCache
from folio.services.dashboard import merge_aggregate
from folio.services.record_store import SqlRecordStore
from folio.services.results import Ok, settle
from folio.services.validation import DEFAULT_TEMPLATE, TEMPLATES

logger = logging.getLogger(__name__)


def portfolio_key(username: str) -> tuple[str, str]:
    return ("portfolio", username)


def _name_slug(name: str) -> str:
    slug = re.sub(r"[^a-z0-9\s-]", "", name.lower())
    slug = re.sub(r"\s+", "-", slug)
    return re.sub(r"-+", "-", slug).strip()


def portfolio_url(user_id, profile: ProfileRecord | None, full_name: str | None = None) -> str:
    """
    Public path of a user's portfolio.

    Prefers the profile username, then a slug of the full name, then the
    user id.
    """
    if profile is not None and profile.username:
        return f"/{profile.username}"
    name = full_name or (profile.full_name if profile is not None else None)
    if name and _name_slug(name):
        return f"/{_name_slug(name)}"
    return f"/{user_id}"


class PublicPortfolioLoader:
    """Loads the read-only portfolio for a username, published content only."""

    def __init__(self, store: SqlRecordStore, cache: QueryCache, ttl: float | None = None):
        self.store = store
        self.cache = cache
        self.ttl = ttl

    async def load(self, username: str) -> PublicPortfolio | None:
        """Return the portfolio, or None if no profile has this username."""
        return await self.cache.fetch(
            portfolio_key(username),
            lambda: self._fetch(username),
            ttl=self.ttl,
            owner_of=lambda portfolio: str(portfolio.profile.id),
        )

    async def get_blog(self, username: str, slug: str) -> BlogRecord | None:
        """Return the newest published post with ``slug``, or None."""
        profile = await self.store.select_one("profiles", {"username": username})
        if profile is None:
            return None
        row = await self.store.select_one(
            "blogs",
            {"user_id": profile["id"], "slug": slug, "published": True},
            order=["-published_at"],
        )
        return BlogRecord.model_validate(row) if row is not None else None

    async def _fetch(self, username: str) -> PublicPortfolio | None:
        row = await self.store.select_one("profiles", {"username": username})
        if row is None:
            return None
        profile = ProfileRecord.model_validate(row)
        user_id = profile.id
        self.cache.tag(portfolio_key(username), str(user_id))

        async def collection(table, record_type, filters, order):
            rows = await self.store.select(table, {"user_id": user_id, **filters}, order=[order])
            return [record_type.model_validate(item) for item in rows]

        results = await settle(
            collection("projects", ProjectRecord, {}, "-created_at"),
            collection("education", EducationRecord, {}, "-start_date"),
            collection("experience", ExperienceRecord, {}, "-start_date"),
            collection("blogs", BlogRecord, {"published": True}, "-published_at"),
        )
        aggregate = merge_aggregate([*results, Ok(profile)], context=f"portfolio username={username}")
        template = profile.selected_template if profile.selected_template in TEMPLATES else DEFAULT_TEMPLATE
        return PublicPortfolio(
            profile=profile,
            projects=aggregate.projects,
            education=aggregate.education,
            experience=aggregate.experience,
            blogs=aggregate.blogs,
            template=template,
        )

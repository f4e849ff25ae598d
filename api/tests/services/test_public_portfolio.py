"""Tests for the public portfolio read path."""

import asyncio
import uuid

from folio.schemas.dashboard import ProfileRecord
from folio.services.portfolio import portfolio_key, portfolio_url
from folio.services.results import Ok
from factories import blog_row, profile_row, project_row


class TestPortfolioUrl:
    def test_prefers_username(self, user_id):
        profile = ProfileRecord(id=user_id, username="ada", full_name="Ada Lovelace")
        assert portfolio_url(user_id, profile) == "/ada"

    def test_falls_back_to_name_slug(self, user_id):
        profile = ProfileRecord(id=user_id, full_name="Ada  Lovelace!")
        assert portfolio_url(user_id, profile) == "/ada-lovelace"

    def test_falls_back_to_user_id(self, user_id):
        assert portfolio_url(user_id, None) == f"/{user_id}"


class TestPublicPortfolioLoader:
    async def test_unknown_username_returns_none(self, portfolio_loader):
        assert await portfolio_loader.load("nobody") is None

    async def test_only_published_blogs_are_public(self, portfolio_loader, store, user_id):
        store.seed("profiles", **profile_row(user_id, username="ada"))
        store.seed("blogs", **blog_row(user_id, title="Draft", slug="draft"))
        store.seed("blogs", **blog_row(user_id, title="Live", slug="live", published=True))

        portfolio = await portfolio_loader.load("ada")

        assert [blog.slug for blog in portfolio.blogs] == ["live"]

    async def test_no_published_blogs_gives_empty_list(self, portfolio_loader, store, user_id):
        store.seed("profiles", **profile_row(user_id, username="ada"))
        store.seed("projects", **project_row(user_id))
        store.seed("blogs", **blog_row(user_id))

        portfolio = await portfolio_loader.load("ada")

        assert portfolio.blogs == []
        assert len(portfolio.projects) == 1
        assert portfolio.profile.username == "ada"

    async def test_unknown_template_falls_back_to_default(self, portfolio_loader, store, user_id):
        store.seed("profiles", **profile_row(user_id, username="ada", selected_template="retro"))

        portfolio = await portfolio_loader.load("ada")

        assert portfolio.template == "minimal"

    async def test_portfolio_is_cached_until_owner_mutates(
        self, portfolio_loader, mutations, store, cache, user_id
    ):
        store.seed("profiles", **profile_row(user_id, username="ada"))
        await portfolio_loader.load("ada")
        reads = store.reads()

        await portfolio_loader.load("ada")
        assert store.reads() == reads

        await mutations.projects.create(user_id, {"title": "Demo"})
        assert cache.get(portfolio_key("ada")) is None

    async def test_other_users_mutations_keep_portfolio_cached(
        self, portfolio_loader, mutations, store, cache, user_id
    ):
        store.seed("profiles", **profile_row(user_id, username="ada"))
        await portfolio_loader.load("ada")

        await mutations.projects.create(uuid.uuid4(), {"title": "Elsewhere"})

        assert cache.get(portfolio_key("ada")) is not None

    async def test_write_during_a_load_shows_on_the_next_read(
        self, portfolio_loader, mutations, store, cache, user_id
    ):
        store.seed("profiles", **profile_row(user_id, username="ada"))
        hold = store.hold("projects")
        pending = asyncio.create_task(portfolio_loader.load("ada"))
        await hold.reached.wait()

        result = await mutations.projects.create(user_id, {"title": "Demo"})
        hold.release.set()
        earlier = await pending

        assert isinstance(result, Ok)
        assert earlier.projects == []
        assert cache.get(portfolio_key("ada")) is None
        portfolio = await portfolio_loader.load("ada")
        assert [project.title for project in portfolio.projects] == ["Demo"]

    async def test_get_blog_returns_published_post_only(self, portfolio_loader, store, user_id):
        store.seed("profiles", **profile_row(user_id, username="ada"))
        store.seed("blogs", **blog_row(user_id, slug="draft"))
        store.seed("blogs", **blog_row(user_id, slug="live", published=True))

        assert await portfolio_loader.get_blog("ada", "draft") is None
        assert (await portfolio_loader.get_blog("ada", "live")).slug == "live"

"""Dependencies that hand the process-wide services to route handlers.

The cache, record store, storage and session events are created once per
process in ``folio.main`` and kept on ``app.state``; loaders and mutation
sets are thin per-request wrappers around them.
"""

from fastapi import Depends, Request

from folio.auth.session_events import SessionEvents
from folio.config import settings
from folio.services.cache import QueryCache
from folio.services.dashboard import DashboardLoader
from folio.services.mutations import Mutations, build_mutations
from folio.services.portfolio import PublicPortfolioLoader
from folio.services.record_store import SqlRecordStore
from folio.services.storage import ObjectStorage
from folio.services.username import UsernameChecker


def get_cache(request: Request) -> QueryCache:
    return request.app.state.cache


def get_record_store(request: Request) -> SqlRecordStore:
    return request.app.state.record_store


def get_storage(request: Request) -> ObjectStorage:
    return request.app.state.storage


def get_session_events(request: Request) -> SessionEvents:
    return request.app.state.session_events


def get_username_checker(
    request: Request,
    store: SqlRecordStore = Depends(get_record_store),
) -> UsernameChecker:
    return UsernameChecker(store, request.app.state.username_debouncer)


def get_dashboard_loader(
    store: SqlRecordStore = Depends(get_record_store),
    cache: QueryCache = Depends(get_cache),
) -> DashboardLoader:
    return DashboardLoader(store, cache, settings.dashboard_cache_ttl_seconds)


def get_portfolio_loader(
    store: SqlRecordStore = Depends(get_record_store),
    cache: QueryCache = Depends(get_cache),
) -> PublicPortfolioLoader:
    return PublicPortfolioLoader(store, cache, settings.portfolio_cache_ttl_seconds)


def get_mutations(
    store: SqlRecordStore = Depends(get_record_store),
    cache: QueryCache = Depends(get_cache),
    usernames: UsernameChecker = Depends(get_username_checker),
) -> Mutations:
    return build_mutations(store, cache, usernames)

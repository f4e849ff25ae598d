"""Services for the portfolio builder API."""

from folio.services.cache import QueryCache
from folio.services.dashboard import DashboardLoader, dashboard_key, merge_aggregate
from folio.services.mutations import EntityMutations, MutationFailure, Mutations, ProfileMutations, build_mutations
from folio.services.portfolio import PublicPortfolioLoader, portfolio_key, portfolio_url
from folio.services.record_store import RecordStoreError, SqlRecordStore
from folio.services.results import Err, Ok, Result, settle
from folio.services.storage import ObjectStorage, StorageError
from folio.services.username import Debouncer, UsernameCheck, UsernameChecker, UsernameStatus

__all__ = [
    "QueryCache",
    "DashboardLoader",
    "dashboard_key",
    "merge_aggregate",
    "EntityMutations",
    "ProfileMutations",
    "MutationFailure",
    "Mutations",
    "build_mutations",
    "PublicPortfolioLoader",
    "portfolio_key",
    "portfolio_url",
    "SqlRecordStore",
    "RecordStoreError",
    "Ok",
    "Err",
    "Result",
    "settle",
    "ObjectStorage",
    "StorageError",
    "Debouncer",
    "UsernameCheck",
    "UsernameChecker",
    "UsernameStatus",
]

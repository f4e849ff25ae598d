"""Dashboard router: the signed-in user's aggregated data."""

import logging

from fastapi import APIRouter, Depends, status

from folio.auth.dependencies import get_current_user
from folio.dependencies import get_dashboard_loader, get_mutations
from folio.models.user import User
from folio.schemas.dashboard import DashboardAggregate, DashboardResponse
from folio.services.dashboard import DashboardLoader
from folio.services.mutations import Mutations
from folio.services.portfolio import portfolio_url
from folio.services.results import Ok

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/dashboard", tags=["Dashboard"])


async def _ensure_profile(
    user: User,
    aggregate: DashboardAggregate,
    mutations: Mutations,
) -> DashboardAggregate:
    """Create the default profile on first visit."""
    if aggregate.profile is not None:
        return aggregate
    result = await mutations.profile.ensure_exists(user.id, full_name=user.full_name, email=user.email)
    if isinstance(result, Ok):
        return aggregate.model_copy(update={"profile": result.value})
    logger.warning("Could not create profile for user %s: %s", user.id, result.reason.message)
    return aggregate


def _response(user: User, aggregate: DashboardAggregate) -> DashboardResponse:
    return DashboardResponse(
        **dict(aggregate),
        portfolio_url=portfolio_url(user.id, aggregate.profile, user.full_name),
    )


@router.get("", response_model=DashboardResponse, status_code=status.HTTP_200_OK)
async def get_dashboard(
    user: User = Depends(get_current_user),
    loader: DashboardLoader = Depends(get_dashboard_loader),
    mutations: Mutations = Depends(get_mutations),
) -> DashboardResponse:
    """
    Return the user's projects, education, experience, blogs and profile.

    Served from the shared cache while fresh. A sub-query that fails leaves
    its field empty instead of failing the request.
    """
    aggregate = await loader.load(user.id)
    aggregate = await _ensure_profile(user, aggregate, mutations)
    return _response(user, aggregate)


@router.post("/refresh", response_model=DashboardResponse, status_code=status.HTTP_200_OK)
async def refresh_dashboard(
    user: User = Depends(get_current_user),
    loader: DashboardLoader = Depends(get_dashboard_loader),
    mutations: Mutations = Depends(get_mutations),
) -> DashboardResponse:
    """Discard the cached aggregate and load it again."""
    aggregate = await loader.refresh(user.id)
    aggregate = await _ensure_profile(user, aggregate, mutations)
    return _response(user, aggregate)

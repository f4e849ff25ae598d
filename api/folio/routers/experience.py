"""Work experience router."""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from folio.auth.dependencies import get_current_user
from folio.dependencies import get_dashboard_loader, get_mutations
from folio.errors import unwrap
from folio.models.user import User
from folio.schemas.dashboard import ExperienceRecord
from folio.schemas.experience import CreateExperienceRequest, UpdateExperienceRequest
from folio.services.dashboard import DashboardLoader
from folio.services.mutations import Mutations

router = APIRouter(prefix="/api/v1/experience", tags=["Experience"])


@router.get("", response_model=list[ExperienceRecord])
async def list_experience(
    user: User = Depends(get_current_user),
    loader: DashboardLoader = Depends(get_dashboard_loader),
) -> list[ExperienceRecord]:
    aggregate = await loader.load(user.id)
    return aggregate.experience


@router.post("", response_model=ExperienceRecord, status_code=status.HTTP_201_CREATED)
async def create_experience(
    data: CreateExperienceRequest,
    user: User = Depends(get_current_user),
    mutations: Mutations = Depends(get_mutations),
) -> ExperienceRecord:
    """Add a position. ``end_date`` is dropped while ``current_job`` is set."""
    return unwrap(await mutations.experience.create(user.id, data.model_dump()))


@router.patch("/{experience_id}", response_model=ExperienceRecord)
async def update_experience(
    experience_id: UUID,
    data: UpdateExperienceRequest,
    user: User = Depends(get_current_user),
    mutations: Mutations = Depends(get_mutations),
) -> ExperienceRecord:
    return unwrap(await mutations.experience.update(user.id, experience_id, data.model_dump(exclude_unset=True)))


@router.delete("/{experience_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_experience(
    experience_id: UUID,
    user: User = Depends(get_current_user),
    mutations: Mutations = Depends(get_mutations),
) -> None:
    unwrap(await mutations.experience.delete(user.id, experience_id))

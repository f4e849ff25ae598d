"""Education router."""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from folio.auth.dependencies import get_current_user
from folio.dependencies import get_dashboard_loader, get_mutations
from folio.errors import unwrap
from folio.models.user import User
from folio.schemas.dashboard import EducationRecord
from folio.schemas.education import CreateEducationRequest, UpdateEducationRequest
from folio.services.dashboard import DashboardLoader
from folio.services.mutations import Mutations

router = APIRouter(prefix="/api/v1/education", tags=["Education"])


@router.get("", response_model=list[EducationRecord])
async def list_education(
    user: User = Depends(get_current_user),
    loader: DashboardLoader = Depends(get_dashboard_loader),
) -> list[EducationRecord]:
    """Education entries, latest start date first."""
    aggregate = await loader.load(user.id)
    return aggregate.education


@router.post("", response_model=EducationRecord, status_code=status.HTTP_201_CREATED)
async def create_education(
    data: CreateEducationRequest,
    user: User = Depends(get_current_user),
    mutations: Mutations = Depends(get_mutations),
) -> EducationRecord:
    """Add an entry. ``end_date`` is dropped while ``current_education`` is set."""
    return unwrap(await mutations.education.create(user.id, data.model_dump()))


@router.patch("/{education_id}", response_model=EducationRecord)
async def update_education(
    education_id: UUID,
    data: UpdateEducationRequest,
    user: User = Depends(get_current_user),
    mutations: Mutations = Depends(get_mutations),
) -> EducationRecord:
    return unwrap(await mutations.education.update(user.id, education_id, data.model_dump(exclude_unset=True)))


@router.delete("/{education_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_education(
    education_id: UUID,
    user: User = Depends(get_current_user),
    mutations: Mutations = Depends(get_mutations),
) -> None:
    unwrap(await mutations.education.delete(user.id, education_id))

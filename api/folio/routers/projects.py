"""Projects router: list, create, update, delete and image upload."""

from uuid import UUID

from fastapi import APIRouter, Depends, File, UploadFile, status

from folio.auth.dependencies import get_current_user
from folio.dependencies import get_dashboard_loader, get_mutations, get_storage
from folio.errors import storage_error, unwrap
from folio.models.user import User
from folio.schemas.dashboard import ProjectRecord
from folio.schemas.projects import CreateProjectRequest, UpdateProjectRequest
from folio.services.dashboard import DashboardLoader
from folio.services.mutations import Mutations
from folio.services.storage import ObjectStorage, StorageError

router = APIRouter(prefix="/api/v1/projects", tags=["Projects"])


@router.get("", response_model=list[ProjectRecord])
async def list_projects(
    user: User = Depends(get_current_user),
    loader: DashboardLoader = Depends(get_dashboard_loader),
) -> list[ProjectRecord]:
    """Projects newest first, from the cached dashboard aggregate."""
    aggregate = await loader.load(user.id)
    return aggregate.projects


@router.post("", response_model=ProjectRecord, status_code=status.HTTP_201_CREATED)
async def create_project(
    data: CreateProjectRequest,
    user: User = Depends(get_current_user),
    mutations: Mutations = Depends(get_mutations),
) -> ProjectRecord:
    return unwrap(await mutations.projects.create(user.id, data.model_dump()))


@router.patch("/{project_id}", response_model=ProjectRecord)
async def update_project(
    project_id: UUID,
    data: UpdateProjectRequest,
    user: User = Depends(get_current_user),
    mutations: Mutations = Depends(get_mutations),
) -> ProjectRecord:
    """Update only the fields present in the request body."""
    return unwrap(await mutations.projects.update(user.id, project_id, data.model_dump(exclude_unset=True)))


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(
    project_id: UUID,
    user: User = Depends(get_current_user),
    mutations: Mutations = Depends(get_mutations),
) -> None:
    unwrap(await mutations.projects.delete(user.id, project_id))


@router.post("/{project_id}/image", response_model=ProjectRecord)
async def upload_project_image(
    project_id: UUID,
    file: UploadFile = File(...),
    user: User = Depends(get_current_user),
    mutations: Mutations = Depends(get_mutations),
    storage: ObjectStorage = Depends(get_storage),
) -> ProjectRecord:
    """
    Store an image for a project and point ``image_url`` at it.

    Accepts PNG, JPEG, GIF or WEBP up to the configured size limit.
    """
    data = await file.read()
    try:
        url = await storage.upload_image("projects", user.id, data, file.content_type)
    except StorageError as exc:
        raise storage_error(exc)
    return unwrap(await mutations.projects.update(user.id, project_id, {"image_url": url}))

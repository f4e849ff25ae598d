"""Profile router: profile edits, username availability and avatars."""

import logging

from fastapi import APIRouter, Depends, File, Query, Response, UploadFile, status

from folio.auth.dependencies import get_current_user
from folio.dependencies import get_dashboard_loader, get_mutations, get_storage, get_username_checker
from folio.errors import storage_error, unwrap
from folio.models.user import User
from folio.schemas.dashboard import ProfileRecord
from folio.schemas.profile import UpdateProfileRequest, UsernameAvailabilityResponse
from folio.services.dashboard import DashboardLoader
from folio.services.mutations import Mutations
from folio.services.storage import ObjectStorage, StorageError
from folio.services.username import UsernameChecker

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/profile", tags=["Profile"])


@router.get("", response_model=ProfileRecord)
async def get_profile(
    user: User = Depends(get_current_user),
    loader: DashboardLoader = Depends(get_dashboard_loader),
    mutations: Mutations = Depends(get_mutations),
) -> ProfileRecord:
    """Return the profile, creating the default one on first access."""
    aggregate = await loader.load(user.id)
    if aggregate.profile is not None:
        return aggregate.profile
    return unwrap(await mutations.profile.ensure_exists(user.id, full_name=user.full_name, email=user.email))


@router.patch("", response_model=ProfileRecord)
async def update_profile(
    data: UpdateProfileRequest,
    user: User = Depends(get_current_user),
    mutations: Mutations = Depends(get_mutations),
) -> ProfileRecord:
    """
    Update the profile, creating it if needed.

    An empty ``username`` clears it. A username held by another profile is
    rejected with 409.
    """
    return unwrap(await mutations.profile.update(user.id, user.id, data.model_dump(exclude_unset=True)))


@router.get(
    "/username-availability",
    response_model=UsernameAvailabilityResponse,
    responses={204: {"description": "Superseded by a newer check from the same user"}},
)
async def check_username_availability(
    username: str = Query(..., description="Username to check"),
    user: User = Depends(get_current_user),
    checker: UsernameChecker = Depends(get_username_checker),
):
    """
    Check whether a username is free.

    Checks are debounced per user: when several arrive within the quiet
    window only the latest is answered, earlier ones get 204.
    """
    outcome = await checker.check_debounced(username, user.id)
    if outcome is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return UsernameAvailabilityResponse(
        username=outcome.username,
        status=outcome.status,
        available=outcome.available,
        message=outcome.message,
    )


@router.post("/avatar", response_model=ProfileRecord)
async def upload_avatar(
    file: UploadFile = File(...),
    user: User = Depends(get_current_user),
    mutations: Mutations = Depends(get_mutations),
    storage: ObjectStorage = Depends(get_storage),
) -> ProfileRecord:
    """Store a new avatar image and point ``avatar_url`` at it."""
    data = await file.read()
    try:
        url = await storage.upload_image("avatars", user.id, data, file.content_type)
    except StorageError as exc:
        raise storage_error(exc)
    return unwrap(await mutations.profile.update(user.id, user.id, {"avatar_url": url}))


@router.delete("/avatar", response_model=ProfileRecord)
async def remove_avatar(
    user: User = Depends(get_current_user),
    loader: DashboardLoader = Depends(get_dashboard_loader),
    mutations: Mutations = Depends(get_mutations),
    storage: ObjectStorage = Depends(get_storage),
) -> ProfileRecord:
    """Clear ``avatar_url`` and delete the stored file if this API issued it."""
    aggregate = await loader.load(user.id)
    profile = unwrap(await mutations.profile.update(user.id, user.id, {"avatar_url": None}))

    previous = aggregate.profile.avatar_url if aggregate.profile else None
    path = storage.path_from_url(previous)
    if path is not None:
        try:
            await storage.remove(path)
        except StorageError:
            logger.warning("Refusing to remove avatar outside storage root: %s", previous)
    return profile

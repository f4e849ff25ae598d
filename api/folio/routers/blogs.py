"""Blog router for the signed-in author's posts, drafts included."""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from folio.auth.dependencies import get_current_user
from folio.dependencies import get_dashboard_loader, get_mutations
from folio.errors import unwrap
from folio.models.user import User
from folio.schemas.blogs import CreateBlogRequest, UpdateBlogRequest
from folio.schemas.dashboard import BlogRecord
from folio.services.dashboard import DashboardLoader
from folio.services.mutations import Mutations

router = APIRouter(prefix="/api/v1/blogs", tags=["Blogs"])


@router.get("", response_model=list[BlogRecord])
async def list_blogs(
    user: User = Depends(get_current_user),
    loader: DashboardLoader = Depends(get_dashboard_loader),
) -> list[BlogRecord]:
    """All posts, newest first, published or not."""
    aggregate = await loader.load(user.id)
    return aggregate.blogs


@router.post("", response_model=BlogRecord, status_code=status.HTTP_201_CREATED)
async def create_blog(
    data: CreateBlogRequest,
    user: User = Depends(get_current_user),
    mutations: Mutations = Depends(get_mutations),
) -> BlogRecord:
    """
    Create a post.

    The slug is derived from the title; ``published_at`` is stamped when the
    post is created published.
    """
    return unwrap(await mutations.blogs.create(user.id, data.model_dump()))


@router.patch("/{blog_id}", response_model=BlogRecord)
async def update_blog(
    blog_id: UUID,
    data: UpdateBlogRequest,
    user: User = Depends(get_current_user),
    mutations: Mutations = Depends(get_mutations),
) -> BlogRecord:
    """
    Update a post.

    Changing the title re-derives the slug. Publishing stamps
    ``published_at``; unpublishing clears it.
    """
    return unwrap(await mutations.blogs.update(user.id, blog_id, data.model_dump(exclude_unset=True)))


@router.delete("/{blog_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_blog(
    blog_id: UUID,
    user: User = Depends(get_current_user),
    mutations: Mutations = Depends(get_mutations),
) -> None:
    unwrap(await mutations.blogs.delete(user.id, blog_id))

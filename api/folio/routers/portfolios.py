"""Public, unauthenticated portfolio pages and the template catalogue."""

import logging

from fastapi import APIRouter, Depends, status

from folio.dependencies import get_portfolio_loader
from folio.errors import api_error, not_found
from folio.schemas.dashboard import BlogRecord
from folio.schemas.portfolio import ListTemplatesResponse, PublicPortfolio, TemplateInfo
from folio.services.portfolio import PublicPortfolioLoader
from folio.services.record_store import RecordStoreError
from folio.services.validation import TEMPLATES

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["Portfolios"])


def _store_unavailable(exc: RecordStoreError):
    logger.warning("Public portfolio lookup failed: %s", exc)
    return api_error(status.HTTP_503_SERVICE_UNAVAILABLE, "STORE_ERROR", "Error loading portfolio")


@router.get("/portfolios/{username}", response_model=PublicPortfolio)
async def get_portfolio(
    username: str,
    loader: PublicPortfolioLoader = Depends(get_portfolio_loader),
) -> PublicPortfolio:
    """
    Return a user's public portfolio.

    Only published blog posts are included. An unknown template selection
    falls back to the default template.
    """
    try:
        portfolio = await loader.load(username)
    except RecordStoreError as exc:
        raise _store_unavailable(exc)
    if portfolio is None:
        raise not_found("Portfolio not found")
    return portfolio


@router.get("/portfolios/{username}/blogs/{slug}", response_model=BlogRecord)
async def get_portfolio_blog(
    username: str,
    slug: str,
    loader: PublicPortfolioLoader = Depends(get_portfolio_loader),
) -> BlogRecord:
    try:
        blog = await loader.get_blog(username, slug)
    except RecordStoreError as exc:
        raise _store_unavailable(exc)
    if blog is None:
        raise not_found("Blog post not found")
    return blog


@router.get("/templates", response_model=ListTemplatesResponse)
async def list_templates() -> ListTemplatesResponse:
    return ListTemplatesResponse(items=[TemplateInfo(id=key, name=name) for key, name in TEMPLATES.items()])

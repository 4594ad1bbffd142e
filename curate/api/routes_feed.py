"""
Fil public : contenus publics consultables sans authentification.
"""

from fastapi import APIRouter, Depends, Query

from curate.api.deps import get_content_service
from curate.api.schemas import ContentListResponse, ContentOut, ContentResponse, ContentSummaryOut
from curate.core.container import container
from curate.services.contents import ContentService

router = APIRouter(prefix="/feed", tags=["feed"])
_settings = container.settings
contents_dep = Depends(get_content_service)


@router.get("", response_model=ContentListResponse)
async def public_feed(
    limit: int = Query(_settings.DEFAULT_PAGE_SIZE, ge=1, le=_settings.MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
    query: str | None = Query(None),
    service: ContentService = contents_dep,
):
    """Contenus publics, du plus récent au plus ancien (recherche sur le titre)."""
    items = await service.list_public_contents(limit=limit, offset=offset, query=query)
    return {"contents": [ContentSummaryOut.model_validate(i) for i in items]}


@router.get("/{content_id}", response_model=ContentResponse)
async def public_content(content_id: str, service: ContentService = contents_dep):
    """Contenu public par id (404 s'il est absent ou privé)."""
    item = await service.get_content(content_id, caller_id=None)
    return {"content": ContentOut.model_validate(item)}

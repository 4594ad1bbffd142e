"""
Routes des contenus stockés : lecture, réactions, visibilité, suppression et commentaires.

Toutes les lectures passent par le contrôle "propriétaire ou public"; les mutations sont
réservées au propriétaire (les variantes en masse ignorent les ids non détenus).
"""

from fastapi import APIRouter, Depends, Query

from curate.api.deps import (
    get_comment_log,
    get_content_service,
    get_current_user,
    get_reaction_ledger,
    require_user,
)
from curate.api.schemas import (
    BulkIdsPayload,
    BulkResult,
    BulkVisibilityPayload,
    CommentListResponse,
    CommentOut,
    CommentPayload,
    ContentListResponse,
    ContentOut,
    ContentResponse,
    ContentSummaryOut,
    CountResponse,
    ReactionPayload,
    ReactionResult,
    UserReactionResponse,
    VisibilityResponse,
)
from curate.core.container import container
from curate.domain.entities import User
from curate.services.comments import CommentLog
from curate.services.contents import ContentService
from curate.services.reactions import ReactionLedger

router = APIRouter(prefix="/contents", tags=["contents"])
_settings = container.settings
current_user_dep = Depends(require_user)
optional_user_dep = Depends(get_current_user)
contents_dep = Depends(get_content_service)
ledger_dep = Depends(get_reaction_ledger)
comments_dep = Depends(get_comment_log)


@router.get("", response_model=ContentListResponse)
async def list_contents(
    limit: int = Query(_settings.DEFAULT_PAGE_SIZE, ge=1, le=_settings.MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
    query: str | None = Query(None),
    user: User = current_user_dep,
    service: ContentService = contents_dep,
):
    """Contenus de l'utilisateur et contenus publics, du plus récent au plus ancien."""
    items = await service.list_contents(user.id, limit=limit, offset=offset, query=query)
    return {"contents": [ContentSummaryOut.model_validate(i) for i in items]}


@router.post("/visibility", response_model=BulkResult)
async def bulk_set_visibility(
    payload: BulkVisibilityPayload,
    user: User = current_user_dep,
    service: ContentService = contents_dep,
):
    """Fixe la visibilité des contenus détenus parmi `ids` (les autres sont ignorés)."""
    affected = await service.bulk_set_visibility(payload.ids, payload.visibility, user.id)
    return {"success": True, "affected": affected}


@router.post("/bulk-delete", response_model=BulkResult)
async def bulk_delete(
    payload: BulkIdsPayload,
    user: User = current_user_dep,
    service: ContentService = contents_dep,
):
    """Supprime les contenus détenus parmi `ids` (les autres sont ignorés)."""
    affected = await service.bulk_delete(payload.ids, user.id)
    return {"success": True, "affected": affected}


@router.get("/{content_id}", response_model=ContentResponse)
async def get_content(
    content_id: str,
    user: User | None = optional_user_dep,
    service: ContentService = contents_dep,
):
    """Contenu complet, s'il est public ou détenu par l'appelant."""
    item = await service.get_content(content_id, user.id if user else None)
    return {"content": ContentOut.model_validate(item)}


@router.delete("/{content_id}", response_model=BulkResult)
async def delete_content(
    content_id: str,
    user: User = current_user_dep,
    service: ContentService = contents_dep,
):
    """Supprime un contenu détenu par l'appelant."""
    await service.delete_content(content_id, user.id)
    return {"success": True, "affected": 1}


@router.post("/{content_id}/visibility", response_model=VisibilityResponse)
async def toggle_visibility(
    content_id: str,
    user: User = current_user_dep,
    service: ContentService = contents_dep,
):
    """Bascule public <-> privé."""
    return {"visibility": await service.toggle_visibility(content_id, user.id)}


@router.post("/{content_id}/reactions", response_model=ReactionResult)
async def set_reaction(
    content_id: str,
    payload: ReactionPayload,
    user: User = current_user_dep,
    ledger: ReactionLedger = ledger_dep,
):
    """Bascule la réaction (like/dislike) de l'utilisateur sur le contenu."""
    return await ledger.set_reaction(user.id, content_id, payload.type)


@router.get("/{content_id}/reaction", response_model=UserReactionResponse)
async def get_reaction(
    content_id: str,
    user: User | None = optional_user_dep,
    ledger: ReactionLedger = ledger_dep,
):
    """Réaction courante de l'appelant (toujours vide pour un anonyme)."""
    return {"type": await ledger.get_user_reaction(user.id if user else None, content_id)}


@router.get("/{content_id}/likes", response_model=CountResponse)
async def get_likes(content_id: str, ledger: ReactionLedger = ledger_dep):
    return {"count": await ledger.get_likes(content_id)}


@router.get("/{content_id}/dislikes", response_model=CountResponse)
async def get_dislikes(content_id: str, ledger: ReactionLedger = ledger_dep):
    return {"count": await ledger.get_dislikes(content_id)}


@router.post("/{content_id}/comments", response_model=CommentOut)
async def post_comment(
    content_id: str,
    payload: CommentPayload,
    user: User = current_user_dep,
    comments: CommentLog = comments_dep,
):
    """Ajoute un commentaire au nom de l'utilisateur authentifié."""
    comment = await comments.post_comment(content_id, payload.user_id, user.id, payload.comment)
    return CommentOut.model_validate(comment)


@router.get("/{content_id}/comments", response_model=CommentListResponse)
async def list_comments(content_id: str, comments: CommentLog = comments_dep):
    """Commentaires du contenu, du plus récent au plus ancien, avec noms affichés."""
    items = await comments.list_comments(content_id)
    return {"comments": [CommentOut.model_validate(c) for c in items]}

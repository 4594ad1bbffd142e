"""
Route de recherche externe.

`POST /search` interroge l'API de recherche, renvoie les résultats immédiatement puis planifie
leur ingestion dédupliquée en tâche de fond : la persistance n'allonge pas la réponse et ses
échecs ne remontent jamais à l'appelant.
"""

import time

import structlog
from fastapi import APIRouter, BackgroundTasks, Depends

from curate.api.deps import get_ingestor, get_search_client, require_user
from curate.api.schemas import SearchRequest, SearchResponse
from curate.app.metrics import SEARCH_LATENCY, SEARCH_REQUESTS
from curate.domain.entities import User
from curate.domain.errors import UpstreamError
from curate.infra.search.exa_client import ExaSearchClient
from curate.services.ingestor import DedupIngestor

router = APIRouter(tags=["search"])
log = structlog.get_logger(__name__).bind(component="routes_search")


@router.post("/search", response_model=SearchResponse)
async def search(
    payload: SearchRequest,
    background_tasks: BackgroundTasks,
    user: User = Depends(require_user),
    client: ExaSearchClient = Depends(get_search_client),
    ingestor: DedupIngestor = Depends(get_ingestor),
):
    """Recherche via l'API externe et planifie le stockage des résultats."""
    start = time.perf_counter()
    try:
        results = await client.search(payload.query, payload.type, payload.max_results)
    except UpstreamError:
        SEARCH_REQUESTS.labels(payload.type, "error").inc()
        raise
    finally:
        SEARCH_LATENCY.labels(payload.type).observe(time.perf_counter() - start)
    SEARCH_REQUESTS.labels(payload.type, "ok").inc()
    background_tasks.add_task(ingestor.ingest_search_results, results, user.id)
    log.info("search_served", user_id=user.id, count=len(results))
    return {"results": [r.model_dump() for r in results]}

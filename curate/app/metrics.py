"""
Métriques Prometheus de l'API.

- HTTP : nombre de requêtes et latence, étiquetées par gabarit de route (cardinalité bornée).
- Métier : issues de l'ingestion, bascules de réactions, appels à l'API de recherche.

`/metrics` expose le registre par défaut au format texte.
"""

import time

from fastapi import APIRouter, Request
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

metrics_router = APIRouter(tags=["metrics"])

REQUEST_COUNT = Counter(
    "http_requests_total", "HTTP requests served", ["method", "route", "status"]
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds", "HTTP request duration", ["route"]
)

CONTENT_INGEST_RESULTS = Counter(
    "content_ingest_results_total",
    "Search results processed by the dedup ingestor",
    ["outcome"],  # stored | skipped | failed
)
REACTION_TOGGLES = Counter(
    "content_reaction_toggles_total",
    "Reaction toggles applied",
    ["type", "action"],
)
SEARCH_REQUESTS = Counter(
    "search_requests_total",
    "Calls to the external search API",
    ["mode", "status"],
)
SEARCH_LATENCY = Histogram(
    "search_latency_seconds",
    "Latency of external search API calls",
    ["mode"],
)


def normalize_route(request: Request) -> str:
    """Gabarit de la route servie (ex: `/contents/{content_id}`), "unmatched" sinon."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or "unmatched"


@metrics_router.get("/metrics")
def metrics() -> Response:
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Compte et chronomètre chaque requête HTTP par méthode, route et statut."""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        response: Response = await call_next(request)
        route = normalize_route(request)
        REQUEST_COUNT.labels(request.method, route, str(response.status_code)).inc()
        REQUEST_LATENCY.labels(route).observe(time.perf_counter() - started)
        return response

"""Middleware Starlette de mesure de durée des requêtes.

Ajoute l'en-tête `X-Process-Time-ms` et journalise chaque requête servie (méthode, chemin,
statut, durée).
"""

import time
from collections.abc import Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

log = structlog.get_logger(__name__).bind(component="http")


class TimingMiddleware(BaseHTTPMiddleware):
    """Mesure la durée de traitement et l'expose en en-tête de réponse."""

    def __init__(self, app: ASGIApp, header_name: str = "X-Process-Time-ms") -> None:
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request, call_next: Callable):
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = int((time.perf_counter() - start) * 1000)
        response.headers[self.header_name] = str(duration_ms)
        log.info(
            "request_served",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=duration_ms,
        )
        return response

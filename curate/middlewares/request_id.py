"""Middleware Starlette qui attribue un identifiant à chaque requête.

L'identifiant (reçu ou généré) est lié au contexte structlog le temps de la requête, afin que
chaque ligne de log émise par les services porte `request_id`, puis renvoyé dans la réponse.
"""

from collections.abc import Callable
from uuid import uuid4

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Propage `X-Request-ID` dans les logs et la réponse."""

    def __init__(self, app: ASGIApp, header_name: str = "X-Request-ID") -> None:
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request, call_next: Callable):
        """Lie l'identifiant au contexte de log, appelle la suite puis nettoie le contexte."""
        request_id = request.headers.get(self.header_name) or uuid4().hex
        request.state.request_id = request_id
        structlog.contextvars.bind_contextvars(request_id=request_id)
        try:
            response = await call_next(request)
        finally:
            structlog.contextvars.unbind_contextvars("request_id")
        response.headers[self.header_name] = request_id
        return response

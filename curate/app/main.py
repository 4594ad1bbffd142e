"""
Application principale FastAPI.

Ce module assemble tous les composants de l'application : middlewares, gestionnaires
d'erreurs, routes et métriques.

Responsabilités du module:
- Initialiser le logging structuré
- Créer le schéma au démarrage si `DB_AUTO_CREATE` est actif, libérer le moteur à l'arrêt
- Ajouter les middlewares (request id, métriques, timing)
- Monter les routers (santé, auth, recherche, contenus, fil public, métriques)
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from curate.api.routes_auth import router as auth_router
from curate.api.routes_contents import router as contents_router
from curate.api.routes_feed import router as feed_router
from curate.api.routes_health import router as health_router
from curate.api.routes_search import router as search_router
from curate.apigw.errors import install_error_handlers
from curate.app.metrics import PrometheusMiddleware, metrics_router
from curate.core.container import container
from curate.core.logging import setup_logging
from curate.infra.repo.db import create_all
from curate.middlewares.request_id import RequestIDMiddleware
from curate.middlewares.timing import TimingMiddleware

log = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Prépare la base au démarrage et ferme le pool de connexions à l'arrêt."""
    if container.settings.DB_AUTO_CREATE:
        await create_all(container.engine)
        log.info("schema_ready", storage=container.storage_backend)
    yield
    await container.engine.dispose()


def create_app() -> FastAPI:
    """
    Construit et retourne l'application FastAPI prête à l'usage.

    Étapes:
    - Configure le logging structuré (structlog)
    - Lit les paramètres d'exécution
    - Ajoute les middlewares utiles au debug/traçabilité
    - Installe les gestionnaires d'erreurs et publie les routes
    """
    settings = container.settings
    setup_logging(debug=settings.APP_DEBUG)
    app = FastAPI(title=settings.APP_NAME, debug=settings.APP_DEBUG, lifespan=lifespan)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(PrometheusMiddleware)
    app.add_middleware(TimingMiddleware)
    install_error_handlers(app)
    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(search_router)
    app.include_router(contents_router)
    app.include_router(feed_router)
    app.include_router(metrics_router)
    return app


app = create_app()

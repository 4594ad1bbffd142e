# ============================================================
# Module : curate/services/ingestor.py
# Objet  : Ingestion dédupliquée des résultats de recherche.
# Contexte : Exécuté en tâche de fond après la réponse de recherche. Chaque résultat est
#            une transaction indépendante : l'échec de l'un n'interrompt pas les autres.
# ============================================================

from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from curate.app.metrics import CONTENT_INGEST_RESULTS
from curate.domain.dedup import content_fingerprint
from curate.domain.entities import DEFAULT_VISIBILITY, SEARCH_SOURCE_TYPE
from curate.infra.repo.content_repo import ContentRepo
from curate.infra.repo.db import session_scope
from curate.infra.search.exa_client import SearchResult


def parse_published(value: object) -> datetime | None:
    """Convertit une date de publication (ISO 8601 ou epoch en millisecondes) en datetime.

    Retourne None pour une valeur absente ou illisible.
    """
    if value is None or value == "" or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, int | float):
        try:
            return datetime.fromtimestamp(float(value) / 1000.0, tz=UTC)
        except (OverflowError, OSError, ValueError):
            return None
    try:
        parsed = datetime.fromisoformat(str(value).strip())
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)


class DedupIngestor:
    """Insère chaque résultat absent du store, clé = empreinte `url|title|body`."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._factory = session_factory
        self._log = structlog.get_logger(__name__).bind(component="dedup_ingestor")

    async def _store_one(self, result: SearchResult, user_id: str) -> str:
        content_hash = content_fingerprint(result.url, result.title, result.content)
        async with session_scope(self._factory) as session:
            repo = ContentRepo(session)
            if await repo.get_by_hash(content_hash) is not None:
                return "skipped"
            try:
                await repo.create(
                    source_type=SEARCH_SOURCE_TYPE,
                    content_hash=content_hash,
                    user_id=user_id,
                    visibility=DEFAULT_VISIBILITY,
                    url=result.url,
                    title=result.title,
                    body=result.content,
                    thumbnail=result.image,
                    favicon=result.favicon,
                    published_at=parse_published(result.published_date),
                    raw_data=result.model_dump(mode="json"),
                )
            except IntegrityError:
                # insertion concurrente de la même empreinte; toute autre violation remonte
                if await repo.get_by_hash(content_hash) is not None:
                    return "skipped"
                raise
        return "stored"

    async def ingest_search_results(
        self, results: Iterable[SearchResult], user_id: str
    ) -> dict[str, int]:
        """Stocke les résultats absents; ne lève jamais.

        Returns:
            dict: compteurs {"stored", "skipped", "failed"}.
        """
        summary = {"stored": 0, "skipped": 0, "failed": 0}
        for result in results:
            try:
                outcome = await self._store_one(result, user_id)
            except Exception:
                self._log.exception("ingest_result_failed", url=result.url)
                outcome = "failed"
            summary[outcome] += 1
            CONTENT_INGEST_RESULTS.labels(outcome=outcome).inc()
        self._log.info("ingest_done", user_id=user_id, **summary)
        return summary

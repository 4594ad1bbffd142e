# ============================================================
# Module : curate/infra/search/exa_client.py
# Objet  : Client HTTP de l'API de recherche Exa (boîte noire).
# Contexte : Un statut non 2xx ou une erreur réseau est un échec dur (UpstreamError).
# ============================================================

from __future__ import annotations

from typing import Any, Literal

import httpx
import structlog
from pydantic import BaseModel
from pydantic import ValidationError as PayloadValidationError

from curate.domain.errors import UpstreamError

SearchMode = Literal["fast", "neural"]


class SearchResult(BaseModel):
    """Résultat de recherche normalisé, tel que renvoyé à l'appelant et ingéré."""

    id: str
    title: str
    url: str | None = None
    content: str | None = None
    score: float | None = None
    published_date: str | float | None = None
    image: str | None = None
    favicon: str | None = None


def _to_result(item: dict[str, Any], index: int) -> SearchResult:
    return SearchResult(
        id=str(item.get("id") or index),
        title=item.get("title") or "Untitled",
        url=item.get("url"),
        content=item.get("text") or None,
        score=item.get("score"),
        published_date=item.get("publishedDate"),
        image=item.get("image"),
        favicon=item.get("favicon"),
    )


class ExaSearchClient:
    """Client asynchrone pour `POST {base_url}/search`.

    `transport` permet d'injecter un `httpx.MockTransport` dans les tests.
    """

    def __init__(
        self,
        api_key: str | None,
        base_url: str = "https://api.exa.ai",
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self._timeout = httpx.Timeout(timeout)
        self._transport = transport
        self._log = structlog.get_logger(__name__).bind(component="exa_search")

    async def search(
        self, query: str, mode: SearchMode = "fast", max_results: int = 4
    ) -> list[SearchResult]:
        """Exécute une recherche et retourne la liste de résultats normalisés."""
        if not self.api_key:
            raise UpstreamError("Search API key is not configured")
        payload = {
            "query": query,
            "type": mode,
            "numResults": max_results,
            "contents": {"text": {"includeHtmlTags": True}},
        }
        headers = {
            "accept": "application/json",
            "content-type": "application/json",
            "x-api-key": self.api_key,
        }
        self._log.info("search_started", mode=mode, max_results=max_results)
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                resp = await client.post(f"{self.base_url}/search", json=payload, headers=headers)
        except httpx.HTTPError as err:
            self._log.error("search_transport_error", error=str(err))
            raise UpstreamError("Failed to fetch search results") from err
        if not resp.is_success:
            self._log.error("search_failed", status_code=resp.status_code)
            raise UpstreamError(f"Search API request failed with status {resp.status_code}")
        try:
            data = resp.json()
        except ValueError as err:
            raise UpstreamError("Search API returned an invalid payload") from err
        items = (data.get("results") if isinstance(data, dict) else None) or []
        try:
            results = [_to_result(item, i) for i, item in enumerate(items)]
        except (PayloadValidationError, AttributeError, TypeError) as err:
            self._log.error("search_invalid_payload", error=str(err))
            raise UpstreamError("Search API returned an invalid payload") from err
        self._log.info("search_done", count=len(results))
        return results

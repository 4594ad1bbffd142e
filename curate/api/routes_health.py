"""Sonde de disponibilité : `/health` répond sans toucher à la base."""

from fastapi import APIRouter

from curate.core.container import container

router = APIRouter(tags=["health"])


@router.get("/health")
def health() -> dict[str, object]:
    return {
        "status": "ok",
        "storage": container.storage_backend,
        "search_configured": bool(container.settings.EXA_API_KEY),
    }

"""Contrôle d'accès "propriétaire ou public".

Prédicats uniques utilisés par tous les services pour les lectures (`can_read`) et les
mutations (`can_write`). Les requêtes de liste appliquent le même prédicat côté SQL
(voir `ContentRepo.readable_by`).
"""

from __future__ import annotations

from typing import Protocol

from curate.domain.errors import NotFound, Unauthorized


class Owned(Protocol):
    visibility: str
    user_id: str | None


def can_read(item: Owned, caller_id: str | None) -> bool:
    """Vrai si l'élément est public ou appartient à l'appelant."""
    if item.visibility == "public":
        return True
    return caller_id is not None and item.user_id == caller_id


def can_write(item: Owned, caller_id: str | None) -> bool:
    """Vrai si l'appelant est authentifié et propriétaire de l'élément."""
    return caller_id is not None and item.user_id == caller_id


def ensure_readable(item: Owned | None, caller_id: str | None) -> Owned:
    """Retourne l'élément s'il est lisible, sinon lève NotFound."""
    if item is None or not can_read(item, caller_id):
        raise NotFound("Content not found")
    return item


def ensure_writable(item: Owned | None, caller_id: str | None) -> Owned:
    """Retourne l'élément si l'appelant en est propriétaire.

    Un élément invisible est signalé comme absent; un élément visible mais détenu par un
    autre utilisateur lève Unauthorized.
    """
    item = ensure_readable(item, caller_id)
    if not can_write(item, caller_id):
        raise Unauthorized("You do not own this content")
    return item

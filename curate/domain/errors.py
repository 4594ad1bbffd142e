"""Erreurs métier du noyau contenus/réactions/commentaires.

Les services lèvent ces exceptions; la couche API les traduit en enveloppes d'erreur HTTP
(voir `curate.apigw.errors`).
"""

from __future__ import annotations


class ContentError(Exception):
    """Base des erreurs métier."""

    code = "CONTENT_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFound(ContentError):
    """Entité absente (ou invisible pour l'appelant)."""

    code = "NOT_FOUND"


class Unauthorized(ContentError):
    """Échec d'un contrôle de propriété ou d'identité."""

    code = "FORBIDDEN"


class ValidationError(ContentError):
    """Entrée mal formée (ex: commentaire trop court)."""

    code = "VALIDATION_ERROR"


class UpstreamError(ContentError):
    """API de recherche en échec (statut non 2xx ou erreur réseau)."""

    code = "BAD_GATEWAY"


class PersistenceError(ContentError):
    """Échec d'une opération de stockage; le message reste générique."""

    code = "INTERNAL_ERROR"


class LoginRequired(Exception):
    """Appelant anonyme sur un endpoint authentifié (redirection vers la connexion)."""

# ============================================================
# Module : curate/domain/dedup.py
# Objet  : Empreinte de déduplication des résultats de recherche.
# ============================================================

from __future__ import annotations

import hashlib

FINGERPRINT_DELIMITER = "|"


def _token(value: object | None) -> str:
    return "" if value is None else str(value)


def content_fingerprint(url: str | None, title: str | None, body: str | None) -> str:
    """Calcule l'empreinte SHA-256 (hex) de `url|title|body`.

    Un champ absent est sérialisé en chaîne vide : deux résultats aux mêmes champs
    produisent toujours la même empreinte.
    """
    raw = FINGERPRINT_DELIMITER.join((_token(url), _token(title), _token(body)))
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()

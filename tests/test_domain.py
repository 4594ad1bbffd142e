"""Tests des règles du domaine : empreinte, contrôle d'accès, noms affichés et noms de profil."""

from __future__ import annotations

import hashlib
from types import SimpleNamespace

import pytest

from curate.domain.auth import default_username, normalize_name
from curate.domain.dedup import content_fingerprint
from curate.domain.entities import ANONYMOUS_DISPLAY_NAME, opposite_reaction, resolve_display_name
from curate.domain.errors import NotFound, Unauthorized
from curate.domain.visibility import can_read, can_write, ensure_readable, ensure_writable

OWNER = "owner-1"
OTHER = "other-2"


def _item(visibility: str, user_id: str | None = OWNER) -> SimpleNamespace:
    return SimpleNamespace(visibility=visibility, user_id=user_id)


def test_fingerprint_is_sha256_of_joined_fields() -> None:
    """L'empreinte est le SHA-256 hexadécimal de `url|title|body`."""
    expected = hashlib.sha256(b"https://a.io|Title|Body").hexdigest()
    assert content_fingerprint("https://a.io", "Title", "Body") == expected


def test_fingerprint_missing_fields_hash_as_empty() -> None:
    """Un champ absent est haché comme une chaîne vide."""
    assert content_fingerprint(None, "T", None) == content_fingerprint("", "T", "")


def test_fingerprint_changes_with_body() -> None:
    assert content_fingerprint("u", "t", "b1") != content_fingerprint("u", "t", "b2")


def test_can_read_public_or_owner() -> None:
    """Lecture autorisée pour le propriétaire ou si le contenu est public."""
    assert can_read(_item("public"), None)
    assert can_read(_item("public"), OTHER)
    assert can_read(_item("private"), OWNER)
    assert not can_read(_item("private"), OTHER)
    assert not can_read(_item("private"), None)


def test_can_write_owner_only() -> None:
    assert can_write(_item("public"), OWNER)
    assert not can_write(_item("public"), OTHER)
    assert not can_write(_item("private", user_id=None), None)


def test_ensure_readable_hides_private_items() -> None:
    with pytest.raises(NotFound):
        ensure_readable(_item("private"), OTHER)
    with pytest.raises(NotFound):
        ensure_readable(None, OWNER)


def test_ensure_writable_distinguishes_hidden_and_foreign() -> None:
    """Contenu invisible: NotFound; visible mais détenu par un autre: Unauthorized."""
    with pytest.raises(NotFound):
        ensure_writable(_item("private"), OTHER)
    with pytest.raises(Unauthorized):
        ensure_writable(_item("public"), OTHER)
    assert ensure_writable(_item("private"), OWNER).user_id == OWNER


def test_display_name_fallbacks() -> None:
    """Nom complet, sinon pseudo, sinon "Anonymous User"."""
    assert resolve_display_name("Alice Martin", "alice") == "Alice Martin"
    assert resolve_display_name(None, "alice") == "alice"
    assert resolve_display_name("", "") == ANONYMOUS_DISPLAY_NAME


def test_opposite_reaction() -> None:
    assert opposite_reaction("like") == "dislike"
    assert opposite_reaction("dislike") == "like"


def test_default_username_is_email_local_part() -> None:
    assert default_username("alice.martin@curate.io") == "alice.martin"


def test_normalize_name_collapses_whitespace() -> None:
    assert normalize_name("  Alice   Martin ") == "Alice Martin"


def test_normalize_name_limits_the_cleaned_length() -> None:
    assert normalize_name("a" + " " * 100 + "b") == "a b"
    assert normalize_name("x" * 100) == "x" * 100


@pytest.mark.parametrize("bad", ["", "   ", "<script>", "x" * 101])
def test_normalize_name_rejects_invalid(bad: str) -> None:
    with pytest.raises(ValueError):
        normalize_name(bad)

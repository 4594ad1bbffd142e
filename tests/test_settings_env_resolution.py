"""
Tests pour la résolution des variables d'environnement.

Ce module teste le chargement des settings depuis un fichier .env désigné par `ENV_FILE`, et la
priorité des variables d'environnement sur ce fichier.
"""

from __future__ import annotations

import importlib
from pathlib import Path

PREVIEW_CHARS = 120
TIMEOUT_SECONDS = 7.5


def _reload_settings():
    settings_mod = importlib.import_module("curate.core.settings")
    return importlib.reload(settings_mod)


def test_settings_reads_env_file(tmp_path: Path, monkeypatch) -> None:
    """Les valeurs d'un fichier .env personnalisé sont appliquées aux settings."""
    env = tmp_path / ".env.custom"
    env.write_text(
        f"FEED_BODY_PREVIEW_CHARS={PREVIEW_CHARS}\nEXA_TIMEOUT_SECONDS={TIMEOUT_SECONDS}\n"
        "LOGIN_URL=/login\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("ENV_FILE", str(env))
    monkeypatch.setenv("LOGIN_URL", "/signin")
    try:
        s = _reload_settings().get_settings()
        assert s.FEED_BODY_PREVIEW_CHARS == PREVIEW_CHARS
        assert s.EXA_TIMEOUT_SECONDS == TIMEOUT_SECONDS
        assert s.LOGIN_URL == "/signin"
    finally:
        monkeypatch.delenv("ENV_FILE")
        _reload_settings()


def test_settings_defaults(monkeypatch) -> None:
    for key in ("EXA_TIMEOUT_SECONDS", "FEED_BODY_PREVIEW_CHARS", "DATABASE_URL"):
        monkeypatch.delenv(key, raising=False)
    s = _reload_settings().Settings(_env_file=None)
    assert s.EXA_TIMEOUT_SECONDS is None
    assert s.FEED_BODY_PREVIEW_CHARS == 300
    assert s.DATABASE_URL.startswith("sqlite+aiosqlite://")

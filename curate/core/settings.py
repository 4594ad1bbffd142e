"""Paramètres de l'application (environnement + fichier .env).

Le fichier .env lu est choisi à l'import, par ordre de priorité :
`ENV_FILE` (chemin explicite), puis `.env.{APP_ENV}` s'il existe, puis `.env`.
Les variables d'environnement l'emportent toujours sur le fichier.
"""

import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


def resolve_env_file(cwd: Path | None = None) -> Path:
    explicit = os.getenv("ENV_FILE")
    if explicit:
        return Path(explicit)
    base = cwd or Path.cwd()
    specific = base / f".env.{os.getenv('APP_ENV', 'dev')}"
    return specific if specific.exists() else base / ".env"


class Settings(BaseSettings):
    """Configuration de l'API curate."""

    model_config = SettingsConfigDict(
        env_file=resolve_env_file(),
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=False,
        extra="ignore",
    )

    APP_NAME: str = "curate-backend"
    APP_ENV: str = "dev"
    APP_DEBUG: bool = True
    APP_HOST: str = "0.0.0.0"
    APP_PORT: int = 8000

    # Stockage (moteur SQLAlchemy asynchrone)
    DATABASE_URL: str = "sqlite+aiosqlite:///./curate.db"
    DB_AUTO_CREATE: bool = True
    DB_ECHO: bool = False

    # Jetons d'accès
    JWT_SECRET: str = "dev-secret-change-me"
    JWT_ALG: str = "HS256"
    JWT_EXPIRES_MIN: int = 60
    LOGIN_URL: str = "/auth/login"

    # API de recherche Exa
    EXA_API_KEY: str | None = None
    EXA_API_URL: str = "https://api.exa.ai"
    EXA_TIMEOUT_SECONDS: float | None = None  # None = pas de timeout

    # Listes de contenus
    FEED_BODY_PREVIEW_CHARS: int = 300
    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100


def get_settings() -> Settings:
    return Settings()

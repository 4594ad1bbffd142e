"""
Identité : mots de passe, jetons d'accès et règles de nommage des profils.

- Mots de passe hachés en PBKDF2-SHA256 (passlib).
- Jetons JWT signés (HS256 par défaut) portant `sub` (id utilisateur), `email` et `name`.
- Pseudo par défaut d'un profil = partie locale de l'email; noms affichés nettoyés.
"""

import re
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from jwt import InvalidTokenError
from passlib.context import CryptContext
from pydantic import BaseModel

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

NAME_MAX_LENGTH = 100
_NAME_ALLOWED_RE = re.compile(r"^[a-zA-Z0-9\s\-_.'\"]+$")
_WHITESPACE_RE = re.compile(r"\s+")


class TokenData(BaseModel):
    """Revendications lues dans un jeton d'accès."""

    sub: str
    email: str
    name: str = ""


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Faux aussi pour un hash vide ou d'un schéma inconnu."""
    try:
        return pwd_context.verify(password, password_hash)
    except ValueError:
        return False


def create_access_token(secret: str, alg: str, expires_min: int, payload: dict[str, Any]) -> str:
    """Signe `payload` avec une expiration à `expires_min` minutes."""
    claims = {**payload, "exp": datetime.now(UTC) + timedelta(minutes=expires_min)}
    return jwt.encode(claims, secret, algorithm=alg)


def decode_token(token: str, secret: str, alg: str) -> TokenData | None:
    """Revendications du jeton, ou None s'il est invalide, expiré ou incomplet."""
    try:
        return TokenData(**jwt.decode(token, secret, algorithms=[alg]))
    except (InvalidTokenError, ValueError):
        return None


def default_username(email: str) -> str:
    """Pseudo par défaut d'un profil : partie locale de l'email."""
    return email.split("@", 1)[0]


def normalize_name(value: str) -> str:
    """Nettoie un nom affiché (trim + espaces multiples réduits).

    Lève ValueError si le nom est vide, trop long ou contient des caractères interdits.
    """
    if not value or not value.strip():
        raise ValueError("Name cannot be empty or contain only spaces")
    name = _WHITESPACE_RE.sub(" ", value.strip())
    if len(name) > NAME_MAX_LENGTH:
        raise ValueError(f"Name must be less than {NAME_MAX_LENGTH} characters")
    if not _NAME_ALLOWED_RE.match(name):
        raise ValueError(
            "Name can only contain letters, numbers, spaces, and -_.'\" characters"
        )
    return name

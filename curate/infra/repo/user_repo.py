"""Dépôt SQL des utilisateurs et de leurs profils.

Un profil est créé en même temps que l'utilisateur (même transaction) et suit ses changements
de nom : il sert uniquement à résoudre les noms affichés des commentaires.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ...domain.auth import default_username
from .models import ProfileORM, UserORM

_USERNAME_SUFFIX_LEN = 6


class UserRepo:
    """Accès aux tables `users` et `profiles`."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, user_id: str) -> UserORM | None:
        return await self._session.get(UserORM, user_id)

    async def get_by_email(self, email: str) -> UserORM | None:
        stmt = select(UserORM).where(UserORM.email == email).limit(1)
        return (await self._session.execute(stmt)).scalars().first()

    async def _username_taken(self, username: str) -> bool:
        stmt = select(ProfileORM.id).where(ProfileORM.username == username).limit(1)
        return (await self._session.execute(stmt)).first() is not None

    async def create(self, name: str, email: str, password_hash: str) -> UserORM:
        """Crée l'utilisateur et son profil (pseudo dérivé de l'email)."""
        user = UserORM(name=name, email=email, password_hash=password_hash)
        self._session.add(user)
        await self._session.flush()
        username = default_username(email)
        if await self._username_taken(username):
            username = f"{username}-{user.id[:_USERNAME_SUFFIX_LEN]}"
        self._session.add(ProfileORM(id=user.id, full_name=name, username=username))
        await self._session.flush()
        return user

    async def rename(self, user_id: str, name: str) -> None:
        """Renomme l'utilisateur et répercute le nom sur son profil."""
        await self._session.execute(
            update(UserORM).where(UserORM.id == user_id).values(name=name)
        )
        await self._session.execute(
            update(ProfileORM).where(ProfileORM.id == user_id).values(full_name=name)
        )

    async def lookup_profile(self, user_id: str) -> dict[str, Any] | None:
        """Retourne {username, full_name} du profil, ou None."""
        profile = await self._session.get(ProfileORM, user_id)
        if not profile:
            return None
        return {"username": profile.username, "full_name": profile.full_name}

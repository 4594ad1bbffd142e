"""
Routes d'authentification pour l'API.

Ce module fournit les endpoints d'inscription, de connexion, de lecture et de renommage de
l'utilisateur courant. L'inscription crée aussi le profil public associé.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError

from curate.api.deps import require_user
from curate.api.schemas import (
    LoginPayload,
    SignupPayload,
    TokenResponse,
    UpdateNamePayload,
    UserResponse,
)
from curate.core.container import container
from curate.domain.auth import create_access_token, hash_password, verify_password
from curate.domain.entities import User
from curate.infra.repo.db import session_scope
from curate.infra.repo.user_repo import UserRepo

router = APIRouter(prefix="/auth", tags=["auth"])
current_user_dep = Depends(require_user)


@router.post("/signup", response_model=UserResponse)
async def signup(p: SignupPayload):
    """Inscrit un nouvel utilisateur dans le système."""
    try:
        async with session_scope(container.session_factory) as session:
            repo = UserRepo(session)
            if await repo.get_by_email(str(p.email)):
                raise HTTPException(status_code=409, detail="email_exists")
            user = await repo.create(
                name=p.name, email=str(p.email), password_hash=hash_password(p.password)
            )
    except IntegrityError as err:
        raise HTTPException(status_code=409, detail="email_exists") from err
    return {"id": user.id, "email": user.email, "name": user.name}


@router.post("/login", response_model=TokenResponse)
async def login(p: LoginPayload):
    """Authentifie un utilisateur et retourne un token d'accès."""
    async with session_scope(container.session_factory) as session:
        user = await UserRepo(session).get_by_email(str(p.email))
        if not user or not verify_password(p.password, user.password_hash or ""):
            raise HTTPException(status_code=401, detail="invalid_credentials")
        token = create_access_token(
            secret=container.settings.JWT_SECRET,
            alg=container.settings.JWT_ALG,
            expires_min=container.settings.JWT_EXPIRES_MIN,
            payload={"sub": user.id, "email": user.email, "name": user.name},
        )
    return {"access_token": token, "token_type": "bearer"}


@router.get("/me", response_model=UserResponse)
async def me(user: User = current_user_dep):
    """Retourne l'utilisateur courant."""
    return user


@router.patch("/me", response_model=UserResponse)
async def update_name(p: UpdateNamePayload, user: User = current_user_dep):
    """Renomme l'utilisateur courant (et son profil)."""
    async with session_scope(container.session_factory) as session:
        await UserRepo(session).rename(user.id, p.name)
    return {"id": user.id, "email": user.email, "name": p.name}

"""FastAPI dependencies: the configured store, the auth service and bearer identity."""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Dict, Optional

from fastapi import Depends, Header

from moviehub.auth import AuthService
from moviehub.config import BCRYPT_ROUNDS, DATABASE_URL, JWT_SECRET, USERS_FILE
from moviehub.db import create_db_engine
from moviehub.errors import AuthError
from moviehub.store import JsonUserStore, SqlUserStore, UserStore


@lru_cache(maxsize=1)
def get_user_store() -> UserStore:
    if DATABASE_URL:
        return SqlUserStore(create_db_engine(DATABASE_URL))
    return JsonUserStore(USERS_FILE)


def get_auth_service(store: UserStore = Depends(get_user_store)) -> AuthService:
    return AuthService(store, JWT_SECRET, bcrypt_rounds=BCRYPT_ROUNDS)


def bearer_token(authorization: Optional[str]) -> str:
    parts = (authorization or "").split()
    return parts[1] if len(parts) > 1 else ""


def identity_from_header(authorization: Optional[str], auth: AuthService) -> Dict[str, Any]:
    if not authorization:
        raise AuthError("Missing auth token")
    return auth.verify(bearer_token(authorization))


def require_identity(
    authorization: Optional[str] = Header(default=None),
    auth: AuthService = Depends(get_auth_service),
) -> Dict[str, Any]:
    """Claims of the caller's bearer token; 401 when absent or invalid."""
    return identity_from_header(authorization, auth)

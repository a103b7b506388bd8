"""
Account and watchlist service.

- Email/password users with bcrypt hashes
- Stateless HS256 bearer tokens (PyJWT) valid for 7 days
- Watchlist toggle over the injected ``UserStore``
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple
from uuid import uuid4

import bcrypt
import jwt

from moviehub.errors import (
    AuthError,
    ConflictError,
    InvalidCredentials,
    NotFoundError,
    ValidationError,
)
from moviehub.schemas import User
from moviehub.store import UserStore

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"
TOKEN_TTL = timedelta(days=7)
# bcrypt only accepts this many bytes of input
MAX_PASSWORD_BYTES = 72


def hash_password(password: str, rounds: int = 10) -> str:
    """Hash a password with bcrypt."""
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its hash."""
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except (ValueError, TypeError):
        return False


class AuthService:
    def __init__(
        self,
        store: UserStore,
        secret: str,
        *,
        bcrypt_rounds: int = 10,
        token_ttl: timedelta = TOKEN_TTL,
    ):
        self.store = store
        self.secret = secret
        self.bcrypt_rounds = bcrypt_rounds
        self.token_ttl = token_ttl
        self._dummy_hash: Optional[str] = None

    # ---- tokens ----

    def issue_token(self, user: User, now: Optional[datetime] = None) -> str:
        now = now or datetime.now(timezone.utc)
        payload = {
            "id": user.id,
            "email": user.email,
            "iat": now,
            "exp": now + self.token_ttl,
        }
        return jwt.encode(payload, self.secret, algorithm=JWT_ALGORITHM)

    def verify(self, token: str) -> Dict[str, Any]:
        """Return the token's claims, or raise AuthError."""
        if not token:
            raise AuthError("Invalid token")
        try:
            claims = jwt.decode(token, self.secret, algorithms=[JWT_ALGORITHM])
        except jwt.PyJWTError:
            raise AuthError("Invalid token")
        if not claims.get("id"):
            raise AuthError("Invalid token")
        return claims

    # ---- accounts ----

    def signup(
        self, name: Optional[str], email: Optional[str], password: Optional[str]
    ) -> Tuple[str, Dict[str, Any]]:
        if not email or not password:
            raise ValidationError("Missing fields")
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")

        password_hash = hash_password(password, self.bcrypt_rounds)

        with self.store.transaction() as users:
            if any(u.email == email for u in users):
                raise ConflictError("Email exists")
            user = User(
                id=uuid4().hex,
                name=name or "",
                email=email,
                password_hash=password_hash,
                watchlist=[],
            )
            users.append(user)

        logger.info("New account %s", user.id)
        return self.issue_token(user), user.public()

    def login(self, email: Optional[str], password: Optional[str]) -> Tuple[str, Dict[str, Any]]:
        user = self.store.find_by_email(email) if email else None

        if user is None:
            # unknown emails still pay for one bcrypt check
            verify_password(password or "", self._get_dummy_hash())
            logger.info("Login failed: unknown email")
            raise InvalidCredentials()

        if not password or not verify_password(password, user.password_hash):
            logger.info("Login failed for %s", user.id)
            raise InvalidCredentials()

        return self.issue_token(user), user.public()

    def _get_dummy_hash(self) -> str:
        if self._dummy_hash is None:
            self._dummy_hash = hash_password(uuid4().hex, self.bcrypt_rounds)
        return self._dummy_hash

    def _require_user(self, users: List[User], claims: Dict[str, Any]) -> User:
        user = next((u for u in users if u.id == claims.get("id")), None)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def current_user(self, claims: Dict[str, Any]) -> Dict[str, Any]:
        user = self._require_user(self.store.load(), claims)
        return {**user.public(), "watchlist": user.watchlist}

    # ---- watchlist ----

    def get_watchlist(self, claims: Dict[str, Any]) -> List[Dict[str, Any]]:
        return self._require_user(self.store.load(), claims).watchlist

    def toggle_watchlist(self, claims: Dict[str, Any], movie: Any) -> List[Dict[str, Any]]:
        """
        Remove ``movie`` from the user's watchlist if an item with its id is
        present, otherwise append it. Returns the updated watchlist.
        """
        with self.store.transaction() as users:
            user = self._require_user(users, claims)
            if not isinstance(movie, dict) or not movie.get("id"):
                raise ValidationError("Missing movie")

            movie_id = movie["id"]
            if any(m.get("id") == movie_id for m in user.watchlist):
                user.watchlist = [m for m in user.watchlist if m.get("id") != movie_id]
            else:
                user.watchlist.append(movie)

        return user.watchlist

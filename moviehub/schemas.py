"""
Pydantic models for stored users and API request bodies.

Request fields are all optional: missing values are reported by the auth
service as ``{"error": ...}`` 400s, not as FastAPI's 422 payload.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    """Stored user record. Serialised with the ``passwordHash`` key."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: Optional[str] = ""
    email: str
    password_hash: str = Field(alias="passwordHash")
    watchlist: List[Dict[str, Any]] = Field(default_factory=list)

    def public(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name or "", "email": self.email}

    def to_record(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class SignupIn(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginIn(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class WatchlistToggleIn(BaseModel):
    movie: Optional[Dict[str, Any]] = None

import os

# config reads the environment at import time
os.environ.setdefault("TMDB_API_KEY", "test-tmdb-key")
os.environ.setdefault("JWT_SECRET", "test-secret")

from typing import Any, Dict, List, Tuple

import pytest
import requests
from fastapi.testclient import TestClient

from moviehub.auth import AuthService
from moviehub.deps import get_auth_service, get_user_store
from moviehub.main import app
from moviehub.movies import tmdb
from moviehub.store import JsonUserStore


@pytest.fixture
def store(tmp_path):
    return JsonUserStore(tmp_path / "users.json")


@pytest.fixture
def auth(store):
    return AuthService(store, "test-secret", bcrypt_rounds=4)


@pytest.fixture
def client(store, auth):
    app.dependency_overrides[get_user_store] = lambda: store
    app.dependency_overrides[get_auth_service] = lambda: auth
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


class FakeResponse:
    def __init__(self, payload: Any, status_code: int = 200, url: str = ""):
        self.payload = payload
        self.status_code = status_code
        self.url = url

    def json(self):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(
                f"{self.status_code} Client Error for url: {self.url}", response=self
            )


class FakeTMDb:
    """Stands in for requests.get inside moviehub.movies.tmdb."""

    def __init__(self):
        self.routes: Dict[str, Tuple[Any, int]] = {}
        self.calls: List[Tuple[str, Dict[str, Any]]] = []
        self.down = False

    def add(self, path: str, payload: Any, status: int = 200):
        self.routes[path] = (payload, status)

    def get(self, url, params=None, timeout=None):
        path = url[len(tmdb.TMDB_BASE):]
        self.calls.append((path, dict(params or {})))
        if self.down:
            raise requests.ConnectionError(
                f"Max retries exceeded with url: {url}?api_key={(params or {}).get('api_key')}"
            )
        payload, status = self.routes.get(
            path, ({"status_message": "The resource you requested could not be found."}, 404)
        )
        return FakeResponse(payload, status, url)


@pytest.fixture
def fake_tmdb(monkeypatch):
    fake = FakeTMDb()
    monkeypatch.setattr(tmdb.requests, "get", fake.get)
    return fake


def signup(client, email="a@x.com", password="p", name=None) -> Dict[str, Any]:
    body = {"email": email, "password": password}
    if name is not None:
        body["name"] = name
    res = client.post("/auth/signup", json=body)
    assert res.status_code == 200, res.text
    return res.json()


def bearer(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}

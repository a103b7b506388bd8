"""
HTML fragment endpoints consumed by static/app.js.

Prefix: /ui

Each endpoint gathers the data for one view and hands it to the pure
renderers in ``moviehub.ui.render``. Upstream failures render a short
message instead of an error page.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Header
from fastapi.responses import HTMLResponse

from moviehub.auth import AuthService
from moviehub.config import TMDB_API_KEY
from moviehub.deps import get_auth_service, identity_from_header
from moviehub.errors import AuthError, NotFoundError, UpstreamError
from moviehub.movies import tmdb
from moviehub.ui.render import (
    DEFAULT_TMDB_CONFIG,
    render_detail,
    render_message,
    render_search,
    render_view,
)
from moviehub.ui.routes import Route

router = APIRouter(prefix="/ui", tags=["ui"])

# (row title, media type, time window)
HOME_ROWS = [
    ("Trending Now", "all", "day"),
    ("Popular Movies", "movie", "week"),
    ("Top TV", "tv", "week"),
]


def _load_config() -> dict:
    try:
        return tmdb.get_configuration(TMDB_API_KEY)
    except UpstreamError:
        return DEFAULT_TMDB_CONFIG


@router.get("/home", response_class=HTMLResponse)
def home_view():
    config = _load_config()
    try:
        rows = [
            (title, tmdb.get_trending(TMDB_API_KEY, media, window).get("results") or [])
            for title, media, window in HOME_ROWS
        ]
    except UpstreamError as e:
        return HTMLResponse(render_message("Failed to load movies."), status_code=e.status_code)

    trending = rows[0][1]
    hero = trending[0] if trending else None
    return HTMLResponse(render_view(Route.HOME, {"hero": hero, "rows": rows, "config": config}))


@router.get("/login", response_class=HTMLResponse)
def login_view():
    return HTMLResponse(render_view(Route.LOGIN))


@router.get("/signup", response_class=HTMLResponse)
def signup_view():
    return HTMLResponse(render_view(Route.SIGNUP))


@router.get("/account", response_class=HTMLResponse)
def account_view(
    authorization: Optional[str] = Header(default=None),
    auth: AuthService = Depends(get_auth_service),
):
    """Account card; logged-out or stale sessions get the login prompt."""
    if not authorization:
        return HTMLResponse(render_view(Route.ACCOUNT))

    try:
        user = auth.current_user(identity_from_header(authorization, auth))
    except (AuthError, NotFoundError) as e:
        return HTMLResponse(render_view(Route.ACCOUNT), status_code=e.status_code)

    return HTMLResponse(render_view(Route.ACCOUNT, {"user": user, "config": _load_config()}))


@router.get("/movie/{movie_id}", response_class=HTMLResponse)
def movie_view(movie_id: str):
    try:
        movie = tmdb.get_movie_details(TMDB_API_KEY, movie_id)
    except UpstreamError as e:
        return HTMLResponse(render_message("Failed to load movie"), status_code=e.status_code)
    return HTMLResponse(render_detail(movie, _load_config()))


@router.get("/search", response_class=HTMLResponse)
def search_view(query: str = ""):
    query = query.strip()
    if not query:
        return HTMLResponse(render_message("Type something to search."))
    try:
        results = tmdb.search_movies(TMDB_API_KEY, {"query": query}).get("results") or []
    except UpstreamError as e:
        return HTMLResponse(render_message("Search failed."), status_code=e.status_code)
    return HTMLResponse(render_search(query, results, _load_config()))

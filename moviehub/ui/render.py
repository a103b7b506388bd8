"""
HTML fragments for the single-page frontend.

Every function here is pure in its arguments: it takes already-fetched data
(TMDb payloads, the public user) and returns markup rendered through the
Jinja2 templates under ``moviehub/templates/ui``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from fastapi.templating import Jinja2Templates

from moviehub.ui.routes import Route

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

PLACEHOLDER_IMAGE = "/static/placeholder.svg"
OVERVIEW_PREVIEW_CHARS = 220

DEFAULT_TMDB_CONFIG: Dict[str, Any] = {
    "images": {
        "secure_base_url": "https://image.tmdb.org/t/p/",
        "poster_sizes": ["w342", "w500", "original"],
    }
}


def image_url(config: Optional[dict], size: str, path: Optional[str]) -> str:
    if not path:
        return PLACEHOLDER_IMAGE
    images = (config or {}).get("images") or {}
    base = images.get("secure_base_url") or DEFAULT_TMDB_CONFIG["images"]["secure_base_url"]
    return f"{base}{size}{path}"


def display_title(movie: dict) -> str:
    return movie.get("title") or movie.get("name") or ""


def watchlist_item(movie: dict) -> Dict[str, Any]:
    """The descriptor the client posts to /api/watchlist for this movie."""
    return {
        "id": movie.get("id"),
        "title": display_title(movie),
        "poster_path": movie.get("poster_path"),
    }


def find_trailer(movie: dict) -> Optional[dict]:
    videos = (movie.get("videos") or {}).get("results") or []
    return next((v for v in videos if v.get("type") == "Trailer"), None)


def _poster(movie: dict, config: Optional[dict]) -> Dict[str, Any]:
    path = movie.get("poster_path") or movie.get("backdrop_path")
    return {
        "id": movie.get("id"),
        "title": display_title(movie),
        "image": image_url(config, "w342", path),
    }


def _render(template_name: str, **context: Any) -> str:
    return templates.get_template(template_name).render(**context)


def render_message(text: str) -> str:
    return _render("ui/message.html", text=text)


def render_banner(movie: Optional[dict], config: Optional[dict]) -> str:
    if not movie:
        return ""
    return _render(
        "ui/banner.html",
        movie_id=movie.get("id"),
        title=display_title(movie),
        overview=(movie.get("overview") or "")[:OVERVIEW_PREVIEW_CHARS],
        backdrop=image_url(config, "original", movie.get("backdrop_path")),
        item=watchlist_item(movie),
    )


def render_row(title: str, movies: Sequence[dict], config: Optional[dict]) -> str:
    return _render("ui/row.html", title=title, posters=[_poster(m, config) for m in movies])


def render_home(
    hero: Optional[dict],
    rows: Sequence[Tuple[str, Sequence[dict]]],
    config: Optional[dict],
) -> str:
    return _render(
        "ui/home.html",
        banner=render_banner(hero, config),
        rows=[render_row(title, movies, config) for title, movies in rows],
    )


def render_search(query: str, movies: Sequence[dict], config: Optional[dict]) -> str:
    return render_row(f'Search results for "{query}"', movies, config)


def render_login() -> str:
    return _render("ui/login.html")


def render_signup() -> str:
    return _render("ui/signup.html")


def render_account(user: Optional[dict], config: Optional[dict]) -> str:
    """Account card, or the login prompt when there is no user."""
    if not user:
        return _render("ui/account_placeholder.html")
    watchlist: List[dict] = user.get("watchlist") or []
    return _render(
        "ui/account.html",
        name=user.get("name") or "(not set)",
        email=user.get("email") or "",
        posters=[_poster(m, config) for m in watchlist],
    )


def render_detail(movie: dict, config: Optional[dict]) -> str:
    trailer = find_trailer(movie)
    return _render(
        "ui/detail.html",
        title=display_title(movie),
        tagline=movie.get("tagline") or "",
        overview=movie.get("overview") or "",
        poster=image_url(config, "w500", movie.get("poster_path")),
        trailer_url=f"https://www.youtube.com/watch?v={trailer['key']}" if trailer else None,
        item=watchlist_item(movie),
    )


def render_view(route: Route, data: Optional[dict] = None) -> str:
    """
    Render the region for ``route``.

    ``data`` keys by route: HOME takes ``hero``, ``rows`` and ``config``;
    ACCOUNT takes ``user`` (absent means logged out) and ``config``;
    LOGIN and SIGNUP take nothing.
    """
    data = data or {}
    config = data.get("config") or DEFAULT_TMDB_CONFIG
    if route is Route.LOGIN:
        return render_login()
    if route is Route.SIGNUP:
        return render_signup()
    if route is Route.ACCOUNT:
        return render_account(data.get("user"), config)
    return render_home(data.get("hero"), data.get("rows") or [], config)

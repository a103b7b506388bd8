import logging
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from moviehub.auth import AuthService
from moviehub.config import (
    CORS_ORIGINS,
    DEFAULT_JWT_SECRET,
    JWT_SECRET,
    LOG_LEVEL,
    PORT,
    TMDB_API_KEY,
)
from moviehub.deps import get_auth_service, require_identity
from moviehub.errors import MovieHubError
from moviehub.movies.tmdb import (
    get_configuration,
    get_movie_details,
    get_trending,
    search_movies,
)
from moviehub.schemas import LoginIn, SignupIn, WatchlistToggleIn
from moviehub.ui.render import templates
from moviehub.ui.routes import Route
from moviehub.ui.views import router as ui_router

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("moviehub")

if JWT_SECRET == DEFAULT_JWT_SECRET:
    logger.warning("JWT_SECRET is not set; using the built-in development secret.")

STATIC_DIR = Path(__file__).resolve().parent / "static"
TOKEN_STORAGE_KEY = "token"

app = FastAPI(title="MovieHub")
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["*"],
)


@app.exception_handler(MovieHubError)
async def moviehub_error(request: Request, exc: MovieHubError):
    logger.info("%s %s -> %d %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(exc.to_body(), status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def invalid_body(request: Request, exc: RequestValidationError):
    return JSONResponse({"error": "Invalid request body"}, status_code=400)


@app.exception_handler(StarletteHTTPException)
async def http_error(request: Request, exc: StarletteHTTPException):
    return JSONResponse({"error": str(exc.detail)}, status_code=exc.status_code, headers=exc.headers)


# ----- Auth -----

@app.post("/auth/signup")
def signup(body: SignupIn, auth: AuthService = Depends(get_auth_service)):
    token, user = auth.signup(body.name, body.email, body.password)
    return {"token": token, "user": user}


@app.post("/auth/login")
def login(body: LoginIn, auth: AuthService = Depends(get_auth_service)):
    token, user = auth.login(body.email, body.password)
    return {"token": token, "user": user}


@app.get("/auth/me")
def me(
    claims: Dict[str, Any] = Depends(require_identity),
    auth: AuthService = Depends(get_auth_service),
):
    return auth.current_user(claims)


# ----- Watchlist (protected) -----

@app.get("/api/watchlist")
def get_watchlist(
    claims: Dict[str, Any] = Depends(require_identity),
    auth: AuthService = Depends(get_auth_service),
):
    return {"watchlist": auth.get_watchlist(claims)}


@app.post("/api/watchlist")
def toggle_watchlist(
    body: Optional[WatchlistToggleIn] = None,
    claims: Dict[str, Any] = Depends(require_identity),
    auth: AuthService = Depends(get_auth_service),
):
    return {"watchlist": auth.toggle_watchlist(claims, body.movie if body else None)}


# ----- TMDb proxy -----

@app.get("/api/trending/{media_type}/{time_window}")
def trending(media_type: str, time_window: str):
    return get_trending(TMDB_API_KEY, media_type, time_window)


@app.get("/api/movie/{movie_id}")
def movie_detail(movie_id: str):
    return get_movie_details(TMDB_API_KEY, movie_id)


@app.get("/api/search/movie")
def search(request: Request):
    return search_movies(TMDB_API_KEY, dict(request.query_params))


@app.get("/api/configuration")
def configuration():
    return get_configuration(TMDB_API_KEY)


# ----- Frontend -----

app.include_router(ui_router)
app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")


@app.get("/{full_path:path}", include_in_schema=False)
def app_shell(request: Request, full_path: str):
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "routes": [r.value for r in Route],
            "home_route": Route.HOME.value,
            "token_key": TOKEN_STORAGE_KEY,
        },
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=PORT)

# moviehub/movies/tmdb.py
import logging
from typing import Any, Dict, Mapping, Optional

import requests

from moviehub.config import TMDB_TIMEOUT
from moviehub.errors import UpstreamError

TMDB_BASE = "https://api.themoviedb.org/3"

logger = logging.getLogger(__name__)


def _get(api_key: str, path: str, params: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """
    GET a TMDb endpoint with the server key attached and return the JSON body.
    Any transport, HTTP or decoding failure becomes UpstreamError.
    """
    query: Dict[str, Any] = dict(params or {})
    query["api_key"] = api_key

    try:
        r = requests.get(f"{TMDB_BASE}{path}", params=query, timeout=TMDB_TIMEOUT)
        r.raise_for_status()
        return r.json()
    except (requests.RequestException, ValueError) as e:
        details = _describe_failure(e)
        logger.warning("TMDb request %s failed: %s", path, details)
        raise UpstreamError(details) from e


def _describe_failure(e: Exception) -> str:
    """
    Error text safe to return to clients and logs.
    requests' own messages embed the request URL, api_key included.
    """
    if isinstance(e, requests.HTTPError) and e.response is not None:
        return f"Request failed with status code {e.response.status_code}"
    if isinstance(e, ValueError):
        return "Invalid JSON in TMDb response"
    return f"{type(e).__name__} while contacting TMDb"


def get_trending(api_key: str, media_type: str, time_window: str) -> dict:
    return _get(api_key, f"/trending/{media_type}/{time_window}")


def get_movie_details(api_key: str, tmdb_id) -> dict:
    """Movie details with videos and credits embedded in the same response."""
    return _get(api_key, f"/movie/{tmdb_id}", {"append_to_response": "videos,credits"})


def search_movies(api_key: str, params: Mapping[str, Any]) -> dict:
    """
    Search movies. Caller params (query, page, year, ...) go through unmodified;
    only api_key is forced to the server's key.
    """
    return _get(api_key, "/search/movie", params)


def get_configuration(api_key: str) -> dict:
    """Image base URL and supported sizes, used to build poster/backdrop URLs."""
    return _get(api_key, "/configuration")

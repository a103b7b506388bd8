from enum import Enum
from typing import Optional


class Route(str, Enum):
    """Client-side views, keyed by the URL fragment."""

    HOME = "home"
    LOGIN = "login"
    SIGNUP = "signup"
    ACCOUNT = "account"

    @property
    def shows_home_sections(self) -> bool:
        return self is Route.HOME


def route_from_fragment(fragment: Optional[str]) -> Route:
    """
    Resolve a location hash ("#login", "#/", "") to a Route.
    Anything unrecognised, "#movies" included, falls back to HOME.
    """
    name = (fragment or "").lstrip("#").strip("/")
    try:
        return Route(name)
    except ValueError:
        return Route.HOME

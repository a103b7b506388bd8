"""Error types surfaced by the API as ``{"error": message}`` bodies."""

from typing import Any, Dict, Optional


class MovieHubError(Exception):
    """Base exception for MovieHub"""

    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)

    def to_body(self) -> Dict[str, Any]:
        return {"error": self.message}


class ValidationError(MovieHubError):
    """Missing or malformed input"""

    status_code = 400


class ConflictError(MovieHubError):
    """Duplicate email on signup"""

    status_code = 400


class AuthError(MovieHubError):
    """Missing, invalid or expired bearer token"""

    status_code = 401


class InvalidCredentials(AuthError):
    """Wrong email/password pair. Reported as 400, like the login form always has."""

    status_code = 400

    def __init__(self):
        super().__init__("Invalid credentials")


class NotFoundError(MovieHubError):
    """Identity or resource absent"""

    status_code = 404


class UpstreamError(MovieHubError):
    """Error from the TMDb API"""

    status_code = 500

    def __init__(self, details: str):
        self.details = details
        super().__init__("TMDb error")

    def to_body(self) -> Dict[str, Any]:
        return {"error": self.message, "details": self.details}


class StoreError(MovieHubError):
    """User store could not be read or written"""

    status_code = 500

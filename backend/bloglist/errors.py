"""Domain errors raised by services and the authorization guard.

Each error carries the HTTP status it maps to; `main` installs a single
exception handler that turns them into JSON responses.
"""

from typing import Dict, Optional


class BlogListError(Exception):
    """Base class for expected, request-level failures."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def headers(self) -> Optional[Dict[str, str]]:
        return None


class ValidationError(BlogListError):
    """A required field is missing or a value is out of range."""
    status_code = 400


class InvalidCredentials(BlogListError):
    """Login failed. Unknown user and wrong password look the same."""
    status_code = 401

    def __init__(self, message: str = "invalid username or password"):
        super().__init__(message)


class Unauthorized(BlogListError):
    """Missing, malformed or expired bearer token."""
    status_code = 401

    def __init__(self, message: str = "token missing or invalid"):
        super().__init__(message)

    @property
    def headers(self) -> Optional[Dict[str, str]]:
        return {"WWW-Authenticate": "Bearer"}


class Forbidden(BlogListError):
    """Authenticated, but not the owner of the resource."""
    status_code = 403

    def __init__(self, message: str = "only the creator can modify this blog"):
        super().__init__(message)


class NotFound(BlogListError):
    status_code = 404

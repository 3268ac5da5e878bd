"""Exception hierarchy for the cookie jar service layer."""

from __future__ import annotations

from typing import Any, Dict, Optional


class CookieJarError(RuntimeError):
    """Base error that carries optional metadata about the failure."""

    def __init__(self, message: str, *, metadata: Optional[Any] = None) -> None:
        super().__init__(message)
        self.metadata = metadata


class CookiePersistenceError(CookieJarError):
    pass


class TooManyRedirectsError(CookieJarError):
    pass


class HTTPClientResponseError(CookieJarError):
    """Raised when the response cannot be parsed as requested."""

    def __init__(self, message: str, *, status_code: int, headers: Dict[str, str], body: bytes) -> None:
        super().__init__(message, metadata={"statusCode": status_code})
        self.status_code = status_code
        self.headers = headers
        self.body = body

"""In-memory working set of cookies."""
from __future__ import annotations

from typing import Dict, Iterable, Iterator, Protocol, Tuple

from .models import Cookie


class CookieCache(Protocol):
    """In-memory cookie store keyed by cookie identity."""

    def add_all(self, cookies: Iterable[Cookie]) -> None:
        """Insert cookies, replacing any with the same identity."""

    def __iter__(self) -> Iterator[Cookie]:
        """Iterate current cookies; ``discard`` may be called while iterating."""

    def discard(self, cookie: Cookie) -> None:
        """Remove the cookie with the same identity, if present."""

    def clear(self) -> None:
        """Remove every cookie."""


class SetCookieCache:
    """Cookie cache with set semantics on ``Cookie.key``."""

    def __init__(self) -> None:
        self._cookies: Dict[Tuple[str, str, str], Cookie] = {}

    def add_all(self, cookies: Iterable[Cookie]) -> None:
        for cookie in cookies:
            # re-inserting moves a replaced cookie to the end
            self._cookies.pop(cookie.key, None)
            self._cookies[cookie.key] = cookie

    def __iter__(self) -> Iterator[Cookie]:
        return iter(list(self._cookies.values()))

    def __len__(self) -> int:
        return len(self._cookies)

    def __contains__(self, cookie: object) -> bool:
        return isinstance(cookie, Cookie) and cookie.key in self._cookies

    def discard(self, cookie: Cookie) -> None:
        self._cookies.pop(cookie.key, None)

    def clear(self) -> None:
        self._cookies.clear()

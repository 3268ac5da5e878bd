"""Cookie jar that keeps an in-memory cache in sync with a durable persistor."""
from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Iterator, List, Optional, Protocol, Sequence

from .cache import CookieCache
from .models import Cookie
from .persistor import CookiePersistor

logger = logging.getLogger(__name__)


class ClearableCookieJar(Protocol):
    """Cookie jar contract used by the HTTP client."""

    def save_from_response(self, url: str, cookies: Sequence[Cookie]) -> None:
        ...

    def load_for_request(self, url: str) -> List[Cookie]:
        ...

    def clear_session(self) -> None:
        """Drop every cookie that is not backed by durable storage."""

    def clear(self) -> None:
        """Drop every cookie, durable ones included."""


class PersistentCookieJar:
    """Cookie jar backed by a ``CookieCache`` and a ``CookiePersistor``.

    The persistor only ever holds cookies that are also in the cache and were
    eligible for persistence when last saved. Expired cookies are evicted from
    both stores lazily, the next time ``load_for_request`` walks the cache.

    With ``ignore_persistence`` set, session cookies are persisted as well and
    survive ``clear_session`` and process restarts.
    """

    def __init__(
        self,
        cache: CookieCache,
        persistor: CookiePersistor,
        ignore_persistence: bool = False,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._cache = cache
        self._persistor = persistor
        self._ignore_persistence = ignore_persistence
        self._clock = clock
        self._lock = threading.RLock()

        with self._lock:
            self._cache.add_all(self._persistor.load_all())

    @property
    def ignore_persistence(self) -> bool:
        return self._ignore_persistence

    def save_from_response(self, url: str, cookies: Sequence[Cookie]) -> None:
        with self._lock:
            self._cache.add_all(cookies)
            self._persistor.save_all(self._filter_persistent_cookies(cookies))

    def _filter_persistent_cookies(self, cookies: Sequence[Cookie]) -> List[Cookie]:
        if self._ignore_persistence:
            return list(cookies)
        return [cookie for cookie in cookies if cookie.persistent]

    def load_for_request(self, url: str) -> List[Cookie]:
        with self._lock:
            now = self._clock()
            expired: List[Cookie] = []
            valid: List[Cookie] = []

            for cookie in self._cache:
                if cookie.is_expired(now):
                    expired.append(cookie)
                    self._cache.discard(cookie)
                elif cookie.matches(url):
                    valid.append(cookie)

            if expired:
                logger.debug("Evicting %d expired cookies", len(expired))
                self._persistor.remove_all(expired)

            return valid

    def clear_session(self) -> None:
        with self._lock:
            self._cache.clear()
            self._cache.add_all(self._persistor.load_all())
            logger.debug("Session cookies cleared")

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()
            self._persistor.clear()
            logger.debug("All cookies cleared")

    def get_cookie(self, host: Optional[str], name: Optional[str], scheme: Optional[str] = "https") -> Optional[str]:
        """Return the value of cookie ``name`` sent to ``host``, or ``None``."""
        if not host or not name or not scheme:
            return None
        for cookie in self.load_for_request(f"{scheme}://{host}/"):
            if cookie.name.lower() == name.lower():
                return cookie.value
        return None

    def __iter__(self) -> Iterator[Cookie]:
        with self._lock:
            return iter(list(self._cache))

    def __len__(self) -> int:
        with self._lock:
            return sum(1 for _ in self._cache)

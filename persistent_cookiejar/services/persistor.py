"""Durable cookie storage."""
from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Protocol, Tuple

from .errors import CookiePersistenceError
from .models import Cookie

logger = logging.getLogger(__name__)


class CookiePersistor(Protocol):
    """Durable cookie store keyed by cookie identity."""

    def load_all(self) -> List[Cookie]:
        ...

    def save_all(self, cookies: Iterable[Cookie]) -> None:
        ...

    def remove_all(self, cookies: Iterable[Cookie]) -> None:
        ...

    def clear(self) -> None:
        ...


class MemoryCookiePersistor:
    """Persistor that lives only as long as the process."""

    def __init__(self, cookies: Iterable[Cookie] = ()) -> None:
        self._lock = threading.RLock()
        self._data: Dict[Tuple[str, str, str], Cookie] = {}
        self.save_all(cookies)

    def load_all(self) -> List[Cookie]:
        with self._lock:
            return list(self._data.values())

    def save_all(self, cookies: Iterable[Cookie]) -> None:
        with self._lock:
            for cookie in cookies:
                self._data[cookie.key] = cookie

    def remove_all(self, cookies: Iterable[Cookie]) -> None:
        with self._lock:
            for cookie in cookies:
                self._data.pop(cookie.key, None)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()


def _storage_key(cookie: Cookie) -> str:
    return json.dumps([cookie.domain, cookie.path, cookie.name])


class FileCookiePersistor:
    """Stores cookies as a JSON object on disk, one entry per cookie identity."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._lock = threading.RLock()
        self._data: Optional[Dict[str, Cookie]] = None

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> Dict[str, Cookie]:
        if self._data is not None:
            return self._data
        data: Dict[str, Cookie] = {}
        if self._path.exists():
            try:
                raw = self._path.read_text(encoding="utf-8")
            except OSError as exc:
                raise CookiePersistenceError(
                    f"unable to read cookie file {self._path}", metadata=str(exc)
                ) from exc
            if raw.strip():
                try:
                    payload = json.loads(raw)
                except json.JSONDecodeError as exc:
                    raise CookiePersistenceError(
                        f"corrupted cookie file {self._path}", metadata=str(exc)
                    ) from exc
                if not isinstance(payload, dict):
                    raise CookiePersistenceError(f"unexpected cookie file layout in {self._path}")
                for key, entry in payload.items():
                    if not isinstance(entry, dict) or not entry.get("name") or not entry.get("domain"):
                        logger.warning("Skipping malformed cookie entry %r in %s", key, self._path)
                        continue
                    cookie = Cookie.from_dict(entry)
                    data[_storage_key(cookie)] = cookie
        self._data = data
        return data

    def _persist(self, data: Dict[str, Cookie]) -> None:
        payload = json.dumps(
            {key: cookie.to_dict() for key, cookie in data.items()},
            indent=2,
            sort_keys=True,
        )
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(payload, encoding="utf-8")
        except OSError as exc:
            raise CookiePersistenceError(
                f"unable to write cookie file {self._path}", metadata=str(exc)
            ) from exc
        logger.debug("Wrote %d cookies to %s", len(data), self._path)

    def load_all(self) -> List[Cookie]:
        with self._lock:
            return list(self._load().values())

    def save_all(self, cookies: Iterable[Cookie]) -> None:
        cookies = list(cookies)
        if not cookies:
            return
        with self._lock:
            data = self._load()
            for cookie in cookies:
                data[_storage_key(cookie)] = cookie
            self._persist(data)

    def remove_all(self, cookies: Iterable[Cookie]) -> None:
        with self._lock:
            data = self._load()
            removed = False
            for cookie in cookies:
                if data.pop(_storage_key(cookie), None) is not None:
                    removed = True
            if removed:
                self._persist(data)

    def clear(self) -> None:
        with self._lock:
            self._data = {}
            self._persist(self._data)

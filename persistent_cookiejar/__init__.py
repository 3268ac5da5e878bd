"""Persistent HTTP cookie jar backed by a durable cookie store."""
from .services import (
    Cookie,
    FileCookiePersistor,
    MemoryCookiePersistor,
    PersistentCookieJar,
    SetCookieCache,
)

__all__ = [
    "Cookie",
    "FileCookiePersistor",
    "MemoryCookiePersistor",
    "PersistentCookieJar",
    "SetCookieCache",
]

"""Service-layer exports."""
from .cache import CookieCache, SetCookieCache
from .cookie_jar import ClearableCookieJar, PersistentCookieJar
from .errors import CookieJarError, CookiePersistenceError
from .http_client import HTTPClient, HTTPRequest, HTTPResult
from .models import MAX_DATE, Cookie
from .persistor import CookiePersistor, FileCookiePersistor, MemoryCookiePersistor

__all__ = [
    "MAX_DATE",
    "ClearableCookieJar",
    "Cookie",
    "CookieCache",
    "CookieJarError",
    "CookiePersistenceError",
    "CookiePersistor",
    "FileCookiePersistor",
    "HTTPClient",
    "HTTPRequest",
    "HTTPResult",
    "MemoryCookiePersistor",
    "PersistentCookieJar",
    "SetCookieCache",
]

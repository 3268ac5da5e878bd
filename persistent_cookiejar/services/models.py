"""Domain models for the cookie jar service layer."""
from __future__ import annotations

import http.cookiejar
from dataclasses import dataclass
from typing import Any, Dict, Tuple
from urllib.parse import urlsplit

import requests
from requests.cookies import MockRequest, create_cookie

# 9999-12-31T23:59:59Z, used for cookies that carry no expiry of their own.
MAX_DATE = 253402300799.0

_POLICY = http.cookiejar.DefaultCookiePolicy()


@dataclass(frozen=True, slots=True)
class Cookie:
    name: str
    value: str
    domain: str
    path: str = "/"
    expires_at: float = MAX_DATE
    secure: bool = False
    http_only: bool = False
    host_only: bool = False
    persistent: bool = False

    @property
    def key(self) -> Tuple[str, str, str]:
        """Identity used for replacement and removal."""
        return (self.name, self.domain, self.path)

    def is_expired(self, now: float) -> bool:
        return self.expires_at < now

    def matches(self, url: str) -> bool:
        """Whether this cookie should be sent with a request to ``url``."""
        host = (urlsplit(url).hostname or "").lower()
        if not host:
            return False
        if self.host_only:
            if host != self.domain:
                return False
        elif host != self.domain and (
            not host.endswith("." + self.domain) or http.cookiejar.IPV4_RE.search(host)
        ):
            return False

        request = MockRequest(requests.Request("GET", url))
        if not _POLICY.path_return_ok(self.path, request):
            return False
        return _POLICY.return_ok_secure(self.to_http_cookie(), request)

    @classmethod
    def from_http_cookie(cls, cookie: http.cookiejar.Cookie) -> "Cookie":
        expires = cookie.expires
        return cls(
            name=cookie.name,
            value=cookie.value or "",
            domain=cookie.domain.lstrip(".").lower(),
            path=cookie.path or "/",
            expires_at=float(expires) if expires is not None else MAX_DATE,
            secure=bool(cookie.secure),
            http_only=any(key.lower() == "httponly" for key in cookie._rest),
            host_only=not cookie.domain_specified,
            persistent=not cookie.discard,
        )

    def to_http_cookie(self) -> http.cookiejar.Cookie:
        rest = {"HttpOnly": None} if self.http_only else {}
        return create_cookie(
            self.name,
            self.value,
            domain=self.domain if self.host_only else "." + self.domain,
            path=self.path,
            secure=self.secure,
            expires=None if self.expires_at >= MAX_DATE else int(self.expires_at),
            discard=not self.persistent,
            rest=rest,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Cookie":
        expires_at = data.get("expiresAt")
        return cls(
            name=data.get("name", ""),
            value=data.get("value", ""),
            domain=str(data.get("domain") or "").lstrip(".").lower(),
            path=data.get("path") or "/",
            expires_at=float(expires_at) if expires_at is not None else MAX_DATE,
            secure=bool(data.get("secure", False)),
            http_only=bool(data.get("httpOnly", False)),
            host_only=bool(data.get("hostOnly", False)),
            persistent=bool(data.get("persistent", False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "value": self.value,
            "domain": self.domain,
            "path": self.path,
            "expiresAt": self.expires_at,
            "secure": self.secure,
            "httpOnly": self.http_only,
            "hostOnly": self.host_only,
            "persistent": self.persistent,
        }

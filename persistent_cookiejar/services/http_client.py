"""Thin wrapper around ``requests`` that routes cookies through a cookie jar."""
from __future__ import annotations

import dataclasses
import http.client
import http.cookiejar
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, MutableMapping, Optional, Tuple
from urllib.parse import urlencode, urljoin, urlsplit

import requests
from requests.cookies import MockRequest, MockResponse, RequestsCookieJar

from .cookie_jar import ClearableCookieJar
from .errors import HTTPClientResponseError, TooManyRedirectsError
from .models import Cookie

logger = logging.getLogger(__name__)

RESPONSE_FORMAT_JSON = "json"
RESPONSE_FORMAT_TEXT = "text"

DEFAULT_MAX_REDIRECTS = 30


@dataclass(slots=True)
class HTTPRequest:
    method: str
    url: str
    headers: Mapping[str, str] = dataclasses.field(default_factory=dict)
    payload: Optional["Payload"] = None
    response_format: str = RESPONSE_FORMAT_TEXT
    follow_redirects: bool = True


@dataclass(slots=True)
class HTTPResult:
    status_code: int
    url: str
    headers: Dict[str, str]
    data: Any

    def get_header(self, key: str) -> str:
        lowered = key.lower()
        for header_key, value in self.headers.items():
            if header_key.lower() == lowered:
                return value
        raise KeyError(key)


class Payload:
    def serialize(self) -> Tuple[bytes, str]:
        raise NotImplementedError


class JSONPayload(Payload):
    def __init__(self, content: Any) -> None:
        self._content = content

    def serialize(self) -> Tuple[bytes, str]:
        return json.dumps(self._content).encode("utf-8"), "application/json"


class FormURLEncodedPayload(Payload):
    def __init__(self, content: Mapping[str, Any]) -> None:
        self._content = content

    def serialize(self) -> Tuple[bytes, str]:
        encoded = urlencode([(key, value) for key, value in self._content.items()], doseq=True)
        return encoded.encode("utf-8"), "application/x-www-form-urlencoded"


class _RecordingCookieJar(http.cookiejar.CookieJar):
    """Collects the cookies a server asked to delete while extracting."""

    def __init__(self) -> None:
        super().__init__()
        self.deleted: List[Tuple[str, str, str]] = []

    def clear(self, domain=None, path=None, name=None):
        if name is not None:
            self.deleted.append((domain, path, name))
        super().clear(domain, path, name)


def response_cookies(response: requests.Response) -> List[Cookie]:
    """Parse the ``Set-Cookie`` headers of ``response`` into cookies.

    Cookies the server expired are returned with an expiry in the past so that
    the jar evicts any stored copy.
    """
    message = http.client.HTTPMessage()
    for value in response.raw.headers.getlist("Set-Cookie"):
        message["Set-Cookie"] = value
    if not message.get_all("Set-Cookie"):
        return []

    host = (urlsplit(response.request.url).hostname or "").lower()
    jar = _RecordingCookieJar()
    jar.extract_cookies(MockResponse(message), MockRequest(response.request))

    cookies: List[Cookie] = []
    for http_cookie in jar:
        cookie = Cookie.from_http_cookie(http_cookie)
        if cookie.host_only:
            cookie = dataclasses.replace(cookie, domain=host)
        cookies.append(cookie)
    for domain, path, name in jar.deleted:
        host_only = not domain.startswith(".")
        cookies.append(
            Cookie(
                name=name,
                value="",
                domain=host if host_only else domain.lstrip(".").lower(),
                path=path,
                expires_at=0.0,
                host_only=host_only,
                persistent=True,
            )
        )
    return cookies


def cookie_header(cookies: List[Cookie]) -> Optional[str]:
    if not cookies:
        return None
    return "; ".join(f"{cookie.name}={cookie.value}" for cookie in cookies)


class HTTPClient:
    def __init__(
        self,
        jar: ClearableCookieJar,
        verify: bool | str = True,
        max_redirects: int = DEFAULT_MAX_REDIRECTS,
    ) -> None:
        self._jar = jar
        self._max_redirects = max_redirects
        self.session = requests.Session()
        self.session.verify = verify
        # the jar is the only cookie store; the session must not keep its own
        self.session.cookies = RequestsCookieJar(
            policy=http.cookiejar.DefaultCookiePolicy(allowed_domains=[])
        )

    @property
    def jar(self) -> ClearableCookieJar:
        return self._jar

    def send(self, request: HTTPRequest) -> HTTPResult:
        data: Optional[bytes] = None
        headers: MutableMapping[str, str] = dict(request.headers)
        if request.payload is not None:
            data, default_content_type = request.payload.serialize()
            if "content-type" not in {k.lower() for k in headers.keys()}:
                headers["Content-Type"] = default_content_type

        method = request.method.upper()
        url = request.url
        for _ in range(self._max_redirects + 1):
            response = self._send_once(method, url, headers, data)
            if not (request.follow_redirects and response.is_redirect):
                return self._build_result(response, request.response_format)

            location = urljoin(url, response.headers["Location"])
            logger.debug("Following %d redirect from %s to %s", response.status_code, url, location)
            if (response.status_code == 303 and method != "HEAD") or (
                response.status_code in (301, 302) and method == "POST"
            ):
                method = "GET"
                data = None
                headers = {k: v for k, v in headers.items() if k.lower() != "content-type"}
            response.close()
            url = location

        raise TooManyRedirectsError(
            f"exceeded {self._max_redirects} redirects", metadata={"url": request.url}
        )

    def _send_once(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        data: Optional[bytes],
    ) -> requests.Response:
        hop_headers = {k: v for k, v in headers.items() if k.lower() != "cookie"}
        header = cookie_header(self._jar.load_for_request(url))
        if header:
            hop_headers["Cookie"] = header

        response = self.session.request(
            method=method,
            url=url,
            headers=hop_headers,
            data=data,
            allow_redirects=False,
        )
        logger.debug("HTTP %d %s %s", response.status_code, method, url)

        self._jar.save_from_response(url, response_cookies(response))
        return response

    def _build_result(self, response: requests.Response, response_format: str) -> HTTPResult:
        raw_headers = dict(response.headers)
        raw_body = response.content

        parsed: Any
        if response_format == RESPONSE_FORMAT_TEXT:
            parsed = response.text
        elif response_format == RESPONSE_FORMAT_JSON:
            try:
                parsed = response.json()
            except ValueError as exc:
                raise HTTPClientResponseError(
                    "Failed to parse server response",
                    status_code=response.status_code,
                    headers=raw_headers,
                    body=raw_body,
                ) from exc
        else:
            raise HTTPClientResponseError(
                f"Unsupported response format: {response_format}",
                status_code=response.status_code,
                headers=raw_headers,
                body=raw_body,
            )

        return HTTPResult(
            status_code=response.status_code,
            url=response.url,
            headers=raw_headers,
            data=parsed,
        )

import json
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from persistent_cookiejar.services import MemoryCookiePersistor, PersistentCookieJar, SetCookieCache

from tests.utils import FakeClock


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def persistor():
    return MemoryCookiePersistor()


@pytest.fixture
def jar(persistor, clock):
    return PersistentCookieJar(SetCookieCache(), persistor, clock=clock)


class _Handler(BaseHTTPRequestHandler):
    def do_GET(self):
        if self.path == "/login":
            self._reply(200, "ok", [
                "sid=abc; Path=/; Max-Age=3600; HttpOnly",
                "tmp=1; Path=/",
            ])
        elif self.path == "/logout":
            self._reply(200, "bye", ["sid=; Path=/; Max-Age=0"])
        elif self.path == "/echo":
            body = json.dumps({"cookie": self.headers.get("Cookie")})
            self._reply(200, body, content_type="application/json")
        elif self.path == "/redirect":
            self._reply(302, "", ["hop=1; Path=/"], location="/echo")
        elif self.path == "/loop":
            self._reply(302, "", location="/loop")
        else:
            self._reply(404, "not found")

    def do_POST(self):
        length = int(self.headers.get("Content-Length") or 0)
        body = self.rfile.read(length)
        if self.path == "/json":
            reply = json.dumps({
                "cookie": self.headers.get("Cookie"),
                "contentType": self.headers.get("Content-Type"),
                "body": json.loads(body),
            })
            self._reply(200, reply, ["posted=json; Path=/"], content_type="application/json")
        elif self.path == "/submit":
            self._reply(303, "", ["posted=1; Path=/"], location="/echo")
        else:
            self._reply(404, "not found")

    def _reply(self, status, body, cookies=(), location=None, content_type="text/plain"):
        payload = body.encode("utf-8")
        self.send_response(status)
        for cookie in cookies:
            self.send_header("Set-Cookie", cookie)
        if location:
            self.send_header("Location", location)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        self.wfile.write(payload)

    def log_message(self, format, *args):
        pass


@pytest.fixture
def cookie_server():
    server = ThreadingHTTPServer(("127.0.0.1", 0), _Handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield f"http://127.0.0.1:{server.server_address[1]}"
    finally:
        server.shutdown()
        server.server_close()

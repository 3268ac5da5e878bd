"""REST API routes for inspecting and clearing the cookie jar."""
from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, current_app, jsonify, request

from ..services.cookie_jar import PersistentCookieJar
from ..services.errors import CookieJarError
from ..services.models import Cookie

api_bp = Blueprint("api", __name__, url_prefix="/api")


def _jar() -> PersistentCookieJar:
    return current_app.config["COOKIE_JAR"]


@api_bp.errorhandler(CookieJarError)
def _handle_cookie_jar_error(exc: CookieJarError):
    payload = {"error": str(exc)}
    if exc.metadata is not None:
        payload["metadata"] = exc.metadata
    return jsonify(payload), HTTPStatus.INTERNAL_SERVER_ERROR


@api_bp.get("/cookies")
def list_cookies():
    url = request.args.get("url")
    if not url:
        return jsonify({"error": "url query parameter is required"}), HTTPStatus.BAD_REQUEST

    cookies = _jar().load_for_request(url)
    return jsonify({"cookies": [cookie.to_dict() for cookie in cookies]})


@api_bp.post("/cookies")
def save_cookies():
    data = request.get_json(silent=True) or {}
    url = data.get("url")
    entries = data.get("cookies")
    if not url or not isinstance(entries, list):
        return jsonify({"error": "url and cookies are required"}), HTTPStatus.BAD_REQUEST

    cookies = []
    for entry in entries:
        if not isinstance(entry, dict) or not entry.get("name") or not entry.get("domain"):
            return jsonify({"error": "each cookie needs a name and a domain"}), HTTPStatus.BAD_REQUEST
        try:
            cookies.append(Cookie.from_dict(entry))
        except (TypeError, ValueError):
            return jsonify({"error": "invalid cookie attributes"}), HTTPStatus.BAD_REQUEST

    _jar().save_from_response(url, cookies)
    return jsonify({"saved": len(cookies)})


@api_bp.get("/cookies/<name>")
def get_cookie(name: str):
    host = request.args.get("host")
    if not host:
        return jsonify({"error": "host query parameter is required"}), HTTPStatus.BAD_REQUEST
    scheme = request.args.get("scheme", "https")

    value = _jar().get_cookie(host, name, scheme=scheme)
    if value is None:
        return jsonify({"name": name, "value": None}), HTTPStatus.NOT_FOUND
    return jsonify({"name": name, "value": value})


@api_bp.delete("/cookies")
def clear_cookies():
    _jar().clear()
    return jsonify({"status": "ok"})


@api_bp.post("/session/clear")
def clear_session():
    _jar().clear_session()
    return jsonify({"status": "ok"})


@api_bp.get("/stats")
def stats():
    return jsonify({"cached": len(_jar())})

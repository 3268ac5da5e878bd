"""Flask application factory."""
from __future__ import annotations

from typing import Optional

from flask import Flask

from .config import JarConfig, build_jar
from .routes.api import api_bp
from .services import PersistentCookieJar


def create_app(
    jar: Optional[PersistentCookieJar] = None,
    config: Optional[JarConfig] = None,
) -> Flask:
    app = Flask(__name__)

    if jar is None:
        jar = build_jar(config or JarConfig.from_env())

    app.config["COOKIE_JAR"] = jar
    app.register_blueprint(api_bp)

    return app

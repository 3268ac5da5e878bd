"""Environment driven configuration for the cookie jar."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from .services import FileCookiePersistor, HTTPClient, PersistentCookieJar, SetCookieCache

_TRUE_VALUES = {"1", "true", "yes", "on"}


def default_config_dir() -> Path:
    return Path.home() / ".persistent-cookiejar"


@dataclass(slots=True)
class JarConfig:
    cookie_file: Path
    ignore_persistence: bool = False
    verify: bool | str = True

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "JarConfig":
        env = os.environ if environ is None else environ

        cookie_file_env = env.get("COOKIEJAR_FILE")
        if cookie_file_env:
            cookie_file = Path(cookie_file_env).expanduser()
        else:
            cookie_file = default_config_dir() / "cookies.json"

        ignore_persistence = env.get("COOKIEJAR_IGNORE_PERSISTENCE", "").strip().lower() in _TRUE_VALUES

        verify: bool | str = True
        if env.get("COOKIEJAR_SSL_NO_VERIFY") == "1":
            verify = False
        else:
            ca_bundle_env = env.get("COOKIEJAR_CA_BUNDLE")
            if ca_bundle_env:
                verify = ca_bundle_env

        return cls(cookie_file=cookie_file, ignore_persistence=ignore_persistence, verify=verify)


def build_jar(config: JarConfig) -> PersistentCookieJar:
    return PersistentCookieJar(
        SetCookieCache(),
        FileCookiePersistor(config.cookie_file),
        ignore_persistence=config.ignore_persistence,
    )


def build_client(config: JarConfig, jar: Optional[PersistentCookieJar] = None) -> HTTPClient:
    return HTTPClient(jar if jar is not None else build_jar(config), verify=config.verify)

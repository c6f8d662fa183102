"""Per-resolution cookie jar."""

from __future__ import annotations

import logging
from typing import Dict, Optional

import httpx

logger = logging.getLogger(__name__)


class CookieJar:
    """Name to value mapping replayed on every hop of one resolution.

    Cookie attributes (Path, Domain, Expires, Secure) are ignored and every
    cookie is sent to every host for the lifetime of the jar.
    """

    def __init__(self) -> None:
        self._cookies: Dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._cookies)

    def get(self, name: str) -> Optional[str]:
        return self._cookies.get(name)

    def set(self, name: str, value: str) -> None:
        self._cookies[name] = value

    def update_from_header(self, raw: str) -> None:
        pair = raw.split(";", 1)[0]
        name, sep, value = pair.partition("=")
        name = name.strip()
        if not sep or not name:
            logger.debug("Ignoring malformed Set-Cookie header: %r", raw)
            return
        self._cookies[name] = value.strip()

    def update_from_headers(self, headers: httpx.Headers) -> None:
        for raw in headers.get_list("set-cookie"):
            self.update_from_header(raw)

    def header_value(self) -> Optional[str]:
        if not self._cookies:
            return None
        return "; ".join(f"{name}={value}" for name, value in self._cookies.items())


__all__ = ["CookieJar"]

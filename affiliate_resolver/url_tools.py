"""URL helper utilities: validation, joining and final cleanup."""

from __future__ import annotations

import html
from enum import Enum
from typing import Optional
from urllib.parse import urljoin, urlsplit, urlunsplit

import httpx

from .errors import MalformedRedirectTargetError

ALLOWED_SCHEMES = {"http", "https"}


class Platform(str, Enum):
    """Coarse e-commerce classification derived from the hostname."""

    SHOPEE = "shopee"
    LAZADA = "lazada"
    TIKTOK = "tiktok"
    OTHER = "other"


def is_valid_url(url: Optional[str]) -> bool:
    """Return True for an absolute http(s) URL with a host."""

    if not url or not isinstance(url, str):
        return False
    try:
        parsed = urlsplit(url.strip())
        # .port raises on garbage such as "host:abc"
        parsed.port
    except ValueError:
        return False
    return parsed.scheme.lower() in ALLOWED_SCHEMES and bool(parsed.hostname)


def absolutize(raw: str, base_url: str) -> str:
    """Resolve a redirect target found in a header or markup against ``base_url``."""

    target = html.unescape(raw or "").strip()
    if not target or target.startswith("#"):
        raise MalformedRedirectTargetError(f"Unusable redirect target: {raw!r}")
    try:
        joined = urljoin(base_url, target)
    except ValueError as exc:
        raise MalformedRedirectTargetError(f"Unusable redirect target: {raw!r}") from exc
    if not is_valid_url(joined):
        raise MalformedRedirectTargetError(f"Unusable redirect target: {raw!r}")
    try:
        # percent-encoded, ASCII only
        return str(httpx.URL(joined))
    except httpx.InvalidURL as exc:
        raise MalformedRedirectTargetError(f"Unusable redirect target: {raw!r}") from exc


def clean_url(url: str) -> str:
    """Drop query and fragment, and trailing slashes of a non-root path."""

    parsed = urlsplit(url)
    path = parsed.path
    if path != "/" and path.endswith("/"):
        path = path.rstrip("/") or "/"
    return urlunsplit((parsed.scheme, parsed.netloc, path, "", ""))


def detect_platform(url: str) -> Platform:
    host = urlsplit(url).hostname or ""
    if host.startswith("www."):
        host = host[len("www."):]
    if "shopee." in host:
        return Platform.SHOPEE
    if "lazada" in host:
        return Platform.LAZADA
    if host.endswith("tiktok.com"):
        return Platform.TIKTOK
    return Platform.OTHER


__all__ = ["Platform", "absolutize", "clean_url", "detect_platform", "is_valid_url"]

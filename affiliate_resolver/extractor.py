"""Soft redirect detection in HTML interstitial pages.

Affiliate networks often answer with a 200 page that navigates away on the
client side instead of sending a 3xx. Nothing here executes script; each
strategy pattern-matches the markup and yields raw targets in document
order. Strategies run in priority order and the first target that resolves
to an http(s) URL wins.
"""

from __future__ import annotations

import base64
import binascii
import logging
import re
import unicodedata
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterator, Optional, Tuple
from urllib.parse import unquote

from bs4 import BeautifulSoup

from .errors import MalformedRedirectTargetError
from .url_tools import absolutize

logger = logging.getLogger(__name__)


class RedirectSource(str, Enum):
    HTTP_LOCATION = "http-location"
    META_REFRESH = "meta-refresh"
    JS_LOCATION = "js-location"
    JS_DECODED = "js-decoded"
    JS_BASE64 = "js-base64"
    ANCHOR_FALLBACK = "anchor-fallback"


@dataclass(frozen=True)
class RedirectCandidate:
    target_url: str
    source: RedirectSource


META_REFRESH_URL_RE = re.compile(r"url\s*=\s*['\"]?\s*([^'\"\s>]+)", re.I)

JS_LOCATION_RE = re.compile(
    r"""(?:
        (?:window\.location(?:\.href)?|location\.href)\s*=\s*(?P<q1>['"])(?P<assigned>.*?)(?P=q1)
      |
        location\.(?:assign|replace)\(\s*(?P<q2>['"])(?P<called>.*?)(?P=q2)\s*\)
    )""",
    re.I | re.X | re.S,
)

DECODE_URI_RE = re.compile(r"decodeURIComponent\(\s*(['\"])(.*?)\1\s*\)", re.S)
ATOB_RE = re.compile(r"atob\(\s*(['\"])([A-Za-z0-9+/=\s]+?)\1\s*\)")

CONTINUE_PHRASES = (
    "click here",
    "continue",
    "redirect",
    "nhấn vào đây",
    "bấm vào đây",
    "tiếp tục",
)
CONTINUE_RE = re.compile(
    "|".join(re.escape(unicodedata.normalize("NFC", phrase)) for phrase in CONTINUE_PHRASES), re.I
)


class HtmlDocument:
    """Raw markup plus a lazily built soup shared by the strategies."""

    def __init__(self, html: str) -> None:
        self.html = html or ""
        self._soup: Optional[BeautifulSoup] = None

    @property
    def soup(self) -> BeautifulSoup:
        if self._soup is None:
            self._soup = BeautifulSoup(self.html, "lxml")
        return self._soup

    @property
    def script_text(self) -> str:
        # Inline JSON often escapes slashes ("https:\/\/...").
        return self.html.replace("\\/", "/")


def find_meta_refresh(doc: HtmlDocument) -> Iterator[str]:
    for meta in doc.soup.find_all("meta"):
        http_equiv = meta.get("http-equiv") or ""
        if http_equiv.strip().lower() != "refresh":
            continue
        match = META_REFRESH_URL_RE.search(meta.get("content") or "")
        if match:
            yield match.group(1)


def find_js_location(doc: HtmlDocument) -> Iterator[str]:
    for match in JS_LOCATION_RE.finditer(doc.script_text):
        target = match.group("assigned")
        if target is None:
            target = match.group("called")
        yield target


def find_decoded_uri(doc: HtmlDocument) -> Iterator[str]:
    for match in DECODE_URI_RE.finditer(doc.script_text):
        yield unquote(match.group(2))


def find_base64(doc: HtmlDocument) -> Iterator[str]:
    for match in ATOB_RE.finditer(doc.html):
        payload = re.sub(r"\s+", "", match.group(2))
        try:
            decoded = base64.b64decode(payload, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError):
            logger.debug("Skipping undecodable atob payload %r", payload[:80])
            continue
        yield decoded.strip()


def find_continue_anchor(doc: HtmlDocument) -> Iterator[str]:
    for anchor in doc.soup.find_all("a", href=True):
        text = unicodedata.normalize("NFC", " ".join(anchor.get_text(" ", strip=True).split()))
        if text and CONTINUE_RE.search(text):
            yield anchor["href"]


Finder = Callable[[HtmlDocument], Iterator[str]]

STRATEGIES: Tuple[Tuple[RedirectSource, Finder], ...] = (
    (RedirectSource.META_REFRESH, find_meta_refresh),
    (RedirectSource.JS_LOCATION, find_js_location),
    (RedirectSource.JS_DECODED, find_decoded_uri),
    (RedirectSource.JS_BASE64, find_base64),
    (RedirectSource.ANCHOR_FALLBACK, find_continue_anchor),
)


def try_extract(finder: Finder, source: RedirectSource, doc: HtmlDocument, base_url: str) -> Optional[RedirectCandidate]:
    """Run a single strategy and return its first usable target."""

    for raw in finder(doc):
        try:
            target = absolutize(raw, base_url)
        except MalformedRedirectTargetError as exc:
            logger.debug("%s: %s", source.value, exc)
            continue
        return RedirectCandidate(target_url=target, source=source)
    return None


def extract(html: str, base_url: str) -> Optional[RedirectCandidate]:
    """Return the highest priority soft redirect in ``html``, if any."""

    if not html:
        return None
    doc = HtmlDocument(html)
    for source, finder in STRATEGIES:
        candidate = try_extract(finder, source, doc, base_url)
        if candidate:
            return candidate
    return None


__all__ = [
    "RedirectSource",
    "RedirectCandidate",
    "HtmlDocument",
    "STRATEGIES",
    "extract",
    "try_extract",
    "find_meta_refresh",
    "find_js_location",
    "find_decoded_uri",
    "find_base64",
    "find_continue_anchor",
]

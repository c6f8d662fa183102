"""Single hop fetching."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Dict, Optional, Tuple, Union

import httpx

from .config import DEFAULT_ACCEPT_LANGUAGE, MAX_HTML_BYTES, MOBILE_SAFARI_UA
from .cookies import CookieJar
from .errors import NetworkError

logger = logging.getLogger(__name__)

REDIRECT_STATUSES = {301, 302, 303, 307, 308}

NAVIGATION_HEADERS = {
    "accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "sec-fetch-dest": "document",
    "sec-fetch-mode": "navigate",
    "sec-fetch-site": "none",
    "sec-fetch-user": "?1",
    "upgrade-insecure-requests": "1",
}


def is_html(content_type: Optional[str]) -> bool:
    return bool(content_type) and "text/html" in content_type.lower()


@dataclass(frozen=True)
class HopResult:
    url: str
    status_code: int
    location: Optional[str]
    content_type: str
    body: bytes = b""
    truncated: bool = False
    elapsed_ms: Optional[int] = None

    @property
    def is_redirect(self) -> bool:
        return self.status_code in REDIRECT_STATUSES

    @property
    def is_html(self) -> bool:
        return is_html(self.content_type)

    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


class HopFetcher:
    """Performs one GET without following redirects.

    The fetcher never interprets the response; it only records what the
    server said, merges cookies into the jar and keeps at most
    ``max_html_bytes`` of an HTML body.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        timeout: float,
        user_agent: str = MOBILE_SAFARI_UA,
        accept_language: str = DEFAULT_ACCEPT_LANGUAGE,
        max_html_bytes: int = MAX_HTML_BYTES,
    ) -> None:
        self.client = client
        self.timeout = timeout
        self.user_agent = user_agent
        self.accept_language = accept_language
        self.max_html_bytes = max_html_bytes

    def build_headers(self, jar: CookieJar, referer: Optional[str] = None) -> Dict[str, Union[str, bytes]]:
        headers: Dict[str, Union[str, bytes]] = {"user-agent": self.user_agent, "accept-language": self.accept_language}
        headers.update(NAVIGATION_HEADERS)
        if referer:
            headers["referer"] = str(httpx.URL(referer))
        cookie = jar.header_value()
        if cookie:
            # values echoed from Set-Cookie may be UTF-8
            headers["cookie"] = cookie.encode("utf-8")
        return headers

    async def _read_capped(self, response: httpx.Response) -> Tuple[bytes, bool]:
        chunks = []
        received = 0
        async for chunk in response.aiter_bytes():
            remaining = self.max_html_bytes - received
            if len(chunk) > remaining:
                chunks.append(chunk[:remaining])
                received += remaining
                # Leaving the stream context closes the connection and drops the rest.
                return b"".join(chunks), True
            chunks.append(chunk)
            received += len(chunk)
        return b"".join(chunks), False

    async def _exchange(
        self, url: str, jar: CookieJar, referer: Optional[str]
    ) -> Tuple[httpx.Response, bytes, bool]:
        async with self.client.stream(
            "GET",
            url,
            headers=self.build_headers(jar, referer),
            timeout=self.timeout,
            follow_redirects=False,
        ) as response:
            jar.update_from_headers(response.headers)
            if not is_html(response.headers.get("content-type")):
                return response, b"", False
            body, truncated = await self._read_capped(response)
            return response, body, truncated

    async def fetch_once(self, url: str, jar: CookieJar, referer: Optional[str] = None) -> HopResult:
        """Fetch ``url`` once. The whole hop, body included, is bounded by ``timeout``."""

        start = time.perf_counter()
        try:
            response, body, truncated = await asyncio.wait_for(
                self._exchange(url, jar, referer), timeout=self.timeout
            )
        except asyncio.TimeoutError as exc:
            raise NetworkError(f"Request to {url} failed: timed out after {self.timeout}s") from exc
        except (httpx.RequestError, httpx.InvalidURL) as exc:
            raise NetworkError(f"Request to {url} failed: {type(exc).__name__}: {exc}") from exc

        result = HopResult(
            url=url,
            status_code=response.status_code,
            location=response.headers.get("location"),
            content_type=response.headers.get("content-type", ""),
            body=body,
            truncated=truncated,
            elapsed_ms=int((time.perf_counter() - start) * 1000),
        )
        logger.debug(
            "GET %s -> %s location=%s bytes=%s truncated=%s (%sms)",
            url,
            result.status_code,
            result.location,
            len(body),
            truncated,
            result.elapsed_ms,
        )
        return result


__all__ = ["HopFetcher", "HopResult", "MAX_HTML_BYTES", "REDIRECT_STATUSES", "is_html"]

"""Redirect chain resolution.

One resolution is a strictly sequential walk: fetch a hop, decide where it
points, move on. HTTP ``Location`` headers take precedence over soft
redirects found in an HTML body. The walk ends when a hop points nowhere,
and fails once ``max_hops`` fetches have been spent without settling.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

import httpx

from .config import MAX_HOPS, Config
from .cookies import CookieJar
from .errors import InvalidInputError, MalformedRedirectTargetError, TooManyHopsError
from .extractor import RedirectCandidate, RedirectSource, extract
from .fetcher import HopFetcher, HopResult
from .url_tools import Platform, absolutize, clean_url, detect_platform, is_valid_url

logger = logging.getLogger(__name__)


@dataclass
class ResolutionState:
    """Mutable state of a single run. Never shared between runs."""

    current_url: str
    referer: Optional[str] = None
    cookie_jar: CookieJar = field(default_factory=CookieJar)
    hop_count: int = 0
    chain: List[RedirectCandidate] = field(default_factory=list)

    def advance(self, candidate: RedirectCandidate) -> None:
        self.referer = self.current_url
        self.current_url = candidate.target_url
        self.chain.append(candidate)


@dataclass(frozen=True)
class Resolution:
    input_url: str
    resolved_url: str
    platform: Platform
    cleaned_url: str
    hops: int
    chain: List[RedirectCandidate] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "input": self.input_url,
            "resolved": self.resolved_url,
            "platform": self.platform.value,
            "cleaned": self.cleaned_url,
        }


def next_hop(hop: HopResult) -> Optional[RedirectCandidate]:
    """Decide where ``hop`` points, or return None if it is final."""

    if hop.is_redirect and hop.location:
        try:
            target = absolutize(hop.location, hop.url)
        except MalformedRedirectTargetError as exc:
            logger.debug("Ignoring Location header on %s: %s", hop.url, exc)
        else:
            return RedirectCandidate(target_url=target, source=RedirectSource.HTTP_LOCATION)
    if hop.is_html:
        return extract(hop.text(), hop.url)
    return None


class AffiliateResolver:
    """Follows a link to its final destination.

    ``transport`` is handed to the per-run ``httpx.AsyncClient``; tests pass
    an ``httpx.MockTransport`` here.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.config = config or Config()
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        # A fresh client per run: httpx keeps its own cookie store on the client.
        return httpx.AsyncClient(follow_redirects=False, transport=self.transport)

    async def follow(self, url: str) -> ResolutionState:
        if not is_valid_url(url):
            raise InvalidInputError(f"Invalid URL: {url!r}")

        state = ResolutionState(current_url=url.strip())
        async with self._client() as client:
            fetcher = HopFetcher(
                client,
                timeout=self.config.timeout,
                user_agent=self.config.user_agent,
                accept_language=self.config.accept_language,
                max_html_bytes=self.config.max_html_bytes,
            )
            while state.hop_count < self.config.max_hops:
                hop = await fetcher.fetch_once(state.current_url, state.cookie_jar, state.referer)
                state.hop_count += 1
                candidate = next_hop(hop)
                if candidate is None:
                    return state
                logger.debug("Hop %s: %s -> %s (%s)", state.hop_count, hop.url, candidate.target_url, candidate.source.value)
                state.advance(candidate)

        raise TooManyHopsError(f"Too many redirects: no final URL after {state.hop_count} hops")

    async def resolve(self, url: str) -> Resolution:
        state = await self.follow(url)
        resolution = Resolution(
            input_url=url,
            resolved_url=state.current_url,
            platform=detect_platform(state.current_url),
            cleaned_url=clean_url(state.current_url),
            hops=state.hop_count,
            chain=list(state.chain),
        )
        logger.info(
            "Resolved %s -> %s in %s hops (%s)",
            url,
            resolution.resolved_url,
            resolution.hops,
            resolution.platform.value,
        )
        return resolution


async def resolve(
    url: str,
    config: Optional[Config] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Resolution:
    return await AffiliateResolver(config, transport=transport).resolve(url)


__all__ = ["AffiliateResolver", "MAX_HOPS", "Resolution", "ResolutionState", "next_hop", "resolve"]

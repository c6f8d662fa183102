from __future__ import annotations

from typing import Callable, Dict, List, Union

import httpx
import pytest

Handler = Callable[[httpx.Request], httpx.Response]


class FakeSite:
    """Routes requests by full URL to canned responses and records them."""

    def __init__(self) -> None:
        self.routes: Dict[str, Union[httpx.Response, Handler]] = {}
        self.requests: List[httpx.Request] = []

    def add(self, url: str, response: Union[httpx.Response, Handler]) -> None:
        self.routes[url] = response

    def redirect(self, url: str, location: str, status_code: int = 302, **kwargs) -> None:
        headers = [("location", location)] + list(kwargs.pop("headers", []))
        self.add(url, lambda request: httpx.Response(status_code, headers=headers, **kwargs))

    def html(self, url: str, body: str, status_code: int = 200, **kwargs) -> None:
        headers = [("content-type", "text/html; charset=utf-8")] + list(kwargs.pop("headers", []))
        self.add(url, lambda request: httpx.Response(status_code, headers=headers, content=body.encode("utf-8"), **kwargs))

    def final(self, url: str, content_type: str = "application/json") -> None:
        self.add(url, lambda request: httpx.Response(200, headers={"content-type": content_type}, content=b"{}"))

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(str(request.url))
        if route is None:
            return httpx.Response(404, headers={"content-type": "text/plain"}, content=b"not found")
        if isinstance(route, httpx.Response):
            return route
        return route(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    @property
    def requested_urls(self) -> List[str]:
        return [str(request.url) for request in self.requests]


@pytest.fixture
def site() -> FakeSite:
    return FakeSite()

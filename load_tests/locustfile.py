"""Locust load test for the affiliate resolver API."""

from __future__ import annotations

import os
from typing import List

from locust import FastHttpUser, between, task

CLEAN_ENDPOINT = os.getenv("AFFILIATE_RESOLVER_ENDPOINT", "http://localhost:8000/api/clean")
LINKS: List[str] = [
    "https://shope.ee/xyz",
    "https://s.lazada.vn/s.abc",
    "https://vt.tiktok.com/ZS123/",
]


class CleanLinkUser(FastHttpUser):
    wait_time = between(1, 5)

    @task
    def clean_link(self) -> None:
        for link in LINKS:
            self.client.post(CLEAN_ENDPOINT, json={"url": link}, name="/api/clean")

    @task
    def preflight(self) -> None:
        self.client.request("OPTIONS", CLEAN_ENDPOINT, name="/api/clean [preflight]")

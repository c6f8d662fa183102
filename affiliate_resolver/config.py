"""Configuration utilities for the affiliate link resolver."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

MOBILE_SAFARI_UA = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.0 Mobile Safari"
)
DEFAULT_ACCEPT_LANGUAGE = "vi-VN,vi;q=0.9,en-US;q=0.8,en;q=0.7"
MAX_HOPS = 10
MAX_HTML_BYTES = 256 * 1024


@dataclass
class Config:
    """Runtime configuration parameters."""

    timeout: float = 10.0
    max_hops: int = MAX_HOPS
    max_html_bytes: int = MAX_HTML_BYTES
    user_agent: str = MOBILE_SAFARI_UA
    accept_language: str = DEFAULT_ACCEPT_LANGUAGE
    concurrency: int = 5
    summary_json: Path = Path("results.summary.json")


def load_config(env_file: Optional[str] = ".env") -> Config:
    """Load configuration from environment variables and optional .env file."""

    if env_file:
        load_dotenv(env_file, override=False)

    return Config(
        timeout=float(os.getenv("AFR_TIMEOUT", Config.timeout)),
        max_hops=int(os.getenv("AFR_MAX_HOPS", Config.max_hops)),
        max_html_bytes=int(os.getenv("AFR_MAX_HTML_BYTES", Config.max_html_bytes)),
        user_agent=os.getenv("AFR_USER_AGENT", Config.user_agent),
        accept_language=os.getenv("AFR_ACCEPT_LANGUAGE", Config.accept_language),
        concurrency=int(os.getenv("AFR_CONCURRENCY", Config.concurrency)),
        summary_json=Path(os.getenv("AFR_SUMMARY_JSON", str(Config.summary_json))),
    )


__all__ = ["Config", "DEFAULT_ACCEPT_LANGUAGE", "MAX_HOPS", "MAX_HTML_BYTES", "MOBILE_SAFARI_UA", "load_config"]

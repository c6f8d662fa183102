"""Configuration management for the resolver service."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from affiliate_resolver.config import (
    DEFAULT_ACCEPT_LANGUAGE,
    MAX_HOPS,
    MAX_HTML_BYTES,
    MOBILE_SAFARI_UA,
    Config,
)


class Settings(BaseSettings):
    """Application settings using environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Core service
    environment: str = Field("development", description="Deployment environment name")
    log_level: str = Field("INFO", description="Python logging level")
    host: str = Field("0.0.0.0", description="Bind address for `serve`")
    port: int = Field(8000, ge=1, le=65535, description="Bind port for `serve`")

    # Resolution
    request_timeout_seconds: float = Field(10.0, gt=0, description="Timeout for each hop")
    max_hops: int = Field(MAX_HOPS, ge=1, description="Fetches allowed before giving up")
    max_html_bytes: int = Field(MAX_HTML_BYTES, ge=1024, description="Bytes of HTML kept per hop")
    user_agent: str = Field(MOBILE_SAFARI_UA, description="User agent sent on every hop")
    accept_language: str = Field(DEFAULT_ACCEPT_LANGUAGE, description="Accept-Language sent on every hop")

    # Transport
    max_body_bytes: int = Field(1_000_000, ge=1, description="Largest accepted request body")

    # Monitoring
    enable_metrics: bool = Field(True, description="Whether to expose Prometheus metrics")

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()

    def resolver_config(self) -> Config:
        return Config(
            timeout=self.request_timeout_seconds,
            max_hops=self.max_hops,
            max_html_bytes=self.max_html_bytes,
            user_agent=self.user_agent,
            accept_language=self.accept_language,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()


__all__ = ["Settings", "get_settings"]

"""CLI entrypoint for the resolver service."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Optional

import typer

from affiliate_resolver.errors import ResolutionError
from affiliate_resolver.resolver import AffiliateResolver

from .config import get_settings

app = typer.Typer(help="Affiliate link resolver service command line interface")


@app.command()
def show_config() -> None:
    """Print the active configuration."""

    settings = get_settings()
    typer.echo(settings.model_dump_json(indent=2))


@app.command()
def resolve(
    url: str,
    log_level: str = typer.Option("WARNING", help="Logging level"),
) -> None:
    """Resolve a single link with the service settings and print the result."""

    logging.basicConfig(level=log_level.upper())
    resolver = AffiliateResolver(get_settings().resolver_config())
    try:
        resolution = asyncio.run(resolver.resolve(url))
    except ResolutionError as exc:
        typer.echo(json.dumps({"error": str(exc)}), err=True)
        raise typer.Exit(code=1) from exc
    typer.echo(json.dumps(resolution.to_dict(), ensure_ascii=False))


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, help="Bind address, defaults to settings"),
    port: Optional[int] = typer.Option(None, help="Bind port, defaults to settings"),
    reload: bool = typer.Option(False, help="Reload on code changes"),
) -> None:
    """Run the HTTP API with uvicorn."""

    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "resolver_service.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    app()

"""FastAPI routes for the resolver service."""

from __future__ import annotations

import asyncio
import json
import logging
import time
from datetime import datetime, timezone
from typing import Any, Awaitable, TypeVar

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from affiliate_resolver.errors import ResolutionError
from affiliate_resolver.resolver import AffiliateResolver
from affiliate_resolver.url_tools import is_valid_url

from ..config import Settings, get_settings
from ..monitoring.metrics import record_failure, record_success

logger = logging.getLogger(__name__)

router = APIRouter()

DISCONNECT_POLL_SECONDS = 0.25

T = TypeVar("T")


class ClientDisconnected(Exception):
    """The caller went away before the resolution finished."""


class CleanResponse(BaseModel):
    input: str
    resolved: str
    platform: str
    cleaned: str


class ErrorResponse(BaseModel):
    error: str


def get_resolver(settings: Settings = Depends(get_settings)) -> AffiliateResolver:
    return AffiliateResolver(settings.resolver_config())


async def read_json_body(request: Request, max_bytes: int) -> Any:
    """Read at most ``max_bytes`` of the body and decode it as JSON."""

    declared = request.headers.get("content-length")
    if declared and declared.isdigit() and int(declared) > max_bytes:
        raise HTTPException(status_code=413, detail="Request body too large")

    received = bytearray()
    async for chunk in request.stream():
        received.extend(chunk)
        if len(received) > max_bytes:
            raise HTTPException(status_code=413, detail="Request body too large")

    if not received:
        return {}
    try:
        return json.loads(received)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail="Invalid JSON body") from exc


async def run_until_disconnect(request: Request, work: Awaitable[T]) -> T:
    """Await ``work``, cancelling it if the client disconnects first."""

    task = asyncio.ensure_future(work)
    try:
        while True:
            done, _ = await asyncio.wait({task}, timeout=DISCONNECT_POLL_SECONDS)
            if done:
                return task.result()
            if await request.is_disconnected():
                raise ClientDisconnected()
    finally:
        if not task.done():
            task.cancel()


@router.post(
    "/clean",
    response_model=CleanResponse,
    responses={400: {"model": ErrorResponse}, 413: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def clean_link(
    request: Request,
    resolver: AffiliateResolver = Depends(get_resolver),
    settings: Settings = Depends(get_settings),
) -> Response:
    payload = await read_json_body(request, settings.max_body_bytes)
    input_url = payload.get("url") if isinstance(payload, dict) else None
    if not input_url:
        raise HTTPException(status_code=400, detail='Missing "url"')
    if not is_valid_url(input_url):
        raise HTTPException(status_code=400, detail="Invalid URL")

    start = time.perf_counter()
    try:
        resolution = await run_until_disconnect(request, resolver.resolve(input_url))
    except ClientDisconnected:
        logger.info("Client disconnected, resolution of %s cancelled", input_url)
        return Response(status_code=499)
    except ResolutionError as exc:
        record_failure(exc, time.perf_counter() - start)
        logger.warning("Resolution of %s failed: %s", input_url, exc)
        return JSONResponse(status_code=500, content={"error": str(exc)})
    except Exception as exc:
        record_failure(exc, time.perf_counter() - start)
        logger.exception("Unexpected failure resolving %s", input_url)
        return JSONResponse(status_code=500, content={"error": str(exc) or "fail"})

    record_success(resolution, time.perf_counter() - start)
    return JSONResponse(status_code=200, content=CleanResponse(**resolution.to_dict()).model_dump())


@router.options("/clean", status_code=204, include_in_schema=False)
async def clean_link_preflight() -> Response:
    return Response(status_code=204)


class HealthResponse(BaseModel):
    status: str = "ok"
    timestamp: datetime


@router.get("/health", response_model=HealthResponse, include_in_schema=False)
async def health_check() -> HealthResponse:
    return HealthResponse(timestamp=datetime.now(timezone.utc))


__all__ = ["router", "get_resolver", "read_json_body", "run_until_disconnect", "ClientDisconnected"]

"""Entry points for running the FastAPI application."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api.routes import router as api_router
from .config import get_settings
from .monitoring.metrics import metrics_router

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST,OPTIONS",
    "Access-Control-Allow-Headers": "content-type",
}


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level)

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        logger.info("Starting affiliate resolver service (environment=%s)", settings.environment)
        yield
        logger.info("Stopping affiliate resolver service")

    app = FastAPI(title="Affiliate Link Resolver", version="0.1.0", lifespan=lifespan)
    app.include_router(api_router, prefix="/api")

    if settings.enable_metrics:
        app.include_router(metrics_router)

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(_: Request, exc: StarletteHTTPException) -> JSONResponse:
        message = "POST only" if exc.status_code == 405 else str(exc.detail)
        return JSONResponse(status_code=exc.status_code, content={"error": message})

    # Applied to every response, errors included; preflights are answered by the OPTIONS route.
    @app.middleware("http")
    async def _cors_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response

    return app


app = create_app()

__all__ = ["create_app", "app", "CORS_HEADERS"]

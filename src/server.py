"""Main FastAPI server for the realtime transcription relay."""

from __future__ import annotations

import os
import logging
from typing import Any
from collections.abc import Callable, Awaitable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, WebSocket
from fastapi.responses import ORJSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.middleware.cors import CORSMiddleware

from src.state.runtime import RuntimeDeps
from src.runtime.logging import configure_logging
from src.config.websocket import WS_ENDPOINT_PATH
from src.handlers.session import handle_create_session
from src.runtime.dependencies import build_runtime_deps
from src.config.broker import STATIC_DIR, CORS_ALLOW_ORIGINS, SESSION_ENDPOINT_PATH
from src.handlers.websocket.manager import handle_relay_connection

logger = logging.getLogger(__name__)

configure_logging()


def _runtime_deps(app: FastAPI) -> RuntimeDeps:
    runtime_deps = getattr(app.state, "runtime_deps", None)
    if runtime_deps is None:
        raise RuntimeError("Runtime dependencies are not initialized")
    return runtime_deps


def create_app(
    build_deps: Callable[[], Awaitable[RuntimeDeps]] = build_runtime_deps,
    *,
    cors_allow_origins: list[str] | None = None,
    static_dir: str | None = STATIC_DIR,
) -> FastAPI:
    @asynccontextmanager
    async def _lifespan(app: FastAPI):
        runtime_deps = await build_deps()
        app.state.runtime_deps = runtime_deps
        logger.info("runtime: ready")
        try:
            yield
        finally:
            deps = getattr(app.state, "runtime_deps", None)
            if deps is not None:
                await deps.shutdown()

    app = FastAPI(default_response_class=ORJSONResponse, lifespan=_lifespan)

    origins = CORS_ALLOW_ORIGINS if cors_allow_origins is None else cors_allow_origins
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(origins),
            allow_methods=["GET", "POST"],
            allow_headers=["*"],
        )

    @app.get("/health")
    async def health() -> dict[str, Any]:
        deps = getattr(app.state, "runtime_deps", None)
        active = deps.pairs.get_connection_count() if deps is not None else 0
        return {"status": "ok", "active_relays": active}

    @app.get("/healthz")
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    @app.post(SESSION_ENDPOINT_PATH)
    async def create_session(request: Request) -> ORJSONResponse:
        return await handle_create_session(request, _runtime_deps(app))

    @app.websocket(WS_ENDPOINT_PATH)
    async def relay_endpoint(websocket: WebSocket, connection_id: str) -> None:
        await handle_relay_connection(websocket, connection_id, _runtime_deps(app))

    # Mounted last so API routes take precedence over the catch-all.
    if static_dir and os.path.isdir(static_dir):
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")
        logger.info("serving static assets from %s", static_dir)

    return app


app = create_app()


__all__ = ["app", "create_app"]

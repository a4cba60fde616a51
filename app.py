"""FastAPI application factory."""

from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from api.handlers import handle_graphql, handle_health, handle_relay
from core.config import Config
from core.encoders import GRAPHQL_ENCODERS
from core.protocols import RequestLogger
from services.dispatcher import Dispatcher
from services.relay_service import RelayService


def build_client(
    config: Config,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create the shared outbound client from configuration."""
    upstream = config.upstream
    limits = httpx.Limits(
        max_connections=upstream.max_connections,
        max_keepalive_connections=upstream.max_keepalive_connections,
    )
    headers = {"User-Agent": upstream.user_agent} if upstream.user_agent else None
    return httpx.AsyncClient(
        timeout=upstream.timeout,
        limits=limits,
        verify=upstream.verify,
        follow_redirects=upstream.follow_redirects,
        max_redirects=upstream.max_redirects,
        headers=headers,
        transport=transport,
    )


def create_app(
    config: Config,
    logger: RequestLogger,
    client: httpx.AsyncClient | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    ``client`` replaces the configured outbound client; the app then leaves
    closing it to the caller.
    """
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        outbound = client or build_client(config)
        app.state.relay_service = RelayService(
            dispatcher=Dispatcher(outbound),
            logger=logger,
        )
        app.state.graphql_service = RelayService(
            dispatcher=Dispatcher(outbound, encoders=GRAPHQL_ENCODERS),
            logger=logger,
        )
        try:
            yield
        finally:
            if client is None:
                await outbound.aclose()

    app = FastAPI(title="Local Relay", version="0.1.0", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors.allow_origins,
        allow_methods=config.cors.allow_methods,
        allow_headers=config.cors.allow_headers,
    )

    @app.post("/api")
    async def relay(request: Request):
        return await handle_relay(request, config)

    @app.post("/graphql")
    async def graphql(request: Request):
        return await handle_graphql(request, config)

    @app.get("/health")
    async def health():
        return await handle_health()

    return app

"""FastAPI application factory."""

from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request

from api.handlers import handle_proxy
from core.config import Config
from core.protocols import RequestLogger
from services.routing_service import RoutingService
from services.upstream import UpstreamClient

ROUTE_NAMES = ("Anthropic", "OpenAI", "Bedrock")


def create_app(
    config: Config,
    logger: RequestLogger,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        limits = httpx.Limits(
            max_connections=config.limits.max_connections,
            max_keepalive_connections=config.limits.max_keepalive_connections,
        )
        timeout = httpx.Timeout(
            config.limits.request_timeout,
            connect=config.limits.connect_timeout,
        )
        clients = {
            name: httpx.AsyncClient(
                timeout=timeout,
                limits=limits,
                follow_redirects=False,
                transport=transport,
            )
            for name in ROUTE_NAMES
        }
        app.state.upstream_client = UpstreamClient(
            clients,
            expose_error_details=config.proxy.expose_error_details,
        )
        app.state.routing_service = RoutingService.from_config(config, logger)
        try:
            yield
        finally:
            for client in clients.values():
                await client.aclose()

    app = FastAPI(
        title="Factory Key Proxy",
        version="0.1.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    app.state.debug = config.proxy.debug

    async def proxy(request: Request):
        return await handle_proxy(request, logger)

    # No method list: every verb reaches the router, unknown paths get the JSON 404
    app.add_route("/{path:path}", proxy, include_in_schema=False)

    return app

"""FastAPI route handlers."""

import httpx
from fastapi import Request, Response
from fastapi.responses import JSONResponse

from core.exceptions import ProxyError, UpstreamConnectionError
from core.protocols import RequestLogger
from core.request_types import InboundRequest
from ui.log_utils import write_incoming_log


def _inbound_from(request: Request) -> InboundRequest:
    """Snapshot the ASGI request as an InboundRequest."""
    method = request.method.upper()
    return InboundRequest(
        method=method,
        path=request.url.path,
        headers=httpx.Headers(request.headers.raw),
        stream=request.stream(),
    )


def error_response(error: ProxyError) -> JSONResponse:
    """JSON error body with the error's status code."""
    return JSONResponse(error.to_payload(), status_code=error.status_code)


async def handle_proxy(request: Request, logger: RequestLogger) -> Response:
    """Route, transform and forward a single request."""
    inbound = _inbound_from(request)
    logger.log_request(inbound.method, inbound.path)
    if request.app.state.debug:
        write_incoming_log(inbound.method, inbound.path, dict(inbound.headers))

    routing_service = request.app.state.routing_service
    upstream = request.app.state.upstream_client

    try:
        prepared = await routing_service.prepare(inbound)
        return await upstream.forward(prepared, logger)
    except UpstreamConnectionError as e:
        # Already logged by the upstream client with the full transport message
        return error_response(e)
    except ProxyError as e:
        logger.log_error(inbound.path, e.status_code, e.message)
        return error_response(e)

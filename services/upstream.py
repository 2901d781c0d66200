"""HTTP proxying utilities for upstream requests."""

import logging
from collections.abc import AsyncIterator

import httpx
from fastapi.responses import StreamingResponse

from core.exceptions import UpstreamConnectionError
from core.headers import HOP_BY_HOP
from core.protocols import RequestLogger
from core.request_types import PreparedRequest

logger = logging.getLogger(__name__)

GENERIC_ERROR_DETAILS = "Upstream request failed"


class UpstreamClient:
    """Forward prepared requests and relay the upstream response untouched."""

    def __init__(
        self,
        clients: dict[str, httpx.AsyncClient],
        expose_error_details: bool = True,
    ) -> None:
        self._clients = clients
        self._expose_error_details = expose_error_details

    async def forward(
        self,
        prepared: PreparedRequest,
        request_logger: RequestLogger,
    ) -> StreamingResponse:
        """Send one upstream request; raise UpstreamConnectionError on transport failure."""
        client = self._client_for(prepared.route_name)
        req = client.build_request(
            prepared.method,
            prepared.target_url,
            headers=prepared.headers,
            content=prepared.content,
        )
        try:
            response = await client.send(req, stream=True)
        except httpx.RequestError as e:
            message = str(e) or type(e).__name__
            request_logger.log_error(prepared.route_name, 502, message)
            details = message if self._expose_error_details else GENERIC_ERROR_DETAILS
            raise UpstreamConnectionError(details) from e

        if response.status_code >= 400:
            request_logger.log_error(
                prepared.route_name,
                response.status_code,
                response.reason_phrase or "upstream error",
            )

        relay = StreamingResponse(
            self._relay_body(response, prepared.route_name),
            status_code=response.status_code,
        )
        relay.raw_headers = [
            (key.lower(), value)
            for key, value in response.headers.raw
            if key.lower().decode("latin-1") not in HOP_BY_HOP
        ]
        return relay

    async def _relay_body(
        self,
        response: httpx.Response,
        route_name: str,
    ) -> AsyncIterator[bytes]:
        """Stream raw upstream bytes; close the upstream response however the stream ends."""
        try:
            async for chunk in response.aiter_raw():
                yield chunk
        except httpx.HTTPError as e:
            logger.warning("%s: upstream stream interrupted: %s", route_name, e)
            raise
        finally:
            await response.aclose()

    def _client_for(self, route_name: str) -> httpx.AsyncClient:
        """Select the appropriate cached client."""
        return self._clients[route_name]

"""Shared request data types."""

from collections.abc import AsyncIterator
from dataclasses import dataclass

import httpx

# Methods whose JSON body the OpenAI route rewrites.
BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})


@dataclass(frozen=True)
class InboundRequest:
    """Request-scoped view of what the client sent."""

    method: str
    path: str
    headers: httpx.Headers
    stream: AsyncIterator[bytes] | None = None

    @property
    def has_body(self) -> bool:
        """The client framed a body (Content-Length or Transfer-Encoding)."""
        if self.stream is None:
            return False
        return "content-length" in self.headers or "transfer-encoding" in self.headers

    @property
    def rewritable(self) -> bool:
        return self.has_body and self.method.upper() in BODY_METHODS


@dataclass(frozen=True)
class PreparedRequest:
    """Prepared data for an upstream request."""

    route_name: str
    target_url: str
    method: str
    headers: httpx.Headers
    content: bytes | AsyncIterator[bytes] | None = None

"""Header construction for upstream requests."""

from collections.abc import Mapping

import httpx

# Connection-scoped headers that must not be relayed by a proxy.
HOP_BY_HOP = frozenset(
    {
        "connection",
        "keep-alive",
        "proxy-connection",
        "te",
        "trailer",
        "transfer-encoding",
        "upgrade",
    }
)


def target_host(target_url: str) -> str:
    """Host (and non-default port) of a target URL, as used in the Host header."""
    return httpx.URL(target_url).netloc.decode("ascii")


def strip_hop_by_hop(headers: httpx.Headers) -> httpx.Headers:
    """Return a copy of headers without connection-scoped entries."""
    return httpx.Headers(
        [(key, value) for key, value in headers.multi_items() if key.lower() not in HOP_BY_HOP]
    )


class HeaderBuilder:
    """Build upstream headers for the three providers."""

    def build_anthropic_headers(
        self,
        headers: Mapping[str, str],
        target_url: str,
    ) -> httpx.Headers:
        """Swap x-api-key for a Bearer token."""
        upstream = strip_hop_by_hop(httpx.Headers(headers))
        api_key = upstream.pop("x-api-key")
        upstream["Authorization"] = f"Bearer {api_key}"
        upstream["host"] = target_host(target_url)
        return upstream

    def build_bedrock_headers(
        self,
        headers: Mapping[str, str],
        target_url: str,
    ) -> httpx.Headers:
        """Anthropic rewrite plus the bedrock provider tag."""
        upstream = self.build_anthropic_headers(headers, target_url)
        upstream["x-model-provider"] = "bedrock"
        return upstream

    def build_openai_headers(
        self,
        headers: Mapping[str, str],
        target_url: str,
        content_length: int | None = None,
    ) -> httpx.Headers:
        """Pass the credential through; fix Content-Length after a body rewrite."""
        upstream = strip_hop_by_hop(httpx.Headers(headers))
        upstream["host"] = target_host(target_url)
        if content_length is not None:
            upstream["Content-Length"] = str(content_length)
        return upstream

"""Upstream target handlers for Anthropic, Bedrock and OpenAI."""

import json
from collections.abc import AsyncIterator
from json import JSONDecodeError
from typing import Any

from core.config import Config
from core.exceptions import InvalidJSON, MissingCredential, RequestTooLarge
from core.headers import HeaderBuilder
from core.protocols import RequestLogger
from core.request_types import InboundRequest, PreparedRequest
from core.transform import RequestTransformer
from ui.log_utils import mask_secret


class AnthropicTarget:
    """Anthropic-specific request preparation: x-api-key becomes a Bearer token."""

    route_name = "Anthropic"

    def __init__(
        self,
        config: Config,
        logger: RequestLogger,
        header_builder: HeaderBuilder,
    ) -> None:
        self._config = config
        self._logger = logger
        self._headers = header_builder

    @property
    def target_url(self) -> str:
        return self._config.targets.anthropic_url

    async def prepare(self, inbound: InboundRequest) -> PreparedRequest:
        """Prepare a request for the Anthropic target."""
        api_key = inbound.headers.get("x-api-key")
        if not api_key:
            raise MissingCredential("x-api-key")

        upstream_headers = self._build_headers(inbound)
        self._logger.log_forward(
            self.route_name,
            self.target_url,
            credential=f"Bearer {mask_secret(api_key)}",
        )
        return PreparedRequest(
            self.route_name,
            self.target_url,
            inbound.method,
            upstream_headers,
            inbound.stream if inbound.has_body else None,
        )

    def _build_headers(self, inbound: InboundRequest):
        return self._headers.build_anthropic_headers(inbound.headers, self.target_url)


class BedrockTarget(AnthropicTarget):
    """Same as Anthropic, tagged with x-model-provider: bedrock."""

    route_name = "Bedrock"

    @property
    def target_url(self) -> str:
        return self._config.targets.bedrock_url

    def _build_headers(self, inbound: InboundRequest):
        return self._headers.build_bedrock_headers(inbound.headers, self.target_url)


class OpenAITarget:
    """OpenAI-specific request preparation with model/body rewrites."""

    route_name = "OpenAI"

    def __init__(
        self,
        config: Config,
        logger: RequestLogger,
        transformer: RequestTransformer,
        header_builder: HeaderBuilder,
    ) -> None:
        self._config = config
        self._logger = logger
        self._transformer = transformer
        self._headers = header_builder

    @property
    def target_url(self) -> str:
        return self._config.targets.openai_url

    async def prepare(self, inbound: InboundRequest) -> PreparedRequest:
        """Prepare a request for the OpenAI target."""
        authorization = inbound.headers.get("authorization")
        if not authorization:
            raise MissingCredential("Authorization")

        content: bytes | AsyncIterator[bytes] | None = None
        content_length: int | None = None

        if inbound.rewritable:
            raw_body = await self._read_body(inbound)
            content = raw_body
            text_body = raw_body.decode("utf-8", errors="replace")
            if text_body:
                body = self._parse_json(text_body)
                body, rewrites = self._transformer.rewrite_openai_body(body)
                content = self._transformer.serialize(body).encode("utf-8")
                content_length = len(content)
                for change in rewrites:
                    self._logger.log_rewrite(self.route_name, change)
        elif inbound.has_body:
            content = inbound.stream

        upstream_headers = self._headers.build_openai_headers(
            inbound.headers,
            self.target_url,
            content_length=content_length,
        )
        self._logger.log_forward(
            self.route_name,
            self.target_url,
            credential=mask_secret(authorization),
        )
        return PreparedRequest(
            self.route_name,
            self.target_url,
            inbound.method,
            upstream_headers,
            content,
        )

    async def _read_body(self, inbound: InboundRequest) -> bytes:
        """Buffer the whole body, bounded by limits.max_body_size."""
        max_size = self._config.limits.max_body_size
        declared = inbound.headers.get("content-length")
        if declared and declared.isdigit() and int(declared) > max_size:
            raise RequestTooLarge()

        chunks: list[bytes] = []
        size = 0
        async for chunk in inbound.stream:
            size += len(chunk)
            if size > max_size:
                raise RequestTooLarge()
            chunks.append(chunk)
        return b"".join(chunks)

    @staticmethod
    def _parse_json(text_body: str) -> Any:
        """Strict JSON: no NaN/Infinity, and a bare null is not a request."""
        try:
            body = json.loads(text_body, parse_constant=_reject_constant)
        except (JSONDecodeError, ValueError) as e:
            raise InvalidJSON() from e
        if body is None:
            raise InvalidJSON()
        return body


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")

"""Routing orchestration for proxy requests."""

from core.config import Config
from core.exceptions import UnknownEndpoint
from core.headers import HeaderBuilder
from core.protocols import RequestLogger
from core.request_types import InboundRequest, PreparedRequest
from core.router import RouteDecider
from core.transform import RequestTransformer
from services.targets import AnthropicTarget, BedrockTarget, OpenAITarget


class RoutingService:
    """Pick the provider target for a request and prepare it."""

    def __init__(
        self,
        config: Config,
        logger: RequestLogger,
        decider: RouteDecider,
        transformer: RequestTransformer,
        header_builder: HeaderBuilder,
        anthropic_target: AnthropicTarget | None = None,
        openai_target: OpenAITarget | None = None,
        bedrock_target: BedrockTarget | None = None,
    ) -> None:
        self._decider = decider
        self._targets = {
            "anthropic": anthropic_target or AnthropicTarget(config, logger, header_builder),
            "openai": openai_target
            or OpenAITarget(config, logger, transformer, header_builder),
            "bedrock": bedrock_target or BedrockTarget(config, logger, header_builder),
        }

    @classmethod
    def from_config(cls, config: Config, logger: RequestLogger) -> "RoutingService":
        """Build the service with collaborators derived from config."""
        return cls(
            config=config,
            logger=logger,
            decider=RouteDecider(strict_prefix=config.routing.strict_prefix),
            transformer=RequestTransformer(
                model_aliases=config.openai.model_aliases,
                strip_effort_models=config.openai.strip_reasoning_effort_models,
            ),
            header_builder=HeaderBuilder(),
        )

    async def prepare(self, inbound: InboundRequest) -> PreparedRequest:
        """Route by path prefix and prepare the upstream request."""
        decision = self._decider.decide(inbound.path)
        if not decision.matched:
            raise UnknownEndpoint()
        return await self._targets[decision.route].prepare(inbound)

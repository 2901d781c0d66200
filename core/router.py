"""Request routing logic - picks the provider from the path prefix."""

from dataclasses import dataclass

# Checked in order; first match wins.
ROUTE_PREFIXES: tuple[tuple[str, str], ...] = (
    ("/anthropic", "anthropic"),
    ("/openai", "openai"),
    ("/bedrock", "bedrock"),
)


@dataclass(frozen=True)
class RouteDecision:
    """Routing decision for a request."""

    route: str | None

    @property
    def matched(self) -> bool:
        return self.route is not None


class RouteDecider:
    """Decide which provider handler serves a request path."""

    def __init__(self, strict_prefix: bool = False):
        self.strict_prefix = strict_prefix

    def decide(self, path: str) -> RouteDecision:
        """Return the route for the first prefix the path matches."""
        for prefix, route in ROUTE_PREFIXES:
            if self._matches(path, prefix):
                return RouteDecision(route=route)
        return RouteDecision(route=None)

    def _matches(self, path: str, prefix: str) -> bool:
        if not path.startswith(prefix):
            return False
        if not self.strict_prefix:
            # Plain "starts with": /anthropicX is still Anthropic
            return True
        rest = path[len(prefix):]
        return rest == "" or rest.startswith("/")

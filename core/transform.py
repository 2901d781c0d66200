"""Request body transformations for the OpenAI upstream."""

import copy
import json
from typing import Any

DEFAULT_MODEL_ALIASES = {"gpt-5": "gpt-5-2025-08-07"}
DEFAULT_STRIP_EFFORT_MODELS = ("gpt-5-codex",)


class RequestTransformer:
    """Transform OpenAI request bodies for upstream compatibility."""

    def __init__(
        self,
        model_aliases: dict[str, str] | None = None,
        strip_effort_models: list[str] | tuple[str, ...] | None = None,
    ):
        self.model_aliases = dict(
            DEFAULT_MODEL_ALIASES if model_aliases is None else model_aliases
        )
        self.strip_effort_models = frozenset(
            DEFAULT_STRIP_EFFORT_MODELS if strip_effort_models is None else strip_effort_models
        )

    def rewrite_openai_body(self, body: Any) -> tuple[Any, list[str]]:
        """Apply model aliasing and reasoning.effort stripping.

        Returns:
            Tuple of (rewritten copy of body, human-readable list of changes)
        """
        if not isinstance(body, dict):
            return body, []

        body = copy.deepcopy(body)
        changes: list[str] = []

        model = body.get("model")
        if isinstance(model, str) and model in self.model_aliases:
            body["model"] = self.model_aliases[model]
            changes.append(f"model {model} -> {body['model']}")

        # Checked against the aliased name
        model = body.get("model")
        if isinstance(model, str) and model in self.strip_effort_models:
            reasoning = body.get("reasoning")
            if isinstance(reasoning, dict) and "effort" in reasoning:
                del reasoning["effort"]
                changes.append(f"removed reasoning.effort for {body['model']}")

        return body, changes

    @staticmethod
    def serialize(body: Any) -> str:
        """Compact JSON, non-ASCII kept as-is."""
        return json.dumps(body, ensure_ascii=False, separators=(",", ":"))

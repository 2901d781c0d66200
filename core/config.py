"""Configuration models and loading."""

import json
import os
from collections.abc import Mapping
from pathlib import Path
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from core.exceptions import ConfigurationError

CONFIG_DIR = Path.home() / ".config" / "factory-key-proxy"
CONFIG_FILE = CONFIG_DIR / "config.json"

DEFAULT_ANTHROPIC_URL = "https://app.factory.ai/api/llm/a/v1/messages"
DEFAULT_OPENAI_URL = "https://app.factory.ai/api/llm/o/v1/responses"
DEFAULT_BEDROCK_URL = "https://app.factory.ai/api/llm/a/v1/messages"

# Environment variable -> (section, field)
ENV_OVERRIDES = {
    "ANTHROPIC_TARGET_URL": ("targets", "anthropic_url"),
    "OPENAI_TARGET_URL": ("targets", "openai_url"),
    "BEDROCK_TARGET_URL": ("targets", "bedrock_url"),
    "PROXY_HOST": ("proxy", "host"),
    "PROXY_PORT": ("proxy", "port"),
}


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class ProxySettings(_Frozen):
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    expose_error_details: bool = True


class TargetSettings(_Frozen):
    anthropic_url: str = DEFAULT_ANTHROPIC_URL
    openai_url: str = DEFAULT_OPENAI_URL
    bedrock_url: str = DEFAULT_BEDROCK_URL

    @field_validator("anthropic_url", "openai_url", "bedrock_url")
    @classmethod
    def _absolute_url(cls, value: str) -> str:
        parts = urlsplit(value)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ValueError(f"target URL must be absolute http(s): {value!r}")
        return value


class OpenAISettings(_Frozen):
    model_aliases: dict[str, str] = Field(
        default_factory=lambda: {"gpt-5": "gpt-5-2025-08-07"}
    )
    strip_reasoning_effort_models: list[str] = Field(
        default_factory=lambda: ["gpt-5-codex"]
    )


class RoutingSettings(_Frozen):
    strict_prefix: bool = False


class LimitsSettings(_Frozen):
    max_body_size: int = 50 * 1024 * 1024  # 50MB
    request_timeout: float = 300.0
    connect_timeout: float = 10.0
    keep_alive_timeout: int = 5
    max_connections: int = 100
    max_keepalive_connections: int = 20


class Config(_Frozen):
    proxy: ProxySettings = Field(default_factory=ProxySettings)
    targets: TargetSettings = Field(default_factory=TargetSettings)
    openai: OpenAISettings = Field(default_factory=OpenAISettings)
    routing: RoutingSettings = Field(default_factory=RoutingSettings)
    limits: LimitsSettings = Field(default_factory=LimitsSettings)


def load_config(
    environ: Mapping[str, str] | None = None,
    config_file: Path = CONFIG_FILE,
) -> Config:
    """Load configuration from JSON file, then apply environment overrides."""
    data = _read_config_file(config_file)
    env = os.environ if environ is None else environ

    for var, (section, key) in ENV_OVERRIDES.items():
        value = env.get(var)
        if value:
            data.setdefault(section, {})[key] = value

    try:
        return Config.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def _read_config_file(config_file: Path) -> dict:
    """Read the config file, creating a default one if needed."""
    if not config_file.exists():
        config_file.parent.mkdir(parents=True, exist_ok=True)
        config_file.write_text(Config().model_dump_json(indent=2))
        return {}

    try:
        data = json.loads(config_file.read_text())
        Config.model_validate(data)
        return data
    except (json.JSONDecodeError, ValidationError):
        # Backup corrupted config and recreate default
        backup = config_file.with_suffix(".json.bak")
        config_file.rename(backup)
        config_file.write_text(Config().model_dump_json(indent=2))
        return {}

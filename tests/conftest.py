"""Pytest configuration and fixtures."""

from contextlib import ExitStack

import httpx
import pytest
from fastapi.testclient import TestClient

from app import create_app
from core.config import Config, TargetSettings

ANTHROPIC_URL = "https://anthropic.test/api/llm/a/v1/messages"
OPENAI_URL = "https://openai.test/api/llm/o/v1/responses"
BEDROCK_URL = "https://bedrock.test:8443/api/llm/a/v1/messages"


class RecordingLogger:
    """RequestLogger that keeps every event for assertions."""

    def __init__(self):
        self.requests: list[tuple[str, str]] = []
        self.forwards: list[tuple[str, str, str]] = []
        self.rewrites: list[tuple[str, str]] = []
        self.errors: list[tuple[str, int, str]] = []

    def log_request(self, method, path):
        self.requests.append((method, path))

    def log_forward(self, route, target_url, *, credential):
        self.forwards.append((route, target_url, credential))

    def log_rewrite(self, route, change):
        self.rewrites.append((route, change))

    def log_error(self, route, status, message):
        self.errors.append((route, status, message))


class FakeUpstream:
    """httpx.MockTransport handler that records what the proxy sent."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.headers = {"content-type": "application/json", "x-upstream": "yes"}
        self.content = b'{"id":"msg_1"}'
        self.error: Exception | None = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        # Unread stream, as a network transport would hand back
        headers = {**self.headers, "content-length": str(len(self.content))}
        return httpx.Response(
            self.status_code,
            headers=headers,
            stream=httpx.ByteStream(self.content),
        )

    @property
    def last(self) -> httpx.Request:
        assert self.requests, "no request reached the upstream"
        return self.requests[-1]


def make_config(**overrides) -> Config:
    data = {
        "targets": TargetSettings(
            anthropic_url=ANTHROPIC_URL,
            openai_url=OPENAI_URL,
            bedrock_url=BEDROCK_URL,
        ),
    }
    data.update(overrides)
    return Config(**data)


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def request_logger():
    return RecordingLogger()


@pytest.fixture
def config():
    return make_config()


@pytest.fixture
def client(config, request_logger, upstream):
    app = create_app(config, request_logger, transport=httpx.MockTransport(upstream))
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_client(request_logger, upstream):
    """Build a TestClient for a config with overrides (e.g. routing, limits)."""
    with ExitStack() as stack:

        def _make(**overrides) -> TestClient:
            app = create_app(
                make_config(**overrides),
                request_logger,
                transport=httpx.MockTransport(upstream),
            )
            return stack.enter_context(TestClient(app))

        yield _make

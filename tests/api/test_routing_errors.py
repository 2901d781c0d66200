"""Routing misses and upstream transport failures."""

import httpx
import pytest

INVALID_ENDPOINT = {"error": "Invalid endpoint. Use /anthropic/, /openai/, or /bedrock/"}


class TestUnknownEndpoints:
    @pytest.mark.parametrize("path", ["/", "/v1/messages", "/docs", "/openapi.json", "/health"])
    def test_unmatched_paths_are_404(self, client, upstream, path):
        resp = client.post(path, headers={"x-api-key": "K"}, content=b"{}")

        assert resp.status_code == 404
        assert resp.headers["content-type"] == "application/json"
        assert resp.json() == INVALID_ENDPOINT
        assert upstream.requests == []

    def test_get_on_unmatched_path(self, client):
        resp = client.get("/nope")

        assert resp.status_code == 404
        assert resp.json() == INVALID_ENDPOINT

    def test_prefix_without_segment_boundary_routes(self, client, upstream):
        resp = client.post("/anthropicX", headers={"x-api-key": "K"}, content=b"{}")

        assert resp.status_code == 200
        assert upstream.last.headers["authorization"] == "Bearer K"

    def test_strict_prefix_rejects_glued_paths(self, make_client, upstream):
        client = make_client(routing={"strict_prefix": True})

        assert client.post("/anthropicX", headers={"x-api-key": "K"}, content=b"{}").status_code == 404
        assert client.post("/anthropic/v1", headers={"x-api-key": "K"}, content=b"{}").status_code == 200
        assert len(upstream.requests) == 1

    @pytest.mark.parametrize("method", ["TRACE", "PROPFIND", "PURGE"])
    def test_any_method_on_unmatched_path(self, client, upstream, method):
        resp = client.request(method, "/nope")

        assert resp.status_code == 404
        assert resp.json() == INVALID_ENDPOINT
        assert upstream.requests == []


class TestUpstreamFailures:
    @pytest.mark.parametrize(
        ("path", "headers"),
        [
            ("/anthropic/v1/messages", {"x-api-key": "K"}),
            ("/bedrock/v1/messages", {"x-api-key": "K"}),
            ("/openai/v1/responses", {"Authorization": "Bearer T"}),
        ],
    )
    def test_connect_error_is_bad_gateway(self, client, upstream, request_logger, path, headers):
        upstream.error = httpx.ConnectError("Connection refused")

        resp = client.post(path, headers=headers, json={"model": "gpt-4"})

        assert resp.status_code == 502
        assert resp.headers["content-type"] == "application/json"
        assert resp.json() == {"error": "Bad Gateway", "details": "Connection refused"}
        assert request_logger.errors[-1][1:] == (502, "Connection refused")

    def test_timeout_is_bad_gateway(self, client, upstream):
        upstream.error = httpx.ReadTimeout("timed out")

        resp = client.post("/anthropic", headers={"x-api-key": "K"}, content=b"{}")

        assert resp.status_code == 502
        assert resp.json()["details"] == "timed out"

    def test_details_can_be_hidden(self, make_client, upstream, request_logger):
        upstream.error = httpx.ConnectError("dns lookup failed for internal-host")
        client = make_client(proxy={"expose_error_details": False})

        resp = client.post("/anthropic", headers={"x-api-key": "K"}, content=b"{}")

        assert resp.status_code == 502
        assert resp.json() == {"error": "Bad Gateway", "details": "Upstream request failed"}
        assert "internal-host" in request_logger.errors[-1][2]

    def test_no_retry_on_failure(self, client, upstream):
        upstream.error = httpx.ConnectError("refused")

        client.post("/anthropic", headers={"x-api-key": "K"}, content=b"{}")

        assert len(upstream.requests) == 1


class TestLocalErrorsAreLogged:
    def test_missing_credential_is_logged(self, client, request_logger):
        client.post("/openai", content=b"{}")

        assert request_logger.requests == [("POST", "/openai")]
        assert request_logger.errors == [("/openai", 401, "Authorization header is required")]

"""Tests for log helpers and the request loggers."""

import io
import json

import pytest
from rich.console import Console

from core.config import Config
from ui import log_utils
from ui.console_logger import ConsoleLogger
from ui.dashboard import Dashboard


@pytest.fixture
def cli_log(tmp_path, monkeypatch):
    path = tmp_path / "proxy.log"
    monkeypatch.setattr(log_utils, "CLI_LOG_FILE", path)
    return path


class TestRedaction:
    def test_mask_secret(self):
        assert log_utils.mask_secret("short") == "***"
        assert log_utils.mask_secret("sk-ant-api03-abcdefgh") == "sk-ant...efgh"

    def test_sensitive_headers_are_masked(self):
        redacted = log_utils.redact_headers(
            {
                "x-api-key": "sk-ant-api03-abcdefgh",
                "Authorization": "Bearer 0123456789",
                "content-type": "application/json",
            }
        )

        assert redacted["x-api-key"] == "sk-ant...efgh"
        assert redacted["Authorization"] == "Bearer...6789"
        assert redacted["content-type"] == "application/json"

    def test_incoming_log_never_contains_raw_key(self, tmp_path):
        path = log_utils.write_incoming_log(
            "POST",
            "/anthropic",
            {"x-api-key": "sk-secret-value-1234"},
            log_root=tmp_path,
        )

        payload = json.loads(path.read_text())
        assert payload["path"] == "/anthropic"
        assert "sk-secret-value-1234" not in path.read_text()

    def test_clear_logs_keeps_cli_log(self, tmp_path):
        log_utils.write_incoming_log("GET", "/openai", {}, log_root=tmp_path)
        log_utils.write_cli_log("INFO", "kept", log_file=tmp_path / "proxy.log")

        log_utils.clear_logs(tmp_path)

        assert not (tmp_path / "incoming").exists()
        assert "kept" in (tmp_path / "proxy.log").read_text()


class TestDashboard:
    def test_counts_and_cli_log(self, cli_log):
        dashboard = Dashboard(Config())
        dashboard.log_request("POST", "/bedrock")
        dashboard.log_forward("Bedrock", "https://b.test/x", credential="Bearer ***")
        dashboard.log_rewrite("OpenAI", "model gpt-5 -> gpt-5-2025-08-07")
        dashboard.log_error("Anthropic", 502, "Connection refused")

        assert dashboard._total == 1
        assert dashboard._request_count["Bedrock"] == 1
        assert dashboard._errors == ["Anthropic 502: Connection refused"]
        text = cli_log.read_text()
        assert "BEDROCK: https://b.test/x" in text
        assert "ERROR: Connection refused route=Anthropic status=502" in text

    def test_layout_renders(self, cli_log):
        dashboard = Dashboard(Config())
        dashboard.log_forward("OpenAI", "https://o.test/", credential="Bearer...1234")

        console = Console(file=io.StringIO(), width=120)
        console.print(dashboard._build_layout(), height=20)
        output = console.file.getvalue()
        assert "Factory Key Proxy" in output
        assert "OpenAI: 1" in output


class TestConsoleLogger:
    def test_prints_one_line_per_event(self, cli_log):
        buffer = io.StringIO()
        logger = ConsoleLogger(Console(file=buffer, width=200, color_system=None))

        logger.log_forward("Anthropic", "https://a.test/v1", credential="Bearer sk-ant...cdef")
        logger.log_error("/openai", 401, "Authorization header is required")

        lines = buffer.getvalue().splitlines()
        assert len(lines) == 2
        assert "Anthropic -> https://a.test/v1" in lines[0]
        assert "/openai 401: Authorization header is required" in lines[1]

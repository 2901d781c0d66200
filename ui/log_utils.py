"""Shared logging utilities."""

import json
import shutil
from collections.abc import Mapping
from datetime import UTC, datetime
from pathlib import Path
from typing import Any
from uuid import uuid4

LOG_ROOT = Path.cwd() / "logs"
CLI_LOG_FILE = LOG_ROOT / "proxy.log"

SENSITIVE_MARKERS = ("key", "authorization", "token", "cookie")


def write_incoming_log(
    method: str,
    path: str,
    headers: Mapping[str, str],
    *,
    log_root: Path = LOG_ROOT,
) -> Path:
    """Write a single incoming request log entry (headers redacted)."""
    payload = {
        "timestamp": _utc_now(),
        "method": method,
        "path": path,
        "headers": redact_headers(headers),
    }
    return _write_json(log_root / "incoming", payload)


def write_cli_log(
    level: str,
    message: str,
    *,
    log_file: Path | None = None,
    **extra: Any,
) -> None:
    """Append a line to the rolling CLI log file."""
    log_file = log_file or CLI_LOG_FILE
    log_file.parent.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now(UTC).strftime("%Y-%m-%d %H:%M:%S")
    extra_str = " ".join(f"{k}={v}" for k, v in extra.items()) if extra else ""
    line = f"[{timestamp}] {level}: {message}"
    if extra_str:
        line += f" {extra_str}"
    line += "\n"
    with log_file.open("a") as f:
        f.write(line)


def clear_logs(log_root: Path = LOG_ROOT) -> None:
    """Remove per-request logs from a previous run; keep the rolling CLI log."""
    incoming = log_root / "incoming"
    if incoming.exists():
        shutil.rmtree(incoming, ignore_errors=True)


def redact_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Redact sensitive headers."""
    redacted = {}
    for key, value in headers.items():
        if any(marker in key.lower() for marker in SENSITIVE_MARKERS):
            redacted[key] = mask_secret(value)
        else:
            redacted[key] = value
    return redacted


def mask_secret(value: str) -> str:
    """Keep only enough of a credential to tell keys apart."""
    if len(value) <= 10:
        return "***"
    return value[:6] + "..." + value[-4:]


def _write_json(folder: Path, payload: dict[str, Any]) -> Path:
    """Write payload to a unique JSON file in the given folder."""
    folder.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now(UTC).strftime("%Y%m%dT%H%M%S.%fZ")
    file_path = folder / f"{timestamp}_{uuid4().hex}.json"
    file_path.write_text(json.dumps(payload, indent=2, default=str))
    return file_path


def _utc_now() -> str:
    return datetime.now(UTC).isoformat()

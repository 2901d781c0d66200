"""Custom exception hierarchy for the key proxy."""

from typing import Any


class ProxyError(Exception):
    """Base exception for errors answered locally with a JSON body."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_payload(self) -> dict[str, Any]:
        return {"error": self.message}


class ConfigurationError(Exception):
    """Raised when configuration is missing or invalid."""


class UnknownEndpoint(ProxyError):
    """Path does not match any provider prefix."""

    status_code = 404

    def __init__(self) -> None:
        super().__init__("Invalid endpoint. Use /anthropic/, /openai/, or /bedrock/")


class MissingCredential(ProxyError):
    """Required credential header is absent or empty."""

    status_code = 401

    def __init__(self, header: str) -> None:
        super().__init__(f"{header} header is required")


class InvalidJSON(ProxyError):
    """Request body is not valid JSON."""

    status_code = 400

    def __init__(self) -> None:
        super().__init__("Invalid JSON in request body")


class RequestTooLarge(ProxyError):
    """Request body exceeds size limit."""

    status_code = 413

    def __init__(self) -> None:
        super().__init__("Request body too large")


class UpstreamConnectionError(ProxyError):
    """Raised when the upstream request fails at the transport level.

    Attributes:
        details: Message surfaced to the client in the ``details`` field
    """

    status_code = 502

    def __init__(self, details: str) -> None:
        super().__init__("Bad Gateway")
        self.details = details

    def to_payload(self) -> dict[str, Any]:
        return {"error": self.message, "details": self.details}

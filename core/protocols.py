"""Shared protocol definitions."""

from typing import Protocol


class RequestLogger(Protocol):
    """Protocol for request logging (Dashboard or console)."""

    def log_request(self, method: str, path: str) -> None: ...
    def log_forward(
        self,
        route: str,
        target_url: str,
        *,
        credential: str,
    ) -> None: ...
    def log_rewrite(self, route: str, change: str) -> None: ...
    def log_error(self, route: str, status: int, message: str) -> None: ...

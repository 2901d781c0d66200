"""Line-oriented request logger for headless runs."""

from datetime import datetime

from rich.console import Console
from rich.markup import escape

from ui.dashboard import ROUTE_STYLES
from ui.log_utils import write_cli_log


class ConsoleLogger:
    """Print one line per proxy event instead of a live dashboard."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def log_request(self, method: str, path: str) -> None:
        self._print(f"[dim]{method} {escape(path)}[/dim]")

    def log_forward(self, route: str, target_url: str, *, credential: str) -> None:
        style = ROUTE_STYLES.get(route, "white")
        self._print(
            f"[{style}]{route}[/{style}] -> {escape(target_url)} [dim]({escape(credential)})[/dim]"
        )

    def log_rewrite(self, route: str, change: str) -> None:
        self._print(f"[green]{route}[/green] rewrite: {escape(change)}")

    def log_error(self, route: str, status: int, message: str) -> None:
        self._print(f"[red]{escape(route)} {status}:[/red] {escape(message)}")
        write_cli_log("ERROR", message[:200], route=route, status=status)

    def _print(self, line: str) -> None:
        stamp = datetime.now().strftime("%H:%M:%S")
        self.console.print(f"[dim]{stamp}[/dim] {line}", highlight=False)

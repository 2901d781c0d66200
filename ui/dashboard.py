"""Real-time CLI dashboard for proxy monitoring."""

from datetime import datetime
from threading import Lock

from rich.console import Console
from rich.layout import Layout
from rich.live import Live
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.config import Config
from ui.log_utils import write_cli_log

console = Console()

ROUTE_STYLES = {
    "Anthropic": "blue",
    "OpenAI": "green",
    "Bedrock": "yellow",
}


class ForwardInfo:
    """Info about a single forwarded request."""

    def __init__(self, route: str, target_url: str, credential: str, timestamp: datetime):
        self.route = route
        self.target_url = target_url
        self.credential = credential
        self.timestamp = timestamp


class Dashboard:
    """Real-time dashboard showing traffic per provider."""

    def __init__(self, config: Config):
        self.config = config
        self._lock = Lock()
        self._forwards: list[ForwardInfo] = []
        self._max_forwards = 8
        self._rewrites: list[str] = []
        self._request_count = {route: 0 for route in ROUTE_STYLES}
        self._total = 0
        self._errors: list[str] = []
        self._live: Live | None = None

    def start(self) -> "Dashboard":
        """Start the live dashboard."""
        self._live = Live(
            self._build_layout(),
            console=console,
            refresh_per_second=4,
            screen=False,
        )
        self._live.start()
        return self

    def stop(self) -> None:
        """Stop the live dashboard."""
        if self._live:
            self._live.stop()

    def log_request(self, method: str, path: str) -> None:
        """Count an incoming request."""
        with self._lock:
            self._total += 1
            self._refresh()
        write_cli_log("REQUEST", f"{method} {path}")

    def log_forward(self, route: str, target_url: str, *, credential: str) -> None:
        """Log a request about to be forwarded upstream."""
        with self._lock:
            self._request_count[route] = self._request_count.get(route, 0) + 1
            info = ForwardInfo(route, target_url, credential, datetime.now())
            self._forwards.insert(0, info)
            self._forwards = self._forwards[: self._max_forwards]
            self._refresh()
        write_cli_log(route.upper(), target_url, credential=credential)

    def log_rewrite(self, route: str, change: str) -> None:
        """Log a body rewrite."""
        with self._lock:
            stamp = datetime.now().strftime("%H:%M:%S")
            self._rewrites.insert(0, f"{stamp} {route}: {change}")
            self._rewrites = self._rewrites[:3]
            self._refresh()
        write_cli_log("REWRITE", change, route=route)

    def log_error(self, route: str, status: int, message: str) -> None:
        """Log an error."""
        with self._lock:
            truncated = message[:50] + "..." if len(message) > 50 else message
            self._errors.insert(0, f"{route} {status}: {truncated}")
            self._errors = self._errors[:3]
            self._refresh()
        write_cli_log("ERROR", message[:200], route=route, status=status)

    def _refresh(self) -> None:
        """Refresh the display."""
        if self._live:
            self._live.update(self._build_layout())

    def _build_layout(self) -> Layout:
        """Build the dashboard layout."""
        layout = Layout()

        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="body"),
            Layout(name="footer", size=8),
        )

        layout["body"].split_row(
            Layout(name="targets", ratio=1),
            Layout(name="forwards", ratio=2),
        )

        layout["header"].update(self._build_header())
        layout["targets"].update(self._build_targets_panel())
        layout["forwards"].update(self._build_forwards_panel())
        layout["footer"].update(self._build_footer())

        return layout

    def _build_header(self) -> Panel:
        """Build header with stats."""
        stats = Text()
        stats.append("Factory Key Proxy", style="bold cyan")
        stats.append("  |  ")
        stats.append(f"Requests: {self._total}", style="bold")
        for route, style in ROUTE_STYLES.items():
            stats.append("  |  ")
            stats.append(f"{route}: {self._request_count.get(route, 0)}", style=style)
        stats.append("  |  ")
        stats.append(f"Port: {self.config.proxy.port}", style="dim")

        return Panel(stats, style="cyan")

    def _build_targets_panel(self) -> Panel:
        """Build the configured targets panel."""
        targets = self.config.targets
        content = Table.grid(padding=(0, 1))
        content.add_column()
        content.add_column()
        content.add_row("[blue]/anthropic[/blue]", escape(targets.anthropic_url))
        content.add_row("[green]/openai[/green]", escape(targets.openai_url))
        content.add_row("[yellow]/bedrock[/yellow]", escape(targets.bedrock_url))

        return Panel(content, title="[bold]Targets[/bold]", border_style="cyan")

    def _build_forwards_panel(self) -> Panel:
        """Build recent forwards panel."""
        if self._forwards:
            table = Table(show_header=True, header_style="bold", expand=True, box=None)
            table.add_column("Time", style="dim", width=8)
            table.add_column("Route", width=10)
            table.add_column("Credential", ratio=1)

            for fwd in self._forwards:
                style = ROUTE_STYLES.get(fwd.route, "white")
                table.add_row(
                    fwd.timestamp.strftime("%H:%M:%S"),
                    f"[{style}]{fwd.route}[/{style}]",
                    escape(fwd.credential),
                )

            content = table
        else:
            content = Text("Waiting for requests...", style="dim")

        return Panel(content, title="[magenta]Recent[/magenta]", border_style="magenta")

    def _build_footer(self) -> Panel:
        """Build footer with errors, rewrites and help."""
        if self._errors or self._rewrites:
            status_text = Text()
            for err in self._errors:
                status_text.append("! ", style="red bold")
                status_text.append(err + "\n", style="red")
            for rewrite in self._rewrites:
                status_text.append("~ ", style="green bold")
                status_text.append(rewrite + "\n", style="green")
            content = status_text
        else:
            content = Text(
                f"Point clients at http://localhost:{self.config.proxy.port}/anthropic, "
                "/openai or /bedrock",
                style="dim",
            )

        return Panel(content, title="[dim]Status[/dim]", border_style="dim")

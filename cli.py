"""CLI entry point for factory-key-proxy."""

import sys
from datetime import datetime

from rich.console import Console

from app import create_app
from core.config import CONFIG_FILE, Config, load_config
from core.exceptions import ConfigurationError
from ui.console_logger import ConsoleLogger
from ui.dashboard import Dashboard
from ui.log_utils import clear_logs, write_cli_log

console = Console()


def main():
    """Main CLI entry point."""
    args = sys.argv[1:]

    if "--help" in args or "-h" in args:
        _print_help()
        return

    try:
        config = load_config()
    except ConfigurationError as e:
        console.print(f"[red][ERROR][/red] {e}")
        sys.exit(1)

    if "--config" in args:
        console.print(f"[bold]Config:[/bold] {CONFIG_FILE}")
        _print_targets(config)
        return

    headless = "--no-dashboard" in args or not console.is_terminal

    clear_logs()
    _print_banner(config)

    if headless:
        logger = ConsoleLogger(console)
        dashboard = None
    else:
        dashboard = Dashboard(config)
        logger = dashboard

    app = create_app(config, logger)

    import uvicorn

    server = uvicorn.Server(build_server_config(app, config))

    if dashboard:
        dashboard.start()
    start_time = datetime.now()
    write_cli_log("STARTUP", "Proxy started", host=config.proxy.host, port=config.proxy.port)
    try:
        server.run()
    finally:
        duration = datetime.now() - start_time
        write_cli_log("SHUTDOWN", "Proxy stopped", duration=str(duration))
        if dashboard:
            dashboard.stop()


def build_server_config(app, config: Config):
    """uvicorn settings; the relay must not gain server or date headers."""
    import uvicorn

    return uvicorn.Config(
        app,
        host=config.proxy.host,
        port=config.proxy.port,
        log_level="info" if config.proxy.debug else "warning",
        timeout_keep_alive=config.limits.keep_alive_timeout,
        server_header=False,
        date_header=False,
    )


def _print_targets(config: Config) -> None:
    """Print the effective target URLs."""
    console.print(f"[bold]Anthropic:[/bold] {config.targets.anthropic_url}")
    console.print(f"[bold]OpenAI:[/bold]    {config.targets.openai_url}")
    console.print(f"[bold]Bedrock:[/bold]   {config.targets.bedrock_url}")


def _print_banner(config: Config) -> None:
    """Print startup targets and usage."""
    console.print(
        f"[bold cyan]Factory Key Proxy[/bold cyan] listening on "
        f"http://{config.proxy.host}:{config.proxy.port}"
    )
    _print_targets(config)
    console.print(
        "[dim]  /anthropic/* needs x-api-key (sent upstream as a Bearer token)\n"
        "  /openai/*    needs Authorization: Bearer <token> (passed through)\n"
        "  /bedrock/*   needs x-api-key (Bearer token + x-model-provider: bedrock)[/dim]"
    )


def _print_help():
    """Print help message."""
    help_text = """
[bold cyan]Factory Key Proxy[/bold cyan]

Turns x-api-key requests into Bearer-token requests for a fixed upstream,
with small OpenAI body fixes (gpt-5 alias, gpt-5-codex reasoning.effort).

[bold]Usage:[/bold]
    factory-key-proxy                  Start with live dashboard
    factory-key-proxy --no-dashboard   Start with line-by-line logging
    factory-key-proxy --config         Show config location and targets
    factory-key-proxy --help           Show this help

[bold]Environment:[/bold]
    ANTHROPIC_TARGET_URL   Upstream for /anthropic
    OPENAI_TARGET_URL      Upstream for /openai
    BEDROCK_TARGET_URL     Upstream for /bedrock
    PROXY_HOST, PROXY_PORT Listen address (default 127.0.0.1:8000)
"""
    console.print(help_text)


if __name__ == "__main__":
    main()

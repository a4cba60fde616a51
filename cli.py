"""CLI entry point for local-relay."""

import sys
from datetime import datetime

from rich.console import Console

from app import create_app
from core.config import CONFIG_FILE, load_config
from ui.dashboard import Dashboard
from ui.log_utils import CLI_LOG_FILE, clear_logs, shutdown_log_executor, write_cli_log

console = Console()


def main():
    """Main CLI entry point."""
    # Handle CLI arguments
    if len(sys.argv) > 1:
        arg = sys.argv[1]

        if arg == "--config":
            console.print(f"[bold]Config:[/bold] {CONFIG_FILE}")
            console.print(f"[bold]Log:[/bold] {CLI_LOG_FILE}")
            return

        if arg in ("--help", "-h"):
            _print_help()
            return

        console.print(f"[red][ERROR][/red] Unknown option: {arg}")
        _print_help()
        sys.exit(2)

    config = load_config()

    # Clear previous logs and start dashboard
    clear_logs()
    dashboard = Dashboard(config)

    import uvicorn

    app = create_app(config, dashboard)

    # Run with dashboard
    uvicorn_config = uvicorn.Config(
        app,
        host=config.proxy.host,
        port=config.proxy.port,
        log_level="info" if config.proxy.debug else "warning",
        timeout_keep_alive=config.limits.keep_alive_timeout,
    )
    server = uvicorn.Server(uvicorn_config)

    dashboard.start()
    start_time = datetime.now()
    write_cli_log("STARTUP", "Relay started", host=config.proxy.host, port=config.proxy.port)
    try:
        server.run()
    finally:
        duration = datetime.now() - start_time
        write_cli_log("SHUTDOWN", "Relay stopped", duration=str(duration))
        shutdown_log_executor()
        dashboard.stop()


def _print_help():
    """Print help message."""
    help_text = """
[bold cyan]Local Relay[/bold cyan]

Executes HTTP requests on behalf of sandboxed clients and returns
the remote response as a JSON envelope.

[bold]Usage:[/bold]
    local-relay              Start with live dashboard
    local-relay --config     Show config and log locations
    local-relay --help       Show this help

[bold]Endpoints:[/bold]
    POST /api       Relay {url, method, headers, body, request}
    GET  /health    Health check
"""
    console.print(help_text)


if __name__ == "__main__":
    main()

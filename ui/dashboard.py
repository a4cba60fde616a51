"""Real-time CLI dashboard for relay monitoring."""

from datetime import datetime
from threading import Lock

from rich.console import Console
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.config import Config
from core.request_types import Method
from ui.log_utils import summarize_headers, write_cli_log

console = Console()


class RelayInfo:
    """Info about a single relayed request."""

    def __init__(
        self,
        relay_id: int,
        method: str,
        url: str,
        content_type: str,
        headers: str,
        timestamp: datetime,
    ):
        self.relay_id = relay_id
        self.method = method
        self.url = url
        self.display_url = url[:60] + "..." if len(url) > 60 else url
        self.content_type = content_type
        self.headers = headers
        self.status = "pending"
        self.timestamp = timestamp


class Dashboard:
    """Real-time dashboard showing recent relays and errors."""

    def __init__(self, config: Config):
        self.config = config
        self._lock = Lock()
        self._relays: list[RelayInfo] = []
        self._max_relays = 8
        self._request_count = {method.value: 0 for method in Method}
        self._errors: list[str] = []
        self._next_id = 0
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

    def log_relay(
        self,
        method: str,
        url: str,
        *,
        content_type: str,
        headers: dict[str, str],
    ) -> int:
        """Log an outbound request about to be dispatched and return its id."""
        with self._lock:
            self._next_id += 1
            relay_id = self._next_id
            self._request_count[method] = self._request_count.get(method, 0) + 1
            preview = summarize_headers(headers)
            info = RelayInfo(
                relay_id=relay_id,
                method=method,
                url=url,
                content_type=content_type,
                headers=preview,
                timestamp=datetime.now(),
            )
            self._relays.insert(0, info)
            self._relays = self._relays[: self._max_relays]
            self._refresh()

            write_cli_log("RELAY", url, id=relay_id, method=method, content_type=content_type)
            return relay_id

    def log_response(self, method: str, url: str, status: str, *, relay_id: int) -> None:
        """Record the status line of a completed relay."""
        with self._lock:
            info = self._find(relay_id)
            if info is not None:
                info.status = status
            self._refresh()
            write_cli_log("RESPONSE", url, id=relay_id, method=method, status=status)

    def log_error(
        self, method: str, url: str, message: str, *, relay_id: int | None = None
    ) -> None:
        """Log an error."""
        with self._lock:
            truncated = message[:60] + "..." if len(message) > 60 else message
            self._errors.insert(0, f"{method} {url[:40]}: {truncated}")
            self._errors = self._errors[:3]
            info = self._find(relay_id)
            if info is not None:
                info.status = "failed"
            self._refresh()
            write_cli_log("ERROR", message[:200], id=relay_id, method=method, url=url)

    def _find(self, relay_id: int | None) -> RelayInfo | None:
        for info in self._relays:
            if info.relay_id == relay_id:
                return info
        return None

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
            Layout(name="footer", size=5),
        )

        layout["header"].update(self._build_header())
        layout["body"].update(self._build_relays_panel())
        layout["footer"].update(self._build_footer())

        return layout

    def _build_header(self) -> Panel:
        """Build header with stats."""
        stats = Text()
        stats.append("Local Relay", style="bold cyan")
        for method, count in self._request_count.items():
            stats.append("  |  ")
            stats.append(f"{method}: {count}", style="blue")
        stats.append("  |  ")
        stats.append(f"Port: {self.config.proxy.port}", style="dim")

        return Panel(stats, style="cyan")

    def _build_relays_panel(self) -> Panel:
        """Build recent relays panel."""
        if self._relays:
            table = Table(show_header=True, header_style="bold", expand=True, box=None)
            table.add_column("Time", style="dim", width=8)
            table.add_column("Method", width=7)
            table.add_column("URL", ratio=2)
            table.add_column("Body", ratio=1)
            table.add_column("Headers", ratio=1)
            table.add_column("Status", width=24)

            for info in self._relays:
                status_style = "red" if info.status == "failed" else ""
                table.add_row(
                    info.timestamp.strftime("%H:%M:%S"),
                    info.method,
                    info.display_url,
                    info.content_type,
                    info.headers or "[dim]-[/dim]",
                    Text(info.status, style=status_style),
                )

            content = table
        else:
            content = Text("Waiting for requests...", style="dim")

        return Panel(content, title="[blue]Recent Relays[/blue]", border_style="blue")

    def _build_footer(self) -> Panel:
        """Build footer with errors and help."""
        if self._errors:
            error_text = Text()
            for err in self._errors:
                error_text.append("! ", style="red bold")
                error_text.append(err + "\n", style="red")
            content = error_text
        else:
            content = Text(
                f"POST relay requests to http://localhost:{self.config.proxy.port}/api",
                style="dim",
            )

        return Panel(content, title="[dim]Status[/dim]", border_style="dim")

"""Shared logging utilities."""

import shutil
from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

LOG_ROOT = Path.cwd() / "logs"
CLI_LOG_FILE = LOG_ROOT / "relay.log"

# Single worker keeps lines in submission order
_log_executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="relay-log")


def summarize_headers(headers: dict[str, str], limit: int = 3) -> str:
    """Render a short, redacted ``name=value`` preview of outbound headers."""
    redacted = redact_headers(headers)
    parts = [f"{key}={value}" for key, value in list(redacted.items())[:limit]]
    if len(redacted) > limit:
        parts.append(f"+{len(redacted) - limit}")
    return ", ".join(parts)


def write_cli_log(
    level: str,
    message: str,
    **extra: Any,
) -> None:
    """Queue a line for the rolling CLI log file."""
    timestamp = datetime.now(UTC).strftime("%Y-%m-%d %H:%M:%S")
    extra_str = " ".join(f"{k}={v}" for k, v in extra.items()) if extra else ""
    line = f"[{timestamp}] {level}: {message}"
    if extra_str:
        line += f" {extra_str}"
    line += "\n"
    _log_executor.submit(_append_line, CLI_LOG_FILE, line)


def clear_logs(log_root: Path = LOG_ROOT) -> None:
    """Remove logs from a previous run."""
    if log_root.exists():
        shutil.rmtree(log_root, ignore_errors=True)


def shutdown_log_executor() -> None:
    """Flush pending log lines and stop the writer thread."""
    _log_executor.shutdown(wait=True)


def _append_line(path: Path, line: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a") as f:
        f.write(line)


def redact_headers(headers: dict[str, str]) -> dict[str, str]:
    """Redact sensitive headers."""
    redacted = {}
    for key, value in headers.items():
        lowered = key.lower()
        if "key" in lowered or "authorization" in lowered or "cookie" in lowered:
            redacted[key] = _mask(value)
        else:
            redacted[key] = value
    return redacted


def _mask(value: str) -> str:
    if len(value) <= 10:
        return "***"
    return value[:6] + "..." + value[-4:]

"""Shared protocol definitions."""

from typing import Protocol


class RequestLogger(Protocol):
    """Protocol for request logging (Dashboard).

    ``log_relay`` returns an id that identifies the relay in the later
    ``log_response`` or ``log_error`` call, so concurrent relays to the same
    URL are never confused.
    """

    def log_relay(
        self,
        method: str,
        url: str,
        *,
        content_type: str,
        headers: dict[str, str],
    ) -> int: ...
    def log_response(self, method: str, url: str, status: str, *, relay_id: int) -> None: ...
    def log_error(
        self, method: str, url: str, message: str, *, relay_id: int | None = None
    ) -> None: ...

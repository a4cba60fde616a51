"""Shared fixtures and helpers for relay tests."""

import asyncio
import json
from typing import Any, Callable

import httpx
import pytest

from core.config import Config
from core.request_types import RelayRequest


class RecordingLogger:
    """RequestLogger double that remembers every call."""

    def __init__(self) -> None:
        self.relays: list[dict[str, Any]] = []
        self.responses: list[tuple[str, str, str]] = []
        self.errors: list[tuple[str, str, str]] = []
        self.response_ids: list[int] = []
        self.error_ids: list[int | None] = []

    def log_relay(
        self,
        method: str,
        url: str,
        *,
        content_type: str,
        headers: dict[str, str],
    ) -> int:
        self.relays.append(
            {"method": method, "url": url, "content_type": content_type, "headers": headers}
        )
        return len(self.relays)

    def log_response(self, method: str, url: str, status: str, *, relay_id: int) -> None:
        self.responses.append((method, url, status))
        self.response_ids.append(relay_id)

    def log_error(
        self, method: str, url: str, message: str, *, relay_id: int | None = None
    ) -> None:
        self.errors.append((method, url, message))
        self.error_ids.append(relay_id)


def make_relay_request(
    url: str = "http://example.test/echo",
    method: str = "GET",
    headers: str = "[]",
    body: str = "",
    request: str = "none",
) -> RelayRequest:
    """Build a relay request the way the caller serializes it."""
    return RelayRequest.model_validate(
        {"url": url, "method": method, "headers": headers, "body": body, "request": request}
    )


def run(coro):
    """Drive a coroutine from a synchronous test."""
    return asyncio.run(coro)


def parse_envelope(payload: str) -> dict[str, Any]:
    """Unwrap ``{"body": "<envelope>"}`` into the envelope dict."""
    outer = json.loads(payload)
    assert set(outer) == {"body"}
    return json.loads(outer["body"])


def mock_client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    """AsyncClient whose remote target is ``handler``."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def echo_handler(request: httpx.Request) -> httpx.Response:
    """Return the request body with the request's X-Test header."""
    headers = [("X-Test", request.headers["x-test"])] if "x-test" in request.headers else []
    return httpx.Response(200, headers=headers, stream=httpx.ByteStream(request.content))


@pytest.fixture
def logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def config() -> Config:
    return Config()

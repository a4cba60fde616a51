"""FastAPI route handlers."""

import json
from json import JSONDecodeError

from fastapi import Request, Response
from pydantic import ValidationError

from core.config import Config
from core.exceptions import InvalidPayload, RelayError, RequestTooLarge
from core.request_types import RelayRequest
from services.relay_service import RelayService
from ui.log_utils import write_cli_log


def _text_error(message: str, status_code: int) -> Response:
    return Response(content=message, status_code=status_code, media_type="text/plain")


async def _parse_relay_request(request: Request, config: Config) -> RelayRequest:
    """Parse the request body as a relay payload.

    Raises:
        RequestTooLarge: Body exceeds the configured limit.
        InvalidPayload: Body is not JSON or lacks a required field.
    """
    raw_body = await request.body()
    if len(raw_body) > config.limits.max_body_size:
        raise RequestTooLarge("Request body too large")

    try:
        data = json.loads(raw_body.decode("utf-8", errors="replace"))
    except (JSONDecodeError, ValueError) as e:
        raise InvalidPayload(f"Invalid JSON: {e}") from e

    try:
        return RelayRequest.model_validate(data)
    except ValidationError as e:
        fields = ", ".join(
            ".".join(str(part) for part in err["loc"]) or "body" for err in e.errors()
        )
        raise InvalidPayload(f"Invalid relay request: {fields}") from e


async def _relay_with(service: RelayService, request: Request, config: Config) -> Response:
    try:
        relay_request = await _parse_relay_request(request, config)
    except RequestTooLarge as e:
        return _text_error(str(e), 413)
    except InvalidPayload as e:
        return _text_error(str(e), 400)

    try:
        payload = await service.relay(relay_request)
    except RelayError as e:
        return _text_error(str(e), 500)
    except Exception as e:
        write_cli_log("ERROR", "Unhandled relay failure", error=repr(e))
        return _text_error(f"Internal error: {e}", 500)

    return Response(content=payload, status_code=200, media_type="application/json")


async def handle_relay(request: Request, config: Config) -> Response:
    """Handle /api: relay the described request and return its envelope."""
    return await _relay_with(request.app.state.relay_service, request, config)


async def handle_graphql(request: Request, config: Config) -> Response:
    """Handle /graphql: relay with a JSON body only; other tags send no body."""
    return await _relay_with(request.app.state.graphql_service, request, config)


async def handle_health() -> dict[str, str]:
    """Handle /health."""
    return {"message": "Server is up"}

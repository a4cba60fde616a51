"""Outbound request construction and execution."""

import httpx

from core.encoders import ENCODERS, BodyEncoder
from core.exceptions import MalformedHeaders, NetworkError
from core.request_types import ContentTypeTag, Method, PreparedRequest, RelayRequest


class Dispatcher:
    """Build the outbound request for a relay request and send it once."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        encoders: dict[ContentTypeTag, BodyEncoder] | None = None,
    ) -> None:
        self._client = client
        self._encoders = encoders or ENCODERS

    @staticmethod
    def normalize_method(method: str) -> Method:
        """Map the caller's method; anything unrecognized is sent as GET."""
        match method:
            case "GET" | "POST" | "PUT" | "DELETE" | "PATCH":
                return Method(method)
            case _:
                return Method.GET

    @staticmethod
    def normalize_tag(content_type: str) -> ContentTypeTag:
        """Map the caller's content-type tag; anything unrecognized sends no body."""
        match content_type:
            case (
                "application/json"
                | "application/x-www-form-urlencoded"
                | "multipart/form-data"
                | "text/plain"
            ):
                return ContentTypeTag(content_type)
            case _:
                return ContentTypeTag.NONE

    def select_encoder(self, content_type: str) -> BodyEncoder:
        """Return the body encoder for a content-type tag.

        Tags this dispatcher has no encoder for fall back to sending no body.
        """
        tag = self.normalize_tag(content_type)
        return self._encoders.get(tag) or self._encoders[ContentTypeTag.NONE]

    def prepare(self, relay_request: RelayRequest, headers: dict[str, str]) -> PreparedRequest:
        """Apply headers, then let the selected encoder attach the body."""
        try:
            outbound_headers = httpx.Headers(headers)
        except UnicodeEncodeError as e:
            raise MalformedHeaders(f"Header value cannot be sent: {e}") from e

        prepared = PreparedRequest(
            method=self.normalize_method(relay_request.method),
            url=relay_request.url,
            headers=outbound_headers,
        )
        return self.select_encoder(relay_request.content_type).attach(prepared, relay_request.body)

    def build(self, prepared: PreparedRequest) -> httpx.Request:
        """Turn a prepared request into an ``httpx.Request``."""
        try:
            return self._client.build_request(**prepared.build_kwargs())
        except httpx.InvalidURL as e:
            raise NetworkError(f"Invalid URL: {e}", url=prepared.url) from e
        except UnicodeEncodeError as e:
            raise MalformedHeaders(f"Header value cannot be sent: {e}") from e

    async def dispatch(self, relay_request: RelayRequest, headers: dict[str, str]) -> httpx.Response:
        """Execute exactly one outbound call; the caller must close the response."""
        request = self.build(self.prepare(relay_request, headers))
        try:
            return await self._client.send(request, stream=True)
        except httpx.TimeoutException as e:
            raise NetworkError(f"Upstream timeout: {e}", url=relay_request.url) from e
        except httpx.RequestError as e:
            raise NetworkError(f"Upstream connection error: {e}", url=relay_request.url) from e

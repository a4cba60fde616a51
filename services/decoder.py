"""Remote response decoding."""

import httpx

from core.exceptions import NetworkError, ResponseDecodeError
from core.request_types import DecodedResponse

DECODE_ERROR_PREFIX = "Error: "
UNKNOWN_REASON = "<unknown status code>"


class ResponseDecoder:
    """Reduce any remote response to a ``(headers, status, body)`` triple.

    Compressed bodies are inflated by httpx while reading. A body that fails
    to decompress is reported inside the body text rather than raised, and
    undecodable bytes are replaced, so the envelope can always be built.
    """

    async def decode(self, response: httpx.Response) -> DecodedResponse:
        try:
            headers = self.decode_headers(response.headers)
            status = self.status_line(response.status_code)
            body = await self._read_body(response)
        finally:
            await response.aclose()
        return DecodedResponse(headers=headers, status=status, body=body)

    @staticmethod
    def status_line(status_code: int) -> str:
        """Return the canonical status line, e.g. ``200 OK``."""
        reason = httpx.codes.get_reason_phrase(status_code) or UNKNOWN_REASON
        return f"{status_code} {reason}"

    @staticmethod
    def decode_headers(headers: httpx.Headers) -> dict[str, str]:
        """Collect response headers into one lower-cased value per name.

        Repeated headers keep the last value. A value that is not UTF-8 is
        read as Latin-1 instead of failing the whole response.
        """
        decoded: dict[str, str] = {}
        for raw_key, raw_value in headers.raw:
            key = _decode_header_bytes(raw_key).lower()
            decoded[key] = _decode_header_bytes(raw_value)
        return decoded

    async def _read_body(self, response: httpx.Response) -> str:
        try:
            await response.aread()
        except httpx.DecodingError as e:
            return f"{DECODE_ERROR_PREFIX}{e}"
        except httpx.TimeoutException as e:
            raise NetworkError(f"Upstream timeout while reading body: {e}") from e
        except httpx.RequestError as e:
            raise NetworkError(f"Upstream connection error while reading body: {e}") from e

        try:
            return response.text
        except (UnicodeDecodeError, LookupError) as e:
            raise ResponseDecodeError(f"Response body cannot be decoded: {e}") from e


def _decode_header_bytes(value: bytes) -> str:
    try:
        return value.decode("utf-8")
    except UnicodeDecodeError:
        return value.decode("latin-1")

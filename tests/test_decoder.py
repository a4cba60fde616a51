"""Unit tests for ResponseDecoder."""

import gzip
import zlib

import httpx
import pytest

from conftest import mock_client, run
from core.exceptions import NetworkError
from services.decoder import ResponseDecoder


def _decode(response: httpx.Response):
    """Send a request to a target returning ``response`` and decode it."""

    async def go():
        async with mock_client(lambda request: response) as client:
            streamed = await client.send(
                client.build_request("GET", "http://example.test/"), stream=True
            )
            return await ResponseDecoder().decode(streamed), streamed

    return run(go())


class TestBody:
    """Body text extraction."""

    def test_plain_utf8(self):
        decoded, _ = _decode(httpx.Response(200, content="héllo".encode("utf-8")))

        assert decoded.body == "héllo"

    def test_gzip_is_decompressed(self):
        response = httpx.Response(
            200,
            headers={"Content-Encoding": "gzip"},
            stream=httpx.ByteStream(gzip.compress(b"hello")),
        )

        decoded, _ = _decode(response)

        assert decoded.body == "hello"
        assert decoded.headers["content-encoding"] == "gzip"

    def test_deflate_is_decompressed(self):
        response = httpx.Response(
            200,
            headers={"Content-Encoding": "deflate"},
            stream=httpx.ByteStream(zlib.compress(b"deflated text")),
        )

        decoded, _ = _decode(response)

        assert decoded.body == "deflated text"

    def test_broken_compression_is_reported_in_body(self):
        response = httpx.Response(
            200,
            headers={"Content-Encoding": "gzip"},
            stream=httpx.ByteStream(b"definitely not gzip"),
        )

        decoded, _ = _decode(response)

        assert decoded.body.startswith("Error: ")
        assert decoded.status == "200 OK"

    def test_binary_body_is_decoded_lossily(self):
        decoded, _ = _decode(httpx.Response(200, content=b"ok\xff\xfe\x00end"))

        assert decoded.body.startswith("ok")
        assert decoded.body.endswith("end")
        assert "�" in decoded.body

    def test_declared_charset_is_used(self):
        response = httpx.Response(
            200,
            headers={"Content-Type": "text/plain; charset=iso-8859-1"},
            content="café".encode("latin-1"),
        )

        decoded, _ = _decode(response)

        assert decoded.body == "café"

    def test_unknown_charset_falls_back_to_utf8(self):
        response = httpx.Response(
            200,
            headers={"Content-Type": "text/plain; charset=no-such-charset"},
            content="naïve".encode("utf-8"),
        )

        decoded, _ = _decode(response)

        assert decoded.body == "naïve"

    def test_empty_body(self):
        decoded, _ = _decode(httpx.Response(204))

        assert decoded.body == ""
        assert decoded.status == "204 No Content"

    def test_response_is_closed(self):
        _, streamed = _decode(httpx.Response(200, content=b"x"))

        assert streamed.is_closed

    def test_read_failure_is_network_error(self):
        class FailingStream(httpx.AsyncByteStream):
            async def __aiter__(self):
                yield b"partial"
                raise httpx.ReadError("connection reset")

        with pytest.raises(NetworkError, match="connection reset"):
            _decode(httpx.Response(200, stream=FailingStream()))


class TestHeaders:
    """Header collation."""

    def test_names_lowercased(self):
        decoded, _ = _decode(
            httpx.Response(200, headers={"X-Test": "1"}, stream=httpx.ByteStream(b""))
        )

        assert decoded.headers == {"x-test": "1"}

    def test_repeated_headers_keep_last(self):
        response = httpx.Response(
            200,
            headers=[("Set-Cookie", "a=1"), ("Set-Cookie", "b=2")],
            stream=httpx.ByteStream(b""),
        )

        decoded, _ = _decode(response)

        assert decoded.headers == {"set-cookie": "b=2"}

    def test_undecodable_header_does_not_abort(self):
        response = httpx.Response(
            200,
            headers=[(b"X-Binary", b"\xff\xfeok"), (b"X-After", b"fine")],
            content=b"body",
        )

        decoded, _ = _decode(response)

        assert decoded.headers["x-binary"] == "\xff\xfeok"
        assert decoded.headers["x-after"] == "fine"
        assert decoded.body == "body"

    def test_utf8_header_value(self):
        response = httpx.Response(
            200, headers=[(b"X-Name", "café".encode("utf-8"))], stream=httpx.ByteStream(b"")
        )

        decoded, _ = _decode(response)

        assert decoded.headers["x-name"] == "café"


class TestStatusLine:
    """Canonical status strings."""

    @pytest.mark.parametrize(
        ("code", "expected"),
        [
            (200, "200 OK"),
            (201, "201 Created"),
            (404, "404 Not Found"),
            (500, "500 Internal Server Error"),
            (599, "599 <unknown status code>"),
        ],
    )
    def test_status_line(self, code, expected):
        assert ResponseDecoder.status_line(code) == expected

    def test_error_statuses_are_not_raised(self):
        decoded, _ = _decode(httpx.Response(503, content=b"down"))

        assert decoded.status == "503 Service Unavailable"
        assert decoded.body == "down"

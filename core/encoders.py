"""Body encoders, one per content-type tag.

Every encoder takes the request in progress plus the caller's raw body string
and returns a new ``PreparedRequest`` with the body attached. Encoders that
attach a body own the ``Content-Type`` header: any caller-supplied value is
replaced, so the order in which headers and body were set never changes what
goes on the wire.
"""

import base64
import binascii
import dataclasses
import os
from typing import Any, Protocol
from urllib.parse import unquote_to_bytes

import httpx
from pydantic import TypeAdapter, ValidationError

from core.exceptions import EncodingError
from core.request_types import ContentTypeTag, FormEntry, PreparedRequest

_FORM_LIST = TypeAdapter(list[FormEntry])


class BodyEncoder(Protocol):
    """Protocol for body encoders."""

    tag: ContentTypeTag

    def attach(self, prepared: PreparedRequest, body: str) -> PreparedRequest: ...


def _with_content(
    prepared: PreparedRequest,
    content: bytes,
    content_type: str,
) -> PreparedRequest:
    headers = _without_content_type(prepared.headers)
    headers["Content-Type"] = content_type
    return dataclasses.replace(prepared, headers=headers, content=content, files=None)


def _without_content_type(headers: httpx.Headers) -> httpx.Headers:
    headers = httpx.Headers(headers)
    headers.pop("content-type", None)
    return headers


def _utf8(text: str, tag: ContentTypeTag) -> bytes:
    try:
        return text.encode("utf-8")
    except UnicodeEncodeError as e:
        raise EncodingError(f"Body is not valid UTF-8 text: {e}", content_type=tag) from e


class JsonEncoder:
    """Send the body verbatim as JSON; the body is not re-validated."""

    tag = ContentTypeTag.JSON

    def attach(self, prepared: PreparedRequest, body: str) -> PreparedRequest:
        return _with_content(prepared, _utf8(body, self.tag), "application/json")


class UrlEncodedEncoder:
    """Send an already-encoded ``k=v&k=v`` body without further escaping."""

    tag = ContentTypeTag.URLENCODED

    def attach(self, prepared: PreparedRequest, body: str) -> PreparedRequest:
        return _with_content(
            prepared, _utf8(body, self.tag), "application/x-www-form-urlencoded"
        )


class TextEncoder:
    """Send the body as literal text."""

    tag = ContentTypeTag.TEXT

    def attach(self, prepared: PreparedRequest, body: str) -> PreparedRequest:
        return _with_content(prepared, _utf8(body, self.tag), "text/plain")


class MultipartEncoder:
    """Build a multipart/form-data body from a JSON array of form entries.

    Text entries become plain fields. File entries (``type == "file"``) carry
    their bytes in ``base`` as a ``data:`` URL or bare base64, and use
    ``value`` as the file name.
    """

    tag = ContentTypeTag.MULTIPART

    def parse(self, body: str) -> list[FormEntry]:
        """Parse the caller's form entries."""
        try:
            return _FORM_LIST.validate_json(body)
        except ValidationError as e:
            raise EncodingError(
                f"Invalid multipart body: {e.errors()[0]['msg']}", content_type=self.tag
            ) from e

    def attach(self, prepared: PreparedRequest, body: str) -> PreparedRequest:
        entries = self.parse(body)
        if not entries:
            # httpx only emits multipart when there is at least one part
            boundary = os.urandom(16).hex()
            return _with_content(
                prepared,
                f"--{boundary}--\r\n".encode("ascii"),
                f"multipart/form-data; boundary={boundary}",
            )

        files = [self._part(entry) for entry in entries]
        headers = _without_content_type(prepared.headers)
        return dataclasses.replace(prepared, headers=headers, content=None, files=files)

    def _part(self, entry: FormEntry) -> tuple[str, Any]:
        _utf8(entry.key, self.tag)
        if entry.type != "file":
            # A None filename renders a plain form field
            return entry.key, (None, _utf8(entry.value, self.tag))

        _utf8(entry.value, self.tag)

        if entry.base is None:
            raise EncodingError(
                f"File part '{entry.key}' has no content", content_type=self.tag
            )
        content, mime = self._decode_file(entry)
        return entry.key, (entry.value or entry.key, content, mime)

    def _decode_file(self, entry: FormEntry) -> tuple[bytes, str | None]:
        """Decode a ``data:`` URL or bare base64 into bytes and media type."""
        base = entry.base or ""
        mime: str | None = None
        is_base64 = True
        payload = base

        if base.startswith("data:"):
            header, sep, payload = base[5:].partition(",")
            if not sep:
                raise EncodingError(
                    f"File part '{entry.key}' has a malformed data URL",
                    content_type=self.tag,
                )
            params = header.split(";")
            mime = params[0] or None
            is_base64 = "base64" in params[1:]

        if not is_base64:
            return unquote_to_bytes(payload), mime

        try:
            return base64.b64decode(payload, validate=True), mime
        except (binascii.Error, ValueError) as e:
            raise EncodingError(
                f"File part '{entry.key}' is not valid base64: {e}",
                content_type=self.tag,
            ) from e


class NoBodyEncoder:
    """Default branch: attach nothing and add no body headers."""

    tag = ContentTypeTag.NONE

    def attach(self, prepared: PreparedRequest, body: str) -> PreparedRequest:
        return prepared


ENCODERS: dict[ContentTypeTag, BodyEncoder] = {
    encoder.tag: encoder
    for encoder in (
        JsonEncoder(),
        UrlEncodedEncoder(),
        MultipartEncoder(),
        TextEncoder(),
        NoBodyEncoder(),
    )
}

# GraphQL documents travel as JSON; every other tag sends no body.
GRAPHQL_ENCODERS: dict[ContentTypeTag, BodyEncoder] = {
    ContentTypeTag.JSON: ENCODERS[ContentTypeTag.JSON],
    ContentTypeTag.NONE: ENCODERS[ContentTypeTag.NONE],
}

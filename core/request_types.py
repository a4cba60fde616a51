"""Shared request data types."""

from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Literal

import httpx
from pydantic import BaseModel, ConfigDict, Field


class Method(StrEnum):
    """Outbound HTTP methods the relay issues."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"


class ContentTypeTag(StrEnum):
    """Caller-declared body kinds, one per body encoder.

    NONE is the default branch: any tag not listed here sends no body.
    """

    JSON = "application/json"
    URLENCODED = "application/x-www-form-urlencoded"
    MULTIPART = "multipart/form-data"
    TEXT = "text/plain"
    NONE = "none"


class HeaderEntry(BaseModel):
    """One caller-supplied header; ``checked`` is carried but not interpreted."""

    key: str
    value: str
    checked: bool | None = None


class FormEntry(BaseModel):
    """One multipart part as serialized by the caller."""

    key: str
    value: str = ""
    checked: bool | None = None
    type: Literal["text", "file"] | None = None
    base: str | None = None


class RelayRequest(BaseModel):
    """Inbound description of the request to relay."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    url: str
    method: str
    headers: str
    body: str
    content_type: str = Field(alias="request")


@dataclass(frozen=True)
class PreparedRequest:
    """Outbound request in progress, ready for ``AsyncClient.build_request``."""

    method: Method
    url: str
    headers: httpx.Headers
    content: bytes | None = None
    files: list[tuple[str, Any]] | None = None

    def build_kwargs(self) -> dict[str, Any]:
        """Return keyword arguments for ``build_request``."""
        kwargs: dict[str, Any] = {
            "method": self.method.value,
            "url": self.url,
            "headers": self.headers,
        }
        if self.content is not None:
            kwargs["content"] = self.content
        if self.files is not None:
            kwargs["files"] = self.files
        return kwargs


@dataclass(frozen=True)
class DecodedResponse:
    """Status, headers and text body extracted from a remote response."""

    headers: dict[str, str]
    status: str
    body: str

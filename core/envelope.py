"""Response envelope construction and serialization."""

import json
from dataclasses import asdict, dataclass

from core.exceptions import SerializationError
from core.request_types import DecodedResponse


@dataclass(frozen=True)
class ResponseEnvelope:
    """Normalized summary of a remote response."""

    headers: dict[str, str]
    status: str
    body: str

    @classmethod
    def from_decoded(cls, decoded: DecodedResponse) -> "ResponseEnvelope":
        return cls(headers=dict(decoded.headers), status=decoded.status, body=decoded.body)

    def to_json(self) -> str:
        """Serialize as ``{"headers": ..., "status": ..., "body": ...}``."""
        return _dumps(asdict(self))


def build_payload(envelope: ResponseEnvelope) -> str:
    """Wrap the serialized envelope as the string ``body`` of the transport payload.

    Callers that only read one string field re-parse ``body`` to get the
    structured envelope.
    """
    return _dumps({"body": envelope.to_json()})


def _dumps(value: dict) -> str:
    try:
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Failed to serialize response: {e}") from e

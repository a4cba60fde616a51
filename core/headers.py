"""Header construction for outbound requests."""

from pydantic import TypeAdapter, ValidationError

from core.exceptions import MalformedHeaders
from core.request_types import HeaderEntry

_HEADER_LIST = TypeAdapter(list[HeaderEntry])


class HeaderMaterializer:
    """Turn the caller's serialized header list into a header mapping."""

    def parse(self, raw: str) -> list[HeaderEntry]:
        """Parse a JSON array of ``{key, value, checked?}`` entries."""
        try:
            return _HEADER_LIST.validate_json(raw)
        except ValidationError as e:
            raise MalformedHeaders(f"Invalid headers format: {_first_error(e)}") from e

    def materialize(self, raw: str) -> dict[str, str]:
        """Build a name -> value mapping; later entries win."""
        headers: dict[str, str] = {}
        for entry in self.parse(raw):
            headers[entry.key] = entry.value
        return headers


def _first_error(error: ValidationError) -> str:
    details = error.errors()
    if not details:
        return str(error)
    first = details[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    if location:
        return f"{first['msg']} at {location}"
    return first["msg"]

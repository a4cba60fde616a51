"""Custom exception hierarchy for the local relay."""


class RelayError(Exception):
    """Base exception for all relay errors."""


class MalformedHeaders(RelayError):
    """Raised when the serialized header list cannot be parsed or sent."""


class EncodingError(RelayError):
    """Raised when a body does not fit its declared content-type.

    Attributes:
        message: Error message
        content_type: Content-type tag the body was declared with
    """

    def __init__(self, message: str, content_type: str | None = None) -> None:
        super().__init__(message)
        self.content_type = content_type


class NetworkError(RelayError):
    """Raised when the outbound request fails at the transport level.

    Attributes:
        message: Transport error message
        url: Target URL of the failed request (optional)
    """

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class ResponseDecodeError(RelayError):
    """Raised when a remote response cannot be converted to text at all."""


class SerializationError(RelayError):
    """Raised when the response envelope cannot be serialized."""


class RequestTooLarge(RelayError):
    """Request body exceeds size limit."""


class InvalidPayload(RelayError):
    """Request body is not a valid relay payload."""

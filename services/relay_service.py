"""Relay orchestration for a single request."""

from core.envelope import ResponseEnvelope, build_payload
from core.exceptions import RelayError
from core.headers import HeaderMaterializer
from core.protocols import RequestLogger
from core.request_types import RelayRequest
from services.decoder import ResponseDecoder
from services.dispatcher import Dispatcher


class RelayService:
    """Run one relay request through headers, dispatch, decoding and envelope."""

    def __init__(
        self,
        dispatcher: Dispatcher,
        logger: RequestLogger,
        materializer: HeaderMaterializer | None = None,
        decoder: ResponseDecoder | None = None,
    ) -> None:
        self._dispatcher = dispatcher
        self._logger = logger
        self._materializer = materializer or HeaderMaterializer()
        self._decoder = decoder or ResponseDecoder()

    async def relay(self, relay_request: RelayRequest) -> str:
        """Relay ``relay_request`` and return the serialized transport payload."""
        method = self._dispatcher.normalize_method(relay_request.method).value
        relay_id: int | None = None
        try:
            headers = self._materializer.materialize(relay_request.headers)
            encoder = self._dispatcher.select_encoder(relay_request.content_type)
            relay_id = self._logger.log_relay(
                method,
                relay_request.url,
                content_type=encoder.tag.value,
                headers=headers,
            )
            response = await self._dispatcher.dispatch(relay_request, headers)
            decoded = await self._decoder.decode(response)
            envelope = ResponseEnvelope.from_decoded(decoded)
            payload = build_payload(envelope)
        except RelayError as e:
            self._logger.log_error(
                method, relay_request.url, f"{type(e).__name__}: {e}", relay_id=relay_id
            )
            raise
        except Exception as e:
            self._logger.log_error(
                method, relay_request.url, f"Internal error: {e!r}", relay_id=relay_id
            )
            raise

        self._logger.log_response(method, relay_request.url, envelope.status, relay_id=relay_id)
        return payload

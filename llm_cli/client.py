"""HTTP client for a single provider."""

import json
import logging
from typing import Optional, Union

import httpx
from pydantic import ValidationError

from .errors import ApiError, DecodeError, TransportError
from .models import ChatRequest, ChatResponse, ProviderId, RawResponse
from .normalize import extract
from .providers import get_provider

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 120.0


class ChatClient:
    """
    Sends chat requests to one provider with one credential.

    The client keeps no per-request state, so one instance can serve
    concurrent calls. Each call opens its own ``httpx.AsyncClient``.
    """

    def __init__(
        self,
        provider: Union[str, ProviderId],
        api_key: str,
        base_url: Optional[str] = None,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        # Resolving the adapter here surfaces UnsupportedProvider before any I/O.
        self.adapter = get_provider(provider)
        self.provider = self.adapter.id
        self.api_key = api_key
        self.base_url = self.adapter.resolve_base_url(base_url)
        self.timeout = timeout
        self._transport = transport

    def __repr__(self) -> str:
        return f"ChatClient(provider={self.provider.value!r}, base_url={self.base_url!r})"

    async def send(self, request: ChatRequest) -> RawResponse:
        """
        Perform the HTTP round trip and capture status and body text.

        Args:
            request: The request to send

        Returns:
            RawResponse with the body read to completion

        Raises:
            TransportError: on any connection-level failure, a malformed URL
                or a credential that cannot be sent in a header
        """
        wire = self.adapter.build(request, self.api_key, self.base_url)
        logger.info("Sending chat request to %s with model %s", self.provider.value, request.model)

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(wire.url, headers=wire.headers, json=wire.body)
                body_text = response.text
        except (httpx.HTTPError, httpx.InvalidURL, UnicodeEncodeError) as exc:
            # Non-ASCII credentials fail while httpx encodes the headers.
            logger.warning(
                "Transport error for %s model %s: %s: %s",
                self.provider.value,
                request.model,
                type(exc).__name__,
                exc,
            )
            raise TransportError(self.provider.value, exc) from exc

        return RawResponse(status_code=response.status_code, body_text=body_text)

    async def chat(self, request: ChatRequest) -> str:
        """
        Send a request and return the normalized answer text.

        Returns:
            The canonical answer, or ``NO_CONTENT_FOUND``

        Raises:
            TransportError: connection failed
            ApiError: non-success status, with the raw body
            DecodeError: body is not a recognized JSON response, with the raw body
        """
        raw = await self.send(request)

        if not raw.ok:
            logger.warning("%s API error for %s: %s", self.provider.value, request.model, raw.status_code)
            raise ApiError(self.provider.value, raw.status_code, raw.body_text)

        response = self._decode(raw)
        return extract(response)

    def _decode(self, raw: RawResponse) -> ChatResponse:
        try:
            data = json.loads(raw.body_text)
            if not isinstance(data, dict):
                raise ValueError(f"expected a JSON object, got {type(data).__name__}")
            return ChatResponse.model_validate(data)
        except (ValueError, ValidationError) as exc:
            # A "data: " prefix in the body means the provider streamed its answer.
            logger.warning("Could not decode %s response: %s", self.provider.value, exc)
            raise DecodeError(self.provider.value, exc, raw.body_text) from exc

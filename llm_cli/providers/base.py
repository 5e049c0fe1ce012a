"""Common interface for provider adapters."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from ..models import ChatRequest, ProviderId, WireRequest


class Provider(ABC):
    """
    Maps a provider-agnostic ChatRequest onto one provider's HTTP request.

    Adapters are pure: ``build`` never performs I/O, and either returns a
    complete WireRequest or raises before anything is sent.
    """

    id: ProviderId
    default_base_url: str
    api_key_env: str

    @abstractmethod
    def build(self, request: ChatRequest, api_key: str, base_url: Optional[str] = None) -> WireRequest:
        """
        Build the wire request.

        Args:
            request: The request to send
            api_key: Credential for this provider
            base_url: Overrides ``default_base_url`` when given

        Returns:
            WireRequest with url, headers and JSON body
        """

    def resolve_base_url(self, base_url: Optional[str]) -> str:
        return (base_url or self.default_base_url).rstrip("/")


def openai_style_body(request: ChatRequest) -> Dict[str, Any]:
    """Body shared by the OpenAI and Anthropic adapters."""
    body: Dict[str, Any] = {
        "model": request.model,
        "messages": [
            {"role": message.role.value, "content": message.content}
            for message in request.messages
        ],
        "max_completion_tokens": request.max_output_tokens,
    }
    if request.temperature is not None:
        body["temperature"] = request.temperature
    if request.stream is not None:
        body["stream"] = request.stream
    return body

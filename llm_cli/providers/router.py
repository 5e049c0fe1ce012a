"""
Provider dispatch.

Maps each ProviderId to exactly one adapter:
- "openai" -> OpenAIProvider (chat completions)
- "anthropic" -> AnthropicProvider (messages)
- "google" -> GoogleProvider (generateContent)
"""

from typing import Dict, Optional, Union

from ..models import ChatRequest, ProviderId, WireRequest
from .anthropic_provider import AnthropicProvider
from .base import Provider
from .google_provider import GoogleProvider
from .openai_provider import OpenAIProvider

PROVIDERS: Dict[ProviderId, Provider] = {
    provider.id: provider
    for provider in (OpenAIProvider(), AnthropicProvider(), GoogleProvider())
}


def get_provider(provider: Union[str, ProviderId]) -> Provider:
    """
    Return the adapter for a provider id.

    Args:
        provider: Provider id (e.g., "openai", ProviderId.GOOGLE)

    Returns:
        The provider's adapter

    Raises:
        UnsupportedProvider: if the id is not a known provider
    """
    return PROVIDERS[ProviderId.parse(provider)]


def build_request(
    provider: Union[str, ProviderId],
    request: ChatRequest,
    api_key: str,
    base_url: Optional[str] = None,
) -> WireRequest:
    """Build the wire request for ``provider`` without sending anything."""
    return get_provider(provider).build(request, api_key, base_url)

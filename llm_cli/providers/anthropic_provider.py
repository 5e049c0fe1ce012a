"""Anthropic/Claude messages adapter."""

from typing import Optional

from ..models import ChatRequest, ProviderId, WireRequest
from .base import Provider, openai_style_body

ANTHROPIC_VERSION = "2023-06-01"


class AnthropicProvider(Provider):
    id = ProviderId.ANTHROPIC
    default_base_url = "https://api.anthropic.com/v1"
    api_key_env = "ANTHROPIC_API_KEY"

    def build(self, request: ChatRequest, api_key: str, base_url: Optional[str] = None) -> WireRequest:
        """
        Build a POST to ``{base}/messages``.

        The body uses the same field names as the OpenAI adapter, including
        ``max_completion_tokens``; messages keep their original roles and order.

        Args:
            request: Model name (e.g., "claude-sonnet-4-20250514") and messages
            api_key: Sent in the ``x-api-key`` header
            base_url: Overrides the public API endpoint

        Returns:
            WireRequest for the messages endpoint
        """
        headers = {
            "x-api-key": api_key,
            "Content-Type": "application/json",
            "anthropic-version": ANTHROPIC_VERSION,
        }
        return WireRequest(
            url=f"{self.resolve_base_url(base_url)}/messages",
            headers=headers,
            body=openai_style_body(request),
        )

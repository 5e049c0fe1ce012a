"""OpenAI chat completions adapter."""

from typing import Optional

from ..models import ChatRequest, ProviderId, WireRequest
from .base import Provider, openai_style_body


class OpenAIProvider(Provider):
    id = ProviderId.OPENAI
    default_base_url = "https://api.openai.com/v1"
    api_key_env = "OPENAI_API_KEY"

    def build(self, request: ChatRequest, api_key: str, base_url: Optional[str] = None) -> WireRequest:
        """
        Build a POST to ``{base}/chat/completions``.

        Args:
            request: Model name and messages (e.g., "gpt-4o", "o1")
            api_key: Sent as a bearer token
            base_url: Overrides the public API endpoint

        Returns:
            WireRequest for the chat completions endpoint
        """
        headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }
        return WireRequest(
            url=f"{self.resolve_base_url(base_url)}/chat/completions",
            headers=headers,
            body=openai_style_body(request),
        )

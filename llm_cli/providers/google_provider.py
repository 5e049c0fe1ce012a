"""Google Gemini generateContent adapter."""

import urllib.parse
from typing import Any, Dict, List, Optional

from ..models import ChatMessage, ChatRequest, ProviderId, Role, WireRequest
from .base import Provider


class GoogleProvider(Provider):
    id = ProviderId.GOOGLE
    default_base_url = "https://generativelanguage.googleapis.com/v1beta"
    api_key_env = "GOOGLE_API_KEY"

    def build(self, request: ChatRequest, api_key: str, base_url: Optional[str] = None) -> WireRequest:
        """
        Build a POST to ``{base}/models/{model}:generateContent?key={key}``.

        The key travels in the query string, so no auth header is set.
        """
        endpoint = f"{self.resolve_base_url(base_url)}/models/{request.model}:generateContent"
        url = f"{endpoint}?key={urllib.parse.quote(api_key, safe='')}"

        generation_config: Dict[str, Any] = {"maxOutputTokens": request.max_output_tokens}
        if request.temperature is not None:
            generation_config["temperature"] = request.temperature

        body = {
            "contents": _to_google_contents(request.messages),
            "generationConfig": generation_config,
        }
        return WireRequest(url=url, headers={"Content-Type": "application/json"}, body=body)


def _to_google_contents(messages: List[ChatMessage]) -> List[Dict[str, Any]]:
    # Gemini only knows "user" and "model"; everything that is not the user
    # (assistant and system alike) is sent as "model".
    return [
        {
            "parts": [{"text": message.content}],
            "role": "user" if message.role == Role.USER else "model",
        }
        for message in messages
    ]

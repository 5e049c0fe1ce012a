"""
Provider adapters for the supported LLM APIs.

Each adapter turns a provider-agnostic ChatRequest into that provider's
HTTP request:
- OpenAI (chat completions, bearer token)
- Anthropic (messages, x-api-key header)
- Google (Gemini generateContent, key in the query string)

Usage:
    from llm_cli.providers import build_request

    wire = build_request("anthropic", request, api_key)
"""

from .anthropic_provider import AnthropicProvider
from .base import Provider
from .google_provider import GoogleProvider
from .openai_provider import OpenAIProvider
from .router import PROVIDERS, build_request, get_provider

__all__ = [
    "Provider",
    "OpenAIProvider",
    "AnthropicProvider",
    "GoogleProvider",
    "PROVIDERS",
    "build_request",
    "get_provider",
]

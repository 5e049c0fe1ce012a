"""
Entry points used by the CLI and the HTTP app.

Usage:
    from llm_cli.api import ask, compare_models

    answer = await ask(config, "What is 6 x 7?", model="gpt-4o")
    results = await compare_models(config, "What is 6 x 7?", ["gpt-4o", "gemini-2.5-flash"])
"""

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import httpx

from .client import ChatClient
from .compare import compare
from .config import AppConfig
from .errors import UnknownModel
from .models import ChatMessage, ChatRequest, ComparisonResult, ProviderId
from .registry import credential_source, get_api_key, resolve_model


@dataclass(frozen=True, slots=True)
class Answer:
    model: str
    provider: ProviderId
    text: str


def _base_urls(config: AppConfig) -> Dict[ProviderId, str]:
    return {
        provider: settings.base_url
        for provider, settings in config.providers.items()
        if settings.base_url
    }


async def ask(
    config: AppConfig,
    query: Optional[str] = None,
    model: Optional[str] = None,
    messages: Optional[Sequence[ChatMessage]] = None,
    temperature: Optional[float] = None,
    max_tokens: Optional[int] = None,
    env: Optional[Mapping[str, str]] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Answer:
    """
    Send one request and return the normalized answer.

    Args:
        config: Resolved configuration (model registry, credentials, defaults)
        query: A single user message; ignored when ``messages`` is given
        model: Model name, defaults to ``models.default``
        messages: Full conversation to send
        temperature: Overrides ``chat.temperature``
        max_tokens: Overrides ``chat.max_tokens``

    Raises:
        UnknownModel, MissingCredential, TransportError, ApiError, DecodeError
    """
    if messages is None:
        if query is None:
            raise ValueError("Either a query or messages must be provided")
        messages = [ChatMessage.user(query)]

    model_name = model or config.models.default
    info = resolve_model(config, model_name)
    api_key = get_api_key(config, info.provider, env)
    settings = config.provider_settings(info.provider)

    client = ChatClient(
        info.provider,
        api_key,
        base_url=settings.base_url,
        timeout=config.chat.timeout_seconds,
        transport=transport,
    )
    request = ChatRequest(
        model=info.name,
        messages=list(messages),
        max_output_tokens=config.chat.max_tokens if max_tokens is None else max_tokens,
        temperature=config.chat.temperature if temperature is None else temperature,
        stream=False,
    )
    text = await client.chat(request)
    return Answer(model=info.name, provider=info.provider, text=text)


async def compare_models(
    config: AppConfig,
    query: str,
    model_names: Sequence[str],
    env: Optional[Mapping[str, str]] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> List[ComparisonResult]:
    """
    Compare models by name.

    Names missing from the registry come back as UnknownModel results in
    their input position; the rest are compared concurrently.
    """
    results: List[Optional[ComparisonResult]] = [None] * len(model_names)
    resolved: List[Tuple[int, str, ProviderId]] = []

    for index, name in enumerate(model_names):
        try:
            info = resolve_model(config, name)
        except UnknownModel as exc:
            results[index] = ComparisonResult(model=name, provider=None, elapsed=0.0, error=exc)
            continue
        resolved.append((index, info.name, info.provider))

    compared = await compare(
        query,
        [(name, provider) for _, name, provider in resolved],
        credential_source(config, env),
        temperature=config.compare.temperature,
        max_output_tokens=config.compare.max_tokens,
        timeout=config.chat.timeout_seconds,
        base_urls=_base_urls(config),
        transport=transport,
    )
    for (index, _, _), result in zip(resolved, compared):
        results[index] = result

    return [result for result in results if result is not None]

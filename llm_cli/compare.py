"""
Concurrent multi-model comparison.

Every model gets its own task, ChatClient and credential. Failures are
captured per model, so one bad credential or dead endpoint never cancels its
siblings, and results always come back in the order the models were given.
"""

import asyncio
import logging
import time
from typing import Callable, List, Mapping, Optional, Sequence, Tuple, Union

import httpx

from .client import DEFAULT_TIMEOUT, ChatClient
from .errors import LLMCliError
from .models import ChatMessage, ChatRequest, ComparisonResult, ComparisonTask, ProviderId

logger = logging.getLogger(__name__)

DEFAULT_COMPARE_TEMPERATURE = 0.7
DEFAULT_COMPARE_MAX_TOKENS = 4096

CredentialSource = Callable[[ProviderId], str]
ModelSpec = Union[ComparisonTask, Tuple[str, Union[str, ProviderId]]]


async def compare(
    query: str,
    models: Sequence[ModelSpec],
    credentials: CredentialSource,
    temperature: Optional[float] = DEFAULT_COMPARE_TEMPERATURE,
    max_output_tokens: int = DEFAULT_COMPARE_MAX_TOKENS,
    timeout: Optional[float] = DEFAULT_TIMEOUT,
    base_urls: Optional[Mapping[ProviderId, str]] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> List[ComparisonResult]:
    """
    Ask several models the same question in parallel.

    Args:
        query: The user message sent to every model
        models: ComparisonTasks or (model_id, provider_id) pairs
        credentials: Returns the API key for a provider, raising MissingCredential
        temperature: Sampling temperature for every request
        max_output_tokens: Output token limit for every request
        timeout: Per-request timeout in seconds, None for no timeout
        base_urls: Optional per-provider endpoint overrides
        transport: Optional httpx transport shared by all clients

    Returns:
        One ComparisonResult per input model, in input order
    """
    overrides = base_urls or {}

    async def run_one(entry: ModelSpec) -> ComparisonResult:
        if isinstance(entry, ComparisonTask):
            model, raw_provider = entry.model, entry.provider
        else:
            model, raw_provider = entry
        provider: Optional[ProviderId] = None

        start = time.perf_counter()
        try:
            provider = ProviderId.parse(raw_provider)
            client = ChatClient(
                provider,
                credentials(provider),
                base_url=overrides.get(provider),
                timeout=timeout,
                transport=transport,
            )
            request = ChatRequest(
                model=model,
                messages=[ChatMessage.user(query)],
                max_output_tokens=max_output_tokens,
                temperature=temperature,
                stream=False,
            )
            text = await client.chat(request)
        except LLMCliError as exc:
            elapsed = time.perf_counter() - start
            logger.warning("Model %s failed after %.2fs: %s", model, elapsed, exc.kind)
            return ComparisonResult(model=model, provider=provider, elapsed=elapsed, error=exc)

        elapsed = time.perf_counter() - start
        logger.debug("Model %s answered in %.2fs", model, elapsed)
        return ComparisonResult(model=model, provider=provider, elapsed=elapsed, text=text)

    # gather returns results in argument order, not completion order
    return list(await asyncio.gather(*(run_one(entry) for entry in models)))

"""Model registry and credential lookup, both driven by an explicit AppConfig."""

import os
from typing import Callable, List, Mapping, Optional, Union

from .config import AppConfig, ModelInfo
from .errors import MissingCredential, UnknownModel
from .models import ProviderId


def list_models(config: AppConfig) -> List[ModelInfo]:
    return list(config.models.available)


def resolve_model(config: AppConfig, name: str) -> ModelInfo:
    """
    Find a model by name.

    Raises:
        UnknownModel: if no configured model has that name
    """
    for info in config.models.available:
        if info.name == name:
            return info
    raise UnknownModel(name)


def get_api_key(
    config: AppConfig,
    provider: Union[str, ProviderId],
    env: Optional[Mapping[str, str]] = None,
) -> str:
    """
    Resolve the API key for a provider.

    An explicit ``api_key`` in the configuration wins over the provider's
    environment variable.

    Raises:
        MissingCredential: provider disabled, or no key configured anywhere
    """
    environ = os.environ if env is None else env
    provider = ProviderId.parse(provider)
    settings = config.provider_settings(provider)

    if not settings.enabled:
        raise MissingCredential(provider.value, reason="provider is disabled in config")
    if settings.api_key:
        return settings.api_key

    from_env = str(environ.get(settings.api_key_env, "")).strip()
    if from_env:
        return from_env
    raise MissingCredential(provider.value, settings.api_key_env)


def credential_source(
    config: AppConfig, env: Optional[Mapping[str, str]] = None
) -> Callable[[ProviderId], str]:
    """Bind ``get_api_key`` to a config for the comparison orchestrator."""

    def lookup(provider: ProviderId) -> str:
        return get_api_key(config, provider, env)

    return lookup


def key_preview(key: Optional[str]) -> Optional[str]:
    return f"{key[:8]}..." if key else None

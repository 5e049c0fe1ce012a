"""Configuration for the LLM CLI."""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from .errors import ConfigError
from .models import ProviderId

load_dotenv()

logger = logging.getLogger(__name__)

# Data directory for config, sessions and templates
DATA_DIR = os.getenv("LLM_CLI_DATA_DIR", "data")
CONFIG_FILENAME = "config.json"
SESSIONS_DIRNAME = "sessions"
TEMPLATES_DIRNAME = "templates"

# Environment variables holding provider API keys
DEFAULT_API_KEY_ENV = {
    ProviderId.OPENAI: "OPENAI_API_KEY",
    ProviderId.ANTHROPIC: "ANTHROPIC_API_KEY",
    ProviderId.GOOGLE: "GOOGLE_API_KEY",
}


class ProviderSettings(BaseModel):
    api_key: Optional[str] = None
    api_key_env: str
    base_url: Optional[str] = None
    enabled: bool = True


class ModelInfo(BaseModel):
    name: str
    provider: ProviderId
    display_name: str


DEFAULT_MODELS = [
    ModelInfo(name="claude-sonnet-4-20250514", provider=ProviderId.ANTHROPIC, display_name="Claude Sonnet 4"),
    ModelInfo(name="claude-3-5-haiku-20241022", provider=ProviderId.ANTHROPIC, display_name="Claude Haiku 3.5"),
    ModelInfo(name="gpt-4o", provider=ProviderId.OPENAI, display_name="GPT-4o"),
    ModelInfo(name="gpt-4o-mini", provider=ProviderId.OPENAI, display_name="GPT-4o mini"),
    ModelInfo(name="gemini-2.5-pro", provider=ProviderId.GOOGLE, display_name="Gemini 2.5 Pro"),
    ModelInfo(name="gemini-2.5-flash", provider=ProviderId.GOOGLE, display_name="Gemini 2.5 Flash"),
]


def _default_providers() -> Dict[ProviderId, ProviderSettings]:
    return {provider: ProviderSettings(api_key_env=env) for provider, env in DEFAULT_API_KEY_ENV.items()}


class ModelsConfig(BaseModel):
    default: str = "claude-sonnet-4-20250514"
    # Stored and editable, never consulted when sending requests.
    fallback: Optional[str] = "claude-3-5-haiku-20241022"
    available: List[ModelInfo] = Field(default_factory=lambda: [m.model_copy() for m in DEFAULT_MODELS])


class ChatConfig(BaseModel):
    temperature: float = 0.7
    max_tokens: int = Field(default=4096, ge=0)
    streaming: bool = False
    timeout_seconds: Optional[float] = 120.0


class CompareConfig(BaseModel):
    temperature: float = 0.7
    max_tokens: int = Field(default=4096, ge=0)


class SessionConfig(BaseModel):
    auto_save: bool = True
    max_history: int = Field(default=50, ge=1)


class OutputConfig(BaseModel):
    color: bool = True


class AppConfig(BaseModel):
    providers: Dict[ProviderId, ProviderSettings] = Field(default_factory=_default_providers)
    models: ModelsConfig = Field(default_factory=ModelsConfig)
    chat: ChatConfig = Field(default_factory=ChatConfig)
    compare: CompareConfig = Field(default_factory=CompareConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    def provider_settings(self, provider: ProviderId) -> ProviderSettings:
        settings = self.providers.get(provider)
        if settings is None:
            settings = ProviderSettings(api_key_env=DEFAULT_API_KEY_ENV[provider])
        return settings


def data_dir() -> Path:
    """Return the data directory, honouring LLM_CLI_DATA_DIR at call time."""
    return Path(os.getenv("LLM_CLI_DATA_DIR", DATA_DIR))


def config_path() -> Path:
    return data_dir() / CONFIG_FILENAME


def sessions_dir() -> Path:
    return data_dir() / SESSIONS_DIRNAME


def templates_dir() -> Path:
    return data_dir() / TEMPLATES_DIRNAME


def load_config(path: Optional[Union[str, Path]] = None) -> AppConfig:
    """Load configuration from file, or return defaults."""
    path = Path(path) if path is not None else config_path()
    if path.exists():
        try:
            with open(path, "r", encoding="utf-8") as f:
                return AppConfig.model_validate(json.load(f))
        except (json.JSONDecodeError, IOError, ValidationError) as exc:
            logger.warning("Ignoring unreadable config %s: %s", path, exc)
    return AppConfig()


def save_config(config: AppConfig, path: Optional[Union[str, Path]] = None) -> Path:
    """Save configuration to file."""
    path = Path(path) if path is not None else config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config.model_dump(mode="json"), f, indent=2)
    return path


def reset_config(path: Optional[Union[str, Path]] = None) -> AppConfig:
    """Overwrite the configuration file with defaults."""
    config = AppConfig()
    save_config(config, path)
    return config


def get_config_value(config: AppConfig, key: str) -> Any:
    """
    Look up a dotted key such as "chat.temperature" or "providers.openai.base_url".

    Raises:
        ConfigError: if any segment of the key does not exist
    """
    node: Any = config.model_dump(mode="json")
    for part in key.split("."):
        if not isinstance(node, dict) or part not in node:
            raise ConfigError(f"Unknown config key: {key}")
        node = node[part]
    return node


def set_config_value(config: AppConfig, key: str, value: str) -> AppConfig:
    """
    Return a copy of ``config`` with the dotted ``key`` set to ``value``.

    The raw string is converted to the field's type by pydantic, so
    "chat.max_tokens 2048" stores an int and "chat.streaming false" a bool.
    The literal "null" clears optional fields.

    Raises:
        ConfigError: unknown key, non-scalar target, or a value of the wrong type
    """
    parts = key.split(".")
    data = config.model_dump(mode="json")

    node: Any = data
    for part in parts[:-1]:
        if not isinstance(node, dict) or part not in node:
            raise ConfigError(f"Unknown config key: {key}")
        node = node[part]
    leaf = parts[-1]
    if not isinstance(node, dict) or leaf not in node:
        raise ConfigError(f"Unknown config key: {key}")
    if isinstance(node[leaf], (dict, list)):
        raise ConfigError(f"Config key {key} is not a single value")

    node[leaf] = None if value == "null" else value
    try:
        return AppConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid value for {key}: {value!r}") from exc

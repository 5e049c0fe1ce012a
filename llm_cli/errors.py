"""Error taxonomy shared by the provider layer, the client and the CLI."""

from typing import Optional


class LLMCliError(Exception):
    """Base class for every error the package raises on purpose."""

    kind = "error"


class UnsupportedProvider(LLMCliError):
    """The provider id is not one of the known providers."""

    kind = "unsupported_provider"

    def __init__(self, provider: str):
        super().__init__(f"Unsupported provider: {provider}")
        self.provider = provider


class MissingCredential(LLMCliError):
    """No API key could be resolved for a provider."""

    kind = "missing_credential"

    def __init__(self, provider: str, env_var: Optional[str] = None, reason: Optional[str] = None):
        if reason:
            message = f"API key for {provider} unavailable: {reason}"
        elif env_var:
            message = f"API key not found for {provider}. Set {env_var} or configure providers.{provider}.api_key"
        else:
            message = f"API key not found for {provider}"
        super().__init__(message)
        self.provider = provider
        self.env_var = env_var


class TransportError(LLMCliError):
    """Connection-level failure: DNS, TLS, refused connection, timeout."""

    kind = "transport_error"

    def __init__(self, provider: str, cause: BaseException):
        super().__init__(f"Transport error talking to {provider}: {type(cause).__name__}: {cause}")
        self.provider = provider
        self.cause = cause


class ApiError(LLMCliError):
    """The provider answered with a non-success HTTP status."""

    kind = "api_error"

    def __init__(self, provider: str, status: int, body: str):
        super().__init__(f"{provider} API error (Status {status}): {body}")
        self.provider = provider
        self.status = status
        self.body = body


class DecodeError(LLMCliError):
    """The response body could not be decoded into a known response shape."""

    kind = "decode_error"

    def __init__(self, provider: str, cause: BaseException, body: str):
        super().__init__(f"JSON decode error from {provider}: {cause}\nRaw Body: {body}")
        self.provider = provider
        self.cause = cause
        self.body = body


class UnknownModel(LLMCliError):
    """The requested model is not present in the model registry."""

    kind = "unknown_model"

    def __init__(self, model: str):
        super().__init__(f"Model '{model}' not found in config")
        self.model = model


class ConfigError(LLMCliError):
    kind = "config_error"


class SessionError(LLMCliError):
    kind = "session_error"


class TemplateError(LLMCliError):
    kind = "template_error"

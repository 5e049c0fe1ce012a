"""Provider-agnostic request/response records.

Requests are built from ``ChatMessage``/``ChatRequest``. Responses from all three
providers are decoded into one ``ChatResponse`` whose shape fields are all optional;
``llm_cli.normalize`` picks the populated one.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from .errors import LLMCliError, UnsupportedProvider

# Returned by the normalizer when no provider shape carried any text.
NO_CONTENT_FOUND = "no content found"


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class ProviderId(str, Enum):
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GOOGLE = "google"

    @classmethod
    def parse(cls, value: Union[str, "ProviderId"]) -> "ProviderId":
        """Return the provider for ``value`` or raise ``UnsupportedProvider``."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise UnsupportedProvider(str(value)) from None


class ChatMessage(BaseModel):
    """One turn of a conversation."""

    model_config = ConfigDict(frozen=True)

    role: Role
    content: str

    @classmethod
    def user(cls, content: str) -> "ChatMessage":
        return cls(role=Role.USER, content=content)


class ChatRequest(BaseModel):
    """A chat completion request, independent of any provider's wire format."""

    model_config = ConfigDict(frozen=True)

    model: str
    messages: List[ChatMessage]
    max_output_tokens: int = Field(ge=0)
    temperature: Optional[float] = None
    stream: Optional[bool] = None


# Response records. Unknown keys are ignored so providers can add fields freely.

class ContentBlock(BaseModel):
    type: Optional[str] = None
    text: Optional[str] = None


class ResponseMessage(BaseModel):
    content: Optional[str] = None


class Choice(BaseModel):
    message: ResponseMessage


class GeminiPart(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # A part may carry only a thought signature and no text.
    text: Optional[str] = None
    thought_signature: Optional[str] = Field(default=None, alias="thoughtSignature")


class GeminiContent(BaseModel):
    parts: List[GeminiPart] = Field(default_factory=list)


class GeminiCandidate(BaseModel):
    content: Optional[GeminiContent] = None


class ChatResponse(BaseModel):
    """Union of the Anthropic, OpenAI and Google response shapes."""

    id: Optional[str] = Field(default=None, validation_alias=AliasChoices("id", "responseId"))
    # Anthropic
    content: Optional[List[ContentBlock]] = None
    # OpenAI
    choices: Optional[List[Choice]] = None
    # Google
    candidates: Optional[List[GeminiCandidate]] = None


@dataclass(frozen=True, slots=True)
class WireRequest:
    """A fully built HTTP request for one provider."""

    url: str
    headers: Dict[str, str]
    body: Dict[str, Any]


@dataclass(frozen=True, slots=True)
class RawResponse:
    """Status and untouched body text of a provider response."""

    status_code: int
    body_text: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


@dataclass(frozen=True, slots=True)
class ComparisonTask:
    model: str
    provider: ProviderId


@dataclass(slots=True)
class ComparisonResult:
    """Outcome of one model in a comparison: either ``text`` or ``error`` is set."""

    model: str
    provider: Optional[ProviderId]
    elapsed: float
    text: Optional[str] = None
    error: Optional[LLMCliError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def outcome(self) -> Union[str, LLMCliError]:
        if self.error is not None:
            return self.error
        return self.text if self.text is not None else NO_CONTENT_FOUND

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": self.model,
            "provider": self.provider.value if self.provider else None,
            "elapsed_ms": round(self.elapsed * 1000.0, 1),
            "ok": self.ok,
        }
        if self.error is not None:
            payload["error"] = {"kind": self.error.kind, "message": str(self.error)}
        else:
            payload["content"] = self.text
        return payload

import pytest

from llm_cli.errors import UnsupportedProvider
from llm_cli.models import ChatMessage, ChatRequest, ProviderId, Role
from llm_cli.providers import build_request, get_provider


def _request(**overrides) -> ChatRequest:
    fields = {
        "model": "some-model",
        "messages": [
            ChatMessage(role=Role.SYSTEM, content="be brief"),
            ChatMessage(role=Role.USER, content="hi"),
            ChatMessage(role=Role.ASSISTANT, content="hello"),
            ChatMessage(role=Role.USER, content="what is 6 x 7?"),
        ],
        "max_output_tokens": 256,
        "temperature": 0.2,
        "stream": False,
    }
    fields.update(overrides)
    return ChatRequest(**fields)


def test_openai_request_uses_bearer_auth_and_chat_completions() -> None:
    wire = build_request("openai", _request(), "sk-openai")

    assert wire.url == "https://api.openai.com/v1/chat/completions"
    assert wire.headers["Authorization"] == "Bearer sk-openai"
    assert wire.body == {
        "model": "some-model",
        "messages": [
            {"role": "system", "content": "be brief"},
            {"role": "user", "content": "hi"},
            {"role": "assistant", "content": "hello"},
            {"role": "user", "content": "what is 6 x 7?"},
        ],
        "max_completion_tokens": 256,
        "temperature": 0.2,
        "stream": False,
    }


def test_anthropic_request_uses_api_key_header_and_same_body_fields() -> None:
    wire = build_request(ProviderId.ANTHROPIC, _request(), "sk-ant")

    assert wire.url == "https://api.anthropic.com/v1/messages"
    assert wire.headers["x-api-key"] == "sk-ant"
    assert wire.headers["anthropic-version"] == "2023-06-01"
    assert "Authorization" not in wire.headers
    assert set(wire.body) == {"model", "messages", "max_completion_tokens", "temperature", "stream"}
    assert wire.body["max_completion_tokens"] == 256


def test_google_request_puts_key_in_url_and_remaps_roles() -> None:
    wire = build_request("google", _request(model="gemini-2.5-flash"), "google-key")

    assert wire.url == (
        "https://generativelanguage.googleapis.com/v1beta/models/gemini-2.5-flash:generateContent?key=google-key"
    )
    assert "Authorization" not in wire.headers
    assert "x-api-key" not in wire.headers
    assert wire.body["generationConfig"] == {"temperature": 0.2, "maxOutputTokens": 256}
    assert wire.body["contents"] == [
        {"parts": [{"text": "be brief"}], "role": "model"},
        {"parts": [{"text": "hi"}], "role": "user"},
        {"parts": [{"text": "hello"}], "role": "model"},
        {"parts": [{"text": "what is 6 x 7?"}], "role": "user"},
    ]


def test_optional_fields_are_omitted_when_unset() -> None:
    request = _request(temperature=None, stream=None)

    assert "temperature" not in build_request("openai", request, "k").body
    assert "stream" not in build_request("anthropic", request, "k").body
    assert build_request("google", request, "k").body["generationConfig"] == {"maxOutputTokens": 256}


def test_base_url_override_drops_trailing_slash() -> None:
    wire = build_request("openai", _request(), "k", base_url="http://localhost:8080/v1/")
    assert wire.url == "http://localhost:8080/v1/chat/completions"


def test_google_key_is_url_quoted() -> None:
    wire = build_request("google", _request(model="gemini"), "a/b&c")
    assert wire.url.endswith("?key=a%2Fb%26c")


@pytest.mark.parametrize("provider", ["openai", "anthropic", "google"])
def test_message_count_and_order_survive_every_adapter(provider: str) -> None:
    messages = [ChatMessage.user(f"message {i}") for i in range(5)]
    wire = build_request(provider, _request(messages=messages), "k")

    if provider == "google":
        texts = [entry["parts"][0]["text"] for entry in wire.body["contents"]]
    else:
        texts = [entry["content"] for entry in wire.body["messages"]]
    assert texts == [f"message {i}" for i in range(5)]


@pytest.mark.parametrize("provider", ["mistral", "", "OpenAI-compatible"])
def test_unknown_provider_is_rejected(provider: str) -> None:
    with pytest.raises(UnsupportedProvider):
        get_provider(provider)
    with pytest.raises(UnsupportedProvider):
        build_request(provider, _request(), "k")


def test_provider_ids_are_case_insensitive() -> None:
    assert get_provider("Google").id is ProviderId.GOOGLE

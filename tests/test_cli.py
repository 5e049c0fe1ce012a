import asyncio
import json
import logging

import httpx
import pytest

from llm_cli import cli
from llm_cli.api import Answer
from llm_cli.client import ChatClient
from llm_cli.config import load_config
from llm_cli.errors import ApiError, TransportError, UnknownModel
from llm_cli.models import ChatMessage, ChatRequest, ComparisonResult, ProviderId, Role
from llm_cli.sessions import SessionMessage, SessionStore

from helpers import GOOGLE_OK, json_response


def test_version(capsys) -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["--version"])
    assert exc_info.value.code == 0
    assert "0.1.0" in capsys.readouterr().out


def test_help_mentions_purpose(capsys) -> None:
    with pytest.raises(SystemExit):
        cli.main(["--help"])
    assert "A CLI tool for interacting with LLMs" in capsys.readouterr().out


def test_compare_requires_at_least_one_model() -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["compare", "hi"])
    assert exc_info.value.code == 2


def test_config_set_get_and_reset(data_dir, capsys) -> None:
    assert cli.main(["config", "set", "chat.max_tokens", "2048"]) == 0
    assert load_config().chat.max_tokens == 2048

    assert cli.main(["config", "get", "chat.max_tokens"]) == 0
    assert capsys.readouterr().out.strip().endswith("2048")

    assert cli.main(["config", "reset"]) == 0
    assert load_config().chat.max_tokens == 4096


def test_config_set_unknown_key_fails(data_dir, capsys) -> None:
    assert cli.main(["config", "set", "chat.bogus", "1"]) == 1
    assert "Unknown config key" in capsys.readouterr().err


def test_config_show_prints_json(data_dir, capsys) -> None:
    assert cli.main(["config", "show"]) == 0
    out = capsys.readouterr().out
    assert json.loads(out[out.index("{"):])["models"]["default"] == "claude-sonnet-4-20250514"


def test_config_list_models(data_dir, capsys) -> None:
    assert cli.main(["config", "list-models"]) == 0
    assert "gemini-2.5-flash (google) - Gemini 2.5 Flash" in capsys.readouterr().out


def test_ask_prints_answer_and_writes_output(data_dir, tmp_path, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    captured = {}

    async def fake_ask(config, query, model=None):
        captured.update(query=query, model=model)
        return Answer(model=model, provider=ProviderId.OPENAI, text="42")

    monkeypatch.setattr(cli, "ask", fake_ask)
    output = tmp_path / "answer.txt"

    assert cli.main(["ask", "6 x 7?", "-m", "gpt-4o", "-o", str(output)]) == 0

    assert captured == {"query": "6 x 7?", "model": "gpt-4o"}
    assert "42" in capsys.readouterr().out
    assert output.read_text() == "42"


def test_ask_reads_query_from_file_and_renders_template(
    data_dir, tmp_path, monkeypatch: pytest.MonkeyPatch
) -> None:
    captured = {}

    async def fake_ask(config, query, model=None):
        captured["query"] = query
        return Answer(model=model, provider=ProviderId.ANTHROPIC, text="fine")

    monkeypatch.setattr(cli, "ask", fake_ask)
    query_file = tmp_path / "q.txt"
    query_file.write_text("def f(): pass")

    assert cli.main(["template", "create", "review", "--content", "Review ({{lang}}):\n{{input}}"]) == 0
    assert cli.main(["ask", "-f", str(query_file), "-t", "review", "--var", "lang=python"]) == 0

    assert captured["query"] == "Review (python):\ndef f(): pass"


def test_ask_without_query_or_file(data_dir, capsys) -> None:
    assert cli.main(["ask"]) == 2
    assert "--file" in capsys.readouterr().err


def test_ask_unknown_model_reports_error(data_dir, capsys) -> None:
    assert cli.main(["ask", "hi", "-m", "gpt-17"]) == 1
    assert "gpt-17" in capsys.readouterr().err


def test_ask_api_error_is_reported_with_body(data_dir, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    async def failing_ask(config, query, model=None):
        raise ApiError("openai", 401, '{"error": "invalid api key"}')

    monkeypatch.setattr(cli, "ask", failing_ask)

    assert cli.main(["ask", "hi", "-m", "gpt-4o"]) == 1
    err = capsys.readouterr().err
    assert "401" in err
    assert "invalid api key" in err


def test_compare_prints_every_model_in_order(data_dir, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    async def fake_compare(config, query, model_names):
        return [
            ComparisonResult(model="gpt-4o", provider=ProviderId.OPENAI, elapsed=1.0, text="first answer"),
            ComparisonResult(
                model="gemini-2.5-pro",
                provider=ProviderId.GOOGLE,
                elapsed=0.2,
                error=TransportError("google", OSError("unreachable")),
            ),
            ComparisonResult(model="nope", provider=None, elapsed=0.0, error=UnknownModel("nope")),
        ]

    monkeypatch.setattr(cli, "compare_models", fake_compare)

    code = cli.main(["compare", "hi", "-m", "gpt-4o", "-m", "gemini-2.5-pro", "-m", "nope"])

    out = capsys.readouterr().out
    assert code == 1
    assert out.index("MODEL: gpt-4o") < out.index("MODEL: gemini-2.5-pro") < out.index("MODEL: nope")
    assert "first answer" in out
    assert "Error (transport_error)" in out
    assert "Error (unknown_model)" in out


def test_session_commands(data_dir, tmp_path, capsys) -> None:
    store = SessionStore(data_dir / "sessions")
    store.add_message("demo", SessionMessage(role=Role.USER, content="hello there"))

    assert cli.main(["session", "list"]) == 0
    assert "demo" in capsys.readouterr().out

    assert cli.main(["session", "show", "demo"]) == 0
    assert "[user] hello there" in capsys.readouterr().out

    export = tmp_path / "demo.json"
    assert cli.main(["session", "export", "demo", "-o", str(export)]) == 0
    assert json.loads(export.read_text())["name"] == "demo"

    assert cli.main(["session", "delete", "demo"]) == 0
    assert cli.main(["session", "show", "demo"]) == 1


def test_template_list_show_delete(data_dir, capsys) -> None:
    assert cli.main(["template", "create", "eli5", "--content", "Explain simply: {{input}}"]) == 0
    assert cli.main(["template", "list"]) == 0
    assert "eli5" in capsys.readouterr().out

    assert cli.main(["template", "show", "eli5"]) == 0
    assert "Explain simply: {{input}}" in capsys.readouterr().out

    assert cli.main(["template", "delete", "eli5"]) == 0
    assert cli.main(["template", "show", "eli5"]) == 1


def test_chat_saves_turns_to_session(data_dir, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    sent = []

    async def fake_ask(config, model=None, messages=None):
        sent.append([m.content for m in messages])
        return Answer(model=model, provider=ProviderId.ANTHROPIC, text=f"echo {messages[-1].content}")

    inputs = iter(["first", "", "second", "/exit"])
    monkeypatch.setattr(cli, "ask", fake_ask)
    monkeypatch.setattr("builtins.input", lambda prompt="": next(inputs))

    assert cli.main(["chat", "-s", "talk"]) == 0

    assert sent == [["first"], ["first", "echo first", "second"]]
    session = SessionStore(data_dir / "sessions").load("talk")
    assert [m.content for m in session.messages] == ["first", "echo first", "second", "echo second"]


def test_chat_ends_on_eof(data_dir, monkeypatch: pytest.MonkeyPatch) -> None:
    def eof(prompt=""):
        raise EOFError

    monkeypatch.setattr("builtins.input", eof)
    assert cli.main(["chat"]) == 0


def test_verbose_logging_keeps_google_key_out_of_logs(caplog) -> None:
    cli.configure_logging(1)
    caplog.set_level(logging.INFO)
    client = ChatClient(
        "google", "SECRET-GOOGLE-KEY", transport=httpx.MockTransport(lambda request: json_response(GOOGLE_OK))
    )
    request = ChatRequest(model="gemini-2.5-pro", messages=[ChatMessage.user("hi")], max_output_tokens=16)

    assert asyncio.run(client.chat(request)) == "ok"

    assert "Sending chat request to google" in caplog.text
    assert "SECRET-GOOGLE-KEY" not in caplog.text


def test_invalid_log_level_falls_back_to_warning(data_dir, monkeypatch: pytest.MonkeyPatch, caplog) -> None:
    monkeypatch.setenv("LLM_CLI_LOG_LEVEL", "LOUD")

    assert cli.main(["template", "list"]) == 0
    assert "Unknown LLM_CLI_LOG_LEVEL 'LOUD'" in caplog.text


def test_ask_output_to_unwritable_path_is_reported(
    data_dir, tmp_path, monkeypatch: pytest.MonkeyPatch, capsys
) -> None:
    async def fake_ask(config, query, model=None):
        return Answer(model=model, provider=ProviderId.OPENAI, text="42")

    monkeypatch.setattr(cli, "ask", fake_ask)
    target = tmp_path / "missing-dir" / "answer.txt"

    assert cli.main(["ask", "hi", "-m", "gpt-4o", "-o", str(target)]) == 1
    assert "Failed to write response" in capsys.readouterr().err


def test_chat_history_window_starts_on_a_user_turn(data_dir, monkeypatch: pytest.MonkeyPatch) -> None:
    sent = []

    async def fake_ask(config, model=None, messages=None):
        sent.append([(m.role, m.content) for m in messages])
        return Answer(model=model, provider=ProviderId.ANTHROPIC, text=f"echo {messages[-1].content}")

    inputs = iter(["first", "second", "/exit"])
    monkeypatch.setattr(cli, "ask", fake_ask)
    monkeypatch.setattr("builtins.input", lambda prompt="": next(inputs))

    assert cli.main(["config", "set", "session.max_history", "2"]) == 0
    assert cli.main(["chat"]) == 0

    assert sent == [[(Role.USER, "first")], [(Role.USER, "second")]]

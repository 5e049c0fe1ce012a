"""Command-line interface."""

import argparse
import asyncio
import json
import logging
import os
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from . import __version__
from .api import ask, compare_models
from .config import (
    AppConfig,
    config_path,
    get_config_value,
    load_config,
    reset_config,
    save_config,
    sessions_dir,
    set_config_value,
    templates_dir,
)
from .errors import LLMCliError
from .models import ChatMessage, Role
from .normalize import has_content
from .output import CYAN, OutputFormatter
from .registry import list_models, resolve_model
from .sessions import SessionMessage, SessionStore, trim_history
from .templates import TemplateStore

logger = logging.getLogger(__name__)

EXIT_COMMANDS = {"/exit", "/quit"}
QUIET_LOGGERS = ("httpx", "httpcore")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="llm-cli", description="A CLI tool for interacting with LLMs")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity")
    subparsers = parser.add_subparsers(dest="command", required=True)

    ask_parser = subparsers.add_parser("ask", help="Ask a one-shot question to the LLM")
    ask_parser.add_argument("query", nargs="?", help="The question to ask")
    ask_parser.add_argument("-f", "--file", help="Read query from file")
    ask_parser.add_argument("-o", "--output", help="Write the answer to this file")
    ask_parser.add_argument("-m", "--model", help="Model to use (overrides config)")
    ask_parser.add_argument("-t", "--template", help="Render the query through a saved template")
    ask_parser.add_argument("--var", action="append", default=[], metavar="KEY=VALUE", help="Template variable")

    chat_parser = subparsers.add_parser("chat", help="Start an interactive chat session")
    chat_parser.add_argument("-s", "--session", help="Session name (creates new or loads existing)")
    chat_parser.add_argument("-m", "--model", help="Model to use (overrides config)")

    compare_parser = subparsers.add_parser("compare", help="Ask several models the same question")
    compare_parser.add_argument("query", help="The question to ask")
    compare_parser.add_argument(
        "-m", "--model", dest="models", action="append", required=True, help="Model to include (repeatable)"
    )

    config_parser = subparsers.add_parser("config", help="Manage configuration")
    config_sub = config_parser.add_subparsers(dest="action", required=True)
    config_set = config_sub.add_parser("set", help="Set a configuration value")
    config_set.add_argument("key", help="Configuration key (e.g., chat.temperature, models.default)")
    config_set.add_argument("value", help="Configuration value")
    config_get = config_sub.add_parser("get", help="Get a configuration value")
    config_get.add_argument("key", help="Configuration key")
    config_sub.add_parser("show", help="Show all configuration")
    config_sub.add_parser("list-models", help="List available models")
    config_sub.add_parser("reset", help="Reset configuration to defaults")

    session_parser = subparsers.add_parser("session", help="Manage chat sessions")
    session_sub = session_parser.add_subparsers(dest="action", required=True)
    session_sub.add_parser("list", help="List all sessions")
    session_show = session_sub.add_parser("show", help="Show session details")
    session_show.add_argument("name", help="Session name")
    session_delete = session_sub.add_parser("delete", help="Delete a session")
    session_delete.add_argument("name", help="Session name")
    session_export = session_sub.add_parser("export", help="Export a session to file")
    session_export.add_argument("name", help="Session name")
    session_export.add_argument("-o", "--output", required=True, help="Output file path")

    template_parser = subparsers.add_parser("template", help="Manage prompt templates")
    template_sub = template_parser.add_subparsers(dest="action", required=True)
    template_create = template_sub.add_parser("create", help="Create a new template")
    template_create.add_argument("name", help="Template name")
    source = template_create.add_mutually_exclusive_group(required=True)
    source.add_argument("--content", help="Template text, {{input}} marks the query")
    source.add_argument("--file", help="Read template text from file")
    template_sub.add_parser("list", help="List all templates")
    template_show = template_sub.add_parser("show", help="Show template content")
    template_show.add_argument("name", help="Template name")
    template_delete = template_sub.add_parser("delete", help="Delete a template")
    template_delete.add_argument("name", help="Template name")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8001, help="Bind port")

    return parser


def configure_logging(verbose: int) -> None:
    invalid_level = None
    if verbose >= 2:
        level = "DEBUG"
    elif verbose == 1:
        level = "INFO"
    else:
        level = os.getenv("LLM_CLI_LOG_LEVEL", "WARNING").strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            invalid_level, level = level, "WARNING"
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    # httpx logs full request URLs at INFO, and the Google key travels in the query string.
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    if invalid_level is not None:
        logger.warning("Unknown LLM_CLI_LOG_LEVEL %r, using WARNING", invalid_level)


def _parse_vars(pairs: Sequence[str]) -> Dict[str, str]:
    variables: Dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise LLMCliError(f"Template variable must look like KEY=VALUE: {pair!r}")
        variables[key] = value
    return variables


def cmd_ask(args: argparse.Namespace, config: AppConfig, out: OutputFormatter) -> int:
    if args.query is not None:
        query = args.query
    elif args.file:
        try:
            query = Path(args.file).read_text(encoding="utf-8")
        except OSError as exc:
            raise LLMCliError(f"Failed to read file {args.file}: {exc}") from exc
    else:
        out.print_error("Either a query string or a --file path must be provided.")
        return 2

    if args.template:
        variables = _parse_vars(args.var)
        variables.setdefault("input", query)
        query = TemplateStore(templates_dir()).render(args.template, variables)

    model_name = args.model or config.models.default
    info = resolve_model(config, model_name)
    out.print_info(f"Using provider: {info.provider.value} with model: {info.name}")

    answer = asyncio.run(ask(config, query, model=info.name))
    if answer.text == "":
        out.print_warning("(Received empty response from model)")
    elif not has_content(answer.text):
        out.print_warning(f"({answer.provider.value} returned no content for {answer.model})")
    else:
        out.print_response(answer.text)

    if args.output:
        try:
            Path(args.output).write_text(answer.text, encoding="utf-8")
        except OSError as exc:
            raise LLMCliError(f"Failed to write response to {args.output}: {exc}") from exc
        out.print_success(f"Saved response to {args.output}")
    return 0


def cmd_chat(args: argparse.Namespace, config: AppConfig, out: OutputFormatter) -> int:
    model_name = args.model or config.models.default
    info = resolve_model(config, model_name)
    store = SessionStore(sessions_dir())
    session = store.load(args.session) if args.session else None
    history: List[ChatMessage] = session.history() if session else []

    out.print_info(f"Chatting with {info.display_name} ({info.provider.value}). Type /exit to quit.")
    while True:
        try:
            line = input("> ")
        except EOFError:
            print()
            break
        line = line.strip()
        if not line:
            continue
        if line in EXIT_COMMANDS:
            break

        history.append(ChatMessage.user(line))
        window = trim_history(history, config.session.max_history)
        try:
            answer = asyncio.run(ask(config, model=info.name, messages=window))
        except LLMCliError as exc:
            history.pop()
            out.print_error(str(exc))
            continue

        history.append(ChatMessage(role=Role.ASSISTANT, content=answer.text))
        out.print_response(answer.text)

        if args.session and config.session.auto_save:
            store.add_message(args.session, SessionMessage(role=Role.USER, content=line))
            store.add_message(args.session, SessionMessage(role=Role.ASSISTANT, content=answer.text))
    return 0


def cmd_compare(args: argparse.Namespace, config: AppConfig, out: OutputFormatter) -> int:
    out.print_info("Comparing models...")
    results = asyncio.run(compare_models(config, args.query, args.models))
    out.print_comparison(results)
    return 0 if all(result.ok for result in results) else 1


def cmd_config(args: argparse.Namespace, config: AppConfig, out: OutputFormatter) -> int:
    if args.action == "set":
        updated = set_config_value(config, args.key, args.value)
        save_config(updated)
        out.print_success(f"Set {out.style(args.key, CYAN)} = {args.value}")
    elif args.action == "get":
        value = get_config_value(config, args.key)
        out.print_response(json.dumps(value) if isinstance(value, (dict, list)) else str(value))
    elif args.action == "show":
        out.print_response(f"Configuration file: {config_path()}")
        out.print_response(json.dumps(config.model_dump(mode="json"), indent=2))
    elif args.action == "list-models":
        out.print_response("Available Models:")
        for info in list_models(config):
            out.print_response(f"  {out.style(info.name, CYAN)} ({info.provider.value}) - {info.display_name}")
    elif args.action == "reset":
        reset_config()
        out.print_success("Configuration reset to defaults")
    return 0


def cmd_session(args: argparse.Namespace, config: AppConfig, out: OutputFormatter) -> int:
    store = SessionStore(sessions_dir())
    if args.action == "list":
        names = store.list()
        if not names:
            out.print_warning("No sessions found")
        for name in names:
            out.print_response(f"  • {out.style(name, CYAN)}")
        return 0

    if args.action == "export":
        path = store.export(args.name, args.output)
        out.print_success(f"Exported session to {path}")
        return 0

    if args.action == "delete":
        if not store.delete(args.name):
            out.print_error(f"Session '{args.name}' not found")
            return 1
        out.print_success(f"Deleted session '{args.name}'")
        return 0

    session = store.load(args.name)
    if session is None:
        out.print_error(f"Session '{args.name}' not found")
        return 1
    out.print_response(f"Session: {session.name}")
    out.print_response(f"Messages: {len(session.messages)}")
    for message in session.messages:
        out.print_response(f"[{message.role.value}] {message.content}")
    return 0


def cmd_template(args: argparse.Namespace, config: AppConfig, out: OutputFormatter) -> int:
    store = TemplateStore(templates_dir())
    if args.action == "create":
        if args.content is not None:
            content = args.content
        else:
            try:
                content = Path(args.file).read_text(encoding="utf-8")
            except OSError as exc:
                raise LLMCliError(f"Failed to read file {args.file}: {exc}") from exc
        store.create(args.name, content)
        out.print_success(f"Created template '{args.name}'")
    elif args.action == "list":
        names = store.list()
        if not names:
            out.print_warning("No templates found")
        for name in names:
            out.print_response(f"  • {out.style(name, CYAN)}")
    elif args.action == "show":
        out.print_response(store.get(args.name))
    elif args.action == "delete":
        if not store.delete(args.name):
            out.print_error(f"Template '{args.name}' not found")
            return 1
        out.print_success(f"Deleted template '{args.name}'")
    return 0


def cmd_serve(args: argparse.Namespace, config: AppConfig, out: OutputFormatter) -> int:
    import uvicorn

    uvicorn.run("llm_cli.main:app", host=args.host, port=args.port)
    return 0


COMMANDS = {
    "ask": cmd_ask,
    "chat": cmd_chat,
    "compare": cmd_compare,
    "config": cmd_config,
    "session": cmd_session,
    "template": cmd_template,
    "serve": cmd_serve,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    config = load_config()
    out = OutputFormatter(color=config.output.color)
    try:
        return COMMANDS[args.command](args, config, out)
    except LLMCliError as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        out.print_error(str(exc))
        return 1


if __name__ == "__main__":
    sys.exit(main())

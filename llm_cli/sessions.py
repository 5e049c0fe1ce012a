"""JSON-file storage for chat sessions."""

import json
import re
import time
from pathlib import Path
from typing import List, Optional, Sequence, TypeVar, Union

from pydantic import BaseModel, Field, ValidationError

from .errors import SessionError
from .models import ChatMessage, Role

_NAME_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")
T = TypeVar("T")


def _now() -> int:
    return int(time.time())


def trim_history(messages: Sequence[T], max_history: Optional[int]) -> List[T]:
    """
    Keep at most ``max_history`` trailing messages, starting on a user turn.
    """
    window = list(messages if max_history is None else messages[-max_history:])
    while len(window) > 1 and window[0].role != Role.USER:
        window.pop(0)
    return window


class SessionMessage(BaseModel):
    role: Role
    content: str
    timestamp: int = Field(default_factory=_now)

    def to_chat_message(self) -> ChatMessage:
        return ChatMessage(role=self.role, content=self.content)


class Session(BaseModel):
    name: str
    messages: List[SessionMessage] = Field(default_factory=list)
    created_at: int = Field(default_factory=_now)
    updated_at: int = Field(default_factory=_now)

    def history(self, max_history: Optional[int] = None) -> List[ChatMessage]:
        """Return the last ``max_history`` messages as ChatMessages."""
        messages = trim_history(self.messages, max_history)
        return [message.to_chat_message() for message in messages]


class SessionStore:
    """One JSON document per session name under ``directory``."""

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def _path(self, name: str) -> Path:
        if not _NAME_RE.match(name):
            raise SessionError(f"Invalid session name: {name!r}")
        return self.directory / f"{name}.json"

    def save(self, session: Session) -> None:
        path = self._path(session.name)
        self.directory.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(session.model_dump(mode="json"), f, indent=2)

    def load(self, name: str) -> Optional[Session]:
        path = self._path(name)
        if not path.exists():
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return Session.model_validate(json.load(f))
        except (json.JSONDecodeError, ValidationError) as exc:
            raise SessionError(f"Session '{name}' is corrupted: {exc}") from exc

    def delete(self, name: str) -> bool:
        path = self._path(name)
        if not path.exists():
            return False
        path.unlink()
        return True

    def list(self) -> List[str]:
        if not self.directory.exists():
            return []
        return sorted(path.stem for path in self.directory.glob("*.json"))

    def add_message(self, name: str, message: SessionMessage) -> Session:
        """Append a message, creating the session if needed."""
        session = self.load(name) or Session(name=name)
        session.messages.append(message)
        session.updated_at = _now()
        self.save(session)
        return session

    def export(self, name: str, output: Union[str, Path]) -> Path:
        session = self.load(name)
        if session is None:
            raise SessionError(f"Session '{name}' not found")
        output = Path(output)
        try:
            output.write_text(json.dumps(session.model_dump(mode="json"), indent=2), encoding="utf-8")
        except OSError as exc:
            raise SessionError(f"Failed to export session '{name}' to {output}: {exc}") from exc
        return output

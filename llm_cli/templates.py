"""Prompt templates with ``{{name}}`` placeholders."""

import re
from pathlib import Path
from typing import List, Mapping, Union

from .errors import TemplateError

_NAME_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


def render(template: str, variables: Mapping[str, str]) -> str:
    """Replace each ``{{key}}``; placeholders without a value are left as is."""
    result = template
    for key, value in variables.items():
        result = result.replace("{{" + key + "}}", value)
    return result


class TemplateStore:
    """Templates stored as ``<name>.txt`` files."""

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def _path(self, name: str) -> Path:
        if not _NAME_RE.match(name):
            raise TemplateError(f"Invalid template name: {name!r}")
        return self.directory / f"{name}.txt"

    def create(self, name: str, content: str) -> Path:
        path = self._path(name)
        self.directory.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    def get(self, name: str) -> str:
        path = self._path(name)
        if not path.exists():
            raise TemplateError(f"Template '{name}' not found")
        return path.read_text(encoding="utf-8")

    def list(self) -> List[str]:
        if not self.directory.exists():
            return []
        return sorted(path.stem for path in self.directory.glob("*.txt"))

    def delete(self, name: str) -> bool:
        path = self._path(name)
        if not path.exists():
            return False
        path.unlink()
        return True

    def render(self, name: str, variables: Mapping[str, str]) -> str:
        return render(self.get(name), variables)

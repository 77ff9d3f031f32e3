"""Parsing of the JSON a PreToolUse hook receives."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any


class InputError(ValueError):
    """Raised when hook input cannot be parsed."""


@dataclass(frozen=True)
class BashInput:
    """Parameters of a Bash tool invocation."""

    command: str
    timeout: int | None = None
    description: str | None = None


@dataclass(frozen=True)
class ReadInput:
    """Parameters of a Read tool invocation."""

    file_path: str
    offset: int | None = None
    limit: int | None = None


@dataclass(frozen=True)
class WriteInput:
    """Parameters of a Write tool invocation."""

    file_path: str
    content: str


@dataclass(frozen=True)
class EditInput:
    """Parameters of an Edit tool invocation."""

    file_path: str
    old_string: str
    new_string: str


@dataclass(frozen=True)
class HookInput:
    """The raw input of a hook invocation."""

    tool_name: str
    tool_input: Any
    cwd: str | None = None
    session_id: str | None = None

    def _str(self, key: str) -> str | None:
        if not isinstance(self.tool_input, dict):
            return None
        value = self.tool_input.get(key)
        return value if isinstance(value, str) else None

    def _uint(self, key: str) -> int | None:
        if not isinstance(self.tool_input, dict):
            return None
        value = self.tool_input.get(key)
        if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
            return value
        return None

    def as_bash(self) -> BashInput | None:
        if self.tool_name != "Bash":
            return None
        command = self._str("command")
        if command is None:
            return None
        return BashInput(command, self._uint("timeout"), self._str("description"))

    def as_read(self) -> ReadInput | None:
        if self.tool_name != "Read":
            return None
        file_path = self._str("file_path")
        if file_path is None:
            return None
        return ReadInput(file_path, self._uint("offset"), self._uint("limit"))

    def as_write(self) -> WriteInput | None:
        if self.tool_name != "Write":
            return None
        file_path = self._str("file_path")
        content = self._str("content")
        if file_path is None or content is None:
            return None
        return WriteInput(file_path, content)

    def as_edit(self) -> EditInput | None:
        if self.tool_name != "Edit":
            return None
        fields = (self._str("file_path"), self._str("old_string"), self._str("new_string"))
        if any(field is None for field in fields):
            return None
        return EditInput(*fields)

    def file_path(self) -> str | None:
        """The path a file-based tool accesses, if any."""
        return self._str("file_path")

    def command(self) -> str | None:
        """The command of a Bash invocation, if any."""
        return self._str("command")


def _optional_str(data: dict, key: str) -> str | None:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise InputError(f"failed to parse JSON: field '{key}' must be a string")
    return value


def parse_hook_input(text: str) -> HookInput:
    """Parse hook input from a JSON string."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise InputError(f"failed to parse JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise InputError("failed to parse JSON: expected an object")
    for key in ("tool_name", "tool_input"):
        if key not in data:
            raise InputError(f"missing required field: {key}")
    tool_name = data["tool_name"]
    if not isinstance(tool_name, str):
        raise InputError("failed to parse JSON: field 'tool_name' must be a string")
    return HookInput(
        tool_name=tool_name,
        tool_input=data["tool_input"],
        cwd=_optional_str(data, "cwd"),
        session_id=_optional_str(data, "session_id"),
    )
"""Splitting shell command lines on &&, ||, |, ; and &."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class Operator(enum.Enum):
    """Shell operators that separate commands."""

    AND = "&&"
    OR = "||"
    PIPE = "|"
    SEMICOLON = ";"
    BACKGROUND = "&"


@dataclass(frozen=True)
class CommandSegment:
    """One command of a command line and the operator that follows it."""

    command: str
    operator: Operator | None = None


def split_commands(text: str) -> list[CommandSegment]:
    """Split a command line into segments, respecting quotes and escapes."""
    segments: list[CommandSegment] = []
    current: list[str] = []
    in_single = in_double = escape_next = False

    def finish(operator: Operator | None) -> None:
        command = "".join(current).strip()
        if command:
            segments.append(CommandSegment(command, operator))
        current.clear()

    pos = 0
    while pos < len(text):
        ch = text[pos]
        pos += 1

        if escape_next:
            current.append(ch)
            escape_next = False
            continue
        if ch == "\\" and not in_single:
            escape_next = True
            current.append(ch)
            continue
        if ch == "'" and not in_double:
            in_single = not in_single
            current.append(ch)
            continue
        if ch == '"' and not in_single:
            in_double = not in_double
            current.append(ch)
            continue
        if in_single or in_double:
            current.append(ch)
            continue

        if ch == "&":
            if text.startswith("&", pos):
                pos += 1
                finish(Operator.AND)
            else:
                finish(Operator.BACKGROUND)
        elif ch == "|":
            if text.startswith("|", pos):
                pos += 1
                finish(Operator.OR)
            else:
                finish(Operator.PIPE)
        elif ch == ";":
            finish(Operator.SEMICOLON)
        else:
            current.append(ch)

    finish(None)
    return segments
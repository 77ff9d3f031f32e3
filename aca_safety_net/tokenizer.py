"""Shell-style tokenisation that respects quotes and escapes."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class Word:
    """A regular word or argument."""

    value: str


@dataclass(frozen=True)
class Redirect:
    """A redirection operator such as >, >> or <."""

    value: str


@dataclass(frozen=True)
class Assignment:
    """A variable assignment, NAME=value."""

    name: str
    value: str


Token = Word | Redirect | Assignment


def _is_valid_var_name(name: str) -> bool:
    if not name or not (name[0].isalpha() or name[0] == "_"):
        return False
    return all(ch.isalnum() or ch == "_" for ch in name[1:])


def _classify(text: str) -> Token:
    name, sep, value = text.partition("=")
    if sep and name and _is_valid_var_name(name):
        return Assignment(name, value)
    return Word(text)


def tokenize(text: str) -> list[Token]:
    """Split a shell command into tokens."""
    tokens: list[Token] = []
    current: list[str] = []
    in_single = in_double = escape_next = False

    def flush() -> None:
        if current:
            tokens.append(_classify("".join(current)))
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
            if in_double:
                current.append(ch)
            continue
        if ch == "'" and not in_double:
            in_single = not in_single
            continue
        if ch == '"' and not in_single:
            in_double = not in_double
            continue
        if in_single or in_double:
            current.append(ch)
            continue
        if ch.isspace():
            flush()
            continue
        if ch in "<>":
            flush()
            redirect = ch
            if ch == ">":
                for follower in (">", "&"):
                    if text.startswith(follower, pos):
                        redirect += follower
                        pos += 1
            elif text.startswith("<", pos):
                redirect += "<"
                pos += 1
                if text.startswith("<", pos):
                    redirect += "<"
                    pos += 1
            tokens.append(Redirect(redirect))
            continue
        current.append(ch)

    flush()
    return tokens


def words(tokens: Iterable[Token]) -> list[str]:
    """The values of the Word tokens, in order."""
    return [token.value for token in tokens if isinstance(token, Word)]


def command_name(tokens: Iterable[Token]) -> str | None:
    """The first word, skipping assignments and redirections."""
    return next(iter(words(tokens)), None)


def arguments(tokens: Iterable[Token]) -> list[str]:
    """All words after the command name."""
    return words(tokens)[1:]
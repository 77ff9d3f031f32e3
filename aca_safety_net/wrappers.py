"""Stripping of wrapper commands such as sudo, env and bash -c."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from .tokenizer import Assignment, Token, Word, tokenize, words

WRAPPER_COMMANDS = frozenset(
    {
        "sudo",
        "doas",
        "su",
        "env",
        "nohup",
        "nice",
        "ionice",
        "timeout",
        "time",
        "strace",
        "ltrace",
        "watch",
    }
)

SHELLS = frozenset({"bash", "sh", "zsh", "dash"})

MAX_STRIP_DEPTH = 5

_SUDO_OPTIONS_WITH_ARG = frozenset({"-u", "-g", "-C", "-D", "-h", "-p", "-r", "-t"})
_TIMEOUT_OPTIONS_WITH_ARG = frozenset({"-s", "--signal", "-k", "--kill-after"})
_NICE_OPTIONS_WITH_ARG = frozenset({"-n", "-c"})


def strip_wrappers(command: str) -> str:
    """Strip wrapper commands to reach the command that actually runs.

    ``sudo ls`` gives ``ls``, ``env FOO=bar ls`` gives ``ls`` and
    ``bash -c "ls -la"`` gives ``ls -la``.
    """
    return _strip(command, 0)


def _strip(command: str, depth: int) -> str:
    if depth >= MAX_STRIP_DEPTH:
        return command

    tokens = tokenize(command)
    idx = 0
    while idx < len(tokens) and isinstance(tokens[idx], Assignment):
        idx += 1
    if idx >= len(tokens):
        return command

    first = tokens[idx]
    if not isinstance(first, Word):
        return command

    if first.value in SHELLS:
        return _handle_shell_c(tokens[idx:], depth)
    if first.value in WRAPPER_COMMANDS:
        return _handle_wrapper(tokens[idx:], depth)
    return command


def _handle_shell_c(tokens: Sequence[Token], depth: int) -> str:
    found_c = False
    for word in words(tokens):
        if word == "-c":
            found_c = True
        elif found_c:
            return _strip(word, depth + 1)
    return " ".join(words(tokens))


def _skip_options(args: Sequence[str], with_arg: frozenset[str]) -> int:
    start = 0
    while start < len(args) and args[start].startswith("-"):
        start += 2 if args[start] in with_arg else 1
    return start


def _command_start(wrapper: str, args: Sequence[str]) -> int:
    """Index in ``args`` where the wrapped command begins."""
    if wrapper == "sudo":
        return _skip_options(args, _SUDO_OPTIONS_WITH_ARG)
    if wrapper == "env":
        start = 0
        while start < len(args) and (args[start].startswith("-") or "=" in args[start]):
            start += 1
        return start
    if wrapper == "timeout":
        start = _skip_options(args, _TIMEOUT_OPTIONS_WITH_ARG)
        # The first non-option argument is the duration.
        return start + 1 if start < len(args) else start
    if wrapper in ("nice", "ionice"):
        return _skip_options(args, _NICE_OPTIONS_WITH_ARG)
    return _skip_options(args, frozenset())


def _handle_wrapper(tokens: Sequence[Token], depth: int) -> str:
    all_words = words(tokens)
    if not all_words:
        return ""
    wrapper, args = all_words[0], all_words[1:]
    start = _command_start(wrapper, args)
    if start >= len(args):
        return ""
    return _strip(" ".join(args[start:]), depth + 1)


def extract_options(tokens: Iterable[Token]) -> list[tuple[str, str]]:
    """Extract (option, value) pairs from a command; value may be empty."""
    options: list[tuple[str, str]] = []
    all_words = words(tokens)

    def next_value(i: int) -> str | None:
        if i + 1 < len(all_words) and not all_words[i + 1].startswith("-"):
            return all_words[i + 1]
        return None

    i = 0
    while i < len(all_words):
        word = all_words[i]
        if word.startswith("--"):
            opt, sep, val = word.partition("=")
            if sep:
                options.append((opt, val))
            else:
                value = next_value(i)
                if value is not None:
                    i += 1
                options.append((word, value or ""))
        elif word.startswith("-") and len(word) > 1:
            letters = word[1:]
            for letter in letters[:-1]:
                options.append((f"-{letter}", ""))
            value = next_value(i)
            if value is not None:
                i += 1
            options.append((f"-{letters[-1]}", value or ""))
        i += 1
    return options
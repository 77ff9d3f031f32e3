"""Analysis of GNU parallel commands that delete files."""

from __future__ import annotations

from collections.abc import Iterable

from .config import CompiledConfig
from .decision import Decision, allow, block
from .tokenizer import Token, words

_RECURSIVE_FLAGS = frozenset({"-r", "-R", "--recursive", "-rf", "-fr"})


def _is_rm(word: str) -> bool:
    return word == "rm" or word.endswith("/rm")


def _is_recursive_flag(word: str) -> bool:
    if word in _RECURSIVE_FLAGS:
        return True
    return (
        word.startswith("-")
        and not word.startswith("--")
        and ("r" in word or "R" in word)
    )


def analyze_parallel(tokens: Iterable[Token], config: CompiledConfig) -> Decision:
    """Block parallel invocations that run rm anywhere in their command."""
    all_words = words(tokens)
    if not all_words:
        return allow()

    args = all_words[1:]
    if not any(_is_rm(word) for word in args):
        return allow()
    if any(_is_recursive_flag(word) for word in args):
        return block(
            "parallel.rm_rf",
            "parallel rm -rf is dangerous - deletes files in parallel from input",
        )
    return block(
        "parallel.rm",
        "parallel rm is dangerous - deletes files in parallel from input",
    )
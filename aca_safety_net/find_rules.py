"""Analysis of find commands that delete files."""

from __future__ import annotations

from collections.abc import Iterable

from .config import CompiledConfig
from .decision import Decision, allow, block
from .tokenizer import Token, words

_EXEC_ACTIONS = frozenset({"-exec", "-execdir"})
_EXEC_TERMINATORS = frozenset({";", "+", "\\;"})
_OK_ACTIONS = frozenset({"-ok", "-okdir"})
_OK_TERMINATORS = frozenset({";", "\\;"})


def _is_rm(word: str) -> bool:
    return word == "rm" or word.endswith("/rm")


def _exec_runs_rm(all_words: list[str]) -> bool:
    in_exec = False
    has_rm = False
    for word in all_words:
        if word in _EXEC_ACTIONS:
            in_exec = True
        elif in_exec:
            if word in _EXEC_TERMINATORS:
                if has_rm:
                    return True
                in_exec = False
                has_rm = False
            elif _is_rm(word):
                has_rm = True
    return False


def _ok_runs_rm(all_words: list[str]) -> bool:
    in_ok = False
    for word in all_words:
        if word in _OK_ACTIONS:
            in_ok = True
        elif in_ok:
            if word in _OK_TERMINATORS:
                in_ok = False
            elif _is_rm(word):
                return True
    return False


def analyze_find(tokens: Iterable[Token], config: CompiledConfig) -> Decision:
    """Block find -delete and find actions that run rm."""
    all_words = words(tokens)
    if not all_words:
        return allow()
    if "-delete" in all_words:
        return block("find.delete", "find -delete permanently deletes matching files")
    if _exec_runs_rm(all_words):
        return block("find.exec_rm", "find -exec rm permanently deletes matching files")
    if _ok_runs_rm(all_words):
        return block("find.ok_rm", "find -ok rm can delete matching files (interactive)")
    return allow()
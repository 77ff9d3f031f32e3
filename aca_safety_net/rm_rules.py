"""Analysis of rm commands for dangerous deletions."""

from __future__ import annotations

import posixpath
from collections.abc import Iterable, Sequence

from .config import CompiledConfig
from .decision import Decision, allow, block
from .tokenizer import Token, words

DANGEROUS_PATHS = ("/", "/home", "/etc", "/usr", "/var", "/root", "/boot", "/sys", "/proc")


def _parse_args(args: Sequence[str]) -> tuple[bool, list[str]]:
    """Whether the arguments ask for recursion, and the paths they name."""
    recursive = False
    paths: list[str] = []
    for word in args:
        if word.startswith("-") and not word.startswith("--"):
            if "r" in word or "R" in word:
                recursive = True
        elif word == "--recursive":
            recursive = True
        elif not word.startswith("-"):
            paths.append(word)
    return recursive, paths


def _is_path_within(path: str, cwd: str, allowed_paths: Sequence[str]) -> bool:
    if posixpath.isabs(path):
        return path.startswith(cwd) or any(path.startswith(allowed) for allowed in allowed_paths)
    depth = 0
    for component in path.split("/"):
        if component == "..":
            depth -= 1
            if depth < 0:
                return False
        elif component not in (".", ""):
            depth += 1
    return True


def _check_path(path: str, config: CompiledConfig, cwd: str | None) -> Decision | None:
    if posixpath.isabs(path) or cwd is None:
        normalized = path
    else:
        normalized = posixpath.join(cwd, path)

    for dangerous in DANGEROUS_PATHS:
        if normalized == dangerous or (
            normalized.startswith(dangerous + "/") and len(normalized) <= len(dangerous) + 2
        ):
            return block("rm.dangerous_path", f"rm -rf on system path '{path}' is blocked")

    if path.startswith(".."):
        return block("rm.parent_escape", f"rm -rf with parent traversal '{path}' is blocked")

    rm_config = config.raw.rm
    if (
        rm_config.block_outside_cwd
        and cwd is not None
        and not _is_path_within(path, cwd, rm_config.allowed_paths)
    ):
        return block("rm.outside_cwd", f"rm -rf outside working directory: '{path}'")
    return None


def analyze_rm(
    tokens: Iterable[Token], config: CompiledConfig, cwd: str | None = None
) -> Decision:
    """Block recursive rm on system paths, parent escapes and paths outside cwd."""
    all_words = words(tokens)
    if not all_words:
        return allow()
    recursive, paths = _parse_args(all_words[1:])
    if not recursive:
        return allow()
    for path in paths:
        decision = _check_path(path, config, cwd)
        if decision is not None:
            return decision
    return allow()
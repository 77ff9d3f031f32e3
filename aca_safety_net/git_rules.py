"""Analysis of git commands for destructive operations."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence

from .config import CompiledConfig
from .decision import Decision, allow, block
from .tokenizer import Token, words

PROTECTED_BRANCHES = frozenset({"main", "master", "develop", "release"})

_FORCE_FLAGS = frozenset({"-f", "--force", "--force-with-lease"})
_PUSH_OPTIONS_WITH_ARG = frozenset({"-u", "--set-upstream", "-o", "--push-option"})


def _checkout(args: Sequence[str], config: CompiledConfig) -> Decision:
    if "--" in args:
        return block("git.checkout", "git checkout -- discards uncommitted changes")
    if "-f" in args or "--force" in args:
        return block(
            "git.checkout.force",
            "git checkout --force discards uncommitted changes",
        )
    return allow()


def _reset(args: Sequence[str], config: CompiledConfig) -> Decision:
    if "--hard" in args:
        return block(
            "git.reset.hard",
            "git reset --hard discards all uncommitted changes",
        )
    return allow()


def _push_target(args: Sequence[str]) -> str:
    """The branch a push names, or HEAD when none is given."""
    positional: list[str] = []
    skip_next = False
    for arg in args:
        if skip_next:
            skip_next = False
            continue
        if arg.startswith("-"):
            skip_next = arg in _PUSH_OPTIONS_WITH_ARG
            continue
        positional.append(arg)
    return positional[1] if len(positional) > 1 else "HEAD"


def _push(args: Sequence[str], config: CompiledConfig) -> Decision:
    is_force = any(
        arg in _FORCE_FLAGS or arg.startswith("--force-with-lease=") for arg in args
    )
    if not is_force:
        return allow()
    target = _push_target(args)
    if target in config.raw.git.force_push_allowed_branches:
        return allow()
    if target in PROTECTED_BRANCHES:
        return block(
            "git.push.force",
            f"force push to protected branch '{target}' is blocked",
        )
    return allow()


def _branch(args: Sequence[str], config: CompiledConfig) -> Decision:
    if "-D" in args:
        name = next((arg for arg in args if not arg.startswith("-")), None)
        suffix = f" '{name}'" if name is not None else ""
        return block(
            "git.branch.force_delete",
            f"git branch -D force-deletes branch{suffix}",
        )
    return allow()


def _stash(args: Sequence[str], config: CompiledConfig) -> Decision:
    if not args:
        return allow()
    if args[0] == "drop":
        return block(
            "git.stash.drop",
            "git stash drop permanently deletes stashed changes",
        )
    if args[0] == "clear":
        return block(
            "git.stash.clear",
            "git stash clear deletes ALL stashed changes",
        )
    return allow()


def _clean(args: Sequence[str], config: CompiledConfig) -> Decision:
    if "-f" not in args and "--force" not in args:
        return allow()
    if any(flag in args for flag in ("-d", "-x", "-X")):
        return block(
            "git.clean.force",
            "git clean -fd/-fx permanently deletes untracked files/directories",
        )
    return block("git.clean", "git clean -f permanently deletes untracked files")


def _add(args: Sequence[str], config: CompiledConfig) -> Decision:
    if not config.raw.git.block_add_sensitive:
        return allow()
    for arg in args:
        if arg.startswith("-"):
            continue
        pattern = config.is_sensitive_path(arg)
        if pattern is not None:
            return block(
                "git.add.sensitive",
                f"git add on sensitive file matching '{pattern}'",
            )
    return allow()


_SUBCOMMANDS: dict[str, Callable[[Sequence[str], CompiledConfig], Decision]] = {
    "checkout": _checkout,
    "reset": _reset,
    "push": _push,
    "branch": _branch,
    "stash": _stash,
    "clean": _clean,
    "add": _add,
}


def analyze_git(tokens: Iterable[Token], config: CompiledConfig) -> Decision:
    """Block destructive git subcommands."""
    all_words = words(tokens)
    if len(all_words) < 2:
        return allow()
    handler = _SUBCOMMANDS.get(all_words[1])
    if handler is None:
        return allow()
    return handler(all_words[2:], config)
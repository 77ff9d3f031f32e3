"""Detection of sensitive files such as secrets and credentials."""

from __future__ import annotations

from collections.abc import Iterable

from .config import CompiledConfig
from .decision import Decision, allow, block


def check_sensitive_path(path: str, config: CompiledConfig) -> Decision:
    """Block access to a path that matches a sensitive file pattern."""
    pattern = config.is_sensitive_path(path)
    if pattern is not None:
        return block(
            "secrets.sensitive_file",
            f"access to sensitive file matching '{pattern}'",
        )
    return allow()


def check_git_add_sensitive(paths: Iterable[str], config: CompiledConfig) -> Decision:
    """Block git add when any of the paths is sensitive."""
    if not config.raw.git.block_add_sensitive:
        return allow()
    for path in paths:
        pattern = config.is_sensitive_path(path)
        if pattern is not None:
            return block(
                "git.add.sensitive",
                f"git add on sensitive file matching '{pattern}'",
            )
    return allow()
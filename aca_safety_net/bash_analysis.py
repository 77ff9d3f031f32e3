"""Analysis of Bash tool invocations."""

from __future__ import annotations

from .commands import analyze_command
from .config import CompiledConfig
from .custom_rules import check_custom_rules
from .decision import Decision, block
from .hook_input import BashInput
from .sensitive import check_sensitive_path
from .splitter import split_commands
from .tokenizer import tokenize, words
from .wrappers import strip_wrappers


def _segment_words(command: str) -> list[list[str]]:
    """The words of each segment, after stripping wrapper commands."""
    return [
        words(tokenize(strip_wrappers(segment.command)))
        for segment in split_commands(command)
    ]


def _check_read_of_sensitive(command: str, config: CompiledConfig) -> Decision | None:
    for segment in _segment_words(command):
        name = next((w for w in segment if not w.startswith("-")), None)
        if name is None or not config.is_read_command(name):
            continue
        for word in segment:
            if word.startswith("-"):
                continue
            decision = check_sensitive_path(word, config)
            if decision.is_blocked():
                return decision
    return None


def _check_git_add(command: str, config: CompiledConfig) -> Decision | None:
    for segment in _segment_words(command):
        if segment[:2] != ["git", "add"]:
            continue
        for path in segment[2:]:
            if path.startswith("-"):
                continue
            if check_sensitive_path(path, config).is_blocked():
                return block("git.add.sensitive", f"git add on sensitive file: {path}")
    return None


def analyze_bash(
    bash_input: BashInput, config: CompiledConfig, cwd: str | None = None
) -> Decision:
    """Decide whether a Bash command may run."""
    command = bash_input.command

    for rule, pattern in config.deny_patterns:
        if rule.tool == "Bash" and pattern.search(command):
            return block(rule.reason, rule.reason)

    custom = check_custom_rules("Bash", command, config)
    if custom.is_blocked():
        return custom

    mentioned = config.matches_paranoid(command)
    if mentioned is not None:
        return block(
            "paranoid.sensitive_mention",
            f"command mentions sensitive pattern '{mentioned}'",
        )

    decision = _check_read_of_sensitive(command, config)
    if decision is not None:
        return decision

    decision = _check_git_add(command, config)
    if decision is not None:
        return decision

    return analyze_command(command, config, cwd)
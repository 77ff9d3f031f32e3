"""Dispatch of command segments to the built-in rules."""

from __future__ import annotations

from .config import CompiledConfig
from .decision import Decision, allow
from .find_rules import analyze_find
from .git_rules import analyze_git
from .parallel_rules import analyze_parallel
from .rm_rules import analyze_rm
from .splitter import split_commands
from .tokenizer import command_name, tokenize
from .wrappers import strip_wrappers
from .xargs_rules import analyze_xargs


def analyze_command(
    command: str, config: CompiledConfig, cwd: str | None = None
) -> Decision:
    """Run the built-in rules over each segment of a command line."""
    for segment in split_commands(command):
        tokens = tokenize(strip_wrappers(segment.command))
        name = command_name(tokens)
        if name == "git":
            decision = analyze_git(tokens, config)
        elif name == "rm":
            decision = analyze_rm(tokens, config, cwd)
        elif name == "find":
            decision = analyze_find(tokens, config)
        elif name == "xargs":
            decision = analyze_xargs(tokens, config)
        elif name == "parallel":
            decision = analyze_parallel(tokens, config)
        else:
            continue
        if decision.is_blocked():
            return decision
    return allow()
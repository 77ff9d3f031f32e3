"""Analysis of Read tool invocations."""

from __future__ import annotations

from .config import CompiledConfig
from .custom_rules import check_custom_rules
from .decision import Decision, block
from .hook_input import ReadInput
from .sensitive import check_sensitive_path


def analyze_read(read_input: ReadInput, config: CompiledConfig) -> Decision:
    """Decide whether a file may be read."""
    path = read_input.file_path

    for rule, pattern in config.deny_patterns:
        if rule.tool == "Read" and pattern.search(path):
            return block(rule.reason, rule.reason)

    custom = check_custom_rules("Read", path, config)
    if custom.is_blocked():
        return custom

    mentioned = config.matches_paranoid(path)
    if mentioned is not None:
        return block(
            "paranoid.sensitive_file",
            f"file path matches sensitive pattern '{mentioned}'",
        )

    return check_sensitive_path(path, config)
"""Analysis of Write tool invocations."""

from __future__ import annotations

from .config import CompiledConfig
from .custom_rules import check_custom_rules
from .decision import AskInfo, Decision, DecisionKind, allow, block
from .hook_input import WriteInput


def analyze_write(write_input: WriteInput, config: CompiledConfig) -> Decision:
    """Decide whether a file may be written; dependency manifests need approval."""
    path = write_input.file_path

    for rule, pattern in config.deny_patterns:
        if rule.tool == "Write" and pattern.search(path):
            return block(rule.reason, rule.reason)

    custom = check_custom_rules("Write", path, config)
    if custom.is_blocked():
        return custom

    if config.is_dependency_file(path):
        info = AskInfo("dependencies.write", f"Writing dependency file: {path}")
        suggestion = config.dependency_suggestion()
        if suggestion is not None:
            info = info.with_suggestion(suggestion)
        return Decision(DecisionKind.ASK, info)

    return allow()
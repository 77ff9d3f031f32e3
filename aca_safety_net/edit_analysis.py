"""Analysis of Edit tool invocations."""

from __future__ import annotations

from .config import CompiledConfig
from .custom_rules import check_custom_rules
from .decision import AskInfo, Decision, DecisionKind, allow, block
from .hook_input import EditInput


def analyze_edit(edit_input: EditInput, config: CompiledConfig) -> Decision:
    """Decide whether a file may be edited; dependency manifests need approval."""
    path = edit_input.file_path

    for rule, pattern in config.deny_patterns:
        if rule.tool == "Edit" and pattern.search(path):
            return block(rule.reason, rule.reason)

    custom = check_custom_rules("Edit", path, config)
    if custom.is_blocked():
        return custom

    if config.is_dependency_file(path):
        info = AskInfo("dependencies.edit", f"Editing dependency file: {path}")
        suggestion = config.dependency_suggestion()
        if suggestion is not None:
            info = info.with_suggestion(suggestion)
        return Decision(DecisionKind.ASK, info)

    return allow()
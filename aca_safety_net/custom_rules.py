"""User-defined rules that block or allow matching content."""

from __future__ import annotations

import re

from .config import CompiledConfig
from .decision import Decision, allow, block


def check_custom_rules(tool: str, content: str, config: CompiledConfig) -> Decision:
    """Apply the first matching custom rule for the tool; allow when none blocks."""
    for rule in config.raw.rules:
        if rule.tool != tool:
            continue
        try:
            pattern = re.compile(rule.pattern)
        except re.error:
            continue
        if not pattern.search(content):
            continue
        if rule.action == "allow":
            return allow()
        if rule.action == "block":
            reason = rule.reason or f"blocked by custom rule '{rule.name}'"
            return block(rule.name, reason)
    return allow()
"""Formatting of decisions as hook output."""

from __future__ import annotations

import json

from .decision import AskInfo, BlockInfo, Decision

WORKAROUND_WARNING = (
    "YOU ABSOLUTELY MUST NOT ATTEMPT TO READ THE TARGET FILE/SECRET/TOKEN VIA "
    "WORKAROUNDS. CONSULT THE USER IF YOU ARE CERTAIN THE TARGET "
    "FILE/SECRET/TOKEN NEEDS TO BE VERIFIED, ONLY AFTER EXHAUSTIVE DEBUGGING "
    "THAT RESULTS IN THIS CERTAINTY."
)


def _dumps(value: object) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _format_block_message(info: BlockInfo) -> str:
    message = f"BLOCKED: {info.reason}"
    if info.details is not None:
        message += f" ({info.details})"
    return f"{message}\n\n{WORKAROUND_WARNING}"


def _format_ask_json(info: AskInfo) -> str:
    reason = info.reason
    if info.suggestion is not None:
        reason += f"\n\nSuggestion: {info.suggestion}"
    return _dumps(
        {
            "hookSpecificOutput": {
                "hookEventName": "PreToolUse",
                "permissionDecision": "ask",
                "permissionDecisionReason": reason,
            }
        }
    )


def format_response(decision: Decision) -> str | None:
    """Text for the hook's output: a message for blocks, JSON for asks."""
    if (info := decision.block_info()) is not None:
        return _format_block_message(info)
    if (ask_info := decision.ask_info()) is not None:
        return _format_ask_json(ask_info)
    return None


def format_json_response(decision: Decision) -> str | None:
    """A decision as JSON, or None when it allows."""
    if (info := decision.block_info()) is not None:
        payload: dict[str, object] = {
            "blocked": True,
            "reason": info.reason,
            "rule": info.rule,
        }
        if info.details is not None:
            payload["details"] = info.details
        return _dumps(payload)
    if (ask_info := decision.ask_info()) is not None:
        return _format_ask_json(ask_info)
    return None
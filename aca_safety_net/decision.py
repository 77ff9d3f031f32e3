"""Outcomes of analysing a tool invocation."""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace


class DecisionKind(enum.Enum):
    """What the hook tells the caller to do with a tool invocation."""

    ALLOW = "allow"
    BLOCK = "block"
    ASK = "ask"


@dataclass(frozen=True)
class BlockInfo:
    """Why a tool invocation was blocked."""

    rule: str
    reason: str
    details: str | None = None

    def with_details(self, details: str) -> BlockInfo:
        """Return a copy carrying the given details."""
        return replace(self, details=details)


@dataclass(frozen=True)
class AskInfo:
    """Why a tool invocation needs the user's approval."""

    rule: str
    reason: str
    suggestion: str | None = None

    def with_suggestion(self, suggestion: str) -> AskInfo:
        """Return a copy carrying the given suggestion."""
        return replace(self, suggestion=suggestion)


@dataclass(frozen=True)
class Decision:
    """The result of analysing a tool invocation."""

    kind: DecisionKind
    info: BlockInfo | AskInfo | None = None

    def __post_init__(self) -> None:
        expected = {
            DecisionKind.ALLOW: type(None),
            DecisionKind.BLOCK: BlockInfo,
            DecisionKind.ASK: AskInfo,
        }[self.kind]
        if not isinstance(self.info, expected):
            raise TypeError(
                f"{self.kind.name} decision needs {expected.__name__}, "
                f"got {type(self.info).__name__}"
            )

    def is_blocked(self) -> bool:
        return self.kind is DecisionKind.BLOCK

    def is_ask(self) -> bool:
        return self.kind is DecisionKind.ASK

    def block_info(self) -> BlockInfo | None:
        return self.info if isinstance(self.info, BlockInfo) else None

    def ask_info(self) -> AskInfo | None:
        return self.info if isinstance(self.info, AskInfo) else None


def allow() -> Decision:
    """Create an allow decision."""
    return Decision(DecisionKind.ALLOW)


def block(rule: str, reason: str) -> Decision:
    """Create a block decision."""
    return Decision(DecisionKind.BLOCK, BlockInfo(rule, reason))


def ask(rule: str, reason: str) -> Decision:
    """Create a decision that requires user approval."""
    return Decision(DecisionKind.ASK, AskInfo(rule, reason))
"""Audit logging of hook decisions."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from os import PathLike
from typing import Any

from .decision import Decision
from .hook_input import HookInput

SUMMARY_MAX_LEN = 200


def _truncate(text: str, max_len: int) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class AuditEntry:
    """One audit log record."""

    tool: str
    blocked: bool
    summary: str
    asked: bool = False
    rule: str | None = None
    reason: str | None = None
    session_id: str | None = None
    timestamp: datetime = field(default_factory=_now)

    @classmethod
    def from_decision(cls, hook_input: HookInput, decision: Decision) -> AuditEntry:
        """Build an entry for the decision taken on a hook input."""
        info = decision.block_info() or decision.ask_info()
        command = hook_input.command()
        if command is not None:
            summary = _truncate(command, SUMMARY_MAX_LEN)
        else:
            summary = hook_input.file_path() or "<unknown>"
        return cls(
            tool=hook_input.tool_name,
            blocked=decision.is_blocked(),
            asked=decision.is_ask(),
            rule=info.rule if info else None,
            reason=info.reason if info else None,
            summary=summary,
            session_id=hook_input.session_id,
        )

    def to_json(self) -> str:
        """The entry as one line of compact JSON."""
        record: dict[str, Any] = {
            "timestamp": self.timestamp.isoformat().replace("+00:00", "Z")
        }
        if self.session_id is not None:
            record["session_id"] = self.session_id
        record["tool"] = self.tool
        record["blocked"] = self.blocked
        if self.asked:
            record["asked"] = True
        if self.rule is not None:
            record["rule"] = self.rule
        if self.reason is not None:
            record["reason"] = self.reason
        record["summary"] = self.summary
        return json.dumps(record, separators=(",", ":"), ensure_ascii=False)


class AuditLogger:
    """Appends audit entries to a file, one JSON object per line."""

    def __init__(self, path: str | PathLike[str]) -> None:
        self._file = open(path, "a", encoding="utf-8")

    def log(self, entry: AuditEntry) -> None:
        self._file.write(entry.to_json() + "\n")
        self._file.flush()

    def log_decision(self, hook_input: HookInput, decision: Decision) -> None:
        self.log(AuditEntry.from_decision(hook_input, decision))

    def close(self) -> None:
        self._file.close()

    def __enter__(self) -> AuditLogger:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
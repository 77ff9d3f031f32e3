"""Entry point of the PreToolUse hook: reads JSON on stdin, exits with a verdict."""

from __future__ import annotations

import sys
from collections.abc import Sequence

from .audit import AuditLogger
from .bash_analysis import analyze_bash
from .config import CompiledConfig, Config, ConfigError
from .decision import Decision, allow
from .edit_analysis import analyze_edit
from .hook_input import HookInput, InputError, parse_hook_input
from .read_analysis import analyze_read
from .response import format_response
from .write_analysis import analyze_write

EXIT_OK = 0
EXIT_BLOCKED = 2


def decide(hook_input: HookInput, config: CompiledConfig) -> Decision:
    """Analyse a hook input according to its tool; other tools pass through."""
    tool = hook_input.tool_name
    if tool == "Bash":
        bash_input = hook_input.as_bash()
        if bash_input is not None:
            return analyze_bash(bash_input, config, hook_input.cwd)
    elif tool == "Read":
        read_input = hook_input.as_read()
        if read_input is not None:
            return analyze_read(read_input, config)
    elif tool == "Edit":
        edit_input = hook_input.as_edit()
        if edit_input is not None:
            return analyze_edit(edit_input, config)
    elif tool == "Write":
        write_input = hook_input.as_write()
        if write_input is not None:
            return analyze_write(write_input, config)
    return allow()


def _audit(config: CompiledConfig, hook_input: HookInput, decision: Decision) -> None:
    audit = config.raw.audit
    if not audit.enabled or audit.path is None:
        return
    try:
        with AuditLogger(audit.path) as logger:
            logger.log_decision(hook_input, decision)
    except OSError:
        pass


def main(argv: Sequence[str] | None = None) -> int:
    """Run the hook; any failure before a decision lets the tool proceed."""
    try:
        text = sys.stdin.read()
    except (OSError, UnicodeDecodeError):
        return EXIT_OK

    try:
        hook_input = parse_hook_input(text)
    except InputError:
        return EXIT_OK

    try:
        config = Config.load(hook_input.cwd)
    except ConfigError:
        return EXIT_OK

    try:
        compiled = config.compile()
    except ConfigError as exc:
        print(f"Config error: {exc}", file=sys.stderr)
        return EXIT_OK

    decision = decide(hook_input, compiled)
    _audit(compiled, hook_input, decision)

    message = format_response(decision)
    if decision.is_blocked():
        if message is not None:
            print(message, file=sys.stderr)
        return EXIT_BLOCKED
    if decision.is_ask() and message is not None:
        sys.stdout.write(message + "\n")
        sys.stdout.flush()
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
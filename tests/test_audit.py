import json

from aca_safety_net.audit import AuditEntry, AuditLogger
from aca_safety_net.decision import allow, ask, block
from aca_safety_net.hook_input import parse_hook_input


def test_audit_entry_allow():
    hook_input = parse_hook_input('{"tool_name":"Bash","tool_input":{"command":"ls -la"}}')
    entry = AuditEntry.from_decision(hook_input, allow())
    assert entry.tool == "Bash"
    assert entry.blocked is False
    assert entry.rule is None
    assert entry.summary == "ls -la"


def test_audit_entry_block():
    hook_input = parse_hook_input('{"tool_name":"Read","tool_input":{"file_path":".env"}}')
    entry = AuditEntry.from_decision(hook_input, block("test.rule", "test reason"))
    assert entry.tool == "Read"
    assert entry.blocked is True
    assert entry.rule == "test.rule"
    assert entry.reason == "test reason"
    assert entry.summary == ".env"


def test_audit_entry_ask():
    hook_input = parse_hook_input(
        '{"tool_name":"Edit","tool_input":{"file_path":"Cargo.toml"},"session_id":"abc"}'
    )
    entry = AuditEntry.from_decision(hook_input, ask("dependencies.edit", "why"))
    record = json.loads(entry.to_json())
    assert record["asked"] is True
    assert record["blocked"] is False
    assert record["session_id"] == "abc"
    assert record["rule"] == "dependencies.edit"


def test_unknown_summary_and_omitted_fields():
    hook_input = parse_hook_input('{"tool_name":"Glob","tool_input":{}}')
    record = json.loads(AuditEntry.from_decision(hook_input, allow()).to_json())
    assert record["summary"] == "<unknown>"
    assert "asked" not in record
    assert "rule" not in record
    assert "session_id" not in record
    assert record["timestamp"].endswith("Z")


def test_audit_logger(tmp_path):
    path = tmp_path / "audit.log"
    hook_input = parse_hook_input('{"tool_name":"Bash","tool_input":{"command":"pwd"}}')
    with AuditLogger(path) as logger:
        logger.log_decision(hook_input, allow())
        logger.log_decision(hook_input, block("r", "x"))
    content = path.read_text(encoding="utf-8")
    assert '"tool":"Bash"' in content
    assert '"blocked":false' in content
    lines = content.splitlines()
    assert [json.loads(line)["blocked"] for line in lines] == [False, True]


def test_truncate_summary():
    long_command = "a" * 300
    hook_input = parse_hook_input(
        json.dumps({"tool_name": "Bash", "tool_input": {"command": long_command}})
    )
    entry = AuditEntry.from_decision(hook_input, allow())
    assert len(entry.summary) <= 200
    assert entry.summary.endswith("...")
    assert entry.summary == "a" * 197 + "..."
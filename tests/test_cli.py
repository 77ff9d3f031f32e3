import io
import json

import pytest

from aca_safety_net.cli import decide, main
from aca_safety_net.config import Config
from aca_safety_net.decision import DecisionKind
from aca_safety_net.hook_input import parse_hook_input

FULL_CONFIG = r"""
sensitive_files = [
    '\.env\b',
    '\.envrc\b',
    'credentials',
    'secrets',
    '\.netrc\b',
    '\.npmrc\b',
    '\.pypirc\b',
    '\.pem\b',
    '\.key\b',
    'id_rsa',
    'id_ed25519',
    'id_ecdsa',
    '\.git-credentials',
    '\.kube/config',
    'kubeconfig',
    '\.aws/credentials',
    '\.config/gcloud/',
    '\.config/gh/hosts\.yml',
    '_history\b',
    '\.bash_history',
    '\.zsh_history',
]

read_commands = '\b(cat|head|tail|less|more|grep|rg|ag|sed|awk|strings|xxd|hexdump|bat|view)\b'

[[deny]]
tool = "Bash"
pattern = '^\s*printenv'
reason = "Exposes environment variables"

[[deny]]
tool = "Bash"
pattern = '^\s*set\s*$'
reason = "Exposes shell variables"

[[deny]]
tool = "Bash"
pattern = '^\s*declare\s+-x'
reason = "Exposes exported variables"

[[deny]]
tool = "Bash"
pattern = '^\s*history\b'
reason = "Exposes command history"
"""


def _bash(command, **extra):
    return json.dumps({"tool_name": "Bash", "tool_input": {"command": command}, **extra})


def _read(path):
    return json.dumps({"tool_name": "Read", "tool_input": {"file_path": path}})


def _edit(path):
    return json.dumps(
        {
            "tool_name": "Edit",
            "tool_input": {"file_path": path, "old_string": "old", "new_string": "new"},
        }
    )


@pytest.fixture
def use_config(tmp_path, monkeypatch):
    def apply(content):
        path = tmp_path / "security-hook.toml"
        path.write_text(content, encoding="utf-8")
        monkeypatch.setenv("ACO_SAFETY_NET_CONFIG", str(path))
        return path

    return apply


@pytest.fixture
def no_config(tmp_path, monkeypatch):
    monkeypatch.setenv("ACO_SAFETY_NET_CONFIG", str(tmp_path / "nonexistent.toml"))


@pytest.fixture
def run(monkeypatch, capsys):
    def invoke(stdin_text):
        monkeypatch.setattr("sys.stdin", io.StringIO(stdin_text))
        code = main([])
        captured = capsys.readouterr()
        return code, captured.out, captured.err

    return invoke


@pytest.mark.parametrize(
    "payload",
    [
        _bash("ls -la"),
        _bash("git status"),
        _read("/home/user/src/main.rs"),
        _read("/home/user/Cargo.toml"),
        json.dumps({"tool_name": "Write", "tool_input": {"file_path": "/tmp/test"}}),
        "not valid json",
        "",
    ],
)
def test_full_config_allows(use_config, run, payload):
    use_config(FULL_CONFIG)
    code, out, err = run(payload)
    assert code == 0
    assert out == ""


@pytest.mark.parametrize(
    "payload",
    [
        _bash("cat .env"),
        _bash("cat .env.local"),
        _bash("cat .envrc"),
        _bash("grep password .env"),
        _bash("cat ~/.ssh/id_rsa"),
        _bash("cat server.pem"),
        _bash("cat ~/.aws/credentials"),
        _read("/home/user/.env"),
        _read("/home/user/.env.local"),
        _read("/home/user/.ssh/id_rsa"),
        _read("/home/user/.ssh/id_ed25519"),
        _read("/home/user/certs/server.pem"),
        _read("/home/user/.aws/credentials"),
        _read("/home/user/.netrc"),
        _read("/home/user/.npmrc"),
        _read("/home/user/.bash_history"),
        _read("/home/user/.kube/config"),
        _read("/project/.envrc"),
        _read("/home/user/.ssh/id_ecdsa"),
        _read("/home/user/.config/gcloud/credentials.db"),
        _read("/home/user/.config/gh/hosts.yml"),
        _bash("printenv"),
        _bash("set"),
        _bash("declare -x"),
        _bash("history"),
        _bash("history 50"),
        _bash("git reset --hard HEAD~1"),
        _bash("git push --force origin main"),
        _bash("git push -f origin master"),
        _bash("git checkout -- src/main.rs"),
        _bash("git branch -D feature"),
        _bash("git stash drop"),
        _bash("git add .env"),
        _bash("rm -rf /"),
        _bash("rm -rf /home"),
        _bash("rm -rf ../"),
        _bash("find . -name '*.tmp' -delete"),
        _bash("find . -name '*.log' -exec rm {} \\;"),
        _bash("find . | xargs rm"),
        _bash("ls | parallel rm"),
        _bash("sudo cat .env"),
        _bash("sudo rm -rf /"),
        _bash("bash -c 'cat .env'"),
        _bash("ls && cat .env"),
        _bash("echo test | cat .env"),
    ],
)
def test_full_config_blocks(use_config, run, payload):
    use_config(FULL_CONFIG)
    code, out, err = run(payload)
    assert code == 2
    assert "BLOCKED" in err


def test_allow_safe_command_prints_nothing(use_config, run):
    use_config("sensitive_files = ['\\.env\\b']\nread_commands = '\\b(cat|head)\\b'\n")
    assert run(_bash("ls -la")) == (0, "", "")


@pytest.mark.parametrize(
    "content, payload",
    [
        ("sensitive_files = ['\\.env\\b']\nread_commands = '\\b(cat|head)\\b'\n", _bash("cat .env")),
        ("sensitive_files = ['\\.env\\b']\n", _read(".env")),
        (
            "sensitive_files = []\n\n[[deny]]\ntool = \"Bash\"\npattern = '^printenv'\n"
            "reason = \"Exposes environment variables\"\n",
            _bash("printenv PATH"),
        ),
        ("sensitive_files = []\n\n[git]\nblock_destructive = true\n", _bash("git reset --hard HEAD~1")),
        (
            "sensitive_files = []\n\n[rm]\nblock_outside_cwd = true\n",
            _bash("rm -rf /", cwd="/home/user/project"),
        ),
        ("sensitive_files = []", _bash("find . -name '*.tmp' -delete")),
        ("sensitive_files = []", _bash("find . -name '*.log' | xargs rm")),
        ("sensitive_files = ['\\.env\\b']\n\n[paranoid]\nenabled = true\n", _bash("ls .env")),
        (
            "sensitive_files = []\n\n[git]\nblock_destructive = true\n"
            "force_push_allowed_branches = []\n",
            _bash("git push -f origin main"),
        ),
        (
            "sensitive_files = ['\\.env\\b']\n\n[git]\nblock_add_sensitive = true\n",
            _bash("git add .env"),
        ),
        (
            "sensitive_files = ['\\.env\\b']\nread_commands = '\\b(cat)\\b'\n",
            _bash("echo hello && cat .env"),
        ),
        ("sensitive_files = ['\\.env\\b']\nread_commands = '\\b(cat)\\b'\n", _bash("sudo cat .env")),
        ("sensitive_files = ['my-custom-secret']\n", _bash("cat .env")),
        ("sensitive_files = ['my-custom-secret']\n", _bash("cat my-custom-secret")),
    ],
)
def test_integration_blocks(use_config, run, content, payload):
    use_config(content)
    code, _, err = run(payload)
    assert code == 2
    assert err.startswith("BLOCKED")


@pytest.mark.parametrize(
    "content, payload",
    [
        (
            "sensitive_files = []\n\n[rm]\nblock_outside_cwd = true\n",
            _bash("rm -rf build/", cwd="/home/user/project"),
        ),
        ("sensitive_files = ['\\.env\\b']", "not valid json"),
        (
            "sensitive_files = []\n\n[git]\nblock_destructive = true\n"
            "force_push_allowed_branches = []\n",
            _bash("git push -f origin feature/my-branch"),
        ),
        (
            "sensitive_files = ['\\.env\\b']",
            json.dumps(
                {"tool_name": "Write", "tool_input": {"file_path": ".env", "content": "test"}}
            ),
        ),
        ("sensitive_files = ['\\.env\\b']", _read("src/main.rs")),
    ],
)
def test_integration_allows(use_config, run, content, payload):
    use_config(content)
    code, out, err = run(payload)
    assert code == 0
    assert err == ""


def test_no_config_uses_defaults(no_config, run):
    code, _, err = run(_bash("cat .env"))
    assert code == 2
    assert "BLOCKED" in err


def test_no_config_allows_safe(no_config, run):
    assert run(_bash("ls -la"))[0] == 0


def test_no_config_blocks_history(no_config, run):
    code, _, err = run(_bash("history"))
    assert code == 2
    assert "BLOCKED" in err


def test_no_config_blocks_kube_config(no_config, run):
    code, _, err = run(_read("/home/user/.kube/config"))
    assert code == 2
    assert "BLOCKED" in err


def test_edit_cargo_toml_asks(use_config, run):
    use_config("sensitive_files = []")
    code, out, _ = run(_edit("Cargo.toml"))
    assert code == 0
    assert '"permissionDecision":"ask"' in out
    assert "cargo add" in out
    assert out.endswith("\n")


def test_write_package_json_asks(use_config, run):
    use_config("sensitive_files = []")
    payload = json.dumps(
        {"tool_name": "Write", "tool_input": {"file_path": "package.json", "content": "{}"}}
    )
    code, out, _ = run(payload)
    assert code == 0
    assert '"permissionDecision":"ask"' in out


def test_edit_normal_file_allowed(use_config, run):
    use_config("sensitive_files = []")
    assert run(_edit("src/main.rs")) == (0, "", "")


def test_edit_deps_disabled_allows(use_config, run):
    use_config("sensitive_files = []\n\n[dependencies]\nenabled = false\n")
    assert run(_edit("Cargo.toml")) == (0, "", "")


def test_edit_pyproject_asks(use_config, run):
    use_config("sensitive_files = []")
    code, out, _ = run(_edit("/home/user/project/pyproject.toml"))
    assert code == 0
    assert '"permissionDecision":"ask"' in out
    assert "uv add" in out


def test_invalid_toml_fails_open(use_config, run):
    use_config("this is = = not toml")
    assert run(_bash("cat .env")) == (0, "", "")


def test_invalid_regex_reports_and_fails_open(use_config, run):
    use_config("sensitive_files = ['[invalid']")
    code, out, err = run(_bash("cat .env"))
    assert code == 0
    assert err.startswith("Config error:")


def test_audit_log_written(use_config, run, tmp_path):
    log_path = tmp_path / "audit.log"
    use_config(f"[audit]\nenabled = true\npath = '{log_path}'\n")
    code, _, _ = run(_bash("cat .env"))
    assert code == 2
    record = json.loads(log_path.read_text(encoding="utf-8").strip())
    assert record["tool"] == "Bash"
    assert record["blocked"] is True
    assert record["summary"] == "cat .env"


def test_decide_dispatches_by_tool():
    config = Config().compile()
    assert decide(parse_hook_input(_bash("cat .env")), config).is_blocked()
    assert decide(parse_hook_input(_read(".env")), config).is_blocked()
    assert decide(parse_hook_input(_edit("Cargo.toml")), config).is_ask()
    other = parse_hook_input(json.dumps({"tool_name": "Glob", "tool_input": {"pattern": "*"}}))
    assert decide(other, config).kind is DecisionKind.ALLOW


def test_decide_allows_malformed_tool_input():
    config = Config().compile()
    hook_input = parse_hook_input(json.dumps({"tool_name": "Bash", "tool_input": {}}))
    assert decide(hook_input, config).kind is DecisionKind.ALLOW
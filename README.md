# aca-safety-net

A PreToolUse hook for coding assistants. It reads one tool call as JSON on
standard input and decides whether to allow it, block it, or ask the user.
It looks at the `Bash`, `Read`, `Edit` and `Write` tools; calls of any other
tool pass through.

It blocks:

- reading files that usually hold secrets (`.env`, `.envrc`, SSH keys,
  `.pem` and `.key` files, `.netrc`, `.npmrc`, `.pypirc`, kube and cloud
  credentials, shell history and the like), through the Read tool or through
  read commands such as `cat`, `grep`, `head` or `sed` in Bash;
- commands that dump the environment (`printenv`, `set`, `export`,
  `declare -x`, `history`, `/proc/*/environ`, `ps auxe`, `docker inspect`,
  `docker exec ... env`, ...);
- destructive git operations: `reset --hard`, `checkout --`,
  `checkout -f`, `branch -D`, `stash drop`, `stash clear`, `clean -f`,
  force pushes (`-f`, `--force`, `--force-with-lease`) to `main`, `master`,
  `develop` or `release`, and `git add` of sensitive files;
- recursive `rm` on system paths (`/`, `/home`, `/etc`, `/usr`, ...), on
  paths starting with `..`, and on paths outside the working directory other
  than the allowed ones; and deletions through `find -delete`,
  `find -exec rm`, `find -ok rm`, `xargs rm` and `parallel rm`.

Wrappers such as `sudo`, `doas`, `env`, `timeout`, `nice`, `nohup` and
`bash -c` are stripped, and chains joined by `&&`, `||`, `|`, `;` and `&` are
checked segment by segment, with quotes and escapes respected. Edits and
writes of dependency manifests (`Cargo.toml`, `pyproject.toml`,
`package.json`, `requirements.txt`, `Gemfile`, `go.mod`, `pom.xml`,
`build.gradle`, `composer.json`, `Package.swift`) ask the user for approval
and suggest using the package manager instead.

## Installation

```
pip install .
```

## Use as a hook

Register the `aca-safety-net` command as a PreToolUse hook. It can also be
run by hand:

```
echo '{"tool_name":"Bash","tool_input":{"command":"cat .env"}}' | aca-safety-net
```

The input holds `tool_name` and `tool_input`, and may hold `cwd` (used for
the `rm` checks and to find the project configuration) and `session_id`
(written to the audit log).

Exit codes:

- `0`: allowed. For an "ask" decision a JSON object with
  `hookSpecificOutput.permissionDecision` set to `"ask"` is printed to
  standard output.
- `2`: blocked. A message starting with `BLOCKED:` is printed to standard
  error.

Unreadable input, invalid JSON and an unreadable or malformed configuration
file fail open (exit code `0`). An invalid regular expression in the
configuration also fails open, after printing `Config error: ...` to
standard error.

## Configuration

Built-in defaults always apply. They are extended by a user file at
`~/.config/aca-safety-net/config.toml` (or the path in the
`ACO_SAFETY_NET_CONFIG` environment variable) and then by a project file
`.security-hook.toml` in the working directory given in the hook input.
Lists are appended to; `read_commands`, the audit path and the dependency
suggestion are replaced; `paranoid.enabled` and `audit.enabled` can only be
switched on, and `dependencies.enabled` only switched off.

```toml
sensitive_files = ['my-custom-secret']
read_commands = '\b(cat|head|tail|grep)\b'

[[deny]]
tool = "Bash"
pattern = '^\s*printenv'
reason = "Exposes environment variables"

[[rules]]
name = "block_curl_upload"
tool = "Bash"
pattern = 'curl.*-d\s+@'
action = "block"
reason = "curl file upload blocked"

[paranoid]
enabled = true
extra_patterns = ['secret']

[git]
block_add_sensitive = true
force_push_allowed_branches = ["feature-test"]

[rm]
block_outside_cwd = true
allowed_paths = ["/tmp", "/var/tmp"]

[audit]
enabled = true
path = "/tmp/aca-safety-net.log"

[dependencies]
enabled = false
```

- `deny` rules match a regular expression against the Bash command or the
  file path of the named tool and block with the given reason.
- `rules` are custom rules; among them the first one that matches decides.
  `action = "block"` (the default) blocks; `action = "allow"` stops later
  custom rules from being checked, while the built-in checks still run.
- In paranoid mode any Bash command or Read path that mentions a sensitive
  pattern, or one of `extra_patterns`, is blocked, whatever the command.
- `git.block_destructive` is accepted but does not switch the git checks
  off; they always run.

With auditing on, every decision is appended to the log file as one JSON
line holding the timestamp, the session id when given, the tool, whether it
was blocked, whether the user was asked, the rule, the reason and a summary
of the command (cut to 200 characters) or path.

## Use from Python

```python
from aca_safety_net.cli import decide
from aca_safety_net.config import Config
from aca_safety_net.hook_input import parse_hook_input
from aca_safety_net.response import format_response

hook_input = parse_hook_input('{"tool_name":"Bash","tool_input":{"command":"git reset --hard"}}')
config = Config.load(None).compile()
decision = decide(hook_input, config)
print(decision.is_blocked())
print(format_response(decision))
```

The pieces can also be used on their own: `tokenizer.tokenize`,
`splitter.split_commands` and `wrappers.strip_wrappers` for shell parsing,
and `analyze_bash`, `analyze_read`, `analyze_edit` and `analyze_write` in
the `*_analysis` modules for single tools.

## What it does not do

The checks are pattern-based and look at the text of the command; nothing
is executed and no path is resolved on disk. Commands other than `git`,
`rm`, `find`, `xargs` and `parallel` get no built-in destructive-operation
checks beyond the deny rules and sensitive-file checks; cloud and hosting
command-line tools are not analysed.
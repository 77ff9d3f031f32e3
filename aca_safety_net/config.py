"""Configuration loading, merging and pattern compilation."""

from __future__ import annotations

import os
import re
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

CONFIG_ENV_VAR = "ACO_SAFETY_NET_CONFIG"
PROJECT_CONFIG_NAME = ".security-hook.toml"
USER_CONFIG_RELATIVE = Path(".config") / "aca-safety-net" / "config.toml"

DEFAULT_SENSITIVE_FILES: tuple[str, ...] = (
    # Environment files
    r"\.env\b",
    r"\.envrc\b",
    # Credentials
    r"credentials",
    r"secrets",
    r"\.netrc\b",
    r"\.npmrc\b",
    r"\.pypirc\b",
    # Keys and certificates
    r"\.pem\b",
    r"\.key\b",
    r"id_rsa",
    r"id_ed25519",
    r"id_ecdsa",
    r"\.git-credentials",
    # Cloud configuration
    r"\.kube/config",
    r"kubeconfig",
    r"\.aws/credentials",
    r"\.config/gcloud/",
    r"\.config/gh/hosts\.yml",
    # History files
    r"_history\b",
    r"\.bash_history",
    r"\.zsh_history",
)

DEFAULT_READ_COMMANDS: tuple[str, ...] = (
    "cat", "head", "tail", "less", "more", "grep", "rg", "ag", "sed", "awk",
    "strings", "xxd", "hexdump", "bat", "view",
)

DEFAULT_READ_COMMANDS_PATTERN = r"\b(" + "|".join(DEFAULT_READ_COMMANDS) + r")\b"

DEFAULT_DENY_RULES: tuple[tuple[str, str, str], ...] = (
    # Environment exposure
    ("Bash", r"^\s*printenv", "Exposes environment variables"),
    ("Bash", r"^\s*set\s*$", "Exposes shell variables"),
    ("Bash", r"^\s*declare\s+-x", "Exposes exported variables"),
    ("Bash", r"^\s*export\s*$", "Exposes exported variables"),
    ("Bash", r"/proc/.*/environ", "Exposes process environment"),
    ("Bash", r"\bps\b.*(-E|auxe)", "Exposes process environment"),
    # History exposure
    ("Bash", r"^\s*history\b", "Exposes command history"),
    # Container environment
    ("Bash", r"\b(docker|podman)\s+(exec|run)\b.*\benv\b", "Exposes container environment"),
    ("Bash", r"\b(docker|podman)\s+inspect\b", "Exposes container configuration"),
    (
        "Bash",
        r"\b(docker-compose|docker\s+compose)\s+exec\b.*\benv\b",
        "Exposes container environment",
    ),
)

DEFAULT_DEPENDENCY_PATTERNS: tuple[str, ...] = (
    r"(^|/)Cargo\.toml$",
    r"(^|/)pyproject\.toml$",
    r"(^|/)package\.json$",
    r"(^|/)requirements\.txt$",
    r"(^|/)Gemfile$",
    r"(^|/)go\.mod$",
    r"(^|/)pom\.xml$",
    r"(^|/)build\.gradle(\.kts)?$",
    r"(^|/)composer\.json$",
    r"(^|/)Package\.swift$",
)

DEFAULT_DEPENDENCY_SUGGESTION = (
    "Use package manager CLI (cargo add, uv add, npm install, etc.) "
    "instead of editing directly"
)


class ConfigError(Exception):
    """Raised when configuration cannot be read, parsed or compiled."""

    def __init__(self, message: str, pattern: str | None = None) -> None:
        super().__init__(message)
        self.pattern = pattern


class _Table:
    """Typed access to a parsed TOML table."""

    def __init__(self, data: Any, where: str) -> None:
        if not isinstance(data, dict):
            raise ConfigError(f"failed to parse TOML: {where} must be a table")
        self._data = data
        self._where = where

    def _name(self, key: str) -> str:
        return f"{self._where}.{key}" if self._where else key

    def _invalid(self, key: str, kind: str) -> ConfigError:
        return ConfigError(f"failed to parse TOML: {self._name(key)} must be {kind}")

    def has(self, key: str) -> bool:
        return key in self._data

    def require_str(self, key: str) -> str:
        if key not in self._data:
            raise ConfigError(f"failed to parse TOML: missing field `{key}` in {self._where}")
        return self.str(key, None)  # type: ignore[return-value]

    def str(self, key: str, default: str | None) -> str | None:
        if key not in self._data:
            return default
        value = self._data[key]
        if not isinstance(value, str):
            raise self._invalid(key, "a string")
        return value

    def bool(self, key: str, default: bool) -> bool:
        if key not in self._data:
            return default
        value = self._data[key]
        if not isinstance(value, bool):
            raise self._invalid(key, "a boolean")
        return value

    def str_list(self, key: str, default: list[str]) -> list[str]:
        if key not in self._data:
            return default
        value = self._data[key]
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise self._invalid(key, "an array of strings")
        return list(value)

    def table(self, key: str) -> _Table:
        return _Table(self._data.get(key, {}), self._name(key))

    def tables(self, key: str) -> list[_Table]:
        value = self._data.get(key, [])
        if not isinstance(value, list):
            raise self._invalid(key, "an array of tables")
        return [_Table(item, f"{self._name(key)}[{i}]") for i, item in enumerate(value)]


@dataclass
class DenyRule:
    """An explicit deny rule for one tool."""

    tool: str
    pattern: str
    reason: str

    @classmethod
    def _from_table(cls, table: _Table) -> DenyRule:
        return cls(
            tool=table.require_str("tool"),
            pattern=table.require_str("pattern"),
            reason=table.require_str("reason"),
        )


@dataclass
class CustomRule:
    """A user-defined rule that blocks or allows matching content."""

    name: str
    tool: str
    pattern: str
    action: str = "block"
    reason: str | None = None

    @classmethod
    def _from_table(cls, table: _Table) -> CustomRule:
        return cls(
            name=table.require_str("name"),
            tool=table.require_str("tool"),
            pattern=table.require_str("pattern"),
            action=table.str("action", "block") or "block",
            reason=table.str("reason", None),
        )


@dataclass
class ParanoidConfig:
    """Paranoid mode: block any mention of a sensitive pattern."""

    enabled: bool = False
    extra_patterns: list[str] = field(default_factory=list)

    @classmethod
    def _from_table(cls, table: _Table) -> ParanoidConfig:
        default = cls()
        return cls(
            enabled=table.bool("enabled", default.enabled),
            extra_patterns=table.str_list("extra_patterns", default.extra_patterns),
        )


@dataclass
class GitConfig:
    """Git-specific settings."""

    block_destructive: bool = True
    block_add_sensitive: bool = True
    force_push_allowed_branches: list[str] = field(default_factory=list)

    @classmethod
    def _from_table(cls, table: _Table) -> GitConfig:
        default = cls()
        return cls(
            block_destructive=table.bool("block_destructive", default.block_destructive),
            block_add_sensitive=table.bool("block_add_sensitive", default.block_add_sensitive),
            force_push_allowed_branches=table.str_list(
                "force_push_allowed_branches", default.force_push_allowed_branches
            ),
        )


@dataclass
class RmConfig:
    """rm-specific settings."""

    block_outside_cwd: bool = True
    allowed_paths: list[str] = field(default_factory=lambda: ["/tmp", "/var/tmp"])

    @classmethod
    def _from_table(cls, table: _Table) -> RmConfig:
        default = cls()
        return cls(
            block_outside_cwd=table.bool("block_outside_cwd", default.block_outside_cwd),
            allowed_paths=table.str_list("allowed_paths", default.allowed_paths),
        )


@dataclass
class AuditConfig:
    """Audit logging settings."""

    enabled: bool = False
    path: str | None = None

    @classmethod
    def _from_table(cls, table: _Table) -> AuditConfig:
        return cls(enabled=table.bool("enabled", False), path=table.str("path", None))


@dataclass
class DependencyConfig:
    """Protection of dependency manifests: edits need the user's approval."""

    enabled: bool = True
    patterns: list[str] = field(default_factory=lambda: list(DEFAULT_DEPENDENCY_PATTERNS))
    suggestion: str | None = DEFAULT_DEPENDENCY_SUGGESTION

    @classmethod
    def _from_table(cls, table: _Table) -> DependencyConfig:
        default = cls()
        return cls(
            enabled=table.bool("enabled", default.enabled),
            patterns=table.str_list("patterns", default.patterns),
            suggestion=table.str("suggestion", default.suggestion),
        )


def _default_deny() -> list[DenyRule]:
    return [DenyRule(tool, pattern, reason) for tool, pattern, reason in DEFAULT_DENY_RULES]


def _compile_pattern(pattern: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise ConfigError(f"invalid regex pattern '{pattern}': {exc}", pattern=pattern) from exc


def user_config_path() -> Path | None:
    """Path of the user-level config; the environment variable overrides it."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override is not None:
        return Path(override) if override else None
    try:
        return Path.home() / USER_CONFIG_RELATIVE
    except RuntimeError:
        return None


def _load_file(path: Path) -> Config | None:
    if not path.exists():
        return None
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"failed to read config file: {exc}") from exc
    return Config.from_toml(text)


@dataclass
class Config:
    """The full configuration of the hook."""

    sensitive_files: list[str] = field(default_factory=lambda: list(DEFAULT_SENSITIVE_FILES))
    read_commands: str | None = DEFAULT_READ_COMMANDS_PATTERN
    deny: list[DenyRule] = field(default_factory=_default_deny)
    rules: list[CustomRule] = field(default_factory=list)
    paranoid: ParanoidConfig = field(default_factory=ParanoidConfig)
    git: GitConfig = field(default_factory=GitConfig)
    rm: RmConfig = field(default_factory=RmConfig)
    audit: AuditConfig = field(default_factory=AuditConfig)
    dependencies: DependencyConfig = field(default_factory=DependencyConfig)

    @classmethod
    def from_dict(cls, data: Any) -> Config:
        """Build a config from parsed TOML data; missing keys take defaults."""
        table = _Table(data, "")
        default = cls()
        return cls(
            sensitive_files=table.str_list("sensitive_files", default.sensitive_files),
            read_commands=table.str("read_commands", default.read_commands),
            deny=(
                [DenyRule._from_table(t) for t in table.tables("deny")]
                if table.has("deny")
                else default.deny
            ),
            rules=[CustomRule._from_table(t) for t in table.tables("rules")],
            paranoid=ParanoidConfig._from_table(table.table("paranoid")),
            git=GitConfig._from_table(table.table("git")),
            rm=RmConfig._from_table(table.table("rm")),
            audit=AuditConfig._from_table(table.table("audit")),
            dependencies=DependencyConfig._from_table(table.table("dependencies")),
        )

    @classmethod
    def from_toml(cls, text: str) -> Config:
        """Parse a config from TOML text."""
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"failed to parse TOML: {exc}") from exc
        return cls.from_dict(data)

    @classmethod
    def load(cls, cwd: str | os.PathLike[str] | None = None) -> Config:
        """Defaults, merged with the user config and then the project config."""
        config = cls()
        user_path = user_config_path()
        if user_path is not None and (user := _load_file(user_path)) is not None:
            config.merge(user)
        if cwd is not None:
            project = _load_file(Path(cwd) / PROJECT_CONFIG_NAME)
            if project is not None:
                config.merge(project)
        return config

    def merge(self, other: Config) -> None:
        """Merge another config into this one; lists grow, set scalars win."""
        self.sensitive_files.extend(other.sensitive_files)
        self.deny.extend(other.deny)
        self.rules.extend(other.rules)
        self.paranoid.extra_patterns.extend(other.paranoid.extra_patterns)
        self.rm.allowed_paths.extend(other.rm.allowed_paths)
        self.git.force_push_allowed_branches.extend(other.git.force_push_allowed_branches)

        if other.read_commands is not None:
            self.read_commands = other.read_commands
        if other.paranoid.enabled:
            self.paranoid.enabled = True
        if other.audit.enabled:
            self.audit.enabled = True
            if other.audit.path is not None:
                self.audit.path = other.audit.path

        # An explicit opt-out of dependency protection is respected.
        if not other.dependencies.enabled:
            self.dependencies.enabled = False
        self.dependencies.patterns.extend(other.dependencies.patterns)
        if other.dependencies.suggestion is not None:
            self.dependencies.suggestion = other.dependencies.suggestion

    def compile(self) -> CompiledConfig:
        """Compile every pattern, raising ConfigError on an invalid one."""
        sensitive = tuple(_compile_pattern(p) for p in self.sensitive_files)
        read_re = _compile_pattern(self.read_commands) if self.read_commands is not None else None
        deny = tuple((rule, _compile_pattern(rule.pattern)) for rule in self.deny)
        paranoid = sensitive + tuple(_compile_pattern(p) for p in self.paranoid.extra_patterns)
        dependency = (
            tuple(_compile_pattern(p) for p in self.dependencies.patterns)
            if self.dependencies.enabled
            else ()
        )
        return CompiledConfig(
            raw=self,
            sensitive_patterns=sensitive,
            read_commands_re=read_re,
            deny_patterns=deny,
            paranoid_patterns=paranoid,
            dependency_patterns=dependency,
        )


@dataclass(frozen=True)
class CompiledConfig:
    """A config together with its compiled patterns."""

    raw: Config
    sensitive_patterns: tuple[re.Pattern[str], ...]
    read_commands_re: re.Pattern[str] | None
    deny_patterns: tuple[tuple[DenyRule, re.Pattern[str]], ...]
    paranoid_patterns: tuple[re.Pattern[str], ...]
    dependency_patterns: tuple[re.Pattern[str], ...]

    def is_sensitive_path(self, path: str) -> str | None:
        """The first sensitive pattern the path matches, if any."""
        return next((p.pattern for p in self.sensitive_patterns if p.search(path)), None)

    def is_read_command(self, command: str) -> bool:
        """Whether the command reads file content."""
        return self.read_commands_re is not None and bool(self.read_commands_re.search(command))

    def matches_paranoid(self, text: str) -> str | None:
        """In paranoid mode, the first pattern the text mentions, if any."""
        if not self.raw.paranoid.enabled:
            return None
        return next((p.pattern for p in self.paranoid_patterns if p.search(text)), None)

    def is_dependency_file(self, path: str) -> bool:
        """Whether the path is a protected dependency manifest."""
        if not self.raw.dependencies.enabled:
            return False
        return any(p.search(path) for p in self.dependency_patterns)

    def dependency_suggestion(self) -> str | None:
        """The message suggesting an alternative to editing manifests."""
        return self.raw.dependencies.suggestion
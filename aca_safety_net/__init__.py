"""PreToolUse hook that blocks secret exposure and destructive shell commands."""

__version__ = "0.1.0"
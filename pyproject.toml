[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "aca-safety-net"
version = "0.1.0"
description = "PreToolUse hook that blocks access to sensitive files, destructive commands and environment exposure"
requires-python = ">=3.11"
dependencies = []
keywords = ["security", "hook", "shell", "secrets", "pretooluse", "guard"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
aca-safety-net = "aca_safety_net.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["aca_safety_net"]

[tool.pytest.ini_options]
addopts = "-ra"

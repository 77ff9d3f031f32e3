"""Analysis of xargs commands that delete files."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence

from .config import CompiledConfig
from .decision import Decision, allow, block
from .tokenizer import Token, words

# xargs options whose value is the following word.
_VALUE_OPTIONS = frozenset(
    [f"-{letter}" for letter in "ILnPsaEd"]
    + [
        f"--{name}"
        for name in (
            "delimiter max-args max-procs replace "
            "max-lines arg-file eof max-chars"
        ).split()
    ]
)


def _recursive(word: str) -> bool:
    """True if the word is an rm option that asks for recursion."""
    if word == "--recursive":
        return True
    is_short = word.startswith("-") and not word.startswith("--")
    return is_short and not {"r", "R"}.isdisjoint(word)


def _runs_rm(word: str) -> bool:
    return word == "rm" or word.endswith("/rm")


def _positional(args: Sequence[str]) -> Iterator[int]:
    """Yield the position of the first argument that is not an xargs option."""
    position = 0
    while position < len(args):
        word = args[position]
        if not word.startswith("-"):
            yield position
            return
        position += 2 if word in _VALUE_OPTIONS else 1


def analyze_xargs(tokens: Iterable[Token], config: CompiledConfig) -> Decision:
    """Block xargs invocations that run rm."""
    args = words(tokens)[1:]
    start = next(_positional(args), None)
    if start is None or not _runs_rm(args[start]):
        return allow()

    if any(map(_recursive, args[start:])):
        return block(
            "xargs.rm_rf",
            "xargs rm -rf is dangerous - deletes files from piped input",
        )
    return block(
        "xargs.rm",
        "xargs rm is dangerous - deletes files from piped input",
    )
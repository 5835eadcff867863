"""Decoding of cargo's machine-readable (``--message-format=json``) output.

Cargo prints one JSON object per line. Only two message shapes matter here:
``compiler-artifact`` (something was produced) and ``build-finished``. Every
other line, including text printed by build scripts or test harnesses and
message shapes newer than this module, decodes to :class:`Other` instead of
raising.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Union

# Crate types cargo may report for a library target
LIB_KINDS: frozenset[str] = frozenset({
    "lib",
    "rlib",
    "dylib",
    "cdylib",
    "staticlib",
    "proc-macro",
})

TARGET_KINDS: frozenset[str] = frozenset({
    "bin",
    "test",
    "bench",
    "example",
    "custom-build",
})


@dataclass(frozen=True)
class CompilerArtifact:
    """A target cargo finished compiling."""

    kind: str
    name: str
    filenames: tuple[str, ...]
    executable: str | None = None
    test: bool = False
    fresh: bool = False
    package_id: str = ""


@dataclass(frozen=True)
class BuildFinished:
    """The final message of a build."""

    success: bool


@dataclass(frozen=True)
class Other:
    """Any line that is not relevant for artifact selection."""

    line: str
    reason: str | None = None


BuildEvent = Union[CompilerArtifact, BuildFinished, Other]


def normalize_kind(kinds: list[str]) -> str:
    """Collapse cargo's list of target kinds into a single kind.

    Library crate types all become ``lib``; an unknown kind is kept as-is so
    it can never match a runnable kind by accident.
    """
    if not kinds:
        return "unknown"
    first = kinds[0]
    if first in LIB_KINDS:
        return "lib"
    return first


def _decode_artifact(message: dict[str, Any], line: str) -> BuildEvent:
    target = message.get("target")
    filenames = message.get("filenames")
    if not isinstance(target, dict) or not isinstance(filenames, list):
        return Other(line, "compiler-artifact")

    name = target.get("name")
    kinds = target.get("kind")
    if not isinstance(name, str) or not isinstance(kinds, list):
        return Other(line, "compiler-artifact")

    profile = message.get("profile")
    test = bool(profile.get("test", False)) if isinstance(profile, dict) else False
    executable = message.get("executable")

    return CompilerArtifact(
        kind=normalize_kind([str(k) for k in kinds]),
        name=name,
        filenames=tuple(str(f) for f in filenames),
        executable=executable if isinstance(executable, str) else None,
        test=test,
        fresh=bool(message.get("fresh", False)),
        package_id=str(message.get("package_id", "")),
    )


def decode_line(line: str) -> BuildEvent:
    """Decode a single line of cargo output into a build event."""
    stripped = line.strip()
    if not stripped.startswith("{"):
        return Other(line)

    try:
        message = json.loads(stripped)
    except (ValueError, RecursionError):
        # Invalid JSON, oversized integers and runaway nesting
        return Other(line)

    if not isinstance(message, dict):
        return Other(line)

    reason = message.get("reason")
    if reason == "compiler-artifact":
        return _decode_artifact(message, line)
    if reason == "build-finished":
        success = message.get("success")
        if isinstance(success, bool):
            return BuildFinished(success)
    return Other(line, reason if isinstance(reason, str) else None)


def read_events(lines: Iterable[str]) -> Iterator[BuildEvent]:
    """Lazily decode every line of a cargo message stream."""
    for line in lines:
        yield decode_line(line)

"""Parsing and rewriting of the forwarded cargo invocation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from .errors import UsageError

SEPARATOR = "--"

# Cargo's built-in short aliases
SUBCOMMAND_ALIASES: dict[str, str] = {
    "r": "run",
    "b": "build",
    "t": "test",
}

# Subcommand -> (subcommand passed to cargo, extra flags, selection mode).
# `run` is built only; test harnesses are compiled but never executed.
SUBCOMMANDS: dict[str, tuple[str, tuple[str, ...], str]] = {
    "run": ("build", (), "build"),
    "build": ("build", (), "build"),
    "test": ("test", ("--no-run",), "test"),
    "bench": ("bench", ("--no-run",), "test"),
}

# Flags that select a single named target
NAMED_TARGET_FLAGS: dict[str, str] = {
    "--bin": "bin",
    "--test": "test",
    "--example": "example",
    "--bench": "bench",
}

# Flags that select a whole kind of targets
KIND_TARGET_FLAGS: dict[str, str] = {
    "--lib": "lib",
    "--bins": "bin",
    "--tests": "test",
    "--examples": "example",
    "--benches": "bench",
}

# Cargo flags that consume the following argument as their value
VALUE_FLAGS: frozenset[str] = frozenset({
    "-p",
    "--package",
    "--exclude",
    "-F",
    "--features",
    "-j",
    "--jobs",
    "--target",
    "--target-dir",
    "--manifest-path",
    "--profile",
    "--color",
    "--message-format",
    "--config",
    "-Z",
    "--lockfile-path",
    *NAMED_TARGET_FLAGS,
})


@dataclass(frozen=True)
class SelectionHint:
    """User supplied narrowing of the candidate artifacts."""

    kind: str | None = None
    name: str | None = None

    def __bool__(self) -> bool:
        return self.kind is not None or self.name is not None


@dataclass
class CargoInvocation:
    """The cargo command as it will actually be executed."""

    subcommand: str
    args: list[str]
    mode: str | None
    hint: SelectionHint = field(default_factory=SelectionHint)
    residual: list[str] = field(default_factory=list)

    def command(self, cargo: str, message_format: Sequence[str]) -> list[str]:
        """Full argument vector used to spawn cargo."""
        return [cargo, self.subcommand, *message_format, *self.args]


def split_separator(args: Sequence[str]) -> tuple[list[str], list[str] | None]:
    """Split at the first ``--``; the tail is None when there is none."""
    args = list(args)
    if SEPARATOR not in args:
        return args, None
    index = args.index(SEPARATOR)
    return args[:index], args[index + 1:]


def extract_hint(args: Sequence[str]) -> SelectionHint:
    """Find the kind-selecting flag among cargo arguments.

    The last such flag wins.
    """
    hint = SelectionHint()
    iterator = iter(args)
    for arg in iterator:
        flag, has_value, value = arg.partition("=")
        if flag in NAMED_TARGET_FLAGS:
            if not has_value:
                value = next(iterator, "")
            # `--bin` without a name lists the targets, it names nothing
            hint = SelectionHint(NAMED_TARGET_FLAGS[flag], value or None)
        elif arg in KIND_TARGET_FLAGS:
            hint = SelectionHint(KIND_TARGET_FLAGS[arg])
        elif arg in VALUE_FLAGS:
            next(iterator, None)
    return hint


def split_test_filters(args: Sequence[str]) -> tuple[list[str], list[str]]:
    """Separate positional test-name filters from cargo flags.

    Returns the cargo arguments with the filters removed, and the filters.
    """
    cargo_args: list[str] = []
    filters: list[str] = []
    iterator = iter(args)
    for arg in iterator:
        if arg.startswith("-"):
            cargo_args.append(arg)
            if arg in VALUE_FLAGS:
                value = next(iterator, None)
                if value is not None:
                    cargo_args.append(value)
        else:
            filters.append(arg)
    return cargo_args, filters


def parse_cargo_invocation(args: Sequence[str]) -> CargoInvocation:
    """Turn ``<subcommand> [cargo-args...] [-- residual...]`` into an invocation.

    Raises:
        UsageError: If no subcommand was given.
    """
    cargo_part, residual = split_separator(args)
    residual = residual or []
    if not cargo_part:
        raise UsageError("Empty cargo command")

    requested, *cargo_args = cargo_part
    canonical = SUBCOMMAND_ALIASES.get(requested, requested)

    if canonical not in SUBCOMMANDS:
        # Left for cargo to reject with its own diagnostics
        return CargoInvocation(
            subcommand=requested,
            args=cargo_args,
            mode=None,
            residual=residual,
        )

    subcommand, extra, mode = SUBCOMMANDS[canonical]
    hint = extract_hint(cargo_args)
    if mode == "test":
        cargo_args, filters = split_test_filters(cargo_args)
        residual = filters + residual
    extra = tuple(flag for flag in extra if flag not in cargo_args)

    return CargoInvocation(
        subcommand=subcommand,
        args=[*extra, *cargo_args],
        mode=mode,
        hint=hint,
        residual=residual,
    )

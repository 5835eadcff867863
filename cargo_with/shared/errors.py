"""Custom exceptions for cargo-with."""

from __future__ import annotations

from typing import Sequence

EXIT_USAGE = 2
EXIT_NO_ARTIFACT = 3
EXIT_AMBIGUOUS = 4
EXIT_TEMPLATE = 5
EXIT_BUILD_FAILED = 101
EXIT_SPAWN_FAILED = 127
EXIT_INTERRUPTED = 130


class CargoWithError(Exception):
    """Base exception for every failure the wrapper reports."""

    exit_code: int = 1

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class UsageError(CargoWithError):
    """Raised when the wrapper invocation itself is malformed."""

    exit_code = EXIT_USAGE


class BuildFailed(CargoWithError):
    """Raised when cargo fails or reports an unsuccessful build."""

    exit_code = EXIT_BUILD_FAILED

    def __init__(self, message: str | None = None, returncode: int | None = None) -> None:
        self.returncode = returncode
        if message is None:
            message = "Cargo subcommand failed"
            if returncode is not None:
                message = f"{message} (exit code {returncode})"
            message += ". Try running the original cargo command (without cargo-with)"
        super().__init__(message)


class NoArtifactFound(CargoWithError):
    """Raised when the build produced nothing that can be run."""

    exit_code = EXIT_NO_ARTIFACT

    def __init__(self, message: str = "Found no possible candidates") -> None:
        super().__init__(message)


class AmbiguousArtifact(CargoWithError):
    """Raised when more than one candidate survives selection."""

    exit_code = EXIT_AMBIGUOUS

    def __init__(self, candidates: Sequence, flags: Sequence[str]) -> None:
        self.candidates = list(candidates)
        self.flags = list(flags)
        listing = "\n".join(f"\t- {c.name} ({c.kind})" for c in self.candidates)
        options = ", ".join(f"`{flag}`" for flag in self.flags[:-1])
        if options:
            options = f"{options} or `{self.flags[-1]}`"
        else:
            options = f"`{self.flags[-1]}`"
        super().__init__(
            f"Found more than one possible candidate:\n\n{listing}\n\n"
            f"Please use {options} to specify exactly what binary you want to examine"
        )


class TemplateError(CargoWithError):
    """Raised when the command template cannot be used."""

    exit_code = EXIT_TEMPLATE


class EmptyTemplate(TemplateError):
    """Raised when the command template contains no tokens."""

    def __init__(self) -> None:
        super().__init__("Empty with command")


class InvalidTemplate(TemplateError):
    """Raised when the command template cannot be tokenized."""

    def __init__(self, template: str, reason: str) -> None:
        self.template = template
        super().__init__(f"Unable to parse with command '{template}': {reason}")


class SpawnFailure(CargoWithError):
    """Raised when the final command cannot be started."""

    exit_code = EXIT_SPAWN_FAILED

    def __init__(self, program: str, reason: str) -> None:
        self.program = program
        super().__init__(f"Failed to spawn '{program}': {reason}")

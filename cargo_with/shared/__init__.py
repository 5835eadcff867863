"""Shared utilities for cargo-with."""

from .cargo_args import (
    CargoInvocation,
    SelectionHint,
    parse_cargo_invocation,
    split_separator,
)
from .errors import (
    AmbiguousArtifact,
    BuildFailed,
    CargoWithError,
    EmptyTemplate,
    InvalidTemplate,
    NoArtifactFound,
    SpawnFailure,
    TemplateError,
    UsageError,
)

__all__ = [
    # Cargo arguments
    "CargoInvocation",
    "SelectionHint",
    "parse_cargo_invocation",
    "split_separator",
    # Errors
    "CargoWithError",
    "UsageError",
    "BuildFailed",
    "NoArtifactFound",
    "AmbiguousArtifact",
    "TemplateError",
    "EmptyTemplate",
    "InvalidTemplate",
    "SpawnFailure",
]

"""Selection of the single artifact to hand over to the wrapped command."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .messages import BuildEvent, BuildFinished, CompilerArtifact
from .shared.cargo_args import SelectionHint
from .shared.errors import AmbiguousArtifact, BuildFailed, NoArtifactFound

RUNNABLE_KINDS: frozenset[str] = frozenset({"bin", "example"})

BUILD_FLAGS = ("--example", "--bin")
TEST_FLAGS = ("--test", "--example", "--bin", "--lib")


@dataclass(frozen=True)
class ArtifactCandidate:
    """An artifact that could be run by the wrapped command."""

    kind: str
    name: str
    path: str
    test: bool = False


def to_candidate(
    artifact: CompilerArtifact,
    mode: str,
    hint: SelectionHint,
) -> ArtifactCandidate | None:
    """Project an artifact onto a candidate, or None if it cannot be run."""
    if artifact.kind == "custom-build":
        return None

    if mode == "test":
        if not artifact.test or artifact.executable is None:
            return None
        return ArtifactCandidate(artifact.kind, artifact.name, artifact.executable, True)

    if artifact.test and artifact.kind != hint.kind:
        return None

    if artifact.kind == "lib":
        # Libraries are only picked when asked for explicitly
        if hint.kind != "lib":
            return None
        path = artifact.executable or next(iter(artifact.filenames), None)
        if path is None:
            return None
        return ArtifactCandidate(artifact.kind, artifact.name, path)

    if artifact.kind not in RUNNABLE_KINDS and artifact.kind != hint.kind:
        return None
    if artifact.executable is None:
        return None
    return ArtifactCandidate(artifact.kind, artifact.name, artifact.executable)


def apply_hint(
    candidates: list[ArtifactCandidate],
    hint: SelectionHint,
) -> list[ArtifactCandidate]:
    """Narrow candidates to the requested name and kind."""
    if hint.name is not None:
        candidates = [c for c in candidates if c.name == hint.name]
    if hint.kind is not None:
        candidates = [c for c in candidates if c.kind == hint.kind]
    return candidates


def select_artifact(
    events: Iterable[BuildEvent],
    mode: str,
    hint: SelectionHint | None = None,
) -> ArtifactCandidate:
    """Consume the whole event stream and pick exactly one artifact.

    Args:
        events: Decoded cargo messages.
        mode: ``build`` for build and run, ``test`` for test and bench.
        hint: Requested kind and/or name, if any.

    Returns:
        The one matching candidate.

    Raises:
        BuildFailed: If cargo reported an unsuccessful build.
        NoArtifactFound: If nothing runnable matches.
        AmbiguousArtifact: If more than one candidate matches.
    """
    hint = hint or SelectionHint()
    candidates: list[ArtifactCandidate] = []
    seen_paths: set[str] = set()
    failed = False

    for event in events:
        if isinstance(event, BuildFinished):
            failed = failed or not event.success
        elif isinstance(event, CompilerArtifact):
            candidate = to_candidate(event, mode, hint)
            if candidate is None or candidate.path in seen_paths:
                continue
            seen_paths.add(candidate.path)
            candidates.append(candidate)

    if failed:
        raise BuildFailed("Cargo reported a failed build; refusing to run partial artifacts")

    candidates = apply_hint(candidates, hint)
    if not candidates:
        raise NoArtifactFound()
    if len(candidates) > 1:
        raise AmbiguousArtifact(candidates, TEST_FLAGS if mode == "test" else BUILD_FLAGS)
    return candidates[0]

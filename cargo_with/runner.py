"""
Build-then-launch orchestration.

1. Rewrite the forwarded cargo command so it only builds
2. Run cargo with JSON messages and pick the produced artifact
3. Expand the command template and run it with inherited stdio
"""

from __future__ import annotations

import shlex
import signal
import subprocess
import sys
from typing import Sequence

from .messages import BuildEvent, read_events
from .selector import ArtifactCandidate, select_artifact
from .shared.cargo_args import CargoInvocation, parse_cargo_invocation
from .shared.errors import BuildFailed, SpawnFailure
from .template import CommandTemplate

CARGO = "cargo"
# Diagnostics are rendered to stderr so stdout only carries JSON messages
MESSAGE_FORMAT_ARGS: tuple[str, ...] = ("--message-format=json-render-diagnostics",)


def echo_command(command: Sequence[str]) -> None:
    print(f"$ {shlex.join(command)}", file=sys.stderr)


def run_cargo(command: list[str]) -> list[BuildEvent]:
    """Run cargo to completion and decode its message stream.

    Raises:
        BuildFailed: If cargo cannot be started or exits unsuccessfully.
    """
    try:
        with subprocess.Popen(
            command,
            stdout=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
        ) as process:
            events = list(read_events(process.stdout))
            returncode = process.wait()
    except OSError as e:
        raise BuildFailed(f"Unable to run cargo command: `{shlex.join(command)}` ({e})") from e

    if returncode != 0:
        raise BuildFailed(returncode=returncode)
    return events


def build_artifact(
    invocation: CargoInvocation,
    *,
    cargo: str = CARGO,
    verbose: bool = False,
) -> ArtifactCandidate:
    """Build the requested target and return the artifact to run."""
    command = invocation.command(cargo, MESSAGE_FORMAT_ARGS)
    if verbose:
        echo_command(command)

    events = run_cargo(command)
    # Subcommands cargo accepted but we do not know are treated like `build`
    return select_artifact(events, invocation.mode or "build", invocation.hint)


def exit_status(returncode: int) -> int:
    """Map a child's return code to our own exit status."""
    if returncode < 0:
        return 128 - returncode
    return returncode


def launch(argv: Sequence[str]) -> int:
    """Run the final command in the foreground and return its exit status.

    Raises:
        SpawnFailure: If the command cannot be executed.
    """
    try:
        process = subprocess.Popen(list(argv))
    except OSError as e:
        reason = e.strerror or str(e)
        raise SpawnFailure(argv[0], reason) from e

    previous = signal.getsignal(signal.SIGINT)
    try:
        # Ctrl-C belongs to the child (e.g. interrupting gdb), not to us
        signal.signal(signal.SIGINT, signal.SIG_IGN)
        returncode = process.wait()
    finally:
        signal.signal(signal.SIGINT, previous)
        if process.returncode is None:
            process.wait()
    return exit_status(returncode)


def resolve(
    template: str,
    cargo_args: Sequence[str],
    *,
    cargo: str = CARGO,
    verbose: bool = False,
) -> tuple[str, ...]:
    """Build and return the final argument vector without running it."""
    command_template = CommandTemplate.parse(template)
    invocation = parse_cargo_invocation(cargo_args)
    artifact = build_artifact(invocation, cargo=cargo, verbose=verbose)
    if verbose:
        print(f"Selected {artifact.name} ({artifact.kind}): {artifact.path}", file=sys.stderr)
    return command_template.expand(artifact.path, invocation.residual)


def run(
    template: str,
    cargo_args: Sequence[str],
    *,
    cargo: str = CARGO,
    verbose: bool = False,
    dry_run: bool = False,
) -> int:
    """Build, resolve and launch; returns the exit status to use."""
    argv = resolve(template, cargo_args, cargo=cargo, verbose=verbose)
    if dry_run:
        print(shlex.join(argv))
        return 0
    if verbose:
        echo_command(argv)
    return launch(argv)

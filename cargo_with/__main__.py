#!/usr/bin/env python3
"""
Run cargo build artifacts through external tools such as gdb, rr or valgrind.

Usage:
    cargo with [options] <command> -- <cargo-subcommand> [cargo-args...] [-- args...]
    python -m cargo_with [options] <command> -- <cargo-subcommand> ...

The command may contain {bin}, replaced by the path of the built artifact,
and {args}, replaced by the arguments following the second `--`. When
omitted, the path and then the arguments are appended to the command.

Examples:
    cargo with gdb -- run
    cargo with "gdb --args {bin} {args}" -- run --bin server -- --port 8080
    cargo with "rr record" -- test my_test
    cargo with "echo {bin} {args}" -- test -- myargs
"""

from __future__ import annotations

import argparse
import sys
from typing import Sequence

from cargo_with import runner
from cargo_with.shared.cargo_args import split_separator
from cargo_with.shared.errors import EXIT_INTERRUPTED, CargoWithError, UsageError

COMMAND_NAME = "with"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cargo with",
        description=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "command",
        help="Command executed with the cargo-created binary ({bin} and {args} placeholders)",
    )
    parser.add_argument(
        "--cargo",
        default=runner.CARGO,
        help="Cargo executable to build with (default: %(default)s)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Build and print the final command without running it",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show the cargo and final commands before running them",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    # cargo passes the subcommand name on to `cargo-with`
    if args and args[0] == COMMAND_NAME:
        args = args[1:]

    wrapper_args, cargo_args = split_separator(args)
    parser = build_parser()
    parsed = parser.parse_args(wrapper_args)

    try:
        if cargo_args is None:
            raise UsageError("Missing `--` followed by the cargo command producing the artifact")
        return runner.run(
            parsed.command,
            cargo_args,
            cargo=parsed.cargo,
            verbose=parsed.verbose,
            dry_run=parsed.dry_run,
        )
    except CargoWithError as e:
        print(f"error: {e.message}", file=sys.stderr)
        return e.exit_code
    except KeyboardInterrupt:
        print("\n\nInterrupted.", file=sys.stderr)
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())

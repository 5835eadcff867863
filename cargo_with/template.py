"""Expansion of the user's command template.

The template is the command string given before the first ``--``, e.g.
``"gdb --args {bin} {args}"``. ``{bin}`` stands for the resolved artifact
path and ``{args}`` for the arguments given after the second ``--``. Both are
appended (path first) when they are not placed explicitly.
"""

from __future__ import annotations

import shlex
from dataclasses import dataclass
from typing import Sequence

from .shared.errors import EmptyTemplate, InvalidTemplate

BIN_PLACEHOLDER = "{bin}"
ARGS_PLACEHOLDER = "{args}"


@dataclass(frozen=True)
class CommandTemplate:
    """A tokenized command template."""

    raw: str
    tokens: tuple[str, ...]

    @classmethod
    def parse(cls, raw: str) -> CommandTemplate:
        """Tokenize a template string, honouring shell quoting.

        Raises:
            InvalidTemplate: If the quoting is unbalanced.
            EmptyTemplate: If nothing but whitespace was given.
        """
        try:
            tokens = shlex.split(raw)
        except ValueError as e:
            raise InvalidTemplate(raw, str(e)) from e
        if not tokens:
            raise EmptyTemplate()
        return cls(raw=raw, tokens=tuple(tokens))

    def expand(self, bin_path: str, args: Sequence[str] = ()) -> tuple[str, ...]:
        """Substitute the artifact path and residual arguments."""
        expanded: list[str] = []
        found_bin = False
        found_args = False

        for token in self.tokens:
            if token == ARGS_PLACEHOLDER:
                found_args = True
                expanded.extend(args)
            elif BIN_PLACEHOLDER in token:
                found_bin = True
                expanded.append(token.replace(BIN_PLACEHOLDER, bin_path))
            else:
                expanded.append(token)

        if not found_bin:
            expanded.append(bin_path)
        if not found_args:
            expanded.extend(args)
        return tuple(expanded)

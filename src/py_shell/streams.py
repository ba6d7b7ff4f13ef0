"""Standard stream bundles.

Every command runs against three streams: where it reads input, where
it writes output, and where it writes errors.  A ``Streams`` bundle
carries those three handles around so that redirection and pipes can
swap one of them out without the command noticing.

``None`` in a slot means "the shell's own stream".  Child processes
inherit it; builtins resolve it to ``sys.stdout`` / ``sys.stderr`` at
the moment they write, so pytest's output capture sees builtin output.
"""

from __future__ import annotations

import dataclasses
import sys
from dataclasses import dataclass
from typing import IO, Any, TextIO


@dataclass(frozen=True)
class Streams:
    """The stdin/stdout/stderr handles one command runs against.

    Attributes:
        stdin: Input source, or None for the shell's own stdin.
        stdout: Output sink, or None for the shell's own stdout.
        stderr: Error sink, or None for the shell's own stderr.

    """

    stdin: IO[Any] | None = None
    stdout: IO[Any] | None = None
    stderr: IO[Any] | None = None

    @property
    def out(self) -> TextIO:
        """Return the text sink builtins write their output to."""
        return self.stdout if self.stdout is not None else sys.stdout  # type: ignore[return-value]

    @property
    def err(self) -> TextIO:
        """Return the text sink builtins write their errors to."""
        return self.stderr if self.stderr is not None else sys.stderr  # type: ignore[return-value]

    def replace(self, **changes: IO[Any] | None) -> Streams:
        """Return a copy with some slots swapped out."""
        return dataclasses.replace(self, **changes)

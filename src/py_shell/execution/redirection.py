"""I/O redirection — send a command's output or errors to a file.

Operators and their meaning:

=========  ========  ==========
Operator   Stream    Mode
=========  ========  ==========
``>``      stdout    truncate
``1>``     stdout    truncate
``>>``     stdout    append
``1>>``    stdout    append
``2>``     stderr    truncate
``2>>``    stderr    append
=========  ========  ==========

The operator and its target are two separate words (``echo hi > f``).
Only the first operator on a line counts; it and everything after its
target are dropped from the command.  An operator with no target after
it is treated as if it were not there.

The target file is opened *before* the command runs.  If it cannot be
opened the command does not run at all.
"""

from __future__ import annotations

import contextlib
from dataclasses import dataclass
from enum import StrEnum
from typing import IO, TYPE_CHECKING, Any

from py_shell.errors import RedirectionError

if TYPE_CHECKING:
    from collections.abc import Iterator

    from py_shell.streams import Streams


class RedirectStream(StrEnum):
    """Which standard stream a redirection replaces."""

    STDOUT = "stdout"
    STDERR = "stderr"


class RedirectMode(StrEnum):
    """How the target file is opened."""

    TRUNCATE = "w"
    APPEND = "a"


_OPERATORS: dict[str, tuple[RedirectStream, RedirectMode]] = {
    ">": (RedirectStream.STDOUT, RedirectMode.TRUNCATE),
    "1>": (RedirectStream.STDOUT, RedirectMode.TRUNCATE),
    ">>": (RedirectStream.STDOUT, RedirectMode.APPEND),
    "1>>": (RedirectStream.STDOUT, RedirectMode.APPEND),
    "2>": (RedirectStream.STDERR, RedirectMode.TRUNCATE),
    "2>>": (RedirectStream.STDERR, RedirectMode.APPEND),
}


def is_redirect_operator(token: str) -> bool:
    """Return True if *token* is one of the redirection operators."""
    return token in _OPERATORS


@dataclass(frozen=True)
class RedirectionSpec:
    """One parsed redirection: which stream, how, and where.

    Attributes:
        stream: STDOUT or STDERR.
        mode: TRUNCATE (create or empty the file) or APPEND.
        path: The target file path as typed.

    """

    stream: RedirectStream
    mode: RedirectMode
    path: str

    def open(self) -> IO[Any]:
        """Open the target file for writing.

        Raises:
            RedirectionError: If the file cannot be opened.

        """
        try:
            return open(self.path, self.mode.value, encoding="utf-8")  # noqa: SIM115
        except OSError as e:
            raise RedirectionError(self.path, e.strerror or str(e)) from e

    def apply(self, streams: Streams, handle: IO[Any]) -> Streams:
        """Return *streams* with the redirected slot replaced by *handle*."""
        if self.stream is RedirectStream.STDERR:
            return streams.replace(stderr=handle)
        return streams.replace(stdout=handle)


def find_redirection(tokens: list[str]) -> tuple[list[str], RedirectionSpec | None]:
    """Split the first redirection off a token list.

    Args:
        tokens: The words of one command.

    Returns:
        The command words before the operator, and the parsed
        redirection (None when there is no operator, or when the
        operator has no target).

    """
    for i, token in enumerate(tokens):
        if token not in _OPERATORS:
            continue
        if i + 1 >= len(tokens):
            return tokens[:i], None
        stream, mode = _OPERATORS[token]
        return tokens[:i], RedirectionSpec(stream=stream, mode=mode, path=tokens[i + 1])
    return list(tokens), None


@contextlib.contextmanager
def redirected(streams: Streams, spec: RedirectionSpec | None) -> Iterator[Streams]:
    """Open *spec*'s target and yield *streams* with it swapped in.

    The file is closed when the block exits, on every path.  With no
    redirection the streams are yielded unchanged.

    Raises:
        RedirectionError: If the target cannot be opened.

    """
    if spec is None:
        yield streams
        return
    handle = spec.open()
    try:
        yield spec.apply(streams, handle)
    finally:
        handle.close()

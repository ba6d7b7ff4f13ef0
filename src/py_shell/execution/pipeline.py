"""Pipelines — connect one command's output to another's input.

``left | right`` runs both commands at the same time, joined by a
conduit (an operating-system pipe): everything ``left`` writes to
stdout, ``right`` reads from stdin, byte for byte and in order.

A pipe has a small, fixed buffer.  If ``left`` writes more than the
buffer holds while nobody reads, ``left`` blocks.  Waiting for ``left``
before ``right`` has started would therefore hang forever on any large
output — the classic pipe deadlock.  The executor avoids it by
following a strict order:

1. Resolve both sides and open any redirect files.  If anything fails
   here, nothing has started yet.
2. Start ``right``, then ``left``.  Both run before either is awaited.
3. A background thread waits for ``left`` and then closes the write
   end, which is how ``right`` learns the stream has ended.
4. The calling thread waits for ``right``, closes the read end (so a
   ``left`` still writing gets a broken pipe instead of blocking), and
   joins the background thread.

Only the first ``|`` on a line splits it; only two-stage pipelines
exist.
"""

from __future__ import annotations

import contextlib
import os
import threading
from typing import IO, TYPE_CHECKING, Any, TypeAlias

from py_shell.errors import CommandNotExecutableError, ShellSyntaxError
from py_shell.execution.redirection import find_redirection, redirected
from py_shell.streams import Streams

if TYPE_CHECKING:
    from collections.abc import Callable

    from py_shell.execution.runnable import Runnable
    from py_shell.logging import Logger

# Maps a command's words (name first) to a runnable, or raises
# CommandNotFoundError.
Resolver: TypeAlias = "Callable[[list[str]], Runnable]"

PIPE = "|"

_SYNTAX_ERROR = f"syntax error near unexpected token `{PIPE}'"


def split_pipeline(tokens: list[str]) -> tuple[list[str], list[str]] | None:
    """Split *tokens* on the first pipe token.

    Returns:
        ``(left, right)``, or None when the line has no pipe.  Any
        later ``|`` stays in ``right`` as an ordinary word.

    """
    try:
        index = tokens.index(PIPE)
    except ValueError:
        return None
    return tokens[:index], tokens[index + 1 :]


def _close_quietly(handle: IO[Any]) -> None:
    """Close *handle*, ignoring a flush into a pipe nobody reads."""
    with contextlib.suppress(BrokenPipeError):
        handle.close()


class PipelineExecutor:
    """Run two commands joined by a conduit."""

    def __init__(self, *, resolve: Resolver, logger: Logger) -> None:
        """Create an executor.

        Args:
            resolve: Turns a command's words into a runnable, raising
                ``CommandNotFoundError`` for unknown names.
            logger: Where pipeline events are recorded.

        """
        self._resolve = resolve
        self._logger = logger

    def run(self, left: list[str], right: list[str], streams: Streams | None = None) -> int:
        """Run ``left | right`` and return ``right``'s exit status.

        Args:
            left: Words of the producing command (may end in a redirect).
            right: Words of the consuming command (may end in a redirect).
            streams: The shell's streams (defaults to its own).

        Raises:
            ShellSyntaxError: If either side is empty.
            CommandNotFoundError: If either side does not resolve.
            CommandNotExecutableError: If either program cannot be spawned.
            RedirectionError: If a redirect target cannot be opened.

        """
        left_words, left_redirect = find_redirection(left)
        right_words, right_redirect = find_redirection(right)
        if not left_words or not right_words:
            raise ShellSyntaxError(_SYNTAX_ERROR)

        producer = self._resolve(left_words)
        consumer = self._resolve(right_words)
        base = streams or Streams()

        self._logger.debug(
            f"{' '.join(producer.argv)} | {' '.join(consumer.argv)}", source="pipeline"
        )

        with contextlib.ExitStack() as stack:
            read_fd, write_fd = os.pipe()
            reader = open(read_fd, "rb")  # noqa: SIM115
            stack.callback(_close_quietly, reader)
            writer = open(write_fd, "w", encoding="utf-8")  # noqa: SIM115
            stack.callback(_close_quietly, writer)

            producer.attach(
                stack.enter_context(redirected(base.replace(stdout=writer), left_redirect))
            )
            consumer.attach(
                stack.enter_context(redirected(base.replace(stdin=reader), right_redirect))
            )

            consumer.start(background=True)
            try:
                producer.start(background=True)
            except CommandNotExecutableError:
                _close_quietly(writer)
                consumer.wait()
                raise

            drain = threading.Thread(
                target=self._await_producer,
                args=(producer, writer),
                name="pipeline-producer",
                daemon=True,
            )
            drain.start()

            status = consumer.wait()
            _close_quietly(reader)
            drain.join()

        self._logger.debug(f"finished with status {status}", source="pipeline")
        return status

    @staticmethod
    def _await_producer(producer: Runnable, writer: IO[Any]) -> None:
        """Wait for the producer, then signal end of stream."""
        try:
            producer.wait()
        finally:
            _close_quietly(writer)

"""The shell — turns one input line into running commands.

``Shell.execute`` takes a raw line and does everything up to the point
where the output has been written:

1. **Tokenize** the line (quotes and escapes honoured).
2. If there is a ``|``, hand both halves to the ``PipelineExecutor``.
3. Otherwise split off a redirection, **resolve** the first word to a
   builtin or an executable on ``PATH``, open the redirect target, and
   run the command to completion.

Every recoverable failure (unknown command, program the OS will not
run, unopenable redirect target, empty pipe side) is printed on stderr
and isolated to that one line; ``execute`` returns a non-zero status
and the session carries on.  The only thing that ends the session is
the ``exit`` builtin, which raises ``SystemExit``.

Design choices:
    - **Returns a status, streams go where they are wired.**  Output is
      written straight to the attached streams rather than collected,
      so long-running programs stream to the terminal as they run.
    - **Resolution order is builtins first, then PATH.**  ``echo`` is
      always the builtin even if ``/bin/echo`` exists.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from py_shell.builtins import Builtin
from py_shell.errors import (
    CommandNotExecutableError,
    CommandNotFoundError,
    RedirectionError,
    ShellError,
)
from py_shell.execution.pipeline import PipelineExecutor, split_pipeline
from py_shell.execution.redirection import find_redirection, redirected
from py_shell.execution.runnable import Runnable, RunnableKind
from py_shell.locator import discover_executables, find_executable
from py_shell.logging import Logger
from py_shell.streams import Streams
from py_shell.tokenizer import tokenize

if TYPE_CHECKING:
    from py_shell.config import ShellConfig

# Conventional exit statuses for failures the shell itself detects.
STATUS_FAILURE = 1
STATUS_NOT_EXECUTABLE = 126
STATUS_NOT_FOUND = 127


class Shell:
    """Command interpreter for one interactive session."""

    def __init__(
        self,
        *,
        config: ShellConfig,
        executables: frozenset[str] | None = None,
        streams: Streams | None = None,
        logger: Logger | None = None,
    ) -> None:
        """Create a shell.

        Args:
            config: Session settings (search path, home, prompt).
            executables: External command names offered for completion.
                Discovered from the search path when omitted.
            streams: The shell's own streams (defaults to the process's).
            logger: Event log (a fresh one when omitted).

        """
        self._config = config
        self._streams = streams or Streams()
        self._logger = logger or Logger()
        if executables is None:
            executables = discover_executables(config.search_path)
            self._logger.info(f"discovered {len(executables)} executables", source="shell")
        self._executables = executables
        self._pipelines = PipelineExecutor(resolve=self.resolve, logger=self._logger)
        self._last_status = 0

    @property
    def config(self) -> ShellConfig:
        """Return the session configuration."""
        return self._config

    @property
    def logger(self) -> Logger:
        """Return the shell's event log."""
        return self._logger

    @property
    def last_status(self) -> int:
        """Return the exit status of the most recent line."""
        return self._last_status

    @property
    def command_names(self) -> list[str]:
        """Return every builtin and discovered executable name, sorted."""
        return sorted({b.value for b in Builtin} | self._executables)

    def resolve(self, words: list[str]) -> Runnable:
        """Turn a command's words into a runnable.

        Args:
            words: Command name followed by its arguments.

        Returns:
            A BUILTIN runnable if the name is a builtin, else an
            EXTERNAL runnable for the first match on the search path.

        Raises:
            CommandNotFoundError: If the name matches neither.

        """
        name, args = words[0], words[1:]
        builtin = Builtin.lookup(name)
        if builtin is not None:
            return Runnable.builtin(builtin, args, self._config)
        path = find_executable(name, self._config.search_path)
        if path is None:
            raise CommandNotFoundError(name)
        return Runnable.external(name, path, args, self._config)

    def execute(self, line: str) -> int:
        """Run one line of input.

        Args:
            line: The raw line, without its trailing newline.

        Returns:
            The exit status of the line (0 for a blank line).

        Raises:
            SystemExit: When the ``exit`` builtin runs.

        """
        tokens = tokenize(line)
        if not tokens:
            return 0

        try:
            halves = split_pipeline(tokens)
            if halves is not None:
                status = self._pipelines.run(*halves, streams=self._streams)
            else:
                status = self._execute_single(tokens)
        except CommandNotFoundError as e:
            self._logger.warning(str(e), source="shell")
            status = self._report(e, STATUS_NOT_FOUND)
        except CommandNotExecutableError as e:
            self._logger.error(str(e), source="shell")
            status = self._report(e, STATUS_NOT_EXECUTABLE)
        except RedirectionError as e:
            self._logger.error(str(e), source="redirection")
            status = self._report(e, STATUS_FAILURE)
        except ShellError as e:
            self._logger.warning(str(e), source="shell")
            status = self._report(e, STATUS_FAILURE)

        self._last_status = status
        return status

    def _execute_single(self, tokens: list[str]) -> int:
        """Run one command, honouring its redirection."""
        words, redirect = find_redirection(tokens)
        if not words:
            return 0

        runnable = self.resolve(words)
        self._logger.debug(f"{runnable.kind}: {' '.join(runnable.argv)}", source="shell")

        with redirected(self._streams, redirect) as streams:
            runnable.attach(streams)
            runnable.start()
            status = runnable.wait()

        if runnable.kind is RunnableKind.BUILTIN and status != 0:
            self._logger.warning(f"{runnable.name} exited with status {status}", source="builtins")
        return status

    def _report(self, error: ShellError, status: int) -> int:
        """Print *error* on the shell's stderr and return *status*."""
        err = self._streams.err
        err.write(f"{error}\n")
        err.flush()
        return status

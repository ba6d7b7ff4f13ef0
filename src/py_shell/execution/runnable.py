"""Runnables — one start/wait contract for builtins and programs.

A pipeline should not care whether ``echo`` is a builtin or
``/bin/echo``.  Both are wrapped in a ``Runnable`` that exposes the same
three steps:

1. ``attach(streams)`` — choose where stdin/stdout/stderr go.
2. ``start()`` — begin running.
3. ``wait()`` — block until done and return an exit status.

There are two kinds:

- **BUILTIN** — calls the builtin function in-process.  By default it
  runs synchronously inside ``start()``; with ``background=True`` it
  runs on its own thread so a pipeline can make progress on both
  sides at once.
- **EXTERNAL** — spawns an operating-system process.  ``argv[0]`` is
  the name the user typed, not the resolved path, so programs see the
  name they were invoked as.

Design choices:
    - **One class with a kind discriminator, no subclasses.**  The
      builtin kind never spawns anything, so it is testable purely
      in-process with ``io.StringIO`` streams.
    - **Broken pipes end a builtin quietly.**  If the reader of a pipe
      goes away, a builtin writing into it simply stops, as a program
      killed by SIGPIPE would.
    - **A background builtin is a subshell.**  It may read the shell's
      state but not change it: ``cd`` on a pipeline thread leaves the
      working directory alone, and ``exit`` ends only that thread.
"""

from __future__ import annotations

import contextlib
import subprocess
import sys
import threading
from enum import StrEnum
from typing import TYPE_CHECKING

from py_shell import builtins
from py_shell.builtins import Builtin, Outcome
from py_shell.errors import CommandNotExecutableError
from py_shell.streams import Streams

if TYPE_CHECKING:
    from py_shell.config import ShellConfig

# Status reported for a builtin that died on a broken pipe (128 + SIGPIPE).
_BROKEN_PIPE_STATUS = 141


class RunnableKind(StrEnum):
    """Which kind of command a runnable wraps."""

    BUILTIN = "builtin"
    EXTERNAL = "external"


class RunnableState(StrEnum):
    """Lifecycle of a runnable: NEW → RUNNING → DONE."""

    NEW = "new"
    RUNNING = "running"
    DONE = "done"


class Runnable:
    """A builtin invocation or an external process behind one interface."""

    def __init__(
        self,
        *,
        kind: RunnableKind,
        name: str,
        args: list[str],
        config: ShellConfig,
        builtin: Builtin | None = None,
        path: str | None = None,
        streams: Streams | None = None,
    ) -> None:
        """Create a runnable in the NEW state.

        Prefer the ``builtin()`` and ``external()`` constructors.

        Args:
            kind: BUILTIN or EXTERNAL.
            name: The command name as typed.
            args: Arguments after the command name.
            config: Shell settings passed to builtins.
            builtin: The builtin to run (BUILTIN kind only).
            path: The resolved executable path (EXTERNAL kind only).
            streams: Initial stream bundle (defaults to the shell's own).

        """
        self._kind = kind
        self._name = name
        self._args = list(args)
        self._config = config
        self._builtin = builtin
        self._path = path
        self._streams = streams or Streams()
        self._state = RunnableState.NEW
        self._process: subprocess.Popen[bytes] | None = None
        self._thread: threading.Thread | None = None
        self._status: int | None = None
        self._exit_requested = False

    @classmethod
    def builtin(
        cls,
        builtin: Builtin,
        args: list[str],
        config: ShellConfig,
        streams: Streams | None = None,
    ) -> Runnable:
        """Wrap a builtin invocation."""
        return cls(
            kind=RunnableKind.BUILTIN,
            name=builtin.value,
            args=args,
            config=config,
            builtin=builtin,
            streams=streams,
        )

    @classmethod
    def external(
        cls,
        name: str,
        path: str,
        args: list[str],
        config: ShellConfig,
        streams: Streams | None = None,
    ) -> Runnable:
        """Wrap an external program found at *path*."""
        return cls(
            kind=RunnableKind.EXTERNAL,
            name=name,
            args=args,
            config=config,
            path=path,
            streams=streams,
        )

    # -- properties --------------------------------------------------------

    @property
    def kind(self) -> RunnableKind:
        """Return BUILTIN or EXTERNAL."""
        return self._kind

    @property
    def name(self) -> str:
        """Return the command name as typed."""
        return self._name

    @property
    def argv(self) -> list[str]:
        """Return the full argument vector, typed name first."""
        return [self._name, *self._args]

    @property
    def streams(self) -> Streams:
        """Return the attached stream bundle."""
        return self._streams

    @property
    def state(self) -> RunnableState:
        """Return the lifecycle state."""
        return self._state

    @property
    def exit_requested(self) -> bool:
        """Return True if a builtin asked the shell to exit."""
        return self._exit_requested

    # -- lifecycle ---------------------------------------------------------

    def attach(self, streams: Streams) -> None:
        """Replace the stream bundle.

        Raises:
            RuntimeError: If the runnable has already started.

        """
        if self._state is not RunnableState.NEW:
            msg = f"Cannot attach streams to {self._name}: already {self._state}"
            raise RuntimeError(msg)
        self._streams = streams

    def start(self, *, background: bool = False) -> None:
        """Begin running.

        Args:
            background: For builtins, run on a dedicated thread instead
                of synchronously.  External processes always run
                concurrently with the shell.

        Raises:
            RuntimeError: If the runnable has already started.
            CommandNotExecutableError: If an external process cannot be
                spawned.

        """
        if self._state is not RunnableState.NEW:
            msg = f"Cannot start {self._name}: already {self._state}"
            raise RuntimeError(msg)

        if self._kind is RunnableKind.EXTERNAL:
            self._spawn()
            self._state = RunnableState.RUNNING
            return

        self._state = RunnableState.RUNNING
        if background:
            self._thread = threading.Thread(
                target=self._run_builtin, name=f"builtin-{self._name}", daemon=True
            )
            self._thread.start()
        else:
            self._run_builtin()

    def wait(self) -> int:
        """Block until the command finishes and return its exit status.

        Raises:
            RuntimeError: If the runnable was never started.

        """
        if self._state is RunnableState.NEW:
            msg = f"Cannot wait for {self._name}: not started"
            raise RuntimeError(msg)

        if self._process is not None:
            self._status = self._process.wait()
        elif self._thread is not None:
            self._thread.join()

        self._state = RunnableState.DONE
        return self._status if self._status is not None else 0

    # -- internals ---------------------------------------------------------

    def _spawn(self) -> None:
        """Start the external process with the attached streams."""
        # Anything the shell buffered must reach the terminal first.
        for stream in (sys.stdout, sys.stderr):
            with contextlib.suppress(ValueError, OSError):
                stream.flush()
        try:
            self._process = subprocess.Popen(  # noqa: S603
                self.argv,
                executable=self._path,
                stdin=self._streams.stdin,
                stdout=self._streams.stdout,
                stderr=self._streams.stderr,
            )
        except OSError as e:
            raise CommandNotExecutableError(self._name, e.strerror or str(e)) from e

    def _run_builtin(self) -> None:
        """Run the builtin and record its status."""
        if self._builtin is None:
            msg = f"{self._name} is not a builtin"
            raise RuntimeError(msg)
        try:
            outcome: Outcome = builtins.execute(
                self._builtin,
                self.argv,
                self._streams,
                self._config,
                subshell=self._thread is not None,
            )
            self._streams.out.flush()
            self._status = outcome.status
        except BrokenPipeError:
            self._status = _BROKEN_PIPE_STATUS
        except SystemExit as e:
            self._exit_requested = True
            self._status = e.code if isinstance(e.code, int) else 0
            if self._thread is None:
                raise

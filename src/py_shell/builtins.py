"""Builtin commands — the five commands the shell runs itself.

Some commands cannot be separate programs.  ``cd`` must change the
*shell's* working directory, and ``exit`` must end the *shell*; a
child process could do neither.  The others (``pwd``, ``echo``,
``type``) are builtins for speed and convenience.

Every builtin has the same shape: it receives its full argument list
(command name first) and a ``Streams`` bundle, writes to those streams,
and returns an ``Outcome``.  A failing builtin writes its own message
to stderr before returning, so the caller only needs the outcome to
know the exit status.

Design choices:
    - **A StrEnum, not a dict of closures.**  ``Builtin`` lists every
      builtin; ``execute`` dispatches over it with ``match``.  The set
      is enumerable (the completer iterates it) and carries no hidden
      captured state.
    - **Configuration is passed in.**  ``type`` needs the search path
      and ``cd ~`` needs the home directory; both come from the
      ``ShellConfig``, never from ``os.environ`` directly.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING

from py_shell.locator import find_executable

if TYPE_CHECKING:
    from py_shell.config import ShellConfig
    from py_shell.streams import Streams

# Builtins that take exactly one argument after the command name.
_ONE_ARGUMENT = 2


class Builtin(StrEnum):
    """The fixed set of shell builtins."""

    EXIT = "exit"
    PWD = "pwd"
    CD = "cd"
    ECHO = "echo"
    TYPE = "type"

    @classmethod
    def lookup(cls, name: str) -> Builtin | None:
        """Return the builtin called *name*, or None."""
        try:
            return cls(name)
        except ValueError:
            return None


@dataclass(frozen=True)
class Outcome:
    """The result of running a builtin.

    Attributes:
        ok: True if the builtin succeeded.
        message: The error message already written to stderr (empty on
            success).

    """

    ok: bool
    message: str = ""

    @classmethod
    def success(cls) -> Outcome:
        """Return a successful outcome."""
        return cls(ok=True)

    @classmethod
    def failure(cls, message: str) -> Outcome:
        """Return a failed outcome carrying *message*."""
        return cls(ok=False, message=message)

    @property
    def status(self) -> int:
        """Return the outcome as a process-style exit status."""
        return 0 if self.ok else 1


def execute(
    builtin: Builtin,
    args: list[str],
    streams: Streams,
    config: ShellConfig,
    *,
    subshell: bool = False,
) -> Outcome:
    """Run *builtin* with *args* against *streams*.

    A builtin running as one side of a pipeline runs as a subshell: it
    may inspect the shell's state but must not change it, so ``cd``
    validates its target without moving the shell.

    Args:
        builtin: Which builtin to run.
        args: The full argument list, command name first.
        streams: Where to write output and errors.
        config: Shell settings (search path, home directory).
        subshell: True when running as one side of a pipeline.

    Returns:
        The builtin's outcome.

    Raises:
        SystemExit: For ``exit``, which ends the shell with status 0.

    """
    match builtin:
        case Builtin.EXIT:
            raise SystemExit(0)
        case Builtin.PWD:
            return _pwd(streams)
        case Builtin.CD:
            return _cd(args, streams, config, subshell=subshell)
        case Builtin.ECHO:
            return _echo(args, streams)
        case Builtin.TYPE:
            return _type(args, streams, config)


def _fail(streams: Streams, message: str) -> Outcome:
    """Write *message* to stderr and return a failed outcome."""
    streams.err.write(message + "\n")
    return Outcome.failure(message)


def _pwd(streams: Streams) -> Outcome:
    try:
        cwd = os.getcwd()
    except OSError as e:
        return _fail(streams, f"pwd: {e}")
    streams.out.write(cwd + "\n")
    return Outcome.success()


def _cd(args: list[str], streams: Streams, config: ShellConfig, *, subshell: bool) -> Outcome:
    """Change the shell's working directory (``~`` means home)."""
    if len(args) != _ONE_ARGUMENT:
        return _fail(streams, "cd: too many arguments")

    target = args[1]
    if target == "~":
        try:
            target = config.home or str(Path.home())
        except RuntimeError:
            return _fail(streams, "cd: cannot determine home directory")

    if not Path(target).is_dir():
        return _fail(streams, f"cd: {target}: No such file or directory")
    if subshell:
        return Outcome.success()
    try:
        os.chdir(target)
    except OSError:
        return _fail(streams, f"cd: {target}: No such file or directory")
    return Outcome.success()


def _echo(args: list[str], streams: Streams) -> Outcome:
    streams.out.write(" ".join(args[1:]) + "\n")
    return Outcome.success()


def _type(args: list[str], streams: Streams, config: ShellConfig) -> Outcome:
    """Report whether a name is a builtin, an executable, or unknown."""
    if len(args) != _ONE_ARGUMENT:
        return _fail(streams, "type: too many arguments")

    name = args[1]
    if Builtin.lookup(name) is not None:
        streams.out.write(f"{name} is a shell builtin\n")
    elif (path := find_executable(name, config.search_path)) is not None:
        streams.out.write(f"{name} is {path}\n")
    else:
        streams.out.write(f"{name}: not found\n")
    return Outcome.success()

"""Shell error taxonomy.

Every failure the shell can recover from is a ``ShellError``.  The
dispatcher catches them, prints the message on stderr, and goes back to
the prompt — one bad line never takes the session down.

The categories mirror where things go wrong:

- **Resolution** — the first word is neither a builtin nor on ``PATH``.
- **Redirection** — the target file could not be opened.
- **Execution** — a program was found but the OS refused to run it.
- **Syntax** — a pipe with nothing on one side.

Builtin failures are *not* exceptions: a builtin reports its own error
on its stderr and returns a failed ``Outcome``.
"""


class ShellError(Exception):
    """Base class for recoverable, per-line shell errors."""


class CommandNotFoundError(ShellError):
    """Raised when a command name resolves to nothing."""

    def __init__(self, name: str) -> None:
        """Record the unresolved command name."""
        self.name = name
        super().__init__(f"{name}: command not found")


class RedirectionError(ShellError):
    """Raised when a redirection target cannot be opened."""

    def __init__(self, path: str, reason: str) -> None:
        """Record the target path and the operating system's reason."""
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class ShellSyntaxError(ShellError):
    """Raised when a line cannot be split into runnable commands."""


class CommandNotExecutableError(ShellError):
    """Raised when a resolved program cannot be spawned."""

    def __init__(self, name: str, reason: str) -> None:
        """Record the command name and the operating system's reason."""
        self.name = name
        self.reason = reason
        super().__init__(f"{name}: {reason}")

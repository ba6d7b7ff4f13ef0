"""Shell event log.

The shell keeps an in-memory record of what it did — which commands it
dispatched, which names failed to resolve, which redirections could
not be opened.  It works like a kernel log buffer (``dmesg``): records
are only ever appended, and a test or a debugging session can pick out
the interesting ones afterwards.  Nothing here reaches the terminal, so
the user's output is exactly what the commands wrote.

Each record names its *source*, the component that produced it:
``shell`` (dispatch and resolution), ``builtins``, ``redirection`` and
``pipeline``.
"""

from dataclasses import dataclass
from enum import IntEnum


class LogLevel(IntEnum):
    """How serious a shell event is, from routine to failed."""

    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


@dataclass(frozen=True)
class LogEntry:
    """One shell event: its level, what happened, and which component saw it."""

    level: LogLevel
    message: str
    source: str

    def __str__(self) -> str:
        """Render as ``[LEVEL] source: message``."""
        return f"[{self.level.name}] {self.source}: {self.message}"


class Logger:
    """Append-only buffer of shell events."""

    def __init__(self) -> None:
        """Start with no events recorded."""
        self._entries: list[LogEntry] = []

    @property
    def entries(self) -> list[LogEntry]:
        """Return a copy of every event, oldest first."""
        return list(self._entries)

    def log(self, level: LogLevel, message: str, *, source: str) -> None:
        """Record one event from *source* at *level*."""
        self._entries.append(LogEntry(level, message, source))

    def debug(self, message: str, *, source: str) -> None:
        """Record a routine event (a dispatched command, a pipeline)."""
        self.log(LogLevel.DEBUG, message, source=source)

    def info(self, message: str, *, source: str) -> None:
        """Record a notable event that is not a failure (session setup)."""
        self.log(LogLevel.INFO, message, source=source)

    def warning(self, message: str, *, source: str) -> None:
        """Record a failure caused by the user's input."""
        self.log(LogLevel.WARNING, message, source=source)

    def error(self, message: str, *, source: str) -> None:
        """Record a failure reported by the operating system."""
        self.log(LogLevel.ERROR, message, source=source)

    def filter(
        self, *, min_level: LogLevel = LogLevel.DEBUG, source: str | None = None
    ) -> list[LogEntry]:
        """Select events at *min_level* or above, optionally from one *source*."""
        return [
            entry
            for entry in self._entries
            if entry.level >= min_level and source in (None, entry.source)
        ]

    def clear(self) -> None:
        """Forget every recorded event."""
        self._entries.clear()

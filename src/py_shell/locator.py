"""Executable lookup on the search path.

When the first word of a line is not a builtin, the shell looks for a
file of that name in each ``PATH`` directory, in order, and runs the
first one that is a regular file with execute permission.

The same walk, done once at startup over *every* directory, gives the
set of external command names the completer offers.
"""

from __future__ import annotations

import os
from pathlib import Path


def _is_executable(path: Path) -> bool:
    """Return True if *path* is a regular file the user may execute."""
    try:
        return path.is_file() and os.access(path, os.X_OK)
    except OSError:
        return False


def find_executable(name: str, search_path: str) -> str | None:
    """Resolve *name* to the first executable on *search_path*.

    Names containing a path separator are not looked up.

    Args:
        name: The command name as typed.
        search_path: ``os.pathsep``-separated directories.

    Returns:
        The full path of the first match, or None if nothing matches.

    """
    if not name or os.sep in name:
        return None
    for directory in search_path.split(os.pathsep):
        if not directory:
            continue
        candidate = Path(directory) / name
        if _is_executable(candidate):
            return str(candidate)
    return None


def discover_executables(search_path: str) -> frozenset[str]:
    """Return the names of every executable on *search_path*.

    Missing or unreadable directories are skipped.
    """
    names: set[str] = set()
    for directory in search_path.split(os.pathsep):
        if not directory:
            continue
        try:
            entries = list(Path(directory).iterdir())
        except OSError:
            continue
        names.update(entry.name for entry in entries if _is_executable(entry))
    return frozenset(names)

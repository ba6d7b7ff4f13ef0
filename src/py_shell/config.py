"""Shell configuration — the handful of settings read at startup.

Every process inherits an environment from its parent: ``PATH`` says
where to look for executables and ``HOME`` says where ``cd ~`` goes.
The shell reads those once, at startup, into an immutable
``ShellConfig`` and hands it to the parts that need it.

Design choices:
    - **Frozen dataclass** — configuration never changes mid-session.
    - **Built from a mapping, not from ``os.environ`` directly** — tests
      pass a plain dict with a fake ``PATH`` and ``HOME``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

DEFAULT_PROMPT = "$ "
BELL = "\a"


@dataclass(frozen=True)
class ShellConfig:
    """Settings shared by the shell, the locator, and the completer.

    Attributes:
        search_path: ``os.pathsep``-separated directories searched for
            executables, in order.
        home: The home directory used by ``cd ~`` (None when unset).
        prompt: The literal printed before every read.
        bell: The character written to ring the terminal bell.

    """

    search_path: str = os.defpath
    home: str | None = None
    prompt: str = DEFAULT_PROMPT
    bell: str = BELL

    @classmethod
    def from_environ(cls, environ: Mapping[str, str] | None = None) -> ShellConfig:
        """Build a config from an environment mapping.

        Args:
            environ: The environment to read (defaults to ``os.environ``).

        Returns:
            A config with ``search_path`` from ``PATH`` and ``home``
            from ``HOME``.

        """
        env = os.environ if environ is None else environ
        return cls(
            search_path=env.get("PATH", os.defpath),
            home=env.get("HOME") or None,
        )

    @property
    def search_dirs(self) -> list[str]:
        """Return the non-empty directories of the search path, in order."""
        return [d for d in self.search_path.split(os.pathsep) if d]

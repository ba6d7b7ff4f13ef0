"""Adaptive tab completer for the shell.

Pressing Tab asks the completer to finish the command name being typed.
What happens depends on how many known commands match:

- **None** — ring the bell; nothing is inserted.
- **One** — insert it, followed by a space.
- **Several** — if they all share a prefix longer than what was typed,
  silently extend the input to that prefix.  Otherwise the first Tab
  rings the bell, and a second Tab on the *same* input lists every
  match and redraws the prompt with the input unchanged.

The second case needs memory: the completer must know whether this Tab
is a repeat.  That memory is a ``CompletionState`` created once per
session and passed in explicitly, so its lifetime is visible and tests
can inspect it.

The completer separates **what to do** (``decide``, pure apart from
the state update, fully testable) from **doing it** (``complete``, the
readline callback that rings bells and prints listings).
"""

from __future__ import annotations

import readline
import sys
from dataclasses import dataclass
from enum import StrEnum
from functools import reduce
from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from collections.abc import Iterable

    from py_shell.shell import Shell

# Repeat count at which the candidate list is printed.
_LIST_ON_REPEAT = 2


class CompletionAction(StrEnum):
    """What a completion request resolved to."""

    BELL = "bell"
    ACCEPT = "accept"
    EXTEND = "extend"
    LIST = "list"


@dataclass(frozen=True)
class Completion:
    """The decision for one completion request.

    Attributes:
        action: What to do.
        candidates: Every matching command name, sorted.
        text: What readline should insert (ACCEPT and EXTEND only).

    """

    action: CompletionAction
    candidates: tuple[str, ...] = ()
    text: str = ""


@dataclass
class CompletionState:
    """Repeat tracking across completion requests.

    Attributes:
        last_attempted_input: The input of the last ambiguous request.
        repeat_count: How many times in a row that input was attempted.

    """

    last_attempted_input: str = ""
    repeat_count: int = 0


def common_prefix(a: str, b: str) -> str:
    """Return the longest common prefix of *a* and *b*."""
    length = 0
    for x, y in zip(a, b, strict=False):
        if x != y:
            break
        length += 1
    return a[:length]


def longest_common_prefix(names: Iterable[str]) -> str:
    """Fold ``common_prefix`` across *names* ("" for no names)."""
    iterator = iter(names)
    first = next(iterator, "")
    return reduce(common_prefix, iterator, first)


class Completer:
    """Tab completer for command names."""

    def __init__(
        self,
        shell: Shell,
        *,
        state: CompletionState | None = None,
        out: TextIO | None = None,
    ) -> None:
        """Create a completer attached to a shell.

        Args:
            shell: Supplies the known command names, prompt, and bell.
            state: Repeat-tracking state (a fresh one when omitted).
            out: Where bells and listings are written (the shell's
                stdout when omitted).

        """
        self._shell = shell
        self._state = state if state is not None else CompletionState()
        self._out = out
        self._matches: list[str] = []

    @property
    def state(self) -> CompletionState:
        """Return the repeat-tracking state."""
        return self._state

    def completions(self, text: str, line: str) -> list[str]:
        """Return the sorted command names that could complete *text*.

        Only the first word of a line is a command name; once the user
        has moved on to arguments there are no candidates.
        """
        words = line.lstrip().split()
        if words and (len(words) > 1 or line.endswith(" ")):
            return []
        return [name for name in self._shell.command_names if name.startswith(text)]

    def decide(self, text: str, line: str | None = None) -> Completion:
        """Decide what a Tab press on *text* should do, updating the state.

        Args:
            text: The word being completed.
            line: The whole input so far (defaults to *text*).  Repeat
                tracking compares whole inputs.

        Returns:
            The completion decision.

        """
        attempted = text if line is None else line
        candidates = tuple(self.completions(text, attempted))

        if not candidates:
            self._state.repeat_count = 0
            self._state.last_attempted_input = attempted
            return Completion(CompletionAction.BELL)

        if len(candidates) == 1:
            return Completion(CompletionAction.ACCEPT, candidates, candidates[0] + " ")

        prefix = longest_common_prefix(candidates)
        if len(prefix) > len(text):
            return Completion(CompletionAction.EXTEND, candidates, prefix)

        if attempted == self._state.last_attempted_input:
            self._state.repeat_count += 1
        else:
            self._state.repeat_count = 1
            self._state.last_attempted_input = attempted

        if self._state.repeat_count < _LIST_ON_REPEAT:
            return Completion(CompletionAction.BELL, candidates)
        return Completion(CompletionAction.LIST, candidates)

    def complete(self, text: str, state: int) -> str | None:
        """Readline callback — return the *state*-th insertion for *text*.

        The decision is made once, on ``state == 0``; bells and listings
        are written then.  Later calls only page through the result.
        """
        if state == 0:
            line = readline.get_line_buffer()
            completion = self.decide(text, line)
            self._perform(completion, line)
            self._matches = [completion.text] if completion.text else []
        if state < len(self._matches):
            return self._matches[state]
        return None

    def _perform(self, completion: Completion, line: str) -> None:
        """Write the bell or the candidate listing."""
        out = self._out if self._out is not None else sys.stdout
        config = self._shell.config
        if completion.action is CompletionAction.BELL:
            out.write(config.bell)
        elif completion.action is CompletionAction.LIST:
            out.write("\n" + " ".join(completion.candidates) + "\n")
            out.write(config.prompt + line)
        else:
            return
        out.flush()

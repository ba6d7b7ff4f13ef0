"""Interactive REPL (Read-Eval-Print Loop) for the shell.

The REPL is the thin I/O wrapper around ``Shell``:

    1. **Read** — print ``$ `` and read one line.
    2. **Eval** — pass it to ``shell.execute()``; output streams straight
       to the terminal as the command runs.
    3. **Loop** — until ``exit`` or end of input.

Startup reads the configuration from the environment, discovers the
executables on ``PATH`` once (for completion), and wires the completer
into readline.  Readline's own bell is switched off: the completer
decides when to ring.

Exit statuses: 0 for ``exit`` or end of input, 1 if reading input
fails for any other reason.
"""

import readline
import sys

from py_shell.completer import Completer, CompletionState
from py_shell.config import ShellConfig
from py_shell.shell import Shell

STATUS_READ_ERROR = 1


def read_line(prompt: str) -> str:
    """Print *prompt*, read one line, and strip any carriage return.

    Raises:
        EOFError: At end of input.
        OSError: If the input stream fails.
        UnicodeDecodeError: If the line is not valid UTF-8.

    """
    return input(prompt).rstrip("\r\n")


def install_completer(completer: Completer) -> None:
    """Wire *completer* into readline as the Tab handler."""
    readline.set_completer(completer.complete)
    readline.set_completer_delims(" \t")
    readline.parse_and_bind("tab: complete")
    readline.parse_and_bind("set bell-style none")


def run() -> None:
    """Start the shell and run the interactive loop.

    This is the console-script entrypoint.  It handles:
    - Configuration and command discovery.
    - Completion wiring.
    - The read-eval loop.
    - Ctrl+C (abandon the line) and Ctrl+D (leave with status 0).
    """
    config = ShellConfig.from_environ()
    shell = Shell(config=config)
    install_completer(Completer(shell, state=CompletionState()))

    while True:
        try:
            line = read_line(config.prompt)
        except EOFError:
            print()  # noqa: T201
            sys.exit(0)
        except KeyboardInterrupt:
            print()  # noqa: T201
            continue
        except (OSError, UnicodeDecodeError) as e:
            print(f"Error reading input: {e}", file=sys.stderr)  # noqa: T201
            sys.exit(STATUS_READ_ERROR)

        shell.execute(line)

"""PyShell — an interactive command-line shell.

The shell reads a line, splits it into words with the usual quoting
rules, and runs the first word as either a builtin or an executable
found on ``PATH``.  Two commands can be joined with ``|`` and one
output stream can be redirected to a file.

Subsystems:

- ``tokenizer`` — quote/escape-aware word splitting.
- ``builtins`` — the five builtin commands.
- ``execution`` — runnables, redirection, and pipelines.
- ``completer`` — adaptive tab completion.
- ``repl`` — the interactive loop.
"""

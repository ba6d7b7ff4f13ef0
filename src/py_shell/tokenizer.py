"""Tokenizer — split an input line into words the way a shell does.

A shell line is not split on every space.  Quotes and backslashes
change what a space means:

- ``'single quotes'`` make everything inside literal, backslashes too.
- ``"double quotes"`` keep spaces, but a backslash still escapes
  ``\\``, ``$``, ``"`` and a newline.  Before any other character the
  backslash stays, so ``"a\\nb"`` keeps its backslash.
- Outside quotes, a backslash escapes the next character, whatever it
  is — ``foo\\ bar`` is one word.

Closing a quote does not end the word.  ``foo'bar baz'qux`` is the
single word ``foobar bazqux``: quoted and unquoted pieces that touch
are glued together.

An unterminated quote is closed at the end of the line rather than
reported as an error.
"""

# Characters a backslash may escape inside double quotes.
_DOUBLE_QUOTE_ESCAPES = frozenset('\\$"\n')

_SINGLE_QUOTE = "'"
_DOUBLE_QUOTE = '"'
_BACKSLASH = "\\"
_SEPARATOR = " "


def tokenize(line: str) -> list[str]:
    """Split *line* into words, honouring quotes and escapes.

    Args:
        line: One line of user input, without its trailing newline.

    Returns:
        The words in order.  Runs of spaces never produce empty words.

    """
    tokens: list[str] = []
    current: list[str] = []
    in_single = False
    in_double = False

    i = 0
    while i < len(line):
        ch = line[i]
        nxt = line[i + 1] if i + 1 < len(line) else None

        if ch == _SINGLE_QUOTE and not in_double:
            in_single = not in_single
        elif ch == _DOUBLE_QUOTE and not in_single:
            in_double = not in_double
        elif ch == _BACKSLASH and not in_single and nxt is not None:
            if not in_double:
                current.append(nxt)
                i += 1
            elif nxt in _DOUBLE_QUOTE_ESCAPES:
                current.append(nxt)
                i += 1
            else:
                current.append(ch)
        elif ch == _SEPARATOR and not (in_single or in_double):
            if current:
                tokens.append("".join(current))
                current.clear()
        else:
            current.append(ch)
        i += 1

    if current:
        tokens.append("".join(current))
    return tokens

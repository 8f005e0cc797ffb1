"""
Colored terminal output.

colored_output() is what the operations use to report progress to the
person watching the container start. It never raises on a bad color name.
"""

import re
import sys
from enum import Enum
from typing import TextIO


class Color(Enum):
    """ANSI color codes selectable by name."""

    RED = "\033[0;31m"
    GREEN = "\033[0;32m"
    ORANGE = "\033[0;33m"
    CYAN = "\033[0;36m"


RESET = "\033[0m"

_SIMPLE_ESCAPES = {
    "\\": "\\",
    "a": "\a",
    "b": "\b",
    "e": "\033",
    "E": "\033",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
}

# \0NNN (octal), \xHH (hex), \c (stop), or any single escaped character
_ESCAPE_RE = re.compile(r"\\(0[0-7]{0,3}|x[0-9a-fA-F]{1,2}|c|.)", re.DOTALL)


def color_code(color: "Color | str") -> str:
    """Return the escape code for a color, or "" if the name is unknown."""
    if isinstance(color, Color):
        return color.value
    try:
        return Color[str(color).upper()].value
    except KeyError:
        return ""


def interpret_escapes(message: str) -> tuple[str, bool]:
    """Expand backslash escapes the way ``echo -e`` does.

    Returns:
        The expanded text and whether a ``\\c`` cut it short (in which case
        no trailing newline should follow).
    """
    out = []
    pos = 0
    for match in _ESCAPE_RE.finditer(message):
        out.append(message[pos : match.start()])
        token = match.group(1)
        if token == "c":
            return "".join(out), True
        if token.startswith("0"):
            # Wraps to one byte, so \0400 is NUL as in echo
            out.append(chr(int(token[1:] or "0", 8) & 0xFF))
        elif token.startswith("x") and len(token) > 1:
            out.append(chr(int(token[1:], 16)))
        elif token in _SIMPLE_ESCAPES:
            out.append(_SIMPLE_ESCAPES[token])
        else:
            out.append(match.group(0))
        pos = match.end()
    out.append(message[pos:])
    return "".join(out), False


def colorize(color: "Color | str", message: str) -> str:
    """Wrap a message in a color code and the reset sequence.

    Escapes in the message are expanded. A trailing newline is included
    unless the message contains ``\\c``.
    """
    text, stopped = interpret_escapes(message)
    return f"{color_code(color)}{text}{RESET}" + ("" if stopped else "\n")


def colored_output(color: "Color | str", message: str, stream: TextIO | None = None) -> None:
    """Write a colored message to stdout (or the given stream)."""
    stream = stream if stream is not None else sys.stdout
    stream.write(colorize(color, message))
    stream.flush()

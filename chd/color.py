"""ANSI colour codes and coloured terminal output."""

from __future__ import annotations

import sys
from enum import IntEnum
from typing import TextIO


class Foreground(IntEnum):
    DEFAULT = 39
    BLACK = 30
    RED = 31
    GREEN = 32
    YELLOW = 33
    BLUE = 34
    MAGENTA = 35
    CYAN = 36
    WHITE = 37


class Background(IntEnum):
    DEFAULT = 49
    BLACK = 40
    RED = 41
    GREEN = 42
    YELLOW = 43
    BLUE = 44
    MAGENTA = 45
    CYAN = 46
    WHITE = 47


class TextStyle(IntEnum):
    RESET = 0
    BOLD = 1
    UNDERLINE = 4
    REVERSED = 7


RESET_SEQUENCE = "\033[0m"


def colorize(
    text: str,
    fg: Foreground = Foreground.DEFAULT,
    bg: Background = Background.DEFAULT,
    style: TextStyle = TextStyle.RESET,
) -> str:
    """Wrap ``text`` in the escape sequence for the given colours and style."""
    return f"\033[{int(style)};{int(fg)};{int(bg)}m{text}{RESET_SEQUENCE}"


def printc(
    text: str,
    fg: Foreground = Foreground.DEFAULT,
    bg: Background = Background.DEFAULT,
    style: TextStyle = TextStyle.RESET,
    file: TextIO | None = None,
) -> None:
    """Write ``text`` coloured, without adding a newline."""
    stream = sys.stdout if file is None else file
    stream.write(colorize(text, fg, bg, style))
    stream.flush()
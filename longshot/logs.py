"""
longshot.logs — Console logging setup
======================================

Longshot prints to a terminal someone is watching, so every record is
rendered as ``HH:MM:SS› (symbol) message`` with a one-character level
symbol instead of a level name.  The per-event log blocks
(:mod:`longshot.services.log_block`) reuse the same symbols.

Styling goes through a module-level :class:`rich.console.Console`;
``set_colors(False)`` swaps in one that emits plain text.
"""

from __future__ import annotations

import logging
import sys

from rich.console import Console
from rich.text import Text

_LEVEL_STYLES: dict[int, tuple[str, str]] = {
    logging.DEBUG: ("*", "bright_black"),
    logging.INFO: ("+", "cyan"),
    logging.WARNING: ("!", "yellow"),
    logging.ERROR: ("✗", "red"),
    logging.CRITICAL: ("✗", "red"),
}

HIGHLIGHT_STYLE = "bright_green"
BANNER_STYLE = "bright_blue"

BANNER = r""".____                               .__            __
|    |    ____   ____    ____  _____|  |__   _____/  |_
|    |   /  _ \ /    \  / ___\/  ___/  |  \ /  _ \   __\
|    |__(  <_> )   |  \/ /_/  >___ \|   Y  (  <_> )  |
|_______ \____/|___|  /\___  /____  >___|  /\____/|__|
        \/          \//_____/     \/     \/             """


def _make_console(colors: bool) -> Console:
    return Console(
        color_system="standard" if colors else None,
        force_terminal=colors,
        no_color=not colors,
        highlight=False,
        soft_wrap=True,
    )


console = _make_console(True)


def set_colors(enabled: bool) -> None:
    global console
    console = _make_console(enabled)


def render(text: Text | str) -> str:
    """*text* as it would appear on the console, ANSI codes included."""
    with console.capture() as capture:
        console.print(text, end="", markup=False, emoji=False)
    return capture.get()


def level_symbol(level: int) -> Text:
    """One-character marker for a logging level (``+``, ``!``, ``✗`` …)."""
    symbol, style = _LEVEL_STYLES.get(level, ("-", "blue"))
    return Text(symbol, style=style)


def symbol_line(level: int, message: str, prefix: str = "", highlighted: bool = False) -> str:
    """Render ``<prefix> (<symbol>) <message>`` for the console."""
    line = Text.assemble(
        f"{prefix} (",
        level_symbol(level),
        ") ",
        (message, HIGHLIGHT_STYLE if highlighted else ""),
    )
    return render(line)


class SymbolFormatter(logging.Formatter):
    """``HH:MM:SS› (+) message`` — level names replaced by symbols."""

    def __init__(self) -> None:
        super().__init__(datefmt="%H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        timestamp = self.formatTime(record, self.datefmt)
        message = record.getMessage()
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return symbol_line(record.levelno, message, prefix=f"{timestamp}›")


def configure_logging(colors: bool = True, level: int = logging.INFO) -> None:
    """Install the console handler on the root logger and print the banner."""
    set_colors(colors)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(SymbolFormatter())
    logging.basicConfig(level=level, handlers=[handler], force=True)

    # Gateway and HTTP internals stay out of the console.
    logging.getLogger("discord").setLevel(logging.CRITICAL)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    console.print(Text(BANNER, style=BANNER_STYLE))
    console.print()


def pause_exit(code: int = 1) -> None:
    """Wait for the user to acknowledge a fatal error, then exit."""
    if sys.stdin is not None and sys.stdin.isatty():
        try:
            input("Press the enter key to exit...")
        except EOFError:
            pass
    sys.exit(code)

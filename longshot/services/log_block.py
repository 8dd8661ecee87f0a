"""
longshot.services.log_block — Buffered, timed log output for one event
=======================================================================

**Why this file exists:**
Dozens of sessions can handle messages at the same moment.  If each step
of a snipe logged on its own line, the console would be an unreadable
interleaving of half-finished attempts.  Instead every snipe collects its
lines in an :class:`EventLogBlock` and writes them out in one go.

Lifecycle::

    Open ──freeze_time()──▶ TimeFrozen ──flush()──▶ Flushed
      └──────────────────flush()──────────────────────▲

``flush()`` emits the whole block as a *single* logging record, and a
logging handler writes one record under its own lock, so two blocks
never interleave line by line.
"""

from __future__ import annotations

import enum
import logging
import time
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

from longshot.errors import LogBlockError
from longshot.logs import symbol_line

if TYPE_CHECKING:
    from longshot.engine.profile import Profile
    from longshot.services.location_cache import Location

# Records on this logger carry a fully rendered block; see configure_block_output().
BLOCK_LOGGER_NAME = "longshot.blocks"
block_logger = logging.getLogger(BLOCK_LOGGER_NAME)


class BlockState(enum.Enum):
    OPEN = "open"
    TIME_FROZEN = "time_frozen"
    FLUSHED = "flushed"


@dataclass(frozen=True, slots=True)
class LogEntry:
    severity: int
    text: str
    highlighted: bool = False

    def render(self) -> str:
        return symbol_line(self.severity, self.text, highlighted=self.highlighted)


class EventLogBlock:
    """Ordered, timed log lines for one snipe attempt.

    Parameters
    ----------
    profile:
        The account that handled the event; shown in the header line.
    """

    def __init__(self, profile: Profile) -> None:
        self.profile = profile
        self.entries: list[LogEntry] = []
        self.state = BlockState.OPEN
        self.elapsed_ms: int | None = None
        self._start = time.perf_counter()

    # -----------------------------------------------------------------------
    # Building
    # -----------------------------------------------------------------------
    def add_entry(self, severity: int, text: str, highlighted: bool = False) -> None:
        if self.state is BlockState.FLUSHED:
            raise LogBlockError("Cannot add entries to a flushed log block")
        self.entries.append(LogEntry(severity, text, highlighted))

    def info(self, text: str) -> None:
        self.add_entry(logging.INFO, text)

    def success(self, text: str) -> None:
        self.add_entry(logging.INFO, text, highlighted=True)

    def warning(self, text: str) -> None:
        self.add_entry(logging.WARNING, text)

    def error(self, text: str) -> None:
        self.add_entry(logging.ERROR, text)

    def freeze_time(self) -> int:
        """Stop the clock.  Only the first call counts; returns the elapsed ms."""
        if self.state is BlockState.OPEN:
            self.elapsed_ms = int((time.perf_counter() - self._start) * 1000)
            self.state = BlockState.TIME_FROZEN
        if self.elapsed_ms is None:
            raise LogBlockError("Log block has no elapsed time")
        return self.elapsed_ms

    # -----------------------------------------------------------------------
    # Output
    # -----------------------------------------------------------------------
    def render(self, location: Location | str, sender: str) -> list[str]:
        """The block's lines without emitting them."""
        header = (
            f"\n{datetime.now().strftime('%H:%M:%S')} › "
            f"({self.profile}) [{location} > {sender}]"
        )
        lines = [header]
        lines.extend(entry.render() for entry in self.entries)
        lines.append(f"Finished in: {self.elapsed_ms}ms")
        return lines

    def flush(self, location: Location | str, sender: str) -> str:
        """Write the whole block as one record.  Valid exactly once."""
        if self.state is BlockState.FLUSHED:
            raise LogBlockError("Log block was already flushed")
        self.freeze_time()

        text = "\n".join(self.render(location, sender))
        self.state = BlockState.FLUSHED
        block_logger.log(self._block_level(), text)
        return text

    def _block_level(self) -> int:
        return max((e.severity for e in self.entries), default=logging.INFO)


def configure_block_output(handler: logging.Handler) -> None:
    """Send blocks to *handler* verbatim, bypassing the root formatter.

    Blocks render their own header and level symbols, so they must not be
    prefixed a second time by :class:`longshot.logs.SymbolFormatter`.
    """
    handler.setFormatter(logging.Formatter("%(message)s"))
    block_logger.addHandler(handler)
    block_logger.propagate = False

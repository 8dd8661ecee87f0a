"""
longshot.engine.state — Cross-session coordination state
=========================================================

One :class:`SharedState` exists per process and is handed to every session
bot when it is built.  Only two things in it are mutable: the claim
registry (which codes this process already went after) and the readiness
counters.  Each sits behind its own lock, and neither lock is ever held
across an ``await``.
"""

from __future__ import annotations

import logging
from threading import Lock
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx

    from longshot.config import LongshotConfig
    from longshot.engine.profile import Profile

logger = logging.getLogger(__name__)


class ClaimRegistry:
    """Process-wide set of codes that have already been claimed.

    Thread-safe.  Grows monotonically; nothing is ever removed.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._codes: set[str] = set()

    def try_claim(self, code: str) -> bool:
        """Atomically test-and-insert *code*.

        Returns True only to the one caller that inserted it; every other
        caller (concurrent or later) gets False.
        """
        with self._lock:
            if code in self._codes:
                return False
            self._codes.add(code)
            return True

    def __contains__(self, code: object) -> bool:
        with self._lock:
            return code in self._codes

    def __len__(self) -> int:
        with self._lock:
            return len(self._codes)


class SharedState:
    """State shared by every session of one process.

    Parameters
    ----------
    http:
        The shared ``httpx.AsyncClient`` (safe for concurrent use).
    config:
        The loaded :class:`LongshotConfig`.
    token_count:
        How many sessions the supervisor is going to start.
    """

    def __init__(self, http: httpx.AsyncClient, config: LongshotConfig, token_count: int) -> None:
        self.http = http
        self.config = config
        self.token_count = token_count
        self.claims = ClaimRegistry()

        self._counter_lock = Lock()
        self._connected = 0
        self._total_guilds = 0

    @property
    def connected(self) -> int:
        return self._connected

    @property
    def total_guilds(self) -> int:
        return self._total_guilds

    def record_session_ready(self, profile: Profile, guild_count: int) -> bool:
        """Count one more connected session.

        Each session calls this exactly once.  Returns True when this call
        brought the process to "every account connected".
        """
        with self._counter_lock:
            self._total_guilds += guild_count
            self._connected += 1
            connected = self._connected
            total_guilds = self._total_guilds

        logger.info(
            "Connected as %s! Now sniping in %d guilds...",
            profile, guild_count,
        )

        all_connected = connected == self.token_count
        if all_connected and self.token_count > 1:
            logger.info(
                "Connected to all %d accounts! Sniping in %d guilds in total!",
                self.token_count, total_guilds,
            )
        return all_connected

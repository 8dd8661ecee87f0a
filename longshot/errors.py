"""
longshot.errors — Exception hierarchy
======================================

Three tiers, matching how far a failure is allowed to travel:

* **Fatal at startup** — :class:`ConfigError`, :class:`FatalError`.  These
  reach ``main()`` which prints the message, waits for the user to
  acknowledge it, and exits.
* **Per-session** — connection failures are caught by the supervisor and
  only that account is dropped.
* **Per-event** — :class:`LocationError` and friends are handled inside the
  sniper pipeline and degrade to a default value.
"""

from __future__ import annotations

import enum


class LongshotError(Exception):
    """Base class for every error raised by Longshot itself."""


class ConfigError(LongshotError):
    """``config.yaml`` is missing, unreadable, or lacks a required key."""


class FatalError(LongshotError):
    """Unrecoverable startup condition — the process must exit."""


class LocationError(LongshotError):
    """A channel or guild name could not be resolved."""


class LogBlockError(LongshotError):
    """An :class:`EventLogBlock` was used outside its valid state."""


class ProfileErrorKind(enum.Enum):
    UNAUTHORIZED = "Main token verification failed. Check token validity."
    RATE_LIMITED = "Rate-limited. Try again later..."
    CONNECTION_ERROR = "Connection failed. Check network connection!"
    OTHER = "Received unknown response for Discord..."


class ProfileError(LongshotError):
    """Fetching the profile behind a token failed."""

    def __init__(self, kind: ProfileErrorKind) -> None:
        super().__init__(kind.value)
        self.kind = kind

    def to_fatal(self) -> FatalError:
        return FatalError(self.kind.value)

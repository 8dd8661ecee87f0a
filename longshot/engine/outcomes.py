"""
longshot.engine.outcomes — Redeem outcomes and their presentation
==================================================================

Single source of truth for what a redeem attempt *means*.  The console log
block and the webhook embed both read from :data:`PRESENTATION`, so the
two can never disagree about an outcome.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

__all__ = [
    "Outcome",
    "OutcomePresentation",
    "PRESENTATION",
    "classify_status",
    "COLOR_SUCCESS",
    "COLOR_FAILURE",
    "COLOR_UNKNOWN",
]

# ---------------------------------------------------------------------------
# Embed colors
# ---------------------------------------------------------------------------
COLOR_SUCCESS = 0x43B581
COLOR_FAILURE = 0xF04747
COLOR_UNKNOWN = 0x000000


class Outcome(enum.Enum):
    """Classified result of one redeem attempt."""

    SUCCESS = "success"
    FAKE_OR_EXPIRED = "fake_or_expired"
    ALREADY_REDEEMED = "already_redeemed"
    RATE_LIMITED = "rate_limited"
    PLATFORM_ERROR = "platform_error"
    CONNECTION_ERROR = "connection_error"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class OutcomePresentation:
    """Everything outcome-dependent that gets shown to a human."""

    log_text: str
    severity: int  # logging level
    title: str
    description: str
    color: int
    highlighted: bool = False


PRESENTATION: dict[Outcome, OutcomePresentation] = {
    Outcome.SUCCESS: OutcomePresentation(
        log_text="Yay! Claimed code!",
        severity=logging.INFO,
        title="Yay! Claimed a Nitro!",
        description="Nitro successfully claimed!",
        color=COLOR_SUCCESS,
        highlighted=True,
    ),
    Outcome.FAKE_OR_EXPIRED: OutcomePresentation(
        log_text="Code was fake or expired.",
        severity=logging.WARNING,
        title="Code was fake or expired",
        description="The code was invalid or already expired.",
        color=COLOR_FAILURE,
    ),
    Outcome.ALREADY_REDEEMED: OutcomePresentation(
        log_text="Code was already redeemed.",
        severity=logging.ERROR,
        title="Code was already redeemed",
        description="Someone beat us to it!",
        color=COLOR_FAILURE,
    ),
    Outcome.RATE_LIMITED: OutcomePresentation(
        log_text="Rate-limited...",
        severity=logging.WARNING,
        title="Rate Limited",
        description="Rate-limited by Discord.",
        color=COLOR_FAILURE,
    ),
    Outcome.PLATFORM_ERROR: OutcomePresentation(
        log_text="There was an error on Discord's side.",
        severity=logging.ERROR,
        title="Discord Error",
        description="There was an error on Discord's side.",
        color=COLOR_FAILURE,
    ),
    Outcome.CONNECTION_ERROR: OutcomePresentation(
        log_text="Connection failed. Check network connection!",
        severity=logging.WARNING,
        title="Connection Error",
        description="Failed to connect to Discord.",
        color=COLOR_FAILURE,
    ),
    Outcome.UNKNOWN: OutcomePresentation(
        log_text="Received unknown response...",
        severity=logging.ERROR,
        title="Unknown Response",
        description="Received an unknown response from Discord.",
        color=COLOR_UNKNOWN,
    ),
}

# HTTP status → outcome.  Anything not listed is UNKNOWN.
_STATUS_OUTCOMES: dict[int, Outcome] = {
    200: Outcome.SUCCESS,
    400: Outcome.ALREADY_REDEEMED,
    404: Outcome.FAKE_OR_EXPIRED,
    405: Outcome.PLATFORM_ERROR,
    429: Outcome.RATE_LIMITED,
}


def classify_status(status: int) -> Outcome:
    """Map a redeem response status code to its :class:`Outcome`.

    Transport failures never produce a status; callers map those to
    :attr:`Outcome.CONNECTION_ERROR` themselves.
    """
    return _STATUS_OUTCOMES.get(status, Outcome.UNKNOWN)

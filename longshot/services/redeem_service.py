"""
longshot.services.redeem_service — Discord REST calls
======================================================

Two requests matter to Longshot:

* ``POST /entitlements/gift-codes/{code}/redeem`` — the race itself.  Sent
  exactly once per code, never retried; the response is classified by
  :func:`longshot.engine.outcomes.classify_status`.
* ``GET /users/@me`` — startup check that the main token works.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import httpx

from longshot.engine.outcomes import PRESENTATION, Outcome, classify_status
from longshot.engine.profile import Profile
from longshot.errors import ProfileError, ProfileErrorKind

if TYPE_CHECKING:
    from longshot.services.log_block import EventLogBlock

logger = logging.getLogger(__name__)

DISCORD_API = "https://discord.com/api/v9"


def redeem_url(code: str) -> str:
    return f"{DISCORD_API}/entitlements/gift-codes/{code}/redeem"


async def redeem_code(
    client: httpx.AsyncClient,
    token: str,
    code: str,
    log: EventLogBlock,
) -> Outcome:
    """Fire the redeem request for *code* and record the outcome in *log*."""
    try:
        response = await client.post(
            redeem_url(code),
            headers={"Authorization": token, "Content-Length": "0"},
            content=b"",
        )
    except httpx.RequestError:
        outcome = Outcome.CONNECTION_ERROR
        _log_outcome(log, outcome)
        return outcome

    outcome = classify_status(response.status_code)
    if outcome is Outcome.UNKNOWN:
        _log_unknown_response(log, response)
    else:
        _log_outcome(log, outcome)
    return outcome


def _log_outcome(log: EventLogBlock, outcome: Outcome) -> None:
    view = PRESENTATION[outcome]
    log.add_entry(view.severity, view.log_text, highlighted=view.highlighted)


def _log_unknown_response(log: EventLogBlock, response: httpx.Response) -> None:
    view = PRESENTATION[Outcome.UNKNOWN]
    reason = httpx.codes.get_reason_phrase(response.status_code)
    suffix = f" {reason}" if reason else ""
    log.add_entry(
        view.severity,
        f"{view.log_text} ({response.status_code}{suffix})",
    )

    try:
        body = response.content.decode("utf-8")
    except UnicodeDecodeError:
        body = None

    if body:
        log.add_entry(view.severity, f"...with this body: {body}")
    else:
        log.add_entry(view.severity, "...and couldn't parse the body of the response.")


async def fetch_profile(client: httpx.AsyncClient, token: str) -> Profile:
    """Resolve the account behind *token*.

    Raises
    ------
    ProfileError
        ``UNAUTHORIZED`` on 401, ``RATE_LIMITED`` on 429,
        ``CONNECTION_ERROR`` on transport failure, ``OTHER`` for any other
        status or an unparseable body.
    """
    try:
        response = await client.get(
            f"{DISCORD_API}/users/@me",
            headers={"Authorization": token},
        )
    except httpx.RequestError as exc:
        raise ProfileError(ProfileErrorKind.CONNECTION_ERROR) from exc

    if response.status_code == 401:
        raise ProfileError(ProfileErrorKind.UNAUTHORIZED)
    if response.status_code == 429:
        raise ProfileError(ProfileErrorKind.RATE_LIMITED)
    if response.status_code != 200:
        logger.debug("Profile fetch returned %d: %s", response.status_code, response.text)
        raise ProfileError(ProfileErrorKind.OTHER)

    try:
        return Profile.from_payload(response.json())
    except (ValueError, KeyError, TypeError) as exc:
        raise ProfileError(ProfileErrorKind.OTHER) from exc

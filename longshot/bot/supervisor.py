"""
longshot.bot.supervisor — Startup Gate & Session Fan-out
=========================================================

Wiring:
1. Open the shared HTTP client.
2. Verify the main token by fetching its profile (fatal on failure — no
   session has accepted live traffic yet, so blocking here is fine).
3. Deduplicate the sniping tokens.
4. Start one :class:`LongshotBot` per token, each in its own task.
   A token that fails to connect is reported and dropped, never retried.
5. When the last session ends, give up with :class:`FatalError`.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import NoReturn

import discord
import httpx

from longshot.bot.core import LongshotBot
from longshot.config import LongshotConfig
from longshot.engine.state import SharedState
from longshot.errors import FatalError, ProfileError
from longshot.services.redeem_service import fetch_profile

logger = logging.getLogger(__name__)

BotFactory = Callable[[SharedState, str, int], LongshotBot]


def unique_tokens(tokens: list[str]) -> list[str]:
    """Sorted tokens with duplicates and blanks removed."""
    return sorted({t.strip() for t in tokens if t and t.strip()})


async def run_session(bot: LongshotBot, token: str, index: int) -> None:
    """Run one account until its connection ends.  Never raises."""
    try:
        await bot.start(token)
    except (discord.DiscordException, OSError):
        logger.error("Connection failed for token #%d. Check token validity.", index)
    except Exception:
        logger.exception("Session for token #%d failed unexpectedly.", index)
    finally:
        if not bot.is_closed():
            await bot.close()
    logger.warning("Session for token #%d has ended.", index)


async def run_sessions(
    config: LongshotConfig,
    *,
    http: httpx.AsyncClient | None = None,
    bot_factory: BotFactory = LongshotBot,
) -> NoReturn:
    """Validate, fan out, and wait for every session to end.

    Raises
    ------
    FatalError
        Main token rejected, no tokens to snipe on, or every session lost.
    """
    owns_http = http is None
    client = http if http is not None else httpx.AsyncClient()

    try:
        try:
            main_profile = await fetch_profile(client, config.main_token)
        except ProfileError as exc:
            raise exc.to_fatal() from exc

        logger.info("Starting Nitro sniping for %s!", main_profile)

        tokens = unique_tokens(config.sniping_tokens())
        if not tokens:
            raise FatalError("At least one token is required to start sniping...")

        logger.info("Sniping on %d account(s)! Connecting to Discord...", len(tokens))

        state = SharedState(client, config, len(tokens))
        sessions: list[asyncio.Task] = []
        for index, token in enumerate(tokens):
            try:
                bot = bot_factory(state, token, index)
            except Exception:
                logger.exception("Failed to create Discord client for token #%d.", index)
                continue
            sessions.append(
                asyncio.create_task(run_session(bot, token, index), name=f"session-{index}")
            )

        # One session's failure must never cancel the others.
        await asyncio.gather(*sessions, return_exceptions=True)
    finally:
        if owns_http:
            await client.aclose()

    raise FatalError("Lost all connections.")

"""
longshot.bot.cogs.sniper — Gift Code Sniping Pipeline
======================================================

Listens for on_message events on one account and races to redeem every
gift code it sees.

Pipeline:
1. on_message fires → readiness gate (profile must be known)
2. Gate checks (blacklisted guild, no gift link)
3. Claim the code in the shared registry — losers stop here silently
4. Redeem request → Outcome, recorded in a fresh EventLogBlock
5. Freeze the timer, resolve the location, flush the block
6. Hand the outcome to the webhook dispatcher (not awaited)
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

import discord
from discord.ext import commands

from longshot.engine.events import ChatEvent
from longshot.engine.matcher import extract_code
from longshot.engine.outcomes import Outcome
from longshot.engine.profile import SlotState
from longshot.errors import LocationError
from longshot.services.location_cache import Location
from longshot.services.log_block import EventLogBlock
from longshot.services.notify_service import dispatch_notification
from longshot.services.redeem_service import redeem_code

if TYPE_CHECKING:
    from longshot.bot.core import LongshotBot

logger = logging.getLogger(__name__)


class Sniper(commands.Cog, name="Sniper"):
    """Claims, redeems, logs and reports gift codes for one account."""

    def __init__(
        self,
        bot: LongshotBot,
        matcher: Callable[[str], str | None] = extract_code,
    ) -> None:
        self.bot = bot
        self.matcher = matcher

    @commands.Cog.listener()
    async def on_message(self, message: discord.Message) -> None:
        """Entry point for every message this account can see."""
        try:
            if not await self._ensure_ready():
                return
            await self.handle_event(ChatEvent.from_message(message))
        except Exception:
            logger.exception(
                "Error processing message %s on token #%d",
                message.id,
                self.bot.index,
            )

    async def _ensure_ready(self) -> bool:
        slot = self.bot.profile_slot
        if slot.state is SlotState.UNINITIALIZED:
            await self.bot.initialize_from_api()
        return slot.get() is not None

    async def handle_event(self, event: ChatEvent) -> Outcome | None:
        """Run one event through the pipeline.

        Returns the outcome, or ``None`` when the event was discarded
        before a redeem request was made.
        """
        state = self.bot.state
        profile = self.bot.profile_slot.get()
        if profile is None:
            return None

        # Gate 1: Blacklisted guild
        if state.config.is_guild_blacklisted(event.guild_id):
            return None

        # Gate 2: No gift link
        code = self.matcher(event.content)
        if code is None:
            return None

        # Gate 3: Another event (any session) already went for this code
        if not state.claims.try_claim(code):
            logger.debug("Skipping already claimed code %s", code)
            return None

        log = EventLogBlock(profile)
        log.info(f"Claiming code: {code}!")

        outcome = await redeem_code(state.http, self.bot.redeem_token, code, log)
        log.freeze_time()

        try:
            location = await self.bot.location_cache.resolve(event.channel_id, event.guild_id)
        except LocationError as exc:
            logger.debug("Location lookup failed: %s", exc)
            log.error("Failed requesting location for event.")
            location = Location.unknown()

        log.flush(location, event.author_tag)

        if state.config.webhook:
            dispatch_notification(state.http, state.config.webhook, event, profile, outcome)

        return outcome


async def setup(bot: LongshotBot) -> None:
    await bot.add_cog(Sniper(bot))

"""
longshot.bot.core — One Bot per Account
========================================

**Why this file exists:**
Every configured token gets its own :class:`LongshotBot`.  A bot carries
only what belongs to its account (token, profile slot, location cache)
plus a reference to the process-wide :class:`SharedState` it was built
with, so every cog can reach the shared claim registry via
``self.bot.state``.

Readiness is reported to the shared state exactly once per session,
either from ``on_ready`` or, when a message arrives first, from
:meth:`LongshotBot.initialize_from_api`.
"""

from __future__ import annotations

import logging

import discord
from discord.ext import commands

from longshot.engine.profile import Profile, ProfileSlot
from longshot.engine.state import SharedState
from longshot.services.location_cache import LocationCache

logger = logging.getLogger(__name__)

# Cog modules to load on startup.
EXTENSIONS: list[str] = [
    "longshot.bot.cogs.sniper",
]

# REST page size when counting guilds without a gateway cache.
GUILD_PAGE_LIMIT = 200


class LongshotBot(commands.Bot):
    """Bot subclass for one sniping account.

    Parameters
    ----------
    state:
        The process-wide :class:`SharedState`.
    token:
        This session's credential.
    index:
        Position of the token in the sorted token list (used in log lines
        so tokens themselves are never printed).
    """

    def __init__(self, state: SharedState, token: str, index: int = 0) -> None:
        intents = discord.Intents.default()
        intents.message_content = True    # Gift links live in message text
        intents.presences = False

        super().__init__(
            command_prefix=commands.when_mentioned,
            intents=intents,
            help_command=None,
        )

        self.state = state
        self.token = token
        self.index = index
        self.profile_slot = ProfileSlot()
        self.location_cache = LocationCache(self)

    @property
    def redeem_token(self) -> str:
        """Token sent with redeem requests from this session."""
        if self.state.config.redeem_on_main:
            return self.state.config.main_token
        return self.token

    # -----------------------------------------------------------------------
    # Lifecycle hooks
    # -----------------------------------------------------------------------
    async def setup_hook(self) -> None:
        """Load cog extensions before connecting.

        A cog that fails to load is logged and skipped.
        """
        for ext in EXTENSIONS:
            try:
                await self.load_extension(ext)
                logger.debug("Loaded extension %s for token #%d", ext, self.index)
            except Exception as exc:
                logger.error("Failed to load extension %s: %s", ext, exc)

    async def on_ready(self) -> None:
        """Fired on every (re)connect; only the first one initializes."""
        if not self.profile_slot.begin():
            return
        assert self.user is not None  # guaranteed after on_ready
        self._finish_initialization(Profile.from_user(self.user), len(self.guilds))

    async def initialize_from_api(self) -> None:
        """Initialize from REST when a message arrives before ``on_ready``."""
        if not self.profile_slot.begin():
            return
        user = self.user  # set by login(), before any gateway event
        if user is None:
            self.profile_slot.reset()
            return
        try:
            guild_count = 0
            async for _guild in self.fetch_guilds(limit=GUILD_PAGE_LIMIT):
                guild_count += 1
        except (discord.HTTPException, discord.InvalidData):
            logger.warning("Early initialization failed for token #%d", self.index)
            self.profile_slot.reset()
            return
        self._finish_initialization(Profile.from_user(user), guild_count)

    def _finish_initialization(self, profile: Profile, guild_count: int) -> None:
        self.profile_slot.set(profile)
        self.state.record_session_ready(profile, guild_count)

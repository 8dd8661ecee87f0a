"""
longshot.services.location_cache — Human-readable event locations
==================================================================

Turns a ``(channel_id, guild_id)`` pair into ``"Guild > #channel"`` for the
log block header.  Each session keeps its own cache because channel
visibility differs per account.  Lookups use the gateway cache first and
fall back to REST; only successful lookups are cached.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import aiohttp
import discord

from longshot.engine.events import user_to_tag
from longshot.errors import LocationError

if TYPE_CHECKING:
    from discord.ext import commands

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Location:
    guild: str | None
    channel: str

    def __str__(self) -> str:
        if self.guild is None:
            return f"DMs > {self.channel}"
        return f"{self.guild} > #{self.channel}"

    @classmethod
    def unknown(cls) -> Location:
        return cls(guild="Unknown", channel="unknown")


class LocationCache:
    """Per-session ``channel_id → Location`` cache."""

    def __init__(self, bot: commands.Bot) -> None:
        self._bot = bot
        self._locations: dict[int, Location] = {}

    def __len__(self) -> int:
        return len(self._locations)

    async def resolve(self, channel_id: int, guild_id: int | None) -> Location:
        """Return the location for *channel_id*, resolving it if needed.

        Raises
        ------
        LocationError
            If Discord refuses the lookup or the connection fails.
        """
        cached = self._locations.get(channel_id)
        if cached is not None:
            return cached

        try:
            channel = self._bot.get_channel(channel_id) or await self._bot.fetch_channel(channel_id)
            guild_name: str | None = None
            if guild_id is not None:
                guild = self._bot.get_guild(guild_id) or await self._bot.fetch_guild(guild_id)
                guild_name = guild.name
        except (
            discord.HTTPException,
            discord.InvalidData,
            aiohttp.ClientError,
            OSError,
        ) as exc:
            raise LocationError(f"Could not resolve channel {channel_id}: {exc}") from exc

        location = Location(guild=guild_name, channel=_channel_label(channel))
        self._locations[channel_id] = location
        return location


def _channel_label(channel: object) -> str:
    recipient = getattr(channel, "recipient", None)
    if recipient is not None:
        return user_to_tag(recipient)
    name = getattr(channel, "name", None)
    return name or str(getattr(channel, "id", "unknown"))

"""
longshot.engine.events — ChatEvent envelope
============================================

Every gateway message is normalized into a :class:`ChatEvent` before the
sniper pipeline touches it, so the pipeline (and its tests) never depend
on a live ``discord.Message``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import discord

__all__ = ["ChatEvent", "user_to_tag"]


def user_to_tag(user: discord.abc.User) -> str:
    """``name#1234`` for legacy accounts, plain ``name`` for migrated ones."""
    discriminator = getattr(user, "discriminator", "0")
    if discriminator and discriminator != "0":
        return f"{user.name}#{discriminator}"
    return user.name


@dataclass(frozen=True, slots=True)
class ChatEvent:
    """One inbound chat message, reduced to what the sniper needs."""

    message_id: int
    author_id: int
    author_tag: str
    channel_id: int
    guild_id: int | None
    content: str

    @classmethod
    def from_message(cls, message: discord.Message) -> ChatEvent:
        return cls(
            message_id=message.id,
            author_id=message.author.id,
            author_tag=user_to_tag(message.author),
            channel_id=message.channel.id,
            guild_id=message.guild.id if message.guild else None,
            content=message.content,
        )

    @property
    def message_url(self) -> str:
        guild = str(self.guild_id) if self.guild_id is not None else "@me"
        return f"https://discordapp.com/channels/{guild}/{self.channel_id}/{self.message_id}"

    @property
    def author_url(self) -> str:
        return f"https://discord.com/users/{self.author_id}"

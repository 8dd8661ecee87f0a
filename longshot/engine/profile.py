"""
longshot.engine.profile — Account identity and its readiness gate
==================================================================

A session learns who it is exactly once (from ``on_ready`` or, if a message
beats the ready event, from the REST API).  :class:`ProfileSlot` makes that
one-shot initialization explicit so readers never see a half-built profile.
"""

from __future__ import annotations

import enum
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    import discord

__all__ = ["Profile", "ProfileSlot", "SlotState", "DEFAULT_AVATAR_URL"]

DEFAULT_AVATAR_URL = "https://discordapp.com/assets/6debd47ed13483642cf09e832ed0bc1b.png"


@dataclass(frozen=True, slots=True)
class Profile:
    """Display identity of one account.  Immutable for the session's lifetime."""

    username: str
    id: str
    avatar: str | None = None

    @property
    def face(self) -> str:
        """Avatar URL, falling back to Discord's default avatar."""
        if self.avatar is None:
            return DEFAULT_AVATAR_URL
        return f"https://cdn.discordapp.com/avatars/{self.id}/{self.avatar}.webp"

    def __str__(self) -> str:
        return self.username

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> Profile:
        """Build from a ``GET /users/@me`` JSON body.

        Raises ``KeyError``/``TypeError`` on a malformed payload.
        """
        return cls(
            username=str(data["username"]),
            id=str(data["id"]),
            avatar=data.get("avatar"),
        )

    @classmethod
    def from_user(cls, user: discord.ClientUser | discord.abc.User) -> Profile:
        avatar = user.avatar.key if user.avatar else None
        return cls(username=user.name, id=str(user.id), avatar=avatar)


class SlotState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"


class ProfileSlot:
    """``Uninitialized → Initializing → Ready``, each transition at most once."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._state = SlotState.UNINITIALIZED
        self._profile: Profile | None = None

    @property
    def state(self) -> SlotState:
        return self._state

    def begin(self) -> bool:
        """Claim the right to initialize.  True only for the first caller."""
        with self._lock:
            if self._state is not SlotState.UNINITIALIZED:
                return False
            self._state = SlotState.INITIALIZING
            return True

    def set(self, profile: Profile) -> None:
        with self._lock:
            if self._state is not SlotState.INITIALIZING:
                raise RuntimeError(f"Cannot set profile while {self._state.value}")
            self._profile = profile
            self._state = SlotState.READY

    def reset(self) -> None:
        """Abandon a failed initialization so the next event can retry it."""
        with self._lock:
            if self._state is SlotState.INITIALIZING:
                self._state = SlotState.UNINITIALIZED

    def get(self) -> Profile | None:
        """The profile, or ``None`` until the slot is ready."""
        if self._state is not SlotState.READY:
            return None
        return self._profile

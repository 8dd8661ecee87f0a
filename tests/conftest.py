"""
tests/conftest.py — Shared Test Fixtures
=========================================
"""

from __future__ import annotations

from collections.abc import Callable
from types import SimpleNamespace
from unittest.mock import AsyncMock

import httpx
import pytest

from longshot.config import LongshotConfig
from longshot.engine.profile import Profile, ProfileSlot
from longshot.engine.state import SharedState
from longshot.logs import set_colors
from longshot.services.location_cache import Location


@pytest.fixture(autouse=True)
def _plain_output():
    """Disable ANSI colors so assertions can match rendered text."""
    set_colors(False)
    yield
    set_colors(True)


def make_profile(username: str = "sniper", user_id: str = "1001", avatar: str | None = None) -> Profile:
    return Profile(username=username, id=user_id, avatar=avatar)


def make_config(**overrides) -> LongshotConfig:
    values = {"main_token": "main-token", "snipe_on_main_token": True}
    values.update(overrides)
    return LongshotConfig(**values)


def mock_client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    """An AsyncClient whose requests are answered by *handler*."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def make_session(
    state: SharedState,
    *,
    token: str = "session-token",
    index: int = 0,
    profile: Profile | None = None,
    location: Location | Exception | None = None,
) -> SimpleNamespace:
    """A lightweight stand-in for a ready LongshotBot."""
    slot = ProfileSlot()
    slot.begin()
    slot.set(profile or make_profile())

    cache = SimpleNamespace()
    if isinstance(location, Exception):
        cache.resolve = AsyncMock(side_effect=location)
    else:
        cache.resolve = AsyncMock(return_value=location or Location("Test Guild", "general"))

    return SimpleNamespace(
        state=state,
        token=token,
        redeem_token=token,
        index=index,
        profile_slot=slot,
        location_cache=cache,
    )

"""
tests/test_state.py — ClaimRegistry & SharedState
==================================================

The claim registry is the only thing standing between N sessions and
N redeem requests for the same code.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from unittest.mock import MagicMock

from conftest import make_config, make_profile

from longshot.engine.state import ClaimRegistry, SharedState


def run_async(coro):
    """Run an async coroutine in a fresh event loop."""
    return asyncio.run(coro)


class TestClaimRegistry:
    """try_claim() is an atomic test-and-insert."""

    def test_first_claim_wins(self):
        claims = ClaimRegistry()
        assert claims.try_claim("ABC123XYZ0") is True
        assert claims.try_claim("ABC123XYZ0") is False
        assert "ABC123XYZ0" in claims
        assert len(claims) == 1

    def test_distinct_codes_are_independent(self):
        claims = ClaimRegistry()
        assert claims.try_claim("a" * 16)
        assert claims.try_claim("b" * 16)
        assert len(claims) == 2

    def test_exactly_one_winner_across_threads(self):
        claims = ClaimRegistry()
        results: list[bool] = []
        barrier = threading.Barrier(32)

        def worker():
            barrier.wait()
            results.append(claims.try_claim("RACE"))

        threads = [threading.Thread(target=worker) for _ in range(32)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results.count(True) == 1
        assert results.count(False) == 31

    def test_exactly_one_winner_across_tasks(self):
        claims = ClaimRegistry()

        async def attempt():
            await asyncio.sleep(0)
            return claims.try_claim("RACE")

        async def main():
            return await asyncio.gather(*(attempt() for _ in range(50)))

        results = run_async(main())
        assert results.count(True) == 1


class TestSharedState:
    """Readiness counters aggregate across sessions."""

    def _state(self, token_count: int) -> SharedState:
        return SharedState(MagicMock(), make_config(), token_count)

    def test_counts_accumulate(self):
        state = self._state(3)
        assert state.record_session_ready(make_profile("a"), 4) is False
        assert state.record_session_ready(make_profile("b"), 6) is False
        assert state.connected == 2
        assert state.total_guilds == 10

    def test_last_session_reports_all_connected(self, caplog):
        state = self._state(2)
        caplog.set_level(logging.INFO, logger="longshot.engine.state")
        state.record_session_ready(make_profile("a"), 4)
        assert state.record_session_ready(make_profile("b"), 6) is True
        assert "Connected to all 2 accounts! Sniping in 10 guilds in total!" in caplog.text

    def test_single_account_skips_summary(self, caplog):
        state = self._state(1)
        caplog.set_level(logging.INFO, logger="longshot.engine.state")
        assert state.record_session_ready(make_profile("solo"), 3) is True
        assert "Connected as solo! Now sniping in 3 guilds..." in caplog.text
        assert "Connected to all" not in caplog.text

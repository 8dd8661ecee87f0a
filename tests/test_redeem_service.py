"""
tests/test_redeem_service.py — Redeem request & profile fetch
==============================================================

HTTP is answered by ``httpx.MockTransport`` so the exact request Longshot
sends can be inspected.
"""

from __future__ import annotations

import asyncio
import logging

import httpx
import pytest
from conftest import make_profile, mock_client

from longshot.engine.outcomes import Outcome
from longshot.errors import ProfileError, ProfileErrorKind
from longshot.services.log_block import EventLogBlock
from longshot.services.redeem_service import (
    DISCORD_API,
    fetch_profile,
    redeem_code,
)


def run_async(coro):
    """Run an async coroutine in a fresh event loop."""
    return asyncio.run(coro)


def _redeem(handler, code: str = "ABC123XYZ0", token: str = "tok"):
    block = EventLogBlock(make_profile())

    async def go():
        async with mock_client(handler) as client:
            return await redeem_code(client, token, code, block)

    return run_async(go()), block


class TestRedeemRequest:
    """The request itself: one POST, token header, empty body."""

    def test_request_shape(self):
        seen: list[httpx.Request] = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200)

        _redeem(handler, code="ABC123XYZ0", token="secret-token")

        assert len(seen) == 1
        request = seen[0]
        assert request.method == "POST"
        assert str(request.url) == f"{DISCORD_API}/entitlements/gift-codes/ABC123XYZ0/redeem"
        assert request.headers["Authorization"] == "secret-token"
        assert request.headers["Content-Length"] == "0"
        assert request.content == b""


class TestRedeemOutcomes:
    """Each response produces one outcome and matching log entries."""

    def test_success_is_highlighted(self):
        outcome, block = _redeem(lambda r: httpx.Response(200))
        assert outcome is Outcome.SUCCESS
        [entry] = block.entries
        assert entry.highlighted is True
        assert entry.text == "Yay! Claimed code!"

    @pytest.mark.parametrize(
        "status, outcome, severity",
        [
            (400, Outcome.ALREADY_REDEEMED, logging.ERROR),
            (404, Outcome.FAKE_OR_EXPIRED, logging.WARNING),
            (405, Outcome.PLATFORM_ERROR, logging.ERROR),
            (429, Outcome.RATE_LIMITED, logging.WARNING),
        ],
    )
    def test_known_failures(self, status, outcome, severity):
        result, block = _redeem(lambda r: httpx.Response(status))
        assert result is outcome
        [entry] = block.entries
        assert entry.severity == severity
        assert entry.highlighted is False

    def test_transport_failure(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        outcome, block = _redeem(handler)
        assert outcome is Outcome.CONNECTION_ERROR
        [entry] = block.entries
        assert entry.severity == logging.WARNING
        assert "Connection failed" in entry.text

    def test_undecodable_response_is_contained(self):
        outcome, block = _redeem(
            lambda r: httpx.Response(500, headers={"content-encoding": "gzip"}, content=b"not gzip")
        )
        assert outcome is Outcome.CONNECTION_ERROR
        [entry] = block.entries
        assert entry.severity == logging.WARNING

    def test_unknown_status_captures_body(self):
        outcome, block = _redeem(
            lambda r: httpx.Response(500, content=b'{"error":"internal"}')
        )
        assert outcome is Outcome.UNKNOWN
        texts = [e.text for e in block.entries]
        assert texts[0] == "Received unknown response... (500 Internal Server Error)"
        assert texts[1] == '...with this body: {"error":"internal"}'

    def test_unknown_status_without_reason_phrase(self):
        outcome, block = _redeem(lambda r: httpx.Response(599, content=b"x"))
        assert outcome is Outcome.UNKNOWN
        assert block.entries[0].text == "Received unknown response... (599)"

    def test_unknown_status_with_unreadable_body(self):
        outcome, block = _redeem(lambda r: httpx.Response(502, content=b"\xff\xfe\xfa"))
        assert outcome is Outcome.UNKNOWN
        assert block.entries[-1].text == "...and couldn't parse the body of the response."

    def test_unknown_status_with_empty_body(self):
        _, block = _redeem(lambda r: httpx.Response(503))
        assert block.entries[-1].text == "...and couldn't parse the body of the response."


def _fetch(handler):
    async def go():
        async with mock_client(handler) as client:
            return await fetch_profile(client, "main-token")

    return run_async(go())


class TestFetchProfile:
    """Startup validation of the main token."""

    def test_ok(self):
        seen: list[httpx.Request] = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"username": "main", "avatar": "abc", "id": "42"})

        profile = _fetch(handler)
        assert profile.username == "main"
        assert profile.face == "https://cdn.discordapp.com/avatars/42/abc.webp"
        assert seen[0].method == "GET"
        assert seen[0].url.path.endswith("/users/@me")
        assert seen[0].headers["Authorization"] == "main-token"

    @pytest.mark.parametrize(
        "status, kind",
        [
            (401, ProfileErrorKind.UNAUTHORIZED),
            (429, ProfileErrorKind.RATE_LIMITED),
            (403, ProfileErrorKind.OTHER),
            (500, ProfileErrorKind.OTHER),
        ],
    )
    def test_error_statuses(self, status, kind):
        with pytest.raises(ProfileError) as excinfo:
            _fetch(lambda r: httpx.Response(status))
        assert excinfo.value.kind is kind

    def test_malformed_body(self):
        with pytest.raises(ProfileError) as excinfo:
            _fetch(lambda r: httpx.Response(200, content=b"not json"))
        assert excinfo.value.kind is ProfileErrorKind.OTHER

    def test_missing_fields(self):
        with pytest.raises(ProfileError) as excinfo:
            _fetch(lambda r: httpx.Response(200, json={"avatar": None}))
        assert excinfo.value.kind is ProfileErrorKind.OTHER

    def test_transport_failure(self):
        def handler(request):
            raise httpx.ConnectError("down", request=request)

        with pytest.raises(ProfileError) as excinfo:
            _fetch(handler)
        assert excinfo.value.kind is ProfileErrorKind.CONNECTION_ERROR

    def test_undecodable_response(self):
        with pytest.raises(ProfileError) as excinfo:
            _fetch(lambda r: httpx.Response(500, headers={"content-encoding": "gzip"}, content=b"not gzip"))
        assert excinfo.value.kind is ProfileErrorKind.CONNECTION_ERROR

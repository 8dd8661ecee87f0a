"""
longshot.services.notify_service — Webhook reports
===================================================

Builds the embed payload for one snipe attempt and posts it to the
configured webhook.  Delivery is fire-and-forget: the sniper pipeline
schedules it and moves on, and a failed delivery is simply dropped.
"""

from __future__ import annotations

import asyncio
from datetime import datetime
from typing import TYPE_CHECKING, Any

import httpx

from longshot import __version__
from longshot.engine.outcomes import PRESENTATION

if TYPE_CHECKING:
    from longshot.engine.events import ChatEvent
    from longshot.engine.outcomes import Outcome
    from longshot.engine.profile import Profile

WEBHOOK_USERNAME = "Longshot"
LONGSHOT_AVATAR_URL = "https://yes.nighty.works/raw/IH8LqF.png"

# Strong references to in-flight deliveries so they aren't garbage-collected.
_pending: set[asyncio.Task] = set()


def build_payload(event: ChatEvent, finder: Profile, outcome: Outcome) -> dict[str, Any]:
    """Webhook JSON for one attempt.  Only title/description/color vary by outcome."""
    view = PRESENTATION[outcome]
    embed = {
        "author": {"icon_url": finder.face, "name": str(finder)},
        "title": view.title,
        "description": view.description,
        "fields": [
            {
                "name": "Code sent by:",
                "value": f"[{event.author_tag}]({event.author_url})",
                "inline": False,
            },
            {
                "name": "Message:",
                "value": f"[Posted here!]({event.message_url})",
                "inline": False,
            },
        ],
        "footer": {
            "icon_url": LONGSHOT_AVATAR_URL,
            "text": f"Longshot {__version__}",
        },
        "timestamp": datetime.now().astimezone().isoformat(),
        "color": view.color,
    }
    return {
        "username": WEBHOOK_USERNAME,
        "avatar_url": LONGSHOT_AVATAR_URL,
        "embeds": [embed],
    }


async def send_notification(
    client: httpx.AsyncClient, url: str, payload: dict[str, Any]
) -> bool:
    """POST *payload* to *url*.  True only on ``204 No Content``."""
    try:
        response = await client.post(url, json=payload)
    except (httpx.HTTPError, httpx.InvalidURL):
        return False
    return response.status_code == 204


def dispatch_notification(
    client: httpx.AsyncClient,
    url: str,
    event: ChatEvent,
    finder: Profile,
    outcome: Outcome,
) -> asyncio.Task:
    """Schedule delivery in the background and return immediately."""
    payload = build_payload(event, finder, outcome)
    task = asyncio.get_running_loop().create_task(
        send_notification(client, url, payload), name=f"webhook-{event.message_id}"
    )
    _pending.add(task)
    task.add_done_callback(_pending.discard)
    return task

"""
longshot.engine.matcher — Gift link detection
==============================================

Pulls a gift code out of raw message text.  Only the first link counts;
codes that don't have one of the lengths Discord issues are ignored so
obvious fakes never cost a redeem request.
"""

from __future__ import annotations

import re

# Discord issues 16-character gift codes and 24-character promo codes.
VALID_CODE_LENGTHS = frozenset({16, 24})

# Markdown decorations people wrap links in (spoilers, bold, escapes …)
_MARKDOWN_NOISE = re.compile(r"[\\*_|~`]")

_GIFT_LINK = re.compile(
    r"(?:https?://)?(?:www\.)?"
    r"(?:discord\.gift|discord(?:app)?\.com/gifts)"
    r"/+([a-z0-9]+)",
    re.IGNORECASE,
)


def extract_code(text: str) -> str | None:
    """Return the gift code from the first gift link in *text*, or ``None``."""
    if not text:
        return None
    match = _GIFT_LINK.search(_MARKDOWN_NOISE.sub("", text))
    if match is None:
        return None
    code = match.group(1)
    if len(code) not in VALID_CODE_LENGTHS:
        return None
    return code

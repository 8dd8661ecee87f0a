"""
longshot.bot.__main__ — Entry point for ``python -m longshot.bot``
==================================================================

Wiring:
1. Console logging + banner.
2. Load .env and config.yaml.
3. Hand off to the supervisor (blocking — runs the asyncio event loop).

Any fatal startup condition is printed and must be acknowledged with
Enter before the process exits.

Run with::

    python -m longshot.bot
"""

from __future__ import annotations

import asyncio
import logging
import sys

from longshot.bot.supervisor import run_sessions
from longshot.config import load_config
from longshot.errors import ConfigError, FatalError
from longshot.logs import configure_logging, pause_exit, set_colors
from longshot.services.log_block import configure_block_output

logger = logging.getLogger("longshot")


def main() -> None:
    """Bootstrap and run Longshot."""

    # 1. Logging.
    configure_logging()
    configure_block_output(logging.StreamHandler(sys.stdout))

    # 2. Configuration (secrets from .env, the rest from config.yaml).
    try:
        cfg = load_config()
    except ConfigError as exc:
        logger.critical("%s", exc)
        pause_exit()
        return
    set_colors(cfg.colors)

    # 3. Run (blocks until every session is gone or Ctrl+C).
    try:
        asyncio.run(run_sessions(cfg))
    except FatalError as exc:
        logger.critical("%s", exc)
        pause_exit()
    except KeyboardInterrupt:
        logger.info("Shutting down…")
    except Exception:
        logger.exception("Longshot stopped unexpectedly.")
        pause_exit()


if __name__ == "__main__":
    main()

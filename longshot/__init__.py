"""
Longshot — Multi-account Discord Nitro sniper
==============================================
Watches every message visible to one or more Discord accounts, picks gift
links out of the text, and races to redeem each code once.  Every attempt
is printed as a single timed log block and optionally reported to a
webhook.

Package layout::

    longshot/
    ├── config.py          # YAML + .env → typed Python config
    ├── errors.py          # Exception hierarchy (fatal vs recoverable)
    ├── logs.py            # Console formatter, banner, pause-and-exit
    ├── engine/
    │   ├── outcomes.py    # Outcome enum + the single presentation table
    │   ├── matcher.py     # Gift link → code extraction
    │   ├── events.py      # ChatEvent envelope
    │   ├── profile.py     # Profile + ProfileSlot readiness state machine
    │   └── state.py       # SharedState + ClaimRegistry (dedup set)
    ├── services/
    │   ├── log_block.py        # Per-event buffered log block
    │   ├── redeem_service.py   # Redeem request + main-token profile fetch
    │   ├── notify_service.py   # Webhook payload + fire-and-forget dispatch
    │   └── location_cache.py   # Channel/guild name resolution
    └── bot/
        ├── core.py        # One commands.Bot per account
        ├── supervisor.py  # Startup gate + session fan-out
        └── cogs/
            └── sniper.py  # on_message → claim → redeem → log → notify
"""

__version__ = "0.1.0"

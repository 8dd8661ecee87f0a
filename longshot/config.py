"""
longshot.config — YAML Configuration Loader
============================================

**Why this file exists:**
This module reads ``config.yaml`` for the accounts to snipe on, the
optional webhook, and the guild blacklist.  Tokens are secrets, so they
may also come from the environment (``.env`` is loaded first) and the
environment always wins over the YAML file.

Usage::

    from longshot.config import load_config

    cfg = load_config()              # reads ./config.yaml by default
    print(cfg.sniping_tokens())      # ["mfa.xxx", "ODk..."]
    print(cfg.is_guild_blacklisted(1468816181854081229))
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

import yaml
from dotenv import load_dotenv

from longshot.errors import ConfigError

# Environment overrides (populated from .env when present)
ENV_MAIN_TOKEN = "LONGSHOT_MAIN_TOKEN"
ENV_SNIPING_TOKENS = "LONGSHOT_SNIPING_TOKENS"


# ---------------------------------------------------------------------------
# Typed settings object
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class LongshotConfig:
    """Immutable configuration loaded from ``config.yaml`` and the environment."""

    # Accounts
    main_token: str
    snipe_on_main_token: bool = True
    extra_tokens: tuple[str, ...] = ()

    # Redeem every code on the main account instead of the account that saw it
    redeem_on_main: bool = False

    # Optional
    webhook: str | None = None  # Where to report every attempt
    guild_blacklist: frozenset[int] = field(default_factory=frozenset)
    colors: bool = True

    def sniping_tokens(self) -> list[str]:
        """Every token that should open a session (may contain duplicates)."""
        tokens = list(self.extra_tokens)
        if self.snipe_on_main_token:
            tokens.append(self.main_token)
        return tokens

    def is_guild_blacklisted(self, guild_id: int | None) -> bool:
        """DMs (``guild_id is None``) are never blacklisted."""
        return guild_id is not None and guild_id in self.guild_blacklist


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def load_config(path: str | Path = "config.yaml") -> LongshotConfig:
    """Read *path* and return a :class:`LongshotConfig` instance.

    Parameters
    ----------
    path:
        Filesystem path to the YAML configuration file.
        Defaults to ``config.yaml`` in the current working directory.

    Raises
    ------
    ConfigError
        If the YAML file doesn't exist, can't be parsed, or no main token
        is available from either the file or the environment.
    """
    load_dotenv()

    config_path = Path(path)
    if not config_path.exists():
        raise ConfigError(
            f"Configuration file not found: {config_path.resolve()}\n"
            "Hint: copy config.yaml.example → config.yaml and edit it."
        )

    try:
        with open(config_path, encoding="utf-8") as fh:
            raw = yaml.safe_load(fh) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Could not parse {config_path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError(f"{config_path} must contain a mapping at the top level.")

    return config_from_mapping(raw, env=os.environ)


def config_from_mapping(raw: dict, env: Mapping[str, str] | None = None) -> LongshotConfig:
    """Build a config from an already-parsed mapping, applying env overrides."""
    env = env if env is not None else {}

    main_token = env.get(ENV_MAIN_TOKEN) or raw.get("main_token")
    if not main_token:
        raise ConfigError(
            "main_token is not set.  "
            f"Add it to config.yaml or set {ENV_MAIN_TOKEN} in .env."
        )

    env_tokens = env.get(ENV_SNIPING_TOKENS)
    if env_tokens:
        extra = [t.strip() for t in env_tokens.split(",") if t.strip()]
    else:
        extra = [str(t) for t in raw.get("sniping_tokens") or []]

    try:
        blacklist = frozenset(int(g) for g in raw.get("guild_blacklist") or [])
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"guild_blacklist must be a list of guild IDs: {exc}") from exc

    return LongshotConfig(
        main_token=str(main_token),
        snipe_on_main_token=bool(raw.get("snipe_on_main_token", True)),
        extra_tokens=tuple(extra),
        redeem_on_main=bool(raw.get("redeem_on_main", False)),
        webhook=raw.get("webhook") or None,
        guild_blacklist=blacklist,
        colors=bool(raw.get("colors", True)),
    )

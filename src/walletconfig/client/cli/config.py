"""Configuration utilities for walletconfig CLI.

This module provides shared configuration functions used across CLI commands.
Settings live in ``config.json`` next to the keyfile:

    {
      "hub": {"server": ..., "url_prefix": ..., "address": ..., "token": ...},
      "accounts": [{"index": 0, "username": "alice.id"}, ...]
    }
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from walletconfig.core.config import HubConfig
from walletconfig.wallet import Account

CONFIG_DIR_ENV = "WALLETCONFIG_HOME"


def get_config_dir() -> Path:
    """Get the configuration directory for walletconfig.

    Returns:
        Path from $WALLETCONFIG_HOME, or ~/.walletconfig.
    """
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".walletconfig"


def get_config_file() -> Path:
    """Get the path to the config file."""
    return get_config_dir() / "config.json"


def load_config() -> dict[str, Any]:
    """Load configuration from config file."""
    config_file = get_config_file()
    if config_file.exists():
        return dict(json.loads(config_file.read_text()))
    return {}


def save_config(config: dict[str, Any]) -> None:
    """Save configuration to config file."""
    config_file = get_config_file()
    config_file.parent.mkdir(parents=True, exist_ok=True)
    config_file.write_text(json.dumps(config, indent=2))


def get_hub_config(config: dict[str, Any]) -> HubConfig | None:
    """Get hub settings from a loaded config, if configured."""
    hub = config.get("hub")
    if not hub:
        return None
    return HubConfig.from_dict(hub)


def get_accounts(config: dict[str, Any]) -> list[Account]:
    """Get the wallet's accounts from a loaded config, ordered by index."""
    accounts = [Account.from_dict(a) for a in config.get("accounts", [])]
    return sorted(accounts, key=lambda a: a.index)

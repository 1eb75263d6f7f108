"""Wallet config record and its JSON wire codec.

The record is exchanged with the crypto layer as UTF-8 JSON using the
camelCase field names shared with other wallet implementations
(``lastLoginAt``, ``appIcon``). Unknown keys are dropped on decode;
auxiliary data belongs in ``WalletConfig.meta``.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any

from walletconfig.core.types import WalletConfigError

logger = logging.getLogger(__name__)

WALLET_CONFIG_FILENAME = "wallet-config.json"

_APP_KEYS = {"origin", "scopes", "lastLoginAt", "appIcon", "name"}
_ACCOUNT_KEYS = {"username", "apps"}
_CONFIG_KEYS = {"accounts", "meta"}


class MalformedConfigError(WalletConfigError):
    """Raised when wallet config text is not a valid record."""


def _expect(value: Any, kind: type | tuple[type, ...], what: str) -> Any:
    # bool is an int subclass; never accept it where a number is expected
    if not isinstance(value, kind) or (isinstance(value, bool) and kind is not bool):
        raise MalformedConfigError(f"{what} has unexpected type {type(value).__name__}")
    return value


def _drop_unknown(data: dict[str, Any], known: set[str], where: str) -> None:
    unknown = set(data) - known
    if unknown:
        logger.debug(f"Dropping unknown keys in {where}: {sorted(unknown)}")


@dataclass
class ConfigApp:
    """An application authorized under one account."""

    origin: str
    scopes: list[str] = field(default_factory=list)
    last_login_at: int = 0  # milliseconds since epoch
    app_icon: str = ""
    name: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ConfigApp:
        """Create from a wire dictionary."""
        _expect(data, dict, "app")
        _drop_unknown(data, _APP_KEYS, "app")
        scopes = _expect(data.get("scopes", []), list, "app.scopes")
        return cls(
            origin=_expect(data.get("origin"), str, "app.origin"),
            scopes=[_expect(s, str, "app.scopes[]") for s in scopes],
            last_login_at=_expect(data.get("lastLoginAt", 0), (int, float), "app.lastLoginAt"),
            app_icon=_expect(data.get("appIcon", ""), str, "app.appIcon"),
            name=_expect(data.get("name", ""), str, "app.name"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a wire dictionary."""
        return {
            "origin": self.origin,
            "scopes": list(self.scopes),
            "lastLoginAt": self.last_login_at,
            "appIcon": self.app_icon,
            "name": self.name,
        }


@dataclass
class ConfigAccount:
    """Per-account slot of the config, aligned by index with the wallet."""

    username: str | None = None
    apps: dict[str, ConfigApp] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ConfigAccount:
        """Create from a wire dictionary.

        A missing or null ``apps`` decodes as an empty mapping.
        """
        _expect(data, dict, "account")
        _drop_unknown(data, _ACCOUNT_KEYS, "account")
        username = data.get("username")
        if username is not None:
            _expect(username, str, "account.username")
        apps = _expect(data.get("apps") or {}, dict, "account.apps")
        return cls(
            username=username,
            apps={origin: ConfigApp.from_dict(app) for origin, app in apps.items()},
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a wire dictionary, omitting an absent username."""
        data: dict[str, Any] = {}
        if self.username is not None:
            data["username"] = self.username
        data["apps"] = {origin: app.to_dict() for origin, app in self.apps.items()}
        return data


@dataclass
class WalletConfig:
    """Root config record, one per wallet."""

    accounts: list[ConfigAccount] = field(default_factory=list)
    meta: dict[str, Any] | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> WalletConfig:
        """Create from a wire dictionary."""
        _expect(data, dict, "config")
        _drop_unknown(data, _CONFIG_KEYS, "config")
        accounts = _expect(data.get("accounts"), list, "config.accounts")
        meta = data.get("meta")
        if meta is not None:
            _expect(meta, dict, "config.meta")
        return cls(
            accounts=[ConfigAccount.from_dict(a) for a in accounts],
            meta=meta,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a wire dictionary, omitting absent meta."""
        data: dict[str, Any] = {"accounts": [a.to_dict() for a in self.accounts]}
        if self.meta is not None:
            data["meta"] = self.meta
        return data


def encode_config(config: WalletConfig) -> str:
    """Serialize a wallet config to its JSON wire text."""
    return json.dumps(config.to_dict())


def decode_config(text: str) -> WalletConfig:
    """Parse JSON wire text into a wallet config.

    Args:
        text: Decrypted config text.

    Returns:
        Parsed config.

    Raises:
        MalformedConfigError: If the text is not JSON or not shaped like a config.
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, RecursionError) as e:
        raise MalformedConfigError(f"Invalid JSON: {e}") from e
    return WalletConfig.from_dict(data)

"""Wallet and account handles consumed by the sync engine.

Only the parts of a wallet the config engine needs are modelled: the
ordered account list and the config private key.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from walletconfig.core.crypto import get_public_key_from_private


@dataclass
class Account:
    """One wallet account.

    Attributes:
        index: Position of the account in the wallet.
        username: Registered username, if any.
    """

    index: int
    username: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Account:
        """Create from a saved settings dictionary."""
        return cls(index=int(data["index"]), username=data.get("username"))

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {"index": self.index, "username": self.username}


@dataclass
class Wallet:
    """Wallet handle: config keypair plus ordered accounts."""

    config_private_key: str
    accounts: list[Account] = field(default_factory=list)

    @property
    def config_public_key(self) -> str:
        """Compressed public key the config is encrypted to."""
        return get_public_key_from_private(self.config_private_key)

    def add_account(self, username: str | None = None) -> Account:
        """Append a new account at the next index.

        Args:
            username: Optional username for the account.

        Returns:
            The created account.
        """
        account = Account(index=len(self.accounts), username=username)
        self.accounts.append(account)
        return account

"""Shared configuration classes for walletconfig.

This module defines the connection settings for the remote hub that stores
the encrypted wallet config.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


@dataclass
class HubConfig:
    """Configuration for connecting to a storage hub.

    Reads go through the public ``url_prefix`` (often a CDN or bucket URL),
    writes go through the hub server's authenticated ``/store`` endpoint.

    Attributes:
        server: Base URL of the hub server (e.g., "https://hub.example.com").
        url_prefix: Public read prefix (e.g., "https://gaia.example.com/hub/").
        address: Namespace of the wallet on the hub.
        token: Authorization token for writes.
        timeout: Request timeout in seconds.
        max_retries: Retries on transport errors before giving up.
    """

    server: str
    url_prefix: str
    address: str
    token: str
    timeout: float = 30.0
    max_retries: int = 3

    def __post_init__(self) -> None:
        """Normalize server URL and read prefix."""
        self.server = self.server.rstrip("/")
        if not self.url_prefix.endswith("/"):
            self.url_prefix = self.url_prefix + "/"

    def read_url(self, name: str) -> str:
        """Get the public URL an object is read from.

        Args:
            name: Object name within the wallet namespace.

        Returns:
            Absolute read URL.
        """
        return f"{self.url_prefix}{self.address}/{name}"

    def write_url(self, name: str) -> str:
        """Get the hub URL an object is uploaded to.

        Args:
            name: Object name within the wallet namespace.

        Returns:
            Absolute write URL.
        """
        return f"{self.server}/store/{self.address}/{name}"

    @property
    def is_secure(self) -> bool:
        """Check if writes use HTTPS."""
        return self.server.startswith("https://")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HubConfig:
        """Create from a saved settings dictionary."""
        return cls(
            server=data["server"],
            url_prefix=data["url_prefix"],
            address=data["address"],
            token=data["token"],
            timeout=float(data.get("timeout", 30.0)),
            max_retries=int(data.get("max_retries", 3)),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return asdict(self)

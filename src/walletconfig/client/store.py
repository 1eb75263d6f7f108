"""Blob store adapters for the encrypted wallet config.

This module provides:
- Abstract interface for a per-wallet object namespace
- HubStore: HTTP storage hub (public read prefix, authenticated writes)
- LocalFSStore: directory-backed store for offline use
- MemoryStore: in-process store for tests and dry runs

Adapters distinguish a missing object (ObjectNotFoundError) from a failed
read (StoreReadError). Uploads replace the whole object.
"""

from __future__ import annotations

import contextlib
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

import httpx

from walletconfig.client.retry import DEFAULT_INITIAL_BACKOFF, retry_with_backoff
from walletconfig.core.config import HubConfig
from walletconfig.core.types import WalletConfigError

logger = logging.getLogger(__name__)


class StoreError(WalletConfigError):
    """Base exception for blob store errors."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ObjectNotFoundError(StoreError):
    """Object does not exist in the store."""


class StoreReadError(StoreError):
    """Object could not be read (transport or server failure)."""


class StoreWriteError(StoreError):
    """Object could not be written."""


class BlobStore(ABC):
    """Abstract interface for a wallet's remote object namespace."""

    @property
    @abstractmethod
    def location(self) -> str:
        """Return a human-readable description of where objects are stored."""

    @abstractmethod
    def fetch(self, name: str) -> bytes:
        """Retrieve an object.

        Args:
            name: Object name within the namespace.

        Returns:
            Raw object bytes.

        Raises:
            ObjectNotFoundError: If the object doesn't exist.
            StoreReadError: If the read failed for any other reason.
        """

    @abstractmethod
    def upload(self, name: str, data: bytes) -> None:
        """Store an object, replacing any previous content.

        Args:
            name: Object name within the namespace.
            data: Object bytes.

        Raises:
            StoreWriteError: If the write failed.
        """


class MemoryStore(BlobStore):
    """In-memory store for tests and dry runs."""

    def __init__(self, objects: dict[str, bytes] | None = None) -> None:
        self.objects: dict[str, bytes] = dict(objects or {})
        self.upload_count = 0

    @property
    def location(self) -> str:
        """Return a description of the in-memory store."""
        return "Memory"

    def fetch(self, name: str) -> bytes:
        """Retrieve an object."""
        if name not in self.objects:
            raise ObjectNotFoundError(f"Object not found: {name}", 404)
        return self.objects[name]

    def upload(self, name: str, data: bytes) -> None:
        """Store an object."""
        self.objects[name] = data
        self.upload_count += 1


class LocalFSStore(BlobStore):
    """Local filesystem store, one file per object."""

    def __init__(self, base_path: Path | str) -> None:
        """Initialize local storage.

        Args:
            base_path: Directory holding the wallet's objects.
        """
        self._base_path = Path(base_path).resolve()
        self._base_path.mkdir(parents=True, exist_ok=True)

    @property
    def location(self) -> str:
        """Return the local storage path."""
        return f"Local filesystem: {self._base_path}"

    def _object_path(self, name: str) -> Path:
        path = (self._base_path / name).resolve()
        if path.parent != self._base_path:
            raise ValueError(f"Invalid object name: {name}")
        return path

    def fetch(self, name: str) -> bytes:
        """Retrieve an object."""
        path = self._object_path(name)
        if not path.exists():
            raise ObjectNotFoundError(f"Object not found: {name}")
        try:
            return path.read_bytes()
        except OSError as e:
            raise StoreReadError(f"Failed to read {path}: {e}") from e

    def upload(self, name: str, data: bytes) -> None:
        """Store an object atomically via a temporary file."""
        path = self._object_path(name)
        try:
            fd, tmp = tempfile.mkstemp(dir=self._base_path, prefix=f".{name}.")
        except OSError as e:
            raise StoreWriteError(f"Failed to write {path}: {e}") from e
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp, path)
        except OSError as e:
            with contextlib.suppress(OSError):
                os.unlink(tmp)
            raise StoreWriteError(f"Failed to write {path}: {e}") from e


class HubStore(BlobStore):
    """HTTP storage hub client.

    Objects are read from ``{url_prefix}{address}/{name}`` (redirects are
    followed) and written with ``POST {server}/store/{address}/{name}``.
    Any non-2xx final response is an error. Transport errors are retried
    with exponential backoff up to ``config.max_retries`` times.
    """

    def __init__(
        self,
        config: HubConfig,
        initial_backoff: float = DEFAULT_INITIAL_BACKOFF,
    ) -> None:
        """Initialize the hub client.

        Args:
            config: Hub connection settings.
            initial_backoff: First retry delay in seconds.
        """
        self._config = config
        self._initial_backoff = initial_backoff
        self._client = httpx.Client(timeout=config.timeout, follow_redirects=True)

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> HubStore:
        """Context manager entry."""
        return self

    def __exit__(self, *args: object) -> None:
        """Context manager exit."""
        self.close()

    @property
    def location(self) -> str:
        """Return the hub namespace URL."""
        return f"Hub: {self._config.server} ({self._config.address})"

    def _send(self, request: httpx.Request) -> httpx.Response:
        return retry_with_backoff(
            lambda: self._client.send(request),
            (httpx.TransportError,),
            max_retries=self._config.max_retries,
            initial_backoff=self._initial_backoff,
        )

    def fetch(self, name: str) -> bytes:
        """Retrieve an object from the public read prefix."""
        url = self._config.read_url(name)
        try:
            response = self._send(self._client.build_request("GET", url))
        except httpx.HTTPError as e:
            raise StoreReadError(f"Request failed: {e}") from e

        if response.status_code == 404:
            raise ObjectNotFoundError(f"Object not found: {name}", 404)
        if not response.is_success:
            raise StoreReadError(
                f"Read of {name} failed with HTTP {response.status_code}",
                response.status_code,
            )
        return response.content

    def upload(self, name: str, data: bytes) -> None:
        """Upload an object through the hub's store endpoint."""
        request = self._client.build_request(
            "POST",
            self._config.write_url(name),
            content=data,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"bearer {self._config.token}",
            },
        )
        try:
            response = self._send(request)
        except httpx.HTTPError as e:
            raise StoreWriteError(f"Request failed: {e}") from e

        if not response.is_success:
            raise StoreWriteError(
                f"Upload of {name} failed with HTTP {response.status_code}",
                response.status_code,
            )
        logger.debug(f"Uploaded {name} ({len(data)} bytes) to {self._config.server}")

"""Secure storage for the wallet's config private key.

This module provides:
- Config key generation
- Encrypted storage of the config key under a master password
- OS keyring integration for caching
- Key export/import for multi-device setup
"""

from __future__ import annotations

import base64
import contextlib
import json
import uuid
from datetime import UTC, datetime
from pathlib import Path

import keyring

from walletconfig.core.crypto import (
    decrypt_secret,
    derive_key,
    encrypt_secret,
    generate_salt,
    get_public_key_from_private,
    make_private_key,
    validate_private_key,
)
from walletconfig.core.types import WalletConfigError

KEYFILE_NAME = "keyfile.json"
KEYRING_SERVICE = "walletconfig"


class KeyStoreError(WalletConfigError):
    """Exception raised for keystore-related errors."""


def _cache_key(key_id: str, private_key: str) -> None:
    # Keyring backends may be missing on headless systems
    with contextlib.suppress(Exception):
        keyring.set_password(KEYRING_SERVICE, key_id, private_key)


def _write_keyfile(
    config_dir: Path, salt: bytes, encrypted_key: bytes, key_id: str, created_at: str
) -> None:
    data = {
        "salt": base64.b64encode(salt).decode(),
        "encrypted_config_key": base64.b64encode(encrypted_key).decode(),
        "key_id": key_id,
        "created_at": created_at,
    }
    (config_dir / KEYFILE_NAME).write_text(json.dumps(data, indent=2))


class KeyStore:
    """Holds the wallet's config private key.

    The hex private key is encrypted with a master key derived from the
    user's password (Argon2id) and stored in keyfile.json.
    """

    def __init__(
        self,
        config_dir: Path,
        salt: bytes,
        encrypted_config_key: bytes,
        key_id: str,
        created_at: str,
        config_private_key: str | None = None,
    ) -> None:
        """Initialize keystore (use create_keystore or load_keystore instead)."""
        self._config_dir = config_dir
        self._salt = salt
        self._encrypted_config_key = encrypted_config_key
        self._key_id = key_id
        self._created_at = created_at
        self._config_private_key = config_private_key

    @property
    def config_private_key(self) -> str:
        """Get the config private key (must be unlocked first)."""
        if self._config_private_key is None:
            cached = keyring.get_password(KEYRING_SERVICE, self._key_id)
            if cached:
                self._config_private_key = cached
            else:
                raise KeyStoreError("Keystore is locked. Call unlock() first.")
        return self._config_private_key

    @property
    def config_public_key(self) -> str:
        """Get the compressed public key for the config private key."""
        return get_public_key_from_private(self.config_private_key)

    @property
    def key_id(self) -> str:
        """Get the unique key identifier."""
        return self._key_id

    def unlock(self, password: str) -> None:
        """Unlock the keystore with the master password.

        Raises:
            KeyStoreError: If the password is incorrect.
        """
        master_key = derive_key(password, self._salt)
        try:
            self._config_private_key = decrypt_secret(
                self._encrypted_config_key, master_key
            ).decode("ascii")
        except Exception as e:
            raise KeyStoreError("Invalid password or corrupted keyfile") from e
        _cache_key(self._key_id, self._config_private_key)

    def export_key(self) -> str:
        """Export the config private key as hex."""
        return self.config_private_key

    def import_key(self, private_key: str, password: str) -> None:
        """Replace the config private key.

        Args:
            private_key: Hex-encoded secp256k1 private key.
            password: Master password to re-encrypt the new key.

        Raises:
            KeyStoreError: If the key is invalid.
        """
        try:
            key = validate_private_key(private_key)
        except ValueError as e:
            raise KeyStoreError(f"Invalid key: {e}") from e

        new_salt = generate_salt()
        master_key = derive_key(password, new_salt)

        self._config_private_key = key
        self._salt = new_salt
        self._encrypted_config_key = encrypt_secret(key.encode("ascii"), master_key)
        self._key_id = str(uuid.uuid4())

        _write_keyfile(
            self._config_dir,
            self._salt,
            self._encrypted_config_key,
            self._key_id,
            self._created_at,
        )
        _cache_key(self._key_id, key)


def create_keystore(password: str, config_dir: Path) -> KeyStore:
    """Create a new keystore with a random config private key.

    Args:
        password: Master password for the keystore.
        config_dir: Directory to store the keyfile.

    Returns:
        Unlocked KeyStore instance.

    Raises:
        KeyStoreError: If keystore already exists.
    """
    config_dir = Path(config_dir)
    config_dir.mkdir(parents=True, exist_ok=True)

    keyfile = config_dir / KEYFILE_NAME
    if keyfile.exists():
        raise KeyStoreError(f"Keystore already exists at {keyfile}")

    private_key = make_private_key()
    salt = generate_salt()
    master_key = derive_key(password, salt)
    encrypted_key = encrypt_secret(private_key.encode("ascii"), master_key)

    key_id = str(uuid.uuid4())
    created_at = datetime.now(UTC).isoformat()
    _write_keyfile(config_dir, salt, encrypted_key, key_id, created_at)

    keystore = KeyStore(
        config_dir=config_dir,
        salt=salt,
        encrypted_config_key=encrypted_key,
        key_id=key_id,
        created_at=created_at,
        config_private_key=private_key,
    )
    _cache_key(key_id, private_key)
    return keystore


def load_keystore(password: str, config_dir: Path) -> KeyStore:
    """Load an existing keystore.

    Args:
        password: Master password for the keystore.
        config_dir: Directory containing the keyfile.

    Returns:
        Unlocked KeyStore instance.

    Raises:
        KeyStoreError: If keystore not found or password is wrong.
    """
    config_dir = Path(config_dir)
    keyfile = config_dir / KEYFILE_NAME

    if not keyfile.exists():
        raise KeyStoreError(f"Keystore not found at {keyfile}")

    try:
        data = json.loads(keyfile.read_text())
    except json.JSONDecodeError as e:
        raise KeyStoreError(f"Corrupted keyfile: {e}") from e

    try:
        salt = base64.b64decode(data["salt"])
        encrypted_key = base64.b64decode(data["encrypted_config_key"])
        key_id = data["key_id"]
        created_at = data["created_at"]
    except (KeyError, ValueError) as e:
        raise KeyStoreError(f"Invalid keyfile format: {e}") from e

    keystore = KeyStore(
        config_dir=config_dir,
        salt=salt,
        encrypted_config_key=encrypted_key,
        key_id=key_id,
        created_at=created_at,
    )
    keystore.unlock(password)
    return keystore

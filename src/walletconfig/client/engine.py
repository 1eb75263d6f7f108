"""Wallet config synchronization engine.

Architecture:
    BlobStore.fetch → decrypt_content → decode_config → merge
    → encode_config → encrypt_content → BlobStore.upload

Each operation performs at most one read and one write, in that order.
There is no locking: the remote object is a single slot and the last
upload wins.

Read-side failures (missing object, transport error, decrypt failure,
malformed record) are never raised. They come back as ``Absent`` with a
reason, so callers can always fall back to bootstrapping a fresh config.
Only ``StoreWriteError`` escapes, since a failed write means the mutation
was not persisted.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, replace

from walletconfig.client.store import (
    BlobStore,
    ObjectNotFoundError,
    StoreReadError,
)
from walletconfig.core.crypto import (
    DecryptionError,
    decrypt_content,
    encrypt_content,
)
from walletconfig.core.types import AbsentReason
from walletconfig.models import (
    WALLET_CONFIG_FILENAME,
    ConfigAccount,
    ConfigApp,
    MalformedConfigError,
    WalletConfig,
    decode_config,
    encode_config,
)
from walletconfig.wallet import Account, Wallet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Found:
    """A usable config was fetched."""

    config: WalletConfig


@dataclass(frozen=True)
class Absent:
    """No usable config; ``reason`` says why."""

    reason: AbsentReason
    detail: str = ""


FetchResult = Found | Absent


def fetch_wallet_config(wallet: Wallet, store: BlobStore) -> FetchResult:
    """Fetch and decrypt the wallet's config.

    Args:
        wallet: Wallet whose config private key decrypts the record.
        store: Store holding the wallet's namespace.

    Returns:
        Found with the decoded config, or Absent with the failure reason.
    """
    try:
        payload = store.fetch(WALLET_CONFIG_FILENAME)
    except ObjectNotFoundError as e:
        logger.info(f"No wallet config in {store.location}")
        return Absent(AbsentReason.NOT_FOUND, str(e))
    except StoreReadError as e:
        logger.warning(f"Failed to read wallet config from {store.location}: {e}")
        return Absent(AbsentReason.READ_ERROR, str(e))

    try:
        plaintext = decrypt_content(
            payload.decode("utf-8", errors="replace"), wallet.config_private_key
        )
    except DecryptionError as e:
        logger.warning(f"Failed to decrypt wallet config: {e}")
        return Absent(AbsentReason.DECRYPT_FAILED, str(e))

    try:
        config = decode_config(plaintext)
    except MalformedConfigError as e:
        logger.warning(f"Ignoring malformed wallet config: {e}")
        return Absent(AbsentReason.MALFORMED, str(e))

    logger.debug(f"Fetched wallet config with {len(config.accounts)} accounts")
    return Found(config)


def encrypt_wallet_config(wallet: Wallet, config: WalletConfig) -> str:
    """Encode a config and encrypt it to the wallet's config public key.

    Returns:
        Encrypted envelope text.
    """
    return encrypt_content(encode_config(config), wallet.config_public_key)


def update_wallet_config(wallet: Wallet, config: WalletConfig, store: BlobStore) -> None:
    """Encrypt and upload a config, replacing the stored one.

    Raises:
        StoreWriteError: If the upload fails. No retry happens here.
    """
    encrypted = encrypt_wallet_config(wallet, config)
    store.upload(WALLET_CONFIG_FILENAME, encrypted.encode("utf-8"))
    logger.info(f"Saved wallet config to {store.location}")


def get_or_create_wallet_config(
    wallet: Wallet,
    store: BlobStore,
    skip_upload: bool = False,
) -> WalletConfig:
    """Return the stored config, bootstrapping a fresh one if none is usable.

    A fresh config has one empty account per wallet account. It is uploaded
    immediately unless ``skip_upload`` is set.

    Args:
        wallet: Wallet handle.
        store: Store holding the wallet's namespace.
        skip_upload: Build the fresh config without writing it (dry run).

    Returns:
        The fetched or bootstrapped config.

    Raises:
        StoreWriteError: If uploading a bootstrapped config fails.
    """
    result = fetch_wallet_config(wallet, store)
    if isinstance(result, Found):
        return result.config

    logger.info(
        f"Bootstrapping wallet config ({result.reason.value}) "
        f"for {len(wallet.accounts)} accounts"
    )
    config = WalletConfig(
        accounts=[ConfigAccount(username=account.username) for account in wallet.accounts]
    )
    if not skip_upload:
        update_wallet_config(wallet, config, store)
    return config


def _realign(wallet: Wallet, config: WalletConfig) -> None:
    """Bring config accounts in line with the wallet's accounts, in place."""
    for index, account in enumerate(wallet.accounts):
        if index < len(config.accounts):
            entry = config.accounts[index]
            entry.username = account.username
            if entry.apps is None:
                entry.apps = {}
        else:
            logger.debug(f"Adding config entry for new account {index}")
            config.accounts.append(ConfigAccount(username=account.username))

    for entry in config.accounts:
        for origin, app in list(entry.apps.items()):
            if app.origin != origin:
                logger.warning(f"Re-keying app with origin {app.origin!r} under {origin!r}")
                entry.apps[origin] = replace(app, origin=origin)


def update_wallet_config_with_app(
    wallet: Wallet,
    account: Account,
    app: ConfigApp,
    config: WalletConfig,
    store: BlobStore,
) -> WalletConfig:
    """Record an app authorization under an account and persist the config.

    Every wallet account is realigned first, so a config written before
    accounts were added gains entries for them. The app then replaces any
    previous entry with the same origin.

    Args:
        wallet: Wallet handle.
        account: Account authorizing the app.
        app: App to register.
        config: Current config; not modified.
        store: Store holding the wallet's namespace.

    Returns:
        The updated config.

    Raises:
        IndexError: If ``account.index`` has no config entry after realignment.
        StoreWriteError: If the upload fails.
    """
    updated = copy.deepcopy(config)
    _realign(wallet, updated)

    if not 0 <= account.index < len(updated.accounts):
        raise IndexError(
            f"Account index {account.index} out of range for "
            f"{len(updated.accounts)} config accounts"
        )
    updated.accounts[account.index].apps[app.origin] = app

    update_wallet_config(wallet, updated, store)
    return updated

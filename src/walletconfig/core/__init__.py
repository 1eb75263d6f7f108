"""Core module - Shared crypto, configuration, and types."""

from walletconfig.core.config import HubConfig
from walletconfig.core.crypto import (
    DecryptionError,
    decrypt_content,
    decrypt_secret,
    derive_key,
    encrypt_content,
    encrypt_secret,
    generate_salt,
    get_public_key_from_private,
    make_private_key,
    validate_private_key,
)
from walletconfig.core.types import AbsentReason, WalletConfigError

__all__ = [
    # Config
    "HubConfig",
    # Crypto
    "DecryptionError",
    "decrypt_content",
    "decrypt_secret",
    "derive_key",
    "encrypt_content",
    "encrypt_secret",
    "generate_salt",
    "get_public_key_from_private",
    "make_private_key",
    "validate_private_key",
    # Types
    "AbsentReason",
    "WalletConfigError",
]

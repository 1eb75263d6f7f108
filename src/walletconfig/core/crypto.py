"""Cryptographic functions for walletconfig.

This module provides:
- secp256k1 key handling for the wallet's config keypair
- ECIES content encryption (ECDH + AES-256-CBC + HMAC-SHA256)
- Key derivation using Argon2id for the local keystore
- Authenticated encryption using AES-256-GCM for the local keystore
"""

from __future__ import annotations

import hashlib
import hmac
import json
import os

from argon2.low_level import Type, hash_secret_raw
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

from walletconfig.core.types import WalletConfigError

# Argon2id parameters (OWASP recommendations for password hashing)
ARGON2_TIME_COST = 3
ARGON2_MEMORY_COST = 65536  # 64 MiB
ARGON2_PARALLELISM = 4
ARGON2_HASH_LEN = 32  # 256 bits

# AES-GCM constants
NONCE_SIZE = 12  # 96 bits (recommended for AES-GCM)
SALT_SIZE = 16  # 128 bits

# ECIES constants
PRIVATE_KEY_SIZE = 32
IV_SIZE = 16  # AES block size
COMPRESSED_SUFFIX = 0x01


class DecryptionError(WalletConfigError):
    """Raised when an encrypted envelope cannot be decrypted."""


def _load_private_key(private_key: str) -> ec.EllipticCurvePrivateKey:
    """Load a hex-encoded secp256k1 private key.

    A 33-byte key ending in 0x01 (compressed-public-key marker) is accepted.
    """
    raw = bytes.fromhex(private_key)
    if len(raw) == PRIVATE_KEY_SIZE + 1 and raw[-1] == COMPRESSED_SUFFIX:
        raw = raw[:PRIVATE_KEY_SIZE]
    if len(raw) != PRIVATE_KEY_SIZE:
        raise ValueError(f"Invalid private key: must be 32 bytes, got {len(raw)}")
    return ec.derive_private_key(int.from_bytes(raw, "big"), ec.SECP256K1())


def _load_public_key(public_key: str) -> ec.EllipticCurvePublicKey:
    """Load a hex-encoded SEC1 (compressed or uncompressed) public key."""
    return ec.EllipticCurvePublicKey.from_encoded_point(
        ec.SECP256K1(), bytes.fromhex(public_key)
    )


def _compressed(public_key: ec.EllipticCurvePublicKey) -> bytes:
    return public_key.public_bytes(Encoding.X962, PublicFormat.CompressedPoint)


def make_private_key() -> str:
    """Generate a new random secp256k1 private key.

    Returns:
        64-character hex string.
    """
    key = ec.generate_private_key(ec.SECP256K1())
    return key.private_numbers().private_value.to_bytes(PRIVATE_KEY_SIZE, "big").hex()


def validate_private_key(private_key: str) -> str:
    """Check that a hex string is a usable secp256k1 private key.

    Args:
        private_key: Hex-encoded private key.

    Returns:
        The key, lowercased and stripped of surrounding whitespace.

    Raises:
        ValueError: If the key is not valid hex or not a valid scalar.
    """
    key = private_key.strip().lower()
    _load_private_key(key)
    return key


def get_public_key_from_private(private_key: str) -> str:
    """Derive the compressed public key for a private key.

    Args:
        private_key: Hex-encoded secp256k1 private key.

    Returns:
        Hex-encoded 33-byte compressed public key.
    """
    return _compressed(_load_private_key(private_key).public_key()).hex()


def _shared_keys(
    private_key: ec.EllipticCurvePrivateKey, public_key: ec.EllipticCurvePublicKey
) -> tuple[bytes, bytes]:
    """Derive (encryption_key, mac_key) from an ECDH exchange."""
    shared_secret = private_key.exchange(ec.ECDH(), public_key)
    digest = hashlib.sha512(shared_secret).digest()
    return digest[:32], digest[32:]


def _mac(mac_key: bytes, iv: bytes, ephemeral_pk: bytes, ciphertext: bytes) -> bytes:
    return hmac.new(mac_key, iv + ephemeral_pk + ciphertext, hashlib.sha256).digest()


def encrypt_content(plaintext: str, public_key: str) -> str:
    """Encrypt a string for the holder of a secp256k1 private key.

    Args:
        plaintext: Text to encrypt.
        public_key: Hex-encoded recipient public key.

    Returns:
        JSON envelope with hex fields: iv, ephemeralPK, cipherText, mac, wasString.
    """
    recipient = _load_public_key(public_key)
    ephemeral = ec.generate_private_key(ec.SECP256K1())
    enc_key, mac_key = _shared_keys(ephemeral, recipient)

    iv = os.urandom(IV_SIZE)
    padder = padding.PKCS7(algorithms.AES.block_size).padder()
    padded = padder.update(plaintext.encode("utf-8")) + padder.finalize()
    encryptor = Cipher(algorithms.AES(enc_key), modes.CBC(iv)).encryptor()
    ciphertext = encryptor.update(padded) + encryptor.finalize()

    ephemeral_pk = _compressed(ephemeral.public_key())
    return json.dumps(
        {
            "iv": iv.hex(),
            "ephemeralPK": ephemeral_pk.hex(),
            "cipherText": ciphertext.hex(),
            "mac": _mac(mac_key, iv, ephemeral_pk, ciphertext).hex(),
            "wasString": True,
        }
    )


def decrypt_content(envelope: str, private_key: str) -> str:
    """Decrypt an envelope produced by encrypt_content.

    Args:
        envelope: JSON envelope text.
        private_key: Hex-encoded recipient private key.

    Returns:
        Decrypted plaintext.

    Raises:
        DecryptionError: If the envelope is malformed, the MAC does not
            verify (wrong key or tampered data), or the plaintext is not UTF-8.
    """
    try:
        data = json.loads(envelope)
        iv = bytes.fromhex(data["iv"])
        ephemeral_pk = bytes.fromhex(data["ephemeralPK"])
        ciphertext = bytes.fromhex(data["cipherText"])
        mac = bytes.fromhex(data["mac"])
    except (ValueError, KeyError, TypeError, RecursionError) as e:
        raise DecryptionError(f"Invalid envelope: {e}") from e

    try:
        recipient = _load_private_key(private_key)
        ephemeral = ec.EllipticCurvePublicKey.from_encoded_point(
            ec.SECP256K1(), ephemeral_pk
        )
    except ValueError as e:
        raise DecryptionError(f"Invalid key material: {e}") from e

    enc_key, mac_key = _shared_keys(recipient, ephemeral)
    if not hmac.compare_digest(_mac(mac_key, iv, ephemeral_pk, ciphertext), mac):
        raise DecryptionError("MAC mismatch: wrong key or tampered payload")

    try:
        decryptor = Cipher(algorithms.AES(enc_key), modes.CBC(iv)).decryptor()
        padded = decryptor.update(ciphertext) + decryptor.finalize()
        unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
        plaintext = unpadder.update(padded) + unpadder.finalize()
        return plaintext.decode("utf-8")
    except ValueError as e:
        raise DecryptionError(f"Invalid ciphertext: {e}") from e


def generate_salt() -> bytes:
    """Generate a cryptographically secure random salt.

    Returns:
        16 bytes of random data for use as salt in key derivation.
    """
    return os.urandom(SALT_SIZE)


def derive_key(password: str, salt: bytes) -> bytes:
    """Derive a 256-bit encryption key from a password using Argon2id.

    Args:
        password: The user's master password.
        salt: A 16-byte random salt (use generate_salt()).

    Returns:
        32 bytes (256 bits) derived key suitable for AES-256.
    """
    return hash_secret_raw(
        secret=password.encode("utf-8"),
        salt=salt,
        time_cost=ARGON2_TIME_COST,
        memory_cost=ARGON2_MEMORY_COST,
        parallelism=ARGON2_PARALLELISM,
        hash_len=ARGON2_HASH_LEN,
        type=Type.ID,
    )


def encrypt_secret(data: bytes, key: bytes) -> bytes:
    """Encrypt data using AES-256-GCM with a random nonce.

    Args:
        data: Plaintext data to encrypt.
        key: 32-byte encryption key.

    Returns:
        Encrypted data in format: nonce (12 bytes) || ciphertext || auth_tag (16 bytes)
    """
    nonce = os.urandom(NONCE_SIZE)
    aesgcm = AESGCM(key)
    ciphertext = aesgcm.encrypt(nonce, data, None)
    return nonce + ciphertext


def decrypt_secret(encrypted: bytes, key: bytes) -> bytes:
    """Decrypt data encrypted with encrypt_secret.

    Args:
        encrypted: Data in format: nonce (12 bytes) || ciphertext || auth_tag (16 bytes)
        key: 32-byte encryption key.

    Returns:
        Decrypted plaintext data.

    Raises:
        cryptography.exceptions.InvalidTag: If authentication fails (wrong key or tampered data).
    """
    nonce = encrypted[:NONCE_SIZE]
    ciphertext = encrypted[NONCE_SIZE:]
    aesgcm = AESGCM(key)
    return aesgcm.decrypt(nonce, ciphertext, None)

"""Shared types for walletconfig.

This module defines the base exception and the enums used by both the
codec and the sync engine.
"""

from __future__ import annotations

from enum import Enum


class WalletConfigError(Exception):
    """Base exception for all walletconfig errors."""


class AbsentReason(str, Enum):
    """Why a fetch produced no usable wallet config.

    Every read-side failure collapses into one of these so callers can
    fall back to bootstrap without handling exceptions.
    """

    NOT_FOUND = "not_found"
    READ_ERROR = "read_error"
    DECRYPT_FAILED = "decrypt_failed"
    MALFORMED = "malformed"

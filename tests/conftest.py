"""Shared pytest fixtures."""

from collections.abc import Iterator
from unittest.mock import MagicMock, patch

import pytest


@pytest.fixture(autouse=True)
def isolated_keyring() -> Iterator[MagicMock]:
    """Keep tests away from the real OS keyring."""
    with patch("walletconfig.client.keystore.keyring") as mock_keyring:
        mock_keyring.get_password.return_value = None
        yield mock_keyring

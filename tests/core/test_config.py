"""Tests for core configuration classes."""

from __future__ import annotations

from walletconfig.core.config import HubConfig


def make_config(**overrides: object) -> HubConfig:
    """Create a HubConfig for testing."""
    values: dict[str, object] = {
        "server": "https://hub.example.com",
        "url_prefix": "https://read.example.com/hub/",
        "address": "1Address",
        "token": "token123",
    }
    values.update(overrides)
    return HubConfig(**values)  # type: ignore[arg-type]


class TestHubConfig:
    """Tests for HubConfig class."""

    def test_init_defaults(self) -> None:
        """Should default timeout and retries."""
        config = make_config()
        assert config.timeout == 30.0
        assert config.max_retries == 3

    def test_server_trailing_slash_removed(self) -> None:
        """Should strip trailing slash from server URL."""
        assert make_config(server="https://hub.example.com/").server == "https://hub.example.com"

    def test_url_prefix_gets_trailing_slash(self) -> None:
        """Should add a trailing slash to the read prefix."""
        config = make_config(url_prefix="https://read.example.com/hub")
        assert config.url_prefix == "https://read.example.com/hub/"

    def test_read_url(self) -> None:
        """Read URL is prefix + address + name."""
        assert (
            make_config().read_url("wallet-config.json")
            == "https://read.example.com/hub/1Address/wallet-config.json"
        )

    def test_write_url(self) -> None:
        """Write URL goes through the store endpoint."""
        assert (
            make_config().write_url("wallet-config.json")
            == "https://hub.example.com/store/1Address/wallet-config.json"
        )

    def test_is_secure(self) -> None:
        """Should report whether the server uses HTTPS."""
        assert make_config().is_secure is True
        assert make_config(server="http://localhost:3000").is_secure is False

    def test_dict_roundtrip(self) -> None:
        """to_dict output should rebuild an equal config."""
        config = make_config(timeout=5.0, max_retries=1)
        assert HubConfig.from_dict(config.to_dict()) == config

"""Tests for the wallet config record and its JSON codec."""

import json

import pytest

from walletconfig.models import (
    ConfigAccount,
    ConfigApp,
    MalformedConfigError,
    WalletConfig,
    decode_config,
    encode_config,
)


def make_app(origin: str = "https://app.example.com", **overrides: object) -> ConfigApp:
    """Create a ConfigApp for testing."""
    values: dict[str, object] = {
        "origin": origin,
        "scopes": ["store_write"],
        "last_login_at": 1700000000000,
        "app_icon": f"{origin}/icon.png",
        "name": "Example",
    }
    values.update(overrides)
    return ConfigApp(**values)  # type: ignore[arg-type]


class TestConfigApp:
    """Tests for ConfigApp wire mapping."""

    def test_to_dict_uses_wire_names(self) -> None:
        """Should emit camelCase field names."""
        data = make_app().to_dict()
        assert data == {
            "origin": "https://app.example.com",
            "scopes": ["store_write"],
            "lastLoginAt": 1700000000000,
            "appIcon": "https://app.example.com/icon.png",
            "name": "Example",
        }

    def test_from_dict_defaults_missing_fields(self) -> None:
        """Only origin is required."""
        app = ConfigApp.from_dict({"origin": "https://x"})
        assert app == ConfigApp(origin="https://x")

    def test_from_dict_requires_origin(self) -> None:
        """Missing origin is malformed."""
        with pytest.raises(MalformedConfigError, match="origin"):
            ConfigApp.from_dict({"scopes": []})

    def test_from_dict_rejects_bool_timestamp(self) -> None:
        """Booleans are not timestamps."""
        with pytest.raises(MalformedConfigError, match="lastLoginAt"):
            ConfigApp.from_dict({"origin": "https://x", "lastLoginAt": True})

    def test_from_dict_drops_unknown_keys(self) -> None:
        """Unknown app keys are not kept."""
        app = ConfigApp.from_dict({"origin": "https://x", "extra": 1})
        assert "extra" not in app.to_dict()


class TestConfigAccount:
    """Tests for ConfigAccount wire mapping."""

    def test_missing_username_omitted(self) -> None:
        """An absent username should not appear on the wire."""
        assert ConfigAccount().to_dict() == {"apps": {}}

    def test_null_apps_decodes_empty(self) -> None:
        """A null apps mapping decodes as empty."""
        account = ConfigAccount.from_dict({"username": "alice.id", "apps": None})
        assert account == ConfigAccount(username="alice.id", apps={})

    def test_non_string_username_rejected(self) -> None:
        """Usernames must be strings."""
        with pytest.raises(MalformedConfigError):
            ConfigAccount.from_dict({"username": 7, "apps": {}})


class TestCodec:
    """Tests for encode_config/decode_config."""

    def test_roundtrip(self) -> None:
        """decode(encode(v)) should equal v."""
        config = WalletConfig(
            accounts=[
                ConfigAccount(
                    username="alice.id",
                    apps={
                        "https://a.example.com": make_app("https://a.example.com"),
                        "https://b.example.com": make_app("https://b.example.com", scopes=[]),
                    },
                ),
                ConfigAccount(),
            ],
            meta={"theme": "dark", "nested": {"n": [1, 2]}},
        )
        assert decode_config(encode_config(config)) == config

    def test_roundtrip_without_meta(self) -> None:
        """Absent meta stays absent."""
        config = WalletConfig(accounts=[ConfigAccount(username="bob.id")])
        encoded = encode_config(config)
        assert "meta" not in json.loads(encoded)
        assert decode_config(encoded) == config

    def test_unknown_top_level_keys_dropped(self) -> None:
        """Only accounts and meta survive a decode."""
        config = decode_config('{"accounts": [], "version": 2, "meta": {"k": "v"}}')
        assert json.loads(encode_config(config)) == {"accounts": [], "meta": {"k": "v"}}

    def test_invalid_json_is_malformed(self) -> None:
        """Non-JSON text raises MalformedConfigError."""
        with pytest.raises(MalformedConfigError, match="Invalid JSON"):
            decode_config("{not json")

    def test_deeply_nested_json_is_malformed(self) -> None:
        """Nesting beyond the parser's recursion limit raises MalformedConfigError."""
        with pytest.raises(MalformedConfigError, match="Invalid JSON"):
            decode_config("[" * 100000)

    def test_encode_escapes_lone_surrogates(self) -> None:
        """Encoded text is ASCII, so it always survives UTF-8 encryption."""
        config = WalletConfig(
            accounts=[ConfigAccount(username="\ud800", apps={"o": make_app("o")})]
        )
        encoded = encode_config(config)
        assert encoded.isascii()
        encoded.encode("utf-8")
        assert decode_config(encoded) == config

    @pytest.mark.parametrize(
        "text",
        ["[]", "{}", '{"accounts": {}}', '{"accounts": [1]}', '{"accounts": [], "meta": []}'],
    )
    def test_wrong_shape_is_malformed(self, text: str) -> None:
        """Structurally invalid records raise MalformedConfigError."""
        with pytest.raises(MalformedConfigError):
            decode_config(text)

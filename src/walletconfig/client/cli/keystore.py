"""Keystore management commands for walletconfig CLI.

Commands:
- init: Create a keystore with a new config private key
- reset: Delete the local configuration
- unlock: Unlock the keystore
- export-key: Export the config private key
- import-key: Import a config private key
"""

from __future__ import annotations

import shutil
import sys

import click

from walletconfig.client.cli.config import get_config_dir
from walletconfig.client.keystore import (
    KEYFILE_NAME,
    KeyStoreError,
    create_keystore,
    load_keystore,
)


def require_initialized() -> None:
    """Exit with an error if no keystore exists."""
    if not (get_config_dir() / KEYFILE_NAME).exists():
        click.echo("Error: walletconfig not initialized. Run 'walletconfig init' first.", err=True)
        sys.exit(1)


@click.command()
def init() -> None:
    """Initialize a new walletconfig keystore.

    Generates the wallet's config keypair and stores the private key
    encrypted under a master password.
    """
    config_dir = get_config_dir()

    if (config_dir / KEYFILE_NAME).exists():
        click.echo("Error: walletconfig already initialized.", err=True)
        click.echo(f"Keystore exists at: {config_dir / KEYFILE_NAME}", err=True)
        click.echo("\nTo start over, run:")
        click.echo("  walletconfig reset")
        sys.exit(1)

    password = click.prompt(
        "Create master password",
        hide_input=True,
        confirmation_prompt="Confirm master password",
    )

    try:
        keystore = create_keystore(password, config_dir)
    except KeyStoreError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo("\nwalletconfig initialized successfully!")
    click.echo(f"Key ID: {keystore.key_id}")
    click.echo(f"Config public key: {keystore.config_public_key}")
    click.echo(f"Config directory: {config_dir}")
    click.echo("\nNext steps:")
    click.echo("  walletconfig hub --server <url> --url-prefix <url> --address <addr> --token <token>")
    click.echo("  walletconfig account add --username <name>")


@click.command()
@click.option("--force", is_flag=True, help="Skip confirmation prompt.")
def reset(force: bool) -> None:
    """Reset walletconfig configuration.

    Deletes the config directory, including the config private key.
    The remote wallet config is not touched.
    """
    config_dir = get_config_dir()

    if not config_dir.exists():
        click.echo("Nothing to reset. walletconfig is not initialized.")
        return

    if not force:
        click.echo("WARNING: This will delete your config private key and hub settings.")
        click.echo(f"Config directory: {config_dir}")
        click.echo("\nExport your key first if you need it:")
        click.echo("  walletconfig export-key\n")
        if not click.confirm("Are you sure you want to reset?"):
            click.echo("Aborted.")
            return

    try:
        shutil.rmtree(config_dir)
    except OSError as e:
        click.echo(f"Error deleting config directory: {e}", err=True)
        sys.exit(1)
    click.echo("walletconfig configuration has been reset.")


@click.command()
def unlock() -> None:
    """Unlock the keystore and cache the key in the OS keyring."""
    require_initialized()
    password = click.prompt("Enter master password", hide_input=True)

    try:
        keystore = load_keystore(password, get_config_dir())
    except KeyStoreError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    click.echo("Keystore unlocked successfully!")
    click.echo(f"Key ID: {keystore.key_id}")


@click.command("export-key")
def export_key() -> None:
    """Export the config private key as hex.

    WARNING: Anyone with this key can read your wallet config.
    """
    require_initialized()
    password = click.prompt("Enter master password", hide_input=True)

    try:
        keystore = load_keystore(password, get_config_dir())
    except KeyStoreError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    click.echo("\nConfig private key (keep secret!):")
    click.echo(keystore.export_key())


@click.command("import-key")
@click.argument("key")
def import_key(key: str) -> None:
    """Import a config private key.

    KEY is the hex-encoded private key exported from another device.
    """
    require_initialized()
    password = click.prompt("Enter master password", hide_input=True)

    try:
        keystore = load_keystore(password, get_config_dir())
        keystore.import_key(key, password)
    except KeyStoreError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    click.echo("Config private key imported successfully!")
    click.echo(f"New Key ID: {keystore.key_id}")

"""Command-line interface for walletconfig.

This module provides the main CLI entry point and assembles all commands.

Commands:
- init: Initialize a new keystore
- reset: Reset walletconfig configuration
- unlock: Unlock the keystore with password
- export-key: Export the config private key
- import-key: Import a config private key
- hub: Save hub connection settings
- account: Manage the wallet's accounts
- show: Print (or bootstrap) the wallet config
- register-app: Record an app authorization
"""

from __future__ import annotations

import logging

import click

from walletconfig.client.cli.keystore import (
    export_key,
    import_key,
    init,
    reset,
    unlock,
)
from walletconfig.client.cli.sync import register_app, show
from walletconfig.client.cli.wallet import account, hub


@click.group()
@click.version_option(package_name="walletconfig")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """walletconfig - Encrypted wallet app configuration sync."""
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    walletconfig_logger = logging.getLogger("walletconfig")
    for existing in walletconfig_logger.handlers[:]:
        walletconfig_logger.removeHandler(existing)
    walletconfig_logger.addHandler(handler)
    walletconfig_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    walletconfig_logger.propagate = False


# Keystore commands
cli.add_command(init)
cli.add_command(reset)
cli.add_command(unlock)
cli.add_command(export_key)
cli.add_command(import_key)

# Settings commands
cli.add_command(hub)
cli.add_command(account)

# Sync commands
cli.add_command(show)
cli.add_command(register_app)

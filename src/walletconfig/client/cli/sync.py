"""Wallet config sync commands for walletconfig CLI.

Commands:
- show: Fetch (or bootstrap) the wallet config and print it
- register-app: Record an app authorization for an account
"""

from __future__ import annotations

import json
import sys
import time
from pathlib import Path

import click

from walletconfig.client.cli.config import (
    get_accounts,
    get_config_dir,
    get_hub_config,
    load_config,
)
from walletconfig.client.cli.keystore import require_initialized
from walletconfig.client.engine import (
    get_or_create_wallet_config,
    update_wallet_config_with_app,
)
from walletconfig.client.keystore import KeyStoreError, load_keystore
from walletconfig.client.store import BlobStore, HubStore, LocalFSStore, StoreWriteError
from walletconfig.models import ConfigApp
from walletconfig.wallet import Wallet

store_dir_option = click.option(
    "--store-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Use a local directory instead of the configured hub.",
)


def _open_wallet_and_store(store_dir: Path | None) -> tuple[Wallet, BlobStore]:
    """Unlock the keystore and build the wallet and store handles."""
    require_initialized()
    config = load_config()

    accounts = get_accounts(config)
    if not accounts:
        click.echo("Error: No accounts. Run 'walletconfig account add' first.", err=True)
        sys.exit(1)

    store: BlobStore
    if store_dir is not None:
        store = LocalFSStore(store_dir)
    else:
        hub_config = get_hub_config(config)
        if hub_config is None:
            click.echo("Error: No hub configured. Run 'walletconfig hub' first.", err=True)
            sys.exit(1)
        store = HubStore(hub_config)

    password = click.prompt("Enter master password", hide_input=True)
    try:
        keystore = load_keystore(password, get_config_dir())
    except KeyStoreError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    return Wallet(config_private_key=keystore.config_private_key, accounts=accounts), store


def _close(store: BlobStore) -> None:
    if isinstance(store, HubStore):
        store.close()


@click.command()
@store_dir_option
@click.option("--dry-run", is_flag=True, help="Do not upload a bootstrapped config.")
def show(store_dir: Path | None, dry_run: bool) -> None:
    """Print the wallet config, creating it if none is stored."""
    wallet, store = _open_wallet_and_store(store_dir)
    try:
        config = get_or_create_wallet_config(wallet, store, skip_upload=dry_run)
    except StoreWriteError as e:
        click.echo(f"Error: Failed to save wallet config: {e}", err=True)
        sys.exit(1)
    finally:
        _close(store)
    click.echo(json.dumps(config.to_dict(), indent=2))


@click.command("register-app")
@click.argument("origin")
@click.option("--account", "account_index", type=int, default=0, show_default=True,
              help="Index of the authorizing account.")
@click.option("--name", default="", help="App display name.")
@click.option("--icon", default="", help="App icon URL.")
@click.option("--scope", "scopes", multiple=True, help="Granted scope (repeatable).")
@store_dir_option
def register_app(
    origin: str,
    account_index: int,
    name: str,
    icon: str,
    scopes: tuple[str, ...],
    store_dir: Path | None,
) -> None:
    """Register an app ORIGIN under an account."""
    wallet, store = _open_wallet_and_store(store_dir)
    if not 0 <= account_index < len(wallet.accounts):
        _close(store)
        click.echo(f"Error: No account with index {account_index}.", err=True)
        sys.exit(1)

    app = ConfigApp(
        origin=origin,
        scopes=list(scopes),
        last_login_at=int(time.time() * 1000),
        app_icon=icon,
        name=name,
    )
    try:
        config = get_or_create_wallet_config(wallet, store)
        update_wallet_config_with_app(
            wallet, wallet.accounts[account_index], app, config, store
        )
    except StoreWriteError as e:
        click.echo(f"Error: Failed to save wallet config: {e}", err=True)
        sys.exit(1)
    finally:
        _close(store)
    click.echo(f"Registered {origin} for account {account_index}.")

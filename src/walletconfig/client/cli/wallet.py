"""Hub and account settings commands for walletconfig CLI.

Commands:
- hub: Save hub connection settings
- account add: Append an account to the wallet
- account list: Show the wallet's accounts
"""

from __future__ import annotations

import click

from walletconfig.client.cli.config import get_accounts, load_config, save_config
from walletconfig.core.config import HubConfig
from walletconfig.wallet import Wallet


@click.command()
@click.option("--server", required=True, help="Hub server URL used for writes.")
@click.option("--url-prefix", required=True, help="Public URL prefix used for reads.")
@click.option("--address", required=True, help="Wallet namespace on the hub.")
@click.option("--token", required=True, help="Authorization token for writes.")
@click.option("--timeout", default=30.0, show_default=True, help="Request timeout in seconds.")
@click.option("--max-retries", default=3, show_default=True, help="Retries on transport errors.")
def hub(
    server: str,
    url_prefix: str,
    address: str,
    token: str,
    timeout: float,
    max_retries: int,
) -> None:
    """Save hub connection settings."""
    hub_config = HubConfig(
        server=server,
        url_prefix=url_prefix,
        address=address,
        token=token,
        timeout=timeout,
        max_retries=max_retries,
    )
    config = load_config()
    config["hub"] = hub_config.to_dict()
    save_config(config)
    click.echo(f"Hub settings saved: {hub_config.server} ({hub_config.address})")
    if not hub_config.is_secure:
        click.echo("Warning: hub server does not use HTTPS.", err=True)


@click.group()
def account() -> None:
    """Manage the wallet's accounts."""


@account.command("add")
@click.option("--username", default=None, help="Username of the account.")
def account_add(username: str | None) -> None:
    """Append an account at the next index."""
    config = load_config()
    # Key is not needed to manage the account list
    wallet = Wallet(config_private_key="", accounts=get_accounts(config))
    new_account = wallet.add_account(username)
    config["accounts"] = [a.to_dict() for a in wallet.accounts]
    save_config(config)
    click.echo(f"Added account {new_account.index} ({username or 'no username'})")


@account.command("list")
def account_list() -> None:
    """List the wallet's accounts."""
    accounts = get_accounts(load_config())
    if not accounts:
        click.echo("No accounts.")
        return
    for acc in accounts:
        click.echo(f"{acc.index}: {acc.username or '-'}")

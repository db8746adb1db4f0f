"""
Wallet commands - create a local wallet, connect and disconnect it.

The connected address and selected network are what the other commands
act on by default.
"""

from __future__ import annotations

import sys

import click

from .. import config
from ..wallet.keyfile import generate_key, get_account, load_private_key, save_private_key
from .shared import get_session, label, require_wallet


@click.command()
@click.pass_context
def connect(ctx: click.Context) -> None:
    """Connect the wallet and follow its network."""
    session = get_session(ctx)

    address = session.connect_wallet()
    if address is None:
        if session.wallet is not None:
            click.secho("Failed to connect wallet.", fg="red")
        sys.exit(1)

    network = session.network
    click.secho("Wallet connected!", fg="green")
    click.echo(label("Address:") + click.style(session.display_address or "", fg="yellow", bold=True))
    click.echo(label("Network:") + f"{network.chain_name} ({session.selected_network})")


@click.command()
@click.pass_context
def disconnect(ctx: click.Context) -> None:
    """Forget the connected address."""
    session = get_session(ctx, sync=False)
    session.disconnect_wallet()
    click.echo("Wallet disconnected.")


@click.group()
def wallet() -> None:
    """Manage the local wallet."""


@wallet.command("init")
@click.option("--force", is_flag=True, help="Replace an existing key")
def wallet_init(force: bool) -> None:
    """Create a new local wallet key."""
    config.load_config()
    try:
        existing = load_private_key()
    except ValueError:
        existing = None

    if existing and not force:
        address = get_account(existing).address
        click.echo(f"Wallet already exists: {address}")
        click.echo("Use --force to replace it.")
        return

    private_key, address = generate_key()
    env_path = save_private_key(private_key)
    if existing:
        # The connected address belonged to the replaced key
        config.save_env_values({config.WALLET_ADDRESS: None})
    click.secho("Wallet created!", fg="green")
    click.echo(label("Address:") + address)
    click.echo(label("Key file:") + str(env_path))


@wallet.command("show")
@click.pass_context
def wallet_show(ctx: click.Context) -> None:
    """Show the wallet address, chain and connection state."""
    session = get_session(ctx, sync=False)
    w = require_wallet(session)
    click.echo(label("Address:") + w.address)
    click.echo(label("Chain:") + str(w.chain_id))
    click.echo(label("Known:") + ", ".join(str(c) for c in w.chains))
    state = "connected" if session.wallet_address else "not connected"
    click.echo(label("Status:") + state)

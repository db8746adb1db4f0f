"""
Network commands - show, list, sync, and switch the selected network.
"""

from __future__ import annotations

import sys

import click

from ..networks import NETWORKS, get_deployment, network_keys, rpc_url
from .shared import get_session, label


@click.group()
def network() -> None:
    """Show or change the selected network."""


@network.command("show")
@click.pass_context
def network_show(ctx: click.Context) -> None:
    """Show the selected network and its deployment."""
    session = get_session(ctx)
    net = session.network
    deployment = get_deployment(session.selected_network)

    click.echo(label("Network:") + click.style(net.chain_name, fg="bright_white", bold=True))
    click.echo(label("Key:") + session.selected_network)
    click.echo(label("Chain ID:") + f"{net.chain_id} ({net.chain_id_hex})")
    click.echo(label("RPC:") + rpc_url(session.selected_network))
    click.echo(label("Explorer:") + net.explorer_url)
    click.echo(label("Contract:") + deployment.contract_address)
    click.echo(label("Token:") + deployment.erc20_address)


@network.command("list")
@click.pass_context
def network_list(ctx: click.Context) -> None:
    """List the supported networks."""
    session = get_session(ctx, sync=False)
    for key in network_keys():
        net = NETWORKS[key]
        marker = click.style("●", fg="green") if key == session.selected_network else " "
        click.echo(
            f"  {marker} "
            + click.style(f"{key:<18}", fg="bright_white")
            + click.style(f"{net.chain_name} ({net.chain_id})", dim=True)
        )


@network.command("switch")
@click.argument("network_key", type=click.Choice(network_keys()))
@click.pass_context
def network_switch(ctx: click.Context, network_key: str) -> None:
    """Switch the wallet (and the selection) to NETWORK_KEY."""
    session = get_session(ctx)
    net = NETWORKS[network_key]

    click.echo(f"Switching to {net.chain_name}...")
    if not session.switch_network(network_key):
        click.secho(f"Failed to switch to {net.chain_name}.", fg="red")
        sys.exit(1)

    click.secho(f"Switched to {net.chain_name}", fg="green")


@network.command("sync")
@click.pass_context
def network_sync(ctx: click.Context) -> None:
    """Follow the network the wallet is currently on."""
    session = get_session(ctx, sync=False)
    if session.wallet is None:
        click.secho("No wallet found; nothing to sync.", fg="yellow")
        return

    selected = session.sync_with_wallet()
    if selected is None:
        click.secho("Could not read the wallet network.", fg="red")
        sys.exit(1)
    click.echo(label("Network:") + f"{NETWORKS[selected].chain_name} ({selected})")

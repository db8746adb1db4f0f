"""
Marketplace queries - contract owner, printers, orders, and balances.
"""

from __future__ import annotations

import datetime
import sys
from typing import Optional

import click

from .. import market
from ..networks import get_network
from .shared import get_session, label, network_option, resolve_address, resolve_network


@click.command()
@network_option
@click.pass_context
def owner(ctx: click.Context, network_key: Optional[str]) -> None:
    """Show the marketplace contract owner."""
    session = get_session(ctx)
    key = resolve_network(session, network_key)

    result = market.fetch_contract_owner(key)
    if result is None:
        click.secho("ERROR: Failed to fetch contract owner.", fg="red")
        sys.exit(1)
    click.echo(label("Owner:") + str(result))


@click.command()
@network_option
@click.pass_context
def printers(ctx: click.Context, network_key: Optional[str]) -> None:
    """List the printers registered on the marketplace."""
    session = get_session(ctx)
    key = resolve_network(session, network_key)

    result = market.fetch_printers(key)
    if result is None:
        click.secho("ERROR: Failed to fetch printers.", fg="red")
        sys.exit(1)

    click.echo(f"=== Printers ({get_network(key).chain_name}) ===")
    if not result:
        click.echo("  No printers registered.")
        return

    for printer in result:
        state = click.style("available", fg="green") if printer.available else click.style("busy", fg="yellow")
        click.echo(
            click.style(f"  {printer.printer_id}", fg="bright_white", bold=True)
            + f"  {printer.name}  "
            + click.style(f"{printer.price_per_hour_ether}/h", dim=True)
            + f"  {state}"
        )


@click.command()
@network_option
@click.option("--address", default=None, help="Client address (default: connected wallet)")
@click.pass_context
def orders(ctx: click.Context, network_key: Optional[str], address: Optional[str]) -> None:
    """List the orders placed by an address."""
    session = get_session(ctx)
    key = resolve_network(session, network_key)
    who = resolve_address(session, address)

    result = market.fetch_orders(key, who)
    if result is None:
        click.secho("ERROR: Failed to fetch orders.", fg="red")
        sys.exit(1)

    click.echo(f"=== Orders ({get_network(key).chain_name}) ===")
    if not result:
        click.echo("  No orders found.")
        return

    for order in result:
        created = datetime.datetime.fromtimestamp(order.created_at, tz=datetime.timezone.utc)
        click.echo(
            click.style(f"  {order.order_id}", fg="bright_white", bold=True)
            + f"  printer {order.printer_id}"
            + f"  {order.duration_hours:g}h"
            + click.style(f"  {order.status_label}", fg="cyan")
            + click.style(f"  {created.isoformat()}", dim=True)
        )


@click.command()
@network_option
@click.option("--address", default=None, help="Address to query (default: connected wallet)")
@click.pass_context
def balance(ctx: click.Context, network_key: Optional[str], address: Optional[str]) -> None:
    """Show native and payment-token balances."""
    session = get_session(ctx)
    key = resolve_network(session, network_key)
    who = resolve_address(session, address)
    if not who:
        click.secho("ERROR: No address given and no wallet connected.", fg="red")
        sys.exit(1)

    net = get_network(key)
    eth = market.fetch_balance_eth(key, who)
    token = market.fetch_balance_erc20(key, who)

    click.echo(f"=== Balance ({net.chain_name}) ===")
    click.echo(label("Address:") + who)
    if eth is None:
        click.echo(label("Native:") + click.style("(unable to read)", fg="red"))
    else:
        click.echo(label("Native:") + f"{eth} {net.native_currency.symbol}")
    if token is None:
        click.echo(label("Token:") + click.style("(unable to read)", fg="red"))
    else:
        click.echo(label("Token:") + f"{token}")

    if eth is None and token is None:
        sys.exit(1)

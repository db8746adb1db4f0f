"""
Order commands - place a print order and inspect the token approval.

Placing an order sends two transactions from the wallet:
1. approve the marketplace to spend the actual price of the payment token
2. createOrder on the marketplace
Each is awaited until mined. The wallet pays gas for both.
"""

from __future__ import annotations

import sys
from decimal import Decimal
from typing import Optional

import click

from .. import market
from ..networks import get_network
from .shared import (
    get_session,
    label,
    network_option,
    require_wallet,
    resolve_address,
    resolve_network,
    token_amount,
)


@click.group()
def order() -> None:
    """Place print orders."""


@order.command("place")
@network_option
@click.option("--order-id", required=True, help="Order identifier")
@click.option("--printer-id", required=True, help="Printer to print on")
@click.option("--min-price", required=True, callback=token_amount, help="Minimum price (token units)")
@click.option("--actual-price", required=True, callback=token_amount, help="Price paid (token units)")
@click.option("--duration", required=True, type=click.FloatRange(min=0), help="Print duration in hours")
@click.option("--timeout", default=None, type=int, help="Receipt wait per transaction (seconds)")
@click.pass_context
def order_place(
    ctx: click.Context,
    network_key: Optional[str],
    order_id: str,
    printer_id: str,
    min_price: Decimal,
    actual_price: Decimal,
    duration: float,
    timeout: Optional[int],
) -> None:
    """Approve the payment and create a print order."""
    session = get_session(ctx)
    wallet = require_wallet(session)
    key = resolve_network(session, network_key)
    net = get_network(key)

    click.echo(f"=== Place Order ({net.chain_name}) ===")
    click.echo()
    click.echo(label("Order:") + order_id)
    click.echo(label("Printer:") + printer_id)
    click.echo(label("Min price:") + str(min_price))
    click.echo(label("Price:") + str(actual_price))
    click.echo(label("Duration:") + f"{duration:g}h")
    click.echo(label("Signer:") + wallet.address)
    click.echo()

    click.echo("  Approving payment and creating order...")
    tx_hash = market.place_order(
        key,
        wallet,
        order_id=order_id,
        printer_id=printer_id,
        min_price=min_price,
        actual_price=actual_price,
        duration=duration,
        timeout=timeout,
    )

    if tx_hash is None:
        click.secho("  Order failed.", fg="red")
        sys.exit(1)

    click.echo()
    click.secho("  Order placed!", fg="green", bold=True)
    click.echo(label("TX:") + tx_hash)
    click.echo(label("Explorer:") + net.tx_url(tx_hash))


@order.command("allowance")
@network_option
@click.option("--address", default=None, help="Token owner (default: connected wallet)")
@click.pass_context
def order_allowance(ctx: click.Context, network_key: Optional[str], address: Optional[str]) -> None:
    """Show how much payment token the marketplace may spend."""
    session = get_session(ctx)
    key = resolve_network(session, network_key)
    who = resolve_address(session, address)
    if not who:
        click.secho("ERROR: No address given and no wallet connected.", fg="red")
        sys.exit(1)

    allowance = market.fetch_token_allowance(key, who)
    if allowance is None:
        click.secho("ERROR: Failed to fetch allowance.", fg="red")
        sys.exit(1)
    click.echo(label("Owner:") + who)
    click.echo(label("Allowance:") + str(allowance))

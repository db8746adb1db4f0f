"""
Formicarium CLI

Command-line client for the Formicarium print-job marketplace.

The wallet is a local secp256k1 key; the selected network follows the
wallet's chain, and switching networks asks the wallet to switch first.

Commands:
  connect     - Connect the wallet and follow its network
  disconnect  - Forget the connected address
  wallet      - Create / show the local wallet
  network     - Show, list, sync, or switch networks
  owner       - Show the marketplace contract owner
  printers    - List registered printers
  orders      - List your orders
  balance     - Show native and payment-token balances
  order       - Place a print order (approve + createOrder)
  whoami      - Show the connected address
  info        - Show system information
"""

from __future__ import annotations

import logging
import sys

import click

from .logging_config import setup_logging


# ============ Constants ============

VERSION = "0.3.0"


# ============ Banner ============


def _print_banner(compact: bool = False) -> None:
    """Print the Formicarium CLI banner.

    Args:
        compact: If True, print a single-line banner (for subcommands).
    """
    if compact:
        click.echo(
            click.style("  ◆ ", fg="yellow")
            + click.style("F O R M I C A R I U M", fg="bright_white", bold=True)
            + click.style(f"  v{VERSION}", dim=True)
        )
        click.echo()
        return

    border = click.style("  ◆ ═══════════════════════════════════════ ◆", fg="yellow")
    click.echo()
    click.echo(border)
    click.echo()
    click.echo(
        click.style("      F O R M I C A R I U M", fg="bright_white", bold=True)
        + click.style(f"      v{VERSION}", dim=True)
    )
    click.secho("        ─── Print Job Marketplace ───", fg="yellow")
    click.echo()
    click.echo(border)
    click.echo()


# ============ Main CLI Group ============


@click.group(invoke_without_command=True)
@click.version_option(version=VERSION, prog_name="formicarium")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option("--yes", "-y", is_flag=True, help="Approve wallet prompts without asking")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, yes: bool) -> None:
    """Formicarium — Print Job Marketplace."""
    setup_logging(logging.DEBUG if verbose else logging.INFO)
    ctx.ensure_object(dict)
    ctx.obj["yes"] = yes
    if ctx.invoked_subcommand is None:
        _print_banner()
        click.echo(ctx.get_help())


# ============ Commands ============

from .commands.market import balance, orders, owner, printers
from .commands.network import network
from .commands.order import order
from .commands.wallet import connect, disconnect, wallet

cli.add_command(connect)
cli.add_command(disconnect)
cli.add_command(wallet)
cli.add_command(network)
cli.add_command(owner)
cli.add_command(printers)
cli.add_command(orders)
cli.add_command(balance)
cli.add_command(order)


# ============ Identity ============


@cli.command()
@click.pass_context
def whoami(ctx: click.Context) -> None:
    """Show the connected wallet address."""
    from .commands.shared import get_session

    session = get_session(ctx, sync=False)
    if session.wallet is None:
        click.echo("No wallet found.")
        click.echo("Run 'formicarium wallet init' to create one.")
        sys.exit(1)
    if not session.wallet_address:
        click.echo("Wallet not connected.")
        click.echo("Run 'formicarium connect'.")
        sys.exit(1)
    click.echo(f"Address: {session.wallet_address}")
    click.echo(f"Explorer: {session.network.address_url(session.wallet_address)}")


# ============ Info ============


@cli.command()
@click.pass_context
def info(ctx: click.Context) -> None:
    """Show system information."""
    from .commands.shared import get_session

    _print_banner()
    session = get_session(ctx)

    # ── Status ──
    click.secho("  Status ─────────────────────────────────", fg="yellow")
    click.echo()

    if session.wallet is None:
        wallet_text = click.style("not initialized", fg="yellow") + click.style(
            "  (run: formicarium wallet init)", dim=True
        )
    elif session.display_address:
        wallet_text = click.style(session.display_address, fg="bright_white")
    else:
        wallet_text = click.style("not connected", fg="yellow") + click.style(
            "  (run: formicarium connect)", dim=True
        )
    click.echo(click.style("  Wallet:      ", dim=True) + wallet_text)
    click.echo(
        click.style("  Network:     ", dim=True)
        + click.style(session.network.chain_name, fg="bright_white")
        + click.style(f"  ({session.selected_network})", dim=True)
    )
    click.echo()

    # ── Commands ──
    click.secho("  Commands ───────────────────────────────", fg="yellow")
    click.echo()

    commands = [
        ("connect ", "Connect the wallet"),
        ("network ", "Show or switch networks"),
        ("printers", "List registered printers"),
        ("orders  ", "List your orders"),
        ("balance ", "Show balances"),
        ("order   ", "Place a print order"),
        ("whoami  ", "Show the connected address"),
    ]
    for cmd, desc in commands:
        click.echo(
            click.style("  ", dim=True)
            + click.style(cmd, fg="bright_white", bold=True)
            + click.style("  ◇  ", fg="yellow")
            + click.style(desc, dim=True)
        )

    click.echo()


# ============ Entry Points ============


def main() -> None:
    """Formicarium CLI entry point."""
    # UTF-8 output on Windows for the banner symbols
    if sys.platform == "win32":
        try:
            sys.stdout.reconfigure(encoding="utf-8")  # type: ignore[union-attr]
            sys.stderr.reconfigure(encoding="utf-8")  # type: ignore[union-attr]
        except (AttributeError, OSError):
            pass
    cli()


if __name__ == "__main__":
    main()

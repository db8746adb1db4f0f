"""
Helpers shared by the command modules: building the session for a
command invocation and resolving the network it acts on.
"""

from __future__ import annotations

import sys
from decimal import Decimal
from typing import NoReturn, Optional

import click

from ..config import load_config
from ..errors import FormicariumError, WalletUnavailableError
from ..networks import network_keys
from ..session import NetworkSession
from ..utils import parse_ether
from ..wallet.keyfile import KeyfileWallet, load_wallet


def network_option(func):
    return click.option(
        "--network",
        "network_key",
        type=click.Choice(network_keys()),
        default=None,
        help="Network to use (default: the selected network)",
    )(func)


def token_amount(ctx: click.Context, param: click.Parameter, value: Optional[str]) -> Optional[Decimal]:
    """Option callback: parse a token amount exactly, as typed."""
    if value is None:
        return None
    try:
        parse_ether(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc), ctx=ctx, param=param) from None
    return Decimal(value.strip())


def _alert(message: str) -> None:
    click.secho(message, fg="red")


def _confirm(prompt: str) -> bool:
    return click.confirm(f"  {prompt}", default=True)


def get_session(ctx: click.Context, sync: bool = True) -> NetworkSession:
    """
    Session for this invocation, created once per command.

    Loads the config, the wallet (if any), restores the persisted
    selection, follows the wallet's chain and listens for chain changes
    until the command finishes.
    """
    obj = ctx.ensure_object(dict)
    session = obj.get("session")
    if session is not None:
        return session

    load_config()
    try:
        wallet = load_wallet(confirm=None if obj.get("yes") else _confirm)
    except ValueError as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        sys.exit(1)

    session = NetworkSession.from_config(wallet, alert=_alert)
    if sync:
        session.sync_with_wallet()
    session.attach()
    ctx.call_on_close(session.detach)

    obj["session"] = session
    return session


def fail(exc: FormicariumError) -> NoReturn:
    click.secho(f"ERROR: {exc}", fg="red")
    sys.exit(exc.exit_code)


def require_wallet(session: NetworkSession) -> KeyfileWallet:
    if session.wallet is None:
        fail(WalletUnavailableError("No wallet found. Run 'formicarium wallet init' or set PRIVATE_KEY."))
    return session.wallet  # type: ignore[return-value]


def resolve_network(session: NetworkSession, network_key: Optional[str]) -> str:
    return network_key or session.selected_network


def resolve_address(session: NetworkSession, address: Optional[str]) -> Optional[str]:
    """Explicit address, else the connected one, else the wallet's own."""
    if address:
        return address
    if session.wallet_address:
        return session.wallet_address
    wallet = session.wallet
    if isinstance(wallet, KeyfileWallet):
        return wallet.address
    return None


def label(text: str) -> str:
    return click.style(f"  {text:<12}", dim=True)

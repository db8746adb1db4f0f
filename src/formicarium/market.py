"""
Marketplace data access - reads and order placement against the
Formicarium contract and its ERC-20 payment token.

Every function takes the network key and reduces failures to ``None``
after logging them, so callers only need to check for ``None``.

Order placement is the two-step payment flow:
1. ``approve(marketplace, actual_price)`` on the payment token
2. ``createOrder(order_id, printer_id, min_price, actual_price, seconds)``
each sent through the wallet and awaited until mined.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import IntEnum
from typing import Any, Optional, Sequence

from . import config
from .chain.abi import encode_function_call, erc20_abi, marketplace_abi
from .chain.rpc import get_balance, read_contract, receipt_status, wait_for_receipt
from .errors import TransactionFailedError, WalletUnavailableError
from .networks import get_deployment, get_network, normalize_chain_id, rpc_url
from .utils import Amount, format_ether, hours_to_seconds, parse_ether
from .wallet.provider import WalletProvider

logger = logging.getLogger(__name__)


class OrderStatus(IntEnum):
    PENDING = 0
    IN_PROGRESS = 1
    COMPLETED = 2
    CANCELLED = 3


@dataclass(frozen=True)
class Printer:
    printer_id: str
    owner: str
    name: str
    price_per_hour: int
    available: bool

    @classmethod
    def from_tuple(cls, raw: Sequence[Any]) -> "Printer":
        printer_id, owner, name, price_per_hour, available = raw
        return cls(str(printer_id), str(owner), str(name), int(price_per_hour), bool(available))

    @property
    def price_per_hour_ether(self) -> Decimal:
        return format_ether(self.price_per_hour)


@dataclass(frozen=True)
class Order:
    order_id: str
    printer_id: str
    client: str
    min_price: int
    actual_price: int
    duration: int
    created_at: int
    status: int

    @classmethod
    def from_tuple(cls, raw: Sequence[Any]) -> "Order":
        order_id, printer_id, client, min_price, actual_price, duration, created_at, status = raw
        return cls(
            str(order_id),
            str(printer_id),
            str(client),
            int(min_price),
            int(actual_price),
            int(duration),
            int(created_at),
            int(status),
        )

    @property
    def status_label(self) -> str:
        try:
            return OrderStatus(self.status).name.replace("_", " ").lower()
        except ValueError:
            return f"unknown ({self.status})"

    @property
    def duration_hours(self) -> float:
        return self.duration / 3600


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------

def _read_marketplace(network: str, function_name: str, from_address: Optional[str] = None) -> Any:
    return read_contract(
        get_deployment(network).contract_address,
        function_name,
        abi=marketplace_abi(),
        rpc_url=rpc_url(network),
        from_address=from_address,
    )


def fetch_contract_owner(network: str) -> Optional[str]:
    try:
        return _read_marketplace(network, "owner")
    except Exception:
        logger.error("Error fetching contract owner", exc_info=True)
        return None


def fetch_orders(network: str, address: Optional[str]) -> Optional[list[Order]]:
    """Orders placed by ``address`` (``getYourOrders`` is keyed on the caller)."""
    try:
        raw = _read_marketplace(network, "getYourOrders", from_address=address)
        return [Order.from_tuple(item) for item in raw or ()]
    except Exception:
        logger.error("Error fetching orders", exc_info=True)
        return None


def fetch_printers(network: str) -> Optional[list[Printer]]:
    try:
        raw = _read_marketplace(network, "getAllPrinters")
        return [Printer.from_tuple(item) for item in raw or ()]
    except Exception:
        logger.error("Error fetching printers", exc_info=True)
        return None


def fetch_balance_eth(network: str, address: Optional[str]) -> Optional[Decimal]:
    """Native balance of ``address`` in ether."""
    if not address:
        return None
    try:
        return format_ether(get_balance(address, rpc_url(network)))
    except Exception:
        logger.error("Error fetching ETH balance", exc_info=True)
        return None


def fetch_balance_erc20(network: str, address: Optional[str]) -> Optional[Decimal]:
    """Payment token balance of ``address``, in 18-decimal units."""
    if not address:
        return None
    try:
        balance = read_contract(
            get_deployment(network).erc20_address,
            "balanceOf",
            abi=erc20_abi(),
            rpc_url=rpc_url(network),
            args=[address],
        )
        return format_ether(balance or 0)
    except Exception:
        logger.error("Error fetching ERC20 balance", exc_info=True)
        return None


def fetch_token_allowance(network: str, owner: Optional[str]) -> Optional[Decimal]:
    """How much of ``owner``'s payment token the marketplace may still spend."""
    if not owner:
        return None
    try:
        deployment = get_deployment(network)
        allowance = read_contract(
            deployment.erc20_address,
            "allowance",
            abi=erc20_abi(),
            rpc_url=rpc_url(network),
            args=[owner, deployment.contract_address],
        )
        return format_ether(allowance or 0)
    except Exception:
        logger.error("Error fetching token allowance", exc_info=True)
        return None


# ---------------------------------------------------------------------------
# Order placement
# ---------------------------------------------------------------------------

def _send_and_wait(
    wallet: WalletProvider,
    network: str,
    sender: str,
    to: str,
    data: str,
    timeout: int,
) -> str:
    tx_hash = wallet.request(
        "eth_sendTransaction",
        [{"from": sender, "to": to, "data": data}],
    )
    receipt = wait_for_receipt(tx_hash, rpc_url(network), timeout=timeout)
    if receipt_status(receipt) != 1:
        raise TransactionFailedError(tx_hash)
    return tx_hash


def place_order(
    network: str,
    wallet: Optional[WalletProvider],
    order_id: str,
    printer_id: str,
    min_price: Amount,
    actual_price: Amount,
    duration: float,
    timeout: Optional[int] = None,
) -> Optional[str]:
    """
    Approve the payment and create a print order.

    Args:
        network: Network key the order is placed on
        wallet: Wallet that signs both transactions
        order_id: Order identifier
        printer_id: Printer identifier
        min_price: Minimum price, in token units
        actual_price: Price paid, in token units (this amount is approved)
        duration: Print duration in hours
        timeout: Receipt wait per transaction, in seconds

    Returns:
        Hash of the createOrder transaction, or None on failure
    """
    try:
        if wallet is None:
            raise WalletUnavailableError("No wallet available to sign the order")

        deployment = get_deployment(network)
        chain = get_network(network)
        timeout = timeout or config.receipt_timeout()

        wallet_chain = normalize_chain_id(wallet.request("eth_chainId"))
        if wallet_chain != chain.chain_id:
            raise WalletUnavailableError(
                f"Wallet is on chain {wallet_chain}, expected {chain.chain_name} ({chain.chain_id})"
            )

        accounts = wallet.request("eth_requestAccounts")
        if not accounts:
            raise WalletUnavailableError("Wallet returned no accounts")
        sender = accounts[0]

        min_price_wei = parse_ether(min_price)
        actual_price_wei = parse_ether(actual_price)
        duration_seconds = hours_to_seconds(duration)

        approve_data = encode_function_call(
            erc20_abi(), "approve", [deployment.contract_address, actual_price_wei]
        )
        approve_hash = _send_and_wait(
            wallet, network, sender, deployment.erc20_address, approve_data, timeout
        )
        logger.info("Approved ERC20 spending: %s", approve_hash)

        order_data = encode_function_call(
            marketplace_abi(),
            "createOrder",
            [order_id, printer_id, min_price_wei, actual_price_wei, duration_seconds],
        )
        tx_hash = _send_and_wait(
            wallet, network, sender, deployment.contract_address, order_data, timeout
        )
        logger.info("Order created, transaction hash: %s", tx_hash)
        return tx_hash
    except Exception:
        logger.error("Error placing order", exc_info=True)
        return None

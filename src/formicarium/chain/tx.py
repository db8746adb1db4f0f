"""
Transaction Builder - Build, sign, and send Ethereum transactions.

Uses eth-account for signing and the httpx-based JSON-RPC client for
sending. Gas is paid by the signing account.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from eth_account.signers.local import LocalAccount
from eth_utils import to_checksum_address

from .rpc import get_gas_price, get_nonce, send_raw_transaction

logger = logging.getLogger(__name__)


def _to_int(value: Any) -> int:
    if isinstance(value, str):
        return int(value, 16) if value.startswith("0x") else int(value)
    return int(value)


def build_transaction(
    sender: str,
    request: dict,
    chain_id: int,
    rpc_url: str,
    default_gas_limit: int,
) -> dict:
    """
    Build an unsigned legacy transaction from an ``eth_sendTransaction`` request.

    Fields missing from the request (nonce, gas, gasPrice, value) are
    filled from the chain.

    Args:
        sender: Address that will sign the transaction
        request: Transaction request (``to``, ``data``, optional ``value``/``gas``/...)
        chain_id: Chain id to bind the signature to
        rpc_url: RPC endpoint of that chain
        default_gas_limit: Gas limit used when the request carries none

    Returns:
        Unsigned transaction dict
    """
    tx: dict[str, Any] = {
        "data": request.get("data", "0x"),
        "value": _to_int(request.get("value", 0)),
        "chainId": chain_id,
    }

    if request.get("to"):
        tx["to"] = to_checksum_address(request["to"])

    tx["nonce"] = (
        _to_int(request["nonce"]) if "nonce" in request else get_nonce(sender, rpc_url)
    )
    tx["gas"] = _to_int(request["gas"]) if "gas" in request else default_gas_limit
    tx["gasPrice"] = (
        _to_int(request["gasPrice"]) if "gasPrice" in request else get_gas_price(rpc_url)
    )

    return tx


def sign_transaction(tx: dict, account: LocalAccount) -> str:
    """Sign a transaction; returns the 0x-prefixed raw transaction."""
    signed = account.sign_transaction(tx)
    return "0x" + signed.raw_transaction.hex().removeprefix("0x")


def sign_and_send(tx: dict, account: LocalAccount, rpc_url: str) -> str:
    """
    Sign a transaction and broadcast it.

    Returns:
        Transaction hash
    """
    raw_tx = sign_transaction(tx, account)
    tx_hash = send_raw_transaction(raw_tx, rpc_url)
    logger.debug("Broadcast tx %s (nonce %s)", tx_hash, tx.get("nonce"))
    return tx_hash

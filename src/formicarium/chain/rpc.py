"""
JSON-RPC client for the supported EVM networks.

Lightweight alternative to web3.py: httpx for HTTP, eth-abi (via ``abi``)
for encoding. Every call names its endpoint explicitly; callers resolve
it from the network table with ``networks.rpc_url``.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Optional, Sequence

import httpx

from ..errors import RpcError
from .abi import decode_function_result, encode_function_call

logger = logging.getLogger(__name__)

RPC_TIMEOUT = 30


def rpc_call(method: str, params: list, rpc_url: str) -> Any:
    """
    Make a JSON-RPC call.

    Args:
        method: RPC method name (e.g., "eth_call")
        params: RPC parameters
        rpc_url: RPC endpoint URL

    Returns:
        Result field from the RPC response

    Raises:
        RpcError: If the endpoint is unreachable or answers with an error
    """
    payload = {
        "jsonrpc": "2.0",
        "method": method,
        "params": params,
        "id": 1,
    }
    logger.debug("RPC %s -> %s", method, rpc_url)

    try:
        with httpx.Client(timeout=RPC_TIMEOUT) as client:
            response = client.post(rpc_url, json=payload)
            response.raise_for_status()
            data = response.json()
    except httpx.HTTPError as exc:
        raise RpcError(f"RPC request {method} to {rpc_url} failed: {exc}") from exc

    if "error" in data:
        error = data["error"] or {}
        raise RpcError(
            f"RPC error: {error.get('message', error)}",
            code=error.get("code"),
        )

    return data.get("result")


def read_contract(
    contract_address: str,
    function_name: str,
    abi: Sequence[dict],
    rpc_url: str,
    args: Optional[list] = None,
    from_address: Optional[str] = None,
) -> Any:
    """
    Read from a smart contract (eth_call).

    Args:
        contract_address: 0x-prefixed contract address
        function_name: Function to call
        abi: Contract ABI
        rpc_url: RPC endpoint URL
        args: Function arguments (default: [])
        from_address: Caller to simulate, for functions keyed on msg.sender

    Returns:
        Decoded return value(s), or None for empty return data
    """
    calldata = encode_function_call(abi, function_name, args or [])

    call: dict[str, str] = {"to": contract_address, "data": calldata}
    if from_address:
        call["from"] = from_address

    result = rpc_call("eth_call", [call, "latest"], rpc_url=rpc_url)

    if result is None or result == "0x":
        return None

    return decode_function_result(abi, function_name, result)


def get_balance(address: str, rpc_url: str) -> int:
    """
    Get the native balance for an address.

    Returns:
        Balance in wei
    """
    result = rpc_call("eth_getBalance", [address, "latest"], rpc_url=rpc_url)
    return int(result, 16)


def get_nonce(address: str, rpc_url: str) -> int:
    result = rpc_call("eth_getTransactionCount", [address, "pending"], rpc_url=rpc_url)
    return int(result, 16)


def get_gas_price(rpc_url: str) -> int:
    """
    Get current gas price.

    Returns:
        Gas price in wei
    """
    result = rpc_call("eth_gasPrice", [], rpc_url=rpc_url)
    return int(result, 16)


def send_raw_transaction(raw_tx: str, rpc_url: str) -> str:
    """
    Send a signed raw transaction.

    Args:
        raw_tx: 0x-prefixed hex encoded signed transaction

    Returns:
        Transaction hash (0x-prefixed hex)
    """
    return rpc_call("eth_sendRawTransaction", [raw_tx], rpc_url=rpc_url)


def get_transaction_receipt(tx_hash: str, rpc_url: str) -> Optional[dict]:
    return rpc_call("eth_getTransactionReceipt", [tx_hash], rpc_url=rpc_url)


def wait_for_receipt(
    tx_hash: str,
    rpc_url: str,
    timeout: int = 120,
    poll_interval: float = 2.0,
) -> dict:
    """
    Wait for a transaction receipt.

    Args:
        tx_hash: Transaction hash
        rpc_url: RPC endpoint URL
        timeout: Maximum wait time in seconds
        poll_interval: Polling interval in seconds

    Returns:
        Transaction receipt dict

    Raises:
        TimeoutError: If receipt not found within timeout
    """
    start = time.monotonic()
    while time.monotonic() - start < timeout:
        receipt = get_transaction_receipt(tx_hash, rpc_url)
        if receipt is not None:
            return receipt
        time.sleep(poll_interval)

    raise TimeoutError(f"Transaction {tx_hash} not confirmed within {timeout}s")


def receipt_status(receipt: dict) -> int:
    """Receipt status as an int (1 success, 0 reverted)."""
    status = receipt.get("status", "0x0")
    if isinstance(status, int):
        return status
    return int(status, 16)

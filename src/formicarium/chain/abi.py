"""
ABI Loader and codec - contract ABIs shipped with the package.

The Formicarium marketplace and ERC-20 ABIs live in ``abis/*.json``
(Hardhat-style artifacts with an ``abi`` key). Encoding and decoding go
through eth-abi; tuple (struct) parameters are expanded from their
``components`` into eth-abi's ``(type,type,...)`` notation.
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Sequence

from eth_abi import decode, encode
from eth_hash.auto import keccak

ABI_DIR = Path(__file__).resolve().parent / "abis"

MARKETPLACE = "Formicarium"
ERC20 = "ERC20"


@lru_cache(maxsize=8)
def load_abi(contract_name: str) -> list[dict[str, Any]]:
    """
    Load the ABI for a bundled contract.

    Args:
        contract_name: Artifact name (e.g., "Formicarium", "ERC20")

    Returns:
        ABI as a list of dicts

    Raises:
        FileNotFoundError: If no artifact with that name is bundled
    """
    abi_path = ABI_DIR / f"{contract_name}.json"
    if not abi_path.exists():
        raise FileNotFoundError(f"ABI not found: {abi_path}")

    with abi_path.open("r", encoding="utf-8") as f:
        artifact = json.load(f)

    return artifact["abi"]


def marketplace_abi() -> list[dict[str, Any]]:
    """Load the Formicarium marketplace ABI."""
    return load_abi(MARKETPLACE)


def erc20_abi() -> list[dict[str, Any]]:
    """Load the ERC-20 ABI."""
    return load_abi(ERC20)


def find_function(abi: Sequence[dict], function_name: str) -> dict:
    for entry in abi:
        if entry.get("type") == "function" and entry.get("name") == function_name:
            return entry
    raise ValueError(f"Function {function_name} not found in ABI")


def abi_type(param: dict) -> str:
    """Canonical eth-abi type string for an ABI parameter."""
    typ = param["type"]
    if typ.startswith("tuple"):
        inner = ",".join(abi_type(c) for c in param.get("components", []))
        return f"({inner}){typ[len('tuple'):]}"
    return typ


def function_selector(function_name: str, input_types: Sequence[str]) -> bytes:
    # Keccak-256, not NIST SHA3-256
    sig = f"{function_name}({','.join(input_types)})"
    return keccak(sig.encode("utf-8"))[:4]


def encode_function_call(abi: Sequence[dict], function_name: str, args: Sequence[Any]) -> str:
    """
    ABI-encode a function call.

    Args:
        abi: Contract ABI
        function_name: Function name to call
        args: Function arguments

    Returns:
        0x-prefixed hex encoded calldata
    """
    func = find_function(abi, function_name)
    input_types = [abi_type(inp) for inp in func.get("inputs", [])]

    if len(args) != len(input_types):
        raise ValueError(
            f"{function_name} expects {len(input_types)} arguments, got {len(args)}"
        )

    selector = function_selector(function_name, input_types)
    encoded_args = encode(input_types, list(args)) if args else b""

    return "0x" + selector.hex() + encoded_args.hex()


def decode_function_result(abi: Sequence[dict], function_name: str, data: str) -> Any:
    """
    ABI-decode a function call result.

    Args:
        abi: Contract ABI
        function_name: Function name
        data: 0x-prefixed hex encoded return data

    Returns:
        Decoded result (single value, tuple of values, or None if the
        function has no outputs)
    """
    func = find_function(abi, function_name)
    output_types = [abi_type(out) for out in func.get("outputs", [])]
    if not output_types:
        return None

    raw = bytes.fromhex(data[2:] if data.startswith("0x") else data)
    decoded = decode(output_types, raw)

    if len(decoded) == 1:
        return decoded[0]
    return decoded

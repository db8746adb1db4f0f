"""
Shared fixtures: an isolated config home, a scripted wallet provider,
and a fixed test key. Nothing here touches the network.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Iterator, Optional
from unittest.mock import patch

import pytest

from formicarium.wallet.provider import (
    CHAIN_CHANGED,
    UNRECOGNIZED_CHAIN,
    UNSUPPORTED_METHOD,
    ProviderRpcError,
    WalletProvider,
)

# Well-known throwaway key (never funded)
TEST_PRIVATE_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"

_STATE_KEYS = (
    "PRIVATE_KEY",
    "SELECTED_NETWORK",
    "WALLET_ADDRESS",
    "WALLET_CHAIN_ID",
    "WALLET_CHAINS",
    "RECEIPT_TIMEOUT",
    "GAS_LIMIT",
    "BASE_TESTNET_RPC",
    "BASE_MAINNET_RPC",
    "ARBITRUM_SEPOLIA_RPC",
)


@pytest.fixture(autouse=True)
def clean_environment() -> Iterator[None]:
    """Restore os.environ and the package logger after every test."""
    with patch.dict(os.environ):
        for key in _STATE_KEYS:
            os.environ.pop(key, None)
        yield

    pkg_logger = logging.getLogger("formicarium")
    pkg_logger.handlers.clear()
    pkg_logger.propagate = True
    pkg_logger.setLevel(logging.NOTSET)


@pytest.fixture()
def formicarium_home(tmp_path: Path) -> Iterator[Path]:
    """Point the config at a temporary ~/.formicarium directory."""
    home = tmp_path / ".formicarium"
    home.mkdir()
    with patch("formicarium.config.FORMICARIUM_DIR", home):
        with patch("formicarium.config.FORMICARIUM_ENV", home / ".env"):
            yield home


class FakeWallet(WalletProvider):
    """Scripted wallet provider recording every request."""

    def __init__(
        self,
        chain_id: int = 84532,
        known_chains: Optional[set[int]] = None,
        accounts: Optional[list[str]] = None,
    ) -> None:
        super().__init__()
        self.chain_id = chain_id
        self.known_chains = set(known_chains or {chain_id})
        self.accounts = accounts if accounts is not None else ["0x1111111111111111111111111111111111111111"]
        self.calls: list[tuple[str, Any]] = []
        self.failures: dict[str, Exception] = {}
        self.sent: list[dict] = []

    def request(self, method: str, params: Optional[list] = None) -> Any:
        self.calls.append((method, params))
        if method in self.failures:
            raise self.failures[method]

        if method in ("eth_requestAccounts", "eth_accounts"):
            return list(self.accounts)
        if method == "eth_chainId":
            return hex(self.chain_id)
        if method == "wallet_switchEthereumChain":
            chain_id = int(params[0]["chainId"], 16)
            if chain_id not in self.known_chains:
                raise ProviderRpcError(UNRECOGNIZED_CHAIN, "Unrecognized chain")
            self.move_to(chain_id)
            return None
        if method == "wallet_addEthereumChain":
            chain_id = int(params[0]["chainId"], 16)
            self.known_chains.add(chain_id)
            self.move_to(chain_id)
            return None
        if method == "eth_sendTransaction":
            self.sent.append(params[0])
            return "0x" + f"{len(self.sent):064x}"

        raise ProviderRpcError(UNSUPPORTED_METHOD, method)

    def move_to(self, chain_id: int) -> None:
        if chain_id != self.chain_id:
            self.chain_id = chain_id
            self.emit(CHAIN_CHANGED, hex(chain_id))

    def methods(self) -> list[str]:
        return [method for method, _ in self.calls]


@pytest.fixture()
def fake_wallet() -> FakeWallet:
    return FakeWallet()

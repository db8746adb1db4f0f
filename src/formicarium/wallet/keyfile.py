"""
Keyfile wallet - a wallet provider backed by a local secp256k1 key.

The key is stored in ~/.formicarium/.env as PRIVATE_KEY (hex format).
Like a browser wallet, it has a current chain and a set of chains it
knows an RPC endpoint for; switching to an unknown chain fails with
4902 until the chain has been added. Both are persisted in the same
env file (WALLET_CHAIN_ID, WALLET_CHAINS).

Dependencies: eth-account (no full web3.py needed)
"""

from __future__ import annotations

import logging
import secrets
from pathlib import Path
from typing import Any, Callable, Optional

from eth_account import Account
from eth_account.signers.local import LocalAccount

from .. import config
from ..chain.tx import build_transaction, sign_and_send
from ..errors import RpcError
from ..networks import NETWORKS, get_network_key_by_chain_id, normalize_chain_id, rpc_url
from .provider import (
    ACCOUNTS_CHANGED,
    CHAIN_CHANGED,
    INTERNAL_ERROR,
    INVALID_PARAMS,
    UNAUTHORIZED,
    UNRECOGNIZED_CHAIN,
    UNSUPPORTED_METHOD,
    USER_REJECTED,
    ProviderRpcError,
    WalletProvider,
)

logger = logging.getLogger(__name__)

Confirm = Callable[[str], bool]


def generate_key() -> tuple[str, str]:
    """
    Generate a new secp256k1 keypair.

    Returns:
        Tuple of (private_key_hex, checksummed address)
    """
    private_key = "0x" + secrets.token_hex(32)
    account = Account.from_key(private_key)
    return private_key, account.address


def save_private_key(private_key: str, env_path: Optional[Path] = None) -> Path:
    return config.save_env_values({"PRIVATE_KEY": private_key}, env_path)


def load_private_key(env_path: Optional[Path] = None) -> str:
    """
    Load private key from the env file or environment.

    Returns:
        0x-prefixed hex private key

    Raises:
        ValueError: If PRIVATE_KEY is not configured
    """
    config.load_config(env_path)

    private_key = config.get_setting("PRIVATE_KEY")
    if not private_key:
        raise ValueError(
            "PRIVATE_KEY not found. Run 'formicarium wallet init' or set "
            f"PRIVATE_KEY in {env_path or config.FORMICARIUM_ENV}"
        )

    if not private_key.startswith("0x"):
        private_key = "0x" + private_key

    return private_key


def get_account(private_key: Optional[str] = None) -> LocalAccount:
    if private_key is None:
        private_key = load_private_key()
    return Account.from_key(private_key)


def parse_chains(value: Optional[str]) -> dict[int, str]:
    """Parse WALLET_CHAINS (``id|rpc;id|rpc``) into {chain_id: rpc_url}."""
    chains: dict[int, str] = {}
    if not value:
        return chains
    for item in value.split(";"):
        item = item.strip()
        if not item:
            continue
        chain_id, _, url = item.partition("|")
        if not url:
            raise ValueError(f"Invalid WALLET_CHAINS entry: {item!r}")
        chains[normalize_chain_id(chain_id)] = url
    return chains


def format_chains(chains: dict[int, str]) -> str:
    return ";".join(f"{chain_id}|{url}" for chain_id, url in chains.items())


class KeyfileWallet(WalletProvider):
    """
    Wallet provider signing with a local key.

    Args:
        account: eth-account LocalAccount used for signing
        chain_id: Chain the wallet is currently on
        chains: Known chains, {chain_id: rpc_url}; must include ``chain_id``
        confirm: Asked before switching/adding chains and sending
                 transactions; returning False rejects with 4001
        persist: Write chain state back to the env file
    """

    def __init__(
        self,
        account: LocalAccount,
        chain_id: int,
        chains: dict[int, str],
        confirm: Optional[Confirm] = None,
        persist: bool = False,
        env_path: Optional[Path] = None,
    ) -> None:
        super().__init__()
        if chain_id not in chains:
            raise ValueError(f"No RPC endpoint known for wallet chain {chain_id}")
        self.account = account
        self.chain_id = chain_id
        self.chains = dict(chains)
        self.confirm = confirm
        self.persist = persist
        self.env_path = env_path
        self.connected = False

    @property
    def address(self) -> str:
        return self.account.address

    @property
    def rpc_url(self) -> str:
        return self.chains[self.chain_id]

    # ------------------------------------------------------------------
    # EIP-1193
    # ------------------------------------------------------------------

    def request(self, method: str, params: Optional[list] = None) -> Any:
        params = params or []
        logger.debug("Wallet request %s", method)

        if method == "eth_requestAccounts":
            return self._request_accounts()
        if method == "eth_accounts":
            return [self.address] if self.connected else []
        if method == "eth_chainId":
            return hex(self.chain_id)
        if method == "wallet_switchEthereumChain":
            return self._switch_chain(self._first_param(params, method))
        if method == "wallet_addEthereumChain":
            return self._add_chain(self._first_param(params, method))
        if method == "eth_sendTransaction":
            return self._send_transaction(self._first_param(params, method))

        raise ProviderRpcError(UNSUPPORTED_METHOD, f"Unsupported method: {method}")

    @staticmethod
    def _first_param(params: list, method: str) -> dict:
        if not params or not isinstance(params[0], dict):
            raise ProviderRpcError(INVALID_PARAMS, f"{method} expects one object parameter")
        return params[0]

    def _ask(self, prompt: str) -> None:
        if self.confirm is not None and not self.confirm(prompt):
            raise ProviderRpcError(USER_REJECTED, "User rejected the request.")

    def _request_accounts(self) -> list[str]:
        if not self.connected:
            self._ask(f"Connect account {self.address}?")
            self.connected = True
            self.emit(ACCOUNTS_CHANGED, [self.address])
        return [self.address]

    def _switch_chain(self, param: dict) -> None:
        try:
            chain_id = normalize_chain_id(param.get("chainId", ""))
        except ValueError as exc:
            raise ProviderRpcError(INVALID_PARAMS, str(exc)) from exc

        if chain_id not in self.chains:
            raise ProviderRpcError(
                UNRECOGNIZED_CHAIN,
                f"Unrecognized chain ID {hex(chain_id)}. "
                "Try adding the chain using wallet_addEthereumChain first.",
            )
        if chain_id == self.chain_id:
            return None

        self._ask(f"Switch wallet to chain {chain_id}?")
        self._set_chain(chain_id)
        return None

    def _add_chain(self, param: dict) -> None:
        try:
            chain_id = normalize_chain_id(param.get("chainId", ""))
        except ValueError as exc:
            raise ProviderRpcError(INVALID_PARAMS, str(exc)) from exc

        rpc_urls = param.get("rpcUrls") or []
        if not rpc_urls:
            raise ProviderRpcError(INVALID_PARAMS, "rpcUrls must not be empty")

        name = param.get("chainName", hex(chain_id))
        self._ask(f"Add network {name} ({chain_id}) and switch to it?")

        self.chains[chain_id] = rpc_urls[0]
        logger.info("Wallet added chain %s (%s)", name, chain_id)
        if chain_id != self.chain_id:
            self._set_chain(chain_id)
        else:
            self._save_state()
        return None

    def _set_chain(self, chain_id: int) -> None:
        self.chain_id = chain_id
        self._save_state()
        self.emit(CHAIN_CHANGED, hex(chain_id))

    def _send_transaction(self, request: dict) -> str:
        if not self.connected:
            raise ProviderRpcError(UNAUTHORIZED, "Account not connected. Call eth_requestAccounts first.")

        sender = request.get("from")
        if sender and sender.lower() != self.address.lower():
            raise ProviderRpcError(UNAUTHORIZED, f"Unknown sender {sender}")

        self._ask(f"Send transaction to {request.get('to')} on chain {self.chain_id}?")

        try:
            tx = build_transaction(
                sender=self.address,
                request=request,
                chain_id=self.chain_id,
                rpc_url=self.rpc_url,
                default_gas_limit=config.gas_limit(),
            )
            return sign_and_send(tx, self.account, self.rpc_url)
        except RpcError as exc:
            raise ProviderRpcError(exc.code or INTERNAL_ERROR, str(exc)) from exc

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _save_state(self) -> None:
        if not self.persist:
            return
        config.save_env_values(
            {
                config.WALLET_CHAIN_ID: str(self.chain_id),
                config.WALLET_CHAINS: format_chains(self.chains),
            },
            self.env_path,
        )


def load_wallet(
    env_path: Optional[Path] = None,
    confirm: Optional[Confirm] = None,
    persist: bool = True,
) -> Optional[KeyfileWallet]:
    """
    Load the configured wallet.

    Returns:
        The wallet, or None when no key is configured
    """
    try:
        private_key = load_private_key(env_path)
    except ValueError:
        return None

    default_chain = NETWORKS[config.DEFAULT_NETWORK]
    chains = parse_chains(config.get_setting(config.WALLET_CHAINS))
    chain_id = normalize_chain_id(
        config.get_setting(config.WALLET_CHAIN_ID, str(default_chain.chain_id))
    )
    if chain_id not in chains:
        known = get_network_key_by_chain_id(chain_id)
        if known is None:
            raise ValueError(
                f"WALLET_CHAIN_ID {chain_id} has no RPC endpoint in WALLET_CHAINS"
            )
        chains[chain_id] = rpc_url(known)

    wallet = KeyfileWallet(
        account=get_account(private_key),
        chain_id=chain_id,
        chains=chains,
        confirm=confirm,
        persist=persist,
        env_path=env_path,
    )

    # An account connected in an earlier session stays authorized
    remembered = config.get_setting(config.WALLET_ADDRESS)
    if remembered and remembered.lower() == wallet.address.lower():
        wallet.connected = True

    return wallet

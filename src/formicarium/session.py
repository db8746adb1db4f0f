"""
Network session - wallet connectivity and network selection.

Keeps the application's own state (connected address, selected network)
in step with what the wallet reports:

- on start-up the selection follows the wallet's current chain
- ``chainChanged`` events from the wallet move the selection
- switching from the application asks the wallet to switch, adding the
  chain first when the wallet does not know it (error 4902); the
  selection only changes once the wallet has switched

Every failure is logged and swallowed; callers get ``None``/``False``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional

from . import config
from .errors import UnknownNetworkError
from .networks import (
    NETWORKS,
    ChainIdLike,
    Network,
    add_chain_params,
    get_network,
    get_network_key_by_chain_id,
)
from .utils import short_address
from .wallet.provider import CHAIN_CHANGED, UNAUTHORIZED, UNRECOGNIZED_CHAIN, ProviderRpcError, WalletProvider

logger = logging.getLogger(__name__)

NO_WALLET_MESSAGE = "No wallet is configured. Set PRIVATE_KEY or run 'formicarium wallet init' to connect."

Alert = Callable[[str], None]


class NetworkSession:
    def __init__(
        self,
        wallet: Optional[WalletProvider],
        alert: Optional[Alert] = None,
        selected_network: Optional[str] = None,
        wallet_address: Optional[str] = None,
        persist: bool = False,
        env_path: Optional[Path] = None,
    ) -> None:
        self.wallet = wallet
        self.alert = alert or (lambda message: logger.warning(message))
        self.selected_network = selected_network or config.DEFAULT_NETWORK
        get_network(self.selected_network)
        self.wallet_address = wallet_address
        self.persist = persist
        self.env_path = env_path
        self._attached = False

    @classmethod
    def from_config(
        cls,
        wallet: Optional[WalletProvider],
        alert: Optional[Alert] = None,
        env_path: Optional[Path] = None,
    ) -> "NetworkSession":
        """Restore the persisted selection and connected address."""
        selected = config.get_setting(config.SELECTED_NETWORK, config.DEFAULT_NETWORK)
        if selected not in NETWORKS:
            logger.warning("Ignoring unknown persisted network %s", selected)
            selected = config.DEFAULT_NETWORK

        # Only keep the remembered address if the wallet still authorizes it
        address = None
        remembered = config.get_setting(config.WALLET_ADDRESS)
        if wallet is not None and remembered:
            try:
                accounts = wallet.request("eth_accounts") or []
            except Exception:
                logger.error("Error reading wallet accounts", exc_info=True)
                accounts = []
            if any(a.lower() == remembered.lower() for a in accounts):
                address = remembered

        return cls(
            wallet=wallet,
            alert=alert,
            selected_network=selected,
            wallet_address=address,
            persist=True,
            env_path=env_path,
        )

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def network(self) -> Network:
        return get_network(self.selected_network)

    @property
    def display_address(self) -> Optional[str]:
        if not self.wallet_address:
            return None
        return short_address(self.wallet_address)

    def set_selected_network(self, key: str) -> None:
        get_network(key)
        self.selected_network = key
        self._save({config.SELECTED_NETWORK: key})

    def set_wallet_address(self, address: Optional[str]) -> None:
        self.wallet_address = address
        self._save({config.WALLET_ADDRESS: address})

    def _save(self, values: dict) -> None:
        if self.persist:
            config.save_env_values(values, self.env_path)

    # ------------------------------------------------------------------
    # Wallet events
    # ------------------------------------------------------------------

    def attach(self) -> None:
        if self.wallet is None or self._attached:
            return
        self.wallet.on(CHAIN_CHANGED, self.handle_chain_changed)
        self._attached = True

    def detach(self) -> None:
        if self.wallet is None or not self._attached:
            return
        self.wallet.remove_listener(CHAIN_CHANGED, self.handle_chain_changed)
        self._attached = False

    def __enter__(self) -> "NetworkSession":
        self.attach()
        return self

    def __exit__(self, *exc_info) -> None:
        self.detach()

    def handle_chain_changed(self, chain_id: ChainIdLike) -> None:
        logger.info("Network changed in wallet: %s", chain_id)
        key = get_network_key_by_chain_id(chain_id)
        if key:
            self.set_selected_network(key)
            logger.info("Switched to %s", get_network(key).chain_name)
        else:
            logger.warning("Unknown network detected: %s", chain_id)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def sync_with_wallet(self) -> Optional[str]:
        """
        Adopt the wallet's current chain as the selected network.

        Returns:
            The selected network key, or None if the wallet is absent or
            could not be read
        """
        if self.wallet is None:
            return None

        try:
            chain_id = self.wallet.request("eth_chainId")
        except Exception:
            logger.error("Error fetching wallet network", exc_info=True)
            return None

        key = get_network_key_by_chain_id(chain_id)
        if key and key != self.selected_network:
            self.set_selected_network(key)
            logger.info("Synced with wallet: %s", get_network(key).chain_name)
        return self.selected_network

    def connect_wallet(self) -> Optional[str]:
        """
        Request wallet accounts and adopt the wallet's network.

        Returns:
            The connected address, or None
        """
        if self.wallet is None:
            self.alert(NO_WALLET_MESSAGE)
            return None

        try:
            accounts = self.wallet.request("eth_requestAccounts")
            if not accounts:
                raise ProviderRpcError(UNAUTHORIZED, "Wallet returned no accounts")
            self.set_wallet_address(accounts[0])
            logger.info("Wallet connected: %s", accounts[0])

            chain_id = self.wallet.request("eth_chainId")
            key = get_network_key_by_chain_id(chain_id)
            if key:
                self.set_selected_network(key)
        except Exception:
            logger.error("Error connecting wallet", exc_info=True)
            return None

        return self.wallet_address

    def disconnect_wallet(self) -> None:
        self.set_wallet_address(None)

    def switch_network(self, key: str) -> bool:
        """
        Ask the wallet to switch to ``key``, adding the chain if needed.

        Returns:
            Whether ``key`` is now the selected network
        """
        try:
            network = get_network(key)
        except UnknownNetworkError:
            logger.error("Cannot switch to unknown network %s", key)
            return False

        if self.wallet is None:
            self.alert(NO_WALLET_MESSAGE)
            return False

        try:
            logger.info("Switching wallet to %s...", network.chain_name)
            self.wallet.request(
                "wallet_switchEthereumChain",
                [{"chainId": network.chain_id_hex}],
            )
            self.set_selected_network(key)
            logger.info("Wallet switched to %s", network.chain_name)
        except ProviderRpcError as switch_error:
            if switch_error.code != UNRECOGNIZED_CHAIN:
                logger.error("Failed to switch to %s: %s", network.chain_name, switch_error)
                return False
            try:
                logger.info("Adding network: %s", network.chain_name)
                self.wallet.request("wallet_addEthereumChain", [add_chain_params(key)])
                self.set_selected_network(key)
                logger.info("Network added and switched to %s", network.chain_name)
            except Exception:
                logger.error("Failed to add %s", network.chain_name, exc_info=True)
                return False
        except Exception:
            logger.error("Failed to switch to %s", network.chain_name, exc_info=True)
            return False

        return self.selected_network == key

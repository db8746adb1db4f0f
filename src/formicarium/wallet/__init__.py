"""
Wallet - provider interface and the local keyfile wallet.
"""

from .keyfile import KeyfileWallet, generate_key, get_account, load_private_key, load_wallet, save_private_key
from .provider import ProviderRpcError, WalletProvider

__all__ = [
    "KeyfileWallet",
    "ProviderRpcError",
    "WalletProvider",
    "generate_key",
    "get_account",
    "load_private_key",
    "load_wallet",
    "save_private_key",
]

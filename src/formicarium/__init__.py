__all__ = [
    # Networks
    "NETWORKS",
    "DEPLOYMENTS",
    "Network",
    "Deployment",
    "get_network",
    "get_deployment",
    "get_network_key_by_chain_id",
    "normalize_chain_id",
    # Session
    "NetworkSession",
    # Market
    "Order",
    "Printer",
    "fetch_balance_erc20",
    "fetch_balance_eth",
    "fetch_contract_owner",
    "fetch_orders",
    "fetch_printers",
    "fetch_token_allowance",
    "place_order",
    # Wallet
    "KeyfileWallet",
    "ProviderRpcError",
    "WalletProvider",
    "load_wallet",
    # Errors
    "FormicariumError",
    "RpcError",
    "TransactionFailedError",
    "UnknownNetworkError",
    "WalletUnavailableError",
]

from .errors import (
    FormicariumError,
    RpcError,
    TransactionFailedError,
    UnknownNetworkError,
    WalletUnavailableError,
)
from .networks import (
    DEPLOYMENTS,
    NETWORKS,
    Deployment,
    Network,
    get_deployment,
    get_network,
    get_network_key_by_chain_id,
    normalize_chain_id,
)
from .market import (
    Order,
    Printer,
    fetch_balance_erc20,
    fetch_balance_eth,
    fetch_contract_owner,
    fetch_orders,
    fetch_printers,
    fetch_token_allowance,
    place_order,
)
from .session import NetworkSession
from .wallet import KeyfileWallet, ProviderRpcError, WalletProvider, load_wallet

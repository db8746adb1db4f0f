"""
Supported networks and the per-network contract deployments.

Two static tables keyed by network key:
- NETWORKS: chain descriptors (id, name, RPC, explorer, native currency)
- DEPLOYMENTS: marketplace contract and ERC-20 payment token addresses
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Union

from eth_utils import to_checksum_address

from .config import DEFAULT_NETWORK, get_setting
from .errors import UnknownNetworkError


@dataclass(frozen=True)
class NativeCurrency:
    name: str
    symbol: str
    decimals: int = 18

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "symbol": self.symbol, "decimals": self.decimals}


@dataclass(frozen=True)
class Network:
    key: str
    chain_id: int
    chain_name: str
    rpc_urls: tuple[str, ...]
    block_explorer_urls: tuple[str, ...]
    native_currency: NativeCurrency = field(default_factory=lambda: NativeCurrency("ETH", "ETH"))

    @property
    def chain_id_hex(self) -> str:
        return hex(self.chain_id)

    @property
    def explorer_url(self) -> str:
        return self.block_explorer_urls[0]

    def tx_url(self, tx_hash: str) -> str:
        return f"{self.explorer_url.rstrip('/')}/tx/{tx_hash}"

    def address_url(self, address: str) -> str:
        return f"{self.explorer_url.rstrip('/')}/address/{address}"


@dataclass(frozen=True)
class Deployment:
    contract_address: str
    erc20_address: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "contract_address", to_checksum_address(self.contract_address))
        object.__setattr__(self, "erc20_address", to_checksum_address(self.erc20_address))


NETWORKS: dict[str, Network] = {
    "base-testnet": Network(
        key="base-testnet",
        chain_id=84532,
        chain_name="Base Sepolia Testnet",
        rpc_urls=("https://sepolia.base.org",),
        block_explorer_urls=("https://sepolia.basescan.org",),
        native_currency=NativeCurrency("SepoliaETH", "ETH", 18),
    ),
    "base-mainnet": Network(
        key="base-mainnet",
        chain_id=8453,
        chain_name="Base Mainnet",
        rpc_urls=("https://mainnet.base.org",),
        block_explorer_urls=("https://basescan.org",),
        native_currency=NativeCurrency("ETH", "ETH", 18),
    ),
    "arbitrum-sepolia": Network(
        key="arbitrum-sepolia",
        chain_id=421614,
        chain_name="Arbitrum Sepolia Testnet",
        rpc_urls=("https://sepolia-rollup.arbitrum.io/rpc",),
        block_explorer_urls=("https://sepolia.arbiscan.io",),
        native_currency=NativeCurrency("ETH", "ETH", 18),
    ),
}

DEPLOYMENTS: dict[str, Deployment] = {
    "base-testnet": Deployment(
        contract_address="0xa68d23AfC79A9acF2773a2dDd24412eDdf6E13d7",
        erc20_address="0x02BA94d06E5C9e6B7DB18eD80c475447939907b1",
    ),
    "base-mainnet": Deployment(
        contract_address="0xEa3D6D99DF5e7aEe6Bb4F723f9BEa19fFfF25d6B",
        erc20_address="0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913",
    ),
    "arbitrum-sepolia": Deployment(
        contract_address="0xE2BBceBC540bEF2e1d76dD3154Bd94Bf1846b705",
        erc20_address="0x3207249ba95035b067D9700A5d221531A6eA3BcB",
    ),
}

if NETWORKS.keys() != DEPLOYMENTS.keys():
    raise RuntimeError("NETWORKS and DEPLOYMENTS must define the same network keys")

if DEFAULT_NETWORK not in NETWORKS:
    raise RuntimeError(f"Default network {DEFAULT_NETWORK!r} is not defined")


ChainIdLike = Union[int, str]


def network_keys() -> list[str]:
    return list(NETWORKS)


def get_network(key: str) -> Network:
    try:
        return NETWORKS[key]
    except KeyError:
        raise UnknownNetworkError(key) from None


def get_deployment(key: str) -> Deployment:
    try:
        return DEPLOYMENTS[key]
    except KeyError:
        raise UnknownNetworkError(key) from None


def normalize_chain_id(value: ChainIdLike) -> int:
    """
    Normalize a chain identifier to an int.

    Wallets report chain ids as hex strings (``"0x14a34"``, sometimes
    zero-padded or upper-cased); RPC and config use ints or decimal
    strings. All of these map to the same int.

    Raises:
        ValueError: If the value is not a recognisable chain id
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid chain id: {value!r}")
    if isinstance(value, int):
        chain_id = value
    elif isinstance(value, str):
        text = value.strip()
        try:
            if text[:2].lower() == "0x":
                chain_id = int(text[2:], 16)
            else:
                chain_id = int(text, 10)
        except ValueError:
            raise ValueError(f"Invalid chain id: {value!r}") from None
    else:
        raise ValueError(f"Invalid chain id: {value!r}")

    if chain_id <= 0:
        raise ValueError(f"Invalid chain id: {value!r}")
    return chain_id


def get_network_key_by_chain_id(chain_id: ChainIdLike) -> Optional[str]:
    """Return the network key for a chain id, or None if it is not supported."""
    try:
        wanted = normalize_chain_id(chain_id)
    except ValueError:
        return None

    for key, network in NETWORKS.items():
        if network.chain_id == wanted:
            return key
    return None


def rpc_env_var(key: str) -> str:
    """Environment variable that overrides a network's RPC endpoint."""
    return key.upper().replace("-", "_") + "_RPC"


def rpc_url(key: str) -> str:
    network = get_network(key)
    return get_setting(rpc_env_var(key), network.rpc_urls[0])


def add_chain_params(key: str) -> dict[str, Any]:
    """Parameter object for ``wallet_addEthereumChain`` (EIP-3085)."""
    network = get_network(key)
    return {
        "chainId": network.chain_id_hex,
        "chainName": network.chain_name,
        "rpcUrls": list(network.rpc_urls),
        "blockExplorerUrls": list(network.block_explorer_urls),
        "nativeCurrency": network.native_currency.to_dict(),
    }

"""
Configuration for the Formicarium client.

Values come from the process environment, backed by ``~/.formicarium/.env``
(directory overridable with ``FORMICARIUM_HOME``). The same file holds the
persisted session state (selected network, connected address) and wallet
state (current chain, added chains) so consecutive CLI invocations agree.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping, Optional

from dotenv import dotenv_values, load_dotenv


FORMICARIUM_DIR = Path(os.environ.get("FORMICARIUM_HOME", Path.home() / ".formicarium"))
FORMICARIUM_ENV = FORMICARIUM_DIR / ".env"

DEFAULT_NETWORK = "base-testnet"
DEFAULT_RECEIPT_TIMEOUT = 120
DEFAULT_GAS_LIMIT = 500_000

# Session / wallet state keys
SELECTED_NETWORK = "SELECTED_NETWORK"
WALLET_ADDRESS = "WALLET_ADDRESS"
WALLET_CHAIN_ID = "WALLET_CHAIN_ID"
WALLET_CHAINS = "WALLET_CHAINS"


def load_config(env_path: Optional[Path] = None) -> None:
    """Load the env file into ``os.environ`` (file values win)."""
    env_path = env_path or FORMICARIUM_ENV
    if env_path.exists():
        load_dotenv(env_path, override=True)


def get_setting(key: str, default: Optional[str] = None) -> Optional[str]:
    value = os.environ.get(key)
    if value is None or value == "":
        return default
    return value


def get_int_setting(key: str, default: int) -> int:
    value = get_setting(key)
    if value is None:
        return default
    try:
        return int(value, 0)
    except ValueError:
        raise ValueError(f"{key} must be an integer, got {value!r}")


def receipt_timeout() -> int:
    return get_int_setting("RECEIPT_TIMEOUT", DEFAULT_RECEIPT_TIMEOUT)


def gas_limit() -> int:
    return get_int_setting("GAS_LIMIT", DEFAULT_GAS_LIMIT)


def save_env_values(
    values: Mapping[str, Optional[str]],
    env_path: Optional[Path] = None,
) -> Path:
    """
    Merge ``values`` into the env file and into ``os.environ``.

    A ``None`` value removes the key. Existing keys not mentioned are
    preserved.

    Args:
        values: Keys to set or remove
        env_path: Path to .env file (default: ~/.formicarium/.env)

    Returns:
        Path to the written .env file
    """
    env_path = env_path or FORMICARIUM_ENV
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = {k: v for k, v in dotenv_values(env_path).items() if v is not None}

    for key, value in values.items():
        if value is None:
            existing.pop(key, None)
            os.environ.pop(key, None)
        else:
            existing[key] = value
            os.environ[key] = value

    lines = [f"{k}={v}" for k, v in existing.items()]
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")

    # Holds the private key
    if os.name != "nt":
        env_path.chmod(0o600)

    return env_path

"""
Wallet provider interface (EIP-1193 shape).

A provider answers ``request(method, params)`` and emits events to
registered listeners. ``chainChanged`` carries the new chain id as a hex
string; ``accountsChanged`` carries the account list.
"""

from __future__ import annotations

import abc
import logging
from collections import defaultdict
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

# EIP-1193 / EIP-3085 error codes
USER_REJECTED = 4001
UNAUTHORIZED = 4100
UNSUPPORTED_METHOD = 4200
UNRECOGNIZED_CHAIN = 4902
INTERNAL_ERROR = -32603
INVALID_PARAMS = -32602

CHAIN_CHANGED = "chainChanged"
ACCOUNTS_CHANGED = "accountsChanged"


class ProviderRpcError(Exception):
    def __init__(self, code: int, message: str, data: Any = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


Listener = Callable[..., None]


class WalletProvider(abc.ABC):
    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = defaultdict(list)

    @abc.abstractmethod
    def request(self, method: str, params: Optional[list] = None) -> Any:
        """Perform a provider request; raises ProviderRpcError on failure."""

    def on(self, event: str, listener: Listener) -> None:
        self._listeners[event].append(listener)

    def remove_listener(self, event: str, listener: Listener) -> None:
        try:
            self._listeners[event].remove(listener)
        except ValueError:
            pass

    def listener_count(self, event: str) -> int:
        return len(self._listeners[event])

    def emit(self, event: str, *args: Any) -> None:
        # Listeners may unsubscribe while being notified
        for listener in list(self._listeners[event]):
            try:
                listener(*args)
            except Exception:
                logger.exception("Listener for %s failed", event)

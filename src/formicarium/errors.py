"""
Error types shared across the Formicarium client.

Lower layers (RPC, ABI, wallet) raise these; the session and market
layers catch them at the call site, log them, and hand back ``None``.
"""

from __future__ import annotations


class FormicariumError(RuntimeError):
    exit_code: int = 1


class UnknownNetworkError(FormicariumError):
    exit_code = 2

    def __init__(self, key: str) -> None:
        super().__init__(f"Unknown network: {key!r}")
        self.key = key


class RpcError(FormicariumError):
    exit_code = 3

    def __init__(self, message: str, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code


class TransactionFailedError(FormicariumError):
    """A transaction was mined but reverted (receipt status 0)."""

    exit_code = 4

    def __init__(self, tx_hash: str) -> None:
        super().__init__(f"Transaction {tx_hash} reverted")
        self.tx_hash = tx_hash


class WalletUnavailableError(FormicariumError):
    exit_code = 5

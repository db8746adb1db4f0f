from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Union

from eth_utils import from_wei, to_wei

Amount = Union[int, float, str, Decimal]

SECONDS_PER_HOUR = 3600
ETHER_DECIMALS = 18


def parse_ether(amount: Amount) -> int:
    """
    Convert an 18-decimal human amount (e.g. "1.5") to base units.

    Raises:
        ValueError: If the amount is not a finite, non-negative number
                    or has more than 18 fractional digits
    """
    # str() first so floats keep their printed value (0.1 -> "0.1")
    try:
        value = Decimal(str(amount).strip())
    except InvalidOperation:
        raise ValueError(f"Invalid amount: {amount!r}") from None
    if not value.is_finite():
        raise ValueError(f"Invalid amount: {amount!r}")
    if value < 0:
        raise ValueError(f"Amount must not be negative: {amount}")
    if value.normalize().as_tuple().exponent < -ETHER_DECIMALS:
        raise ValueError(f"Too many decimal places (max {ETHER_DECIMALS}): {amount}")
    return int(to_wei(value, "ether"))


def format_ether(wei: int) -> Decimal:
    return Decimal(from_wei(wei, "ether"))


def hours_to_seconds(hours: Union[int, float]) -> int:
    if hours < 0:
        raise ValueError(f"Duration must not be negative: {hours}")
    return int(hours * SECONDS_PER_HOUR)


def short_address(address: str) -> str:
    """``0x1234...abcd`` form used wherever an address is displayed."""
    if len(address) <= 10:
        return address
    return f"{address[:6]}...{address[-4:]}"

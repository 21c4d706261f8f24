"""Display helpers for addresses, timestamps and amounts."""

from datetime import datetime
from decimal import Decimal

from chain_tx_tracker.pricing.placeholder import to_native_units


def format_address(address: str) -> str:
    """Shorten an address to ``0x1234...abcd``."""
    if not address:
        return ""
    return f"{address[:6]}...{address[-4:]}"


def format_timestamp(timestamp: int) -> str:
    """Render a unix timestamp in local time, e.g. ``Mar 05, 2024 14:02``."""
    return datetime.fromtimestamp(timestamp).strftime("%b %d, %Y %H:%M")


def format_amount(value: str | int, decimals: int = 18) -> str:
    """
    Format a smallest-unit amount in native units.

    Returns
    -------
    str
        ``0``, ``< 0.0001`` for dust, otherwise up to 6 decimals with
        trailing zeros removed

    """
    amount = to_native_units(value, decimals)
    if amount == 0:
        return "0"
    if amount < Decimal("0.0001"):
        return "< 0.0001"
    text = f"{amount:.6f}"
    return text.rstrip("0").rstrip(".")

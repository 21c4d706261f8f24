"""Placeholder USD conversion for native currency amounts."""

from decimal import Decimal, InvalidOperation

DEFAULT_NATIVE_USD_PRICE = Decimal("2000")


def to_native_units(value: str | int, decimals: int = 18) -> Decimal:
    """
    Convert a smallest-unit integer amount into native units.

    Parameters
    ----------
    value : str | int
        Amount in the smallest denomination (e.g., wei)
    decimals : int
        Decimal precision of the native currency

    Returns
    -------
    Decimal
        Amount in native units, zero if value is not an integer

    """
    try:
        return Decimal(int(value)).scaleb(-decimals)
    except (TypeError, ValueError, InvalidOperation):
        return Decimal("0")


class PlaceholderPricing:
    """
    Converts native amounts to USD at a fixed, approximate price.

    This is not a price feed: every native currency is valued at the same
    constant rate.

    Parameters
    ----------
    native_usd_price : Decimal
        USD price applied to one native unit

    """

    def __init__(self, native_usd_price: Decimal = DEFAULT_NATIVE_USD_PRICE) -> None:
        self.native_usd_price = native_usd_price

    def usd_value(self, value: str | int, decimals: int = 18) -> Decimal:
        """USD value of a smallest-unit amount."""
        return to_native_units(value, decimals) * self.native_usd_price

    def format_usd(self, value: str | int, decimals: int = 18) -> str:
        """
        Format the USD value of a smallest-unit amount.

        Returns
        -------
        str
            ``$12.34``, or ``< $0.01`` below one cent

        """
        usd = self.usd_value(value, decimals)
        if usd < Decimal("0.01"):
            return "< $0.01"
        return f"${usd:,.2f}"

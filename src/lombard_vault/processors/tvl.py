from __future__ import annotations

from ..adapters.price_adapters.base import PriceQuote
from ..units import format_units, round_half_up


def calculate_tvl(balance: int, token_decimals: int, quote: PriceQuote) -> float:
    """USD value of ``balance`` token units at the oracle price.

    Both fixed-point values are rendered to decimal strings first and only
    converted to float for the final multiplication. Precision loss on very
    large balances is accepted; TVL is a display figure.
    """
    balance_units = float(format_units(balance, token_decimals))
    price_units = float(format_units(quote.price, quote.decimals))
    return balance_units * price_units


def format_usd(value: float) -> str:
    """``$`` followed by the value grouped in thousands with two fraction digits.

    Half-cent ties round up: ``0.125`` renders as ``$0.13``.
    """
    return f"${round_half_up(value):,.2f}"


def format_tvl(balance: int, token_decimals: int, quote: PriceQuote) -> str:
    return format_usd(calculate_tvl(balance, token_decimals, quote))

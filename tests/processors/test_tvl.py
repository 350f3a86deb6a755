from __future__ import annotations

import pytest

from lombard_vault.adapters.price_adapters.base import PriceQuote
from lombard_vault.processors.tvl import calculate_tvl, format_tvl, format_usd


def test_one_lbtc_at_sixty_thousand_dollars():
    quote = PriceQuote(price=6_000_000_000_000, decimals=8)

    assert format_tvl(100_000_000, 8, quote) == "$60,000.00"


def test_empty_vault_is_zero_dollars():
    quote = PriceQuote(price=6_000_000_000_000, decimals=8)

    assert format_tvl(0, 8, quote) == "$0.00"


def test_zero_price_is_zero_dollars():
    assert format_tvl(100_000_000, 8, PriceQuote(price=0, decimals=8)) == "$0.00"


@pytest.mark.parametrize(
    ("balance", "decimals", "price", "price_decimals"),
    [
        (123_456_789, 8, 6_543_210_000_000, 8),
        (5 * 10**18, 18, 250_000_000, 8),
        (1, 8, 99_999_999_999, 8),
        (987_654_321_000, 8, 10**8, 8),
    ],
)
def test_tvl_matches_grouped_two_decimal_rendering(balance, decimals, price, price_decimals):
    expected = (balance / 10**decimals) * (price / 10**price_decimals)
    quote = PriceQuote(price=price, decimals=price_decimals)

    assert calculate_tvl(balance, decimals, quote) == pytest.approx(expected)
    assert format_tvl(balance, decimals, quote) == f"${expected:,.2f}"


def test_format_usd_groups_thousands():
    assert format_usd(1234567.891) == "$1,234,567.89"


@pytest.mark.parametrize(
    ("balance", "price", "expected"),
    [
        (12_500_000, 100_000_000, "$0.13"),
        (50_000_000, 25_000_000, "$0.13"),
        (100_000_000, 1_000_000_500_000, "$10,000.01"),
        (100_000_000, 123_456_500_000, "$1,234.57"),
    ],
)
def test_half_cent_ties_round_up(balance, price, expected):
    assert format_tvl(balance, 8, PriceQuote(price=price, decimals=8)) == expected


def test_format_usd_rounds_ties_away_from_even():
    assert format_usd(0.125) == "$0.13"
    assert format_usd(2.675) == "$2.68"
    assert format_usd(1_000.005) == "$1,000.01"

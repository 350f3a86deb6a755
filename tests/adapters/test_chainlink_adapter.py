import pytest
import requests

from conftest import ORACLE, FakeContract
from lombard_vault.adapters.price_adapters import ChainlinkPriceAdapter, PriceQuote
from lombard_vault.errors import RpcFailureError


@pytest.mark.asyncio
async def test_fetch_quote_returns_answer_and_decimals():
    feed = FakeContract(
        ORACLE,
        decimals=8,
        latestRoundData=(18446744073709552000, 6_000_000_000_000, 1, 1_700_000_000, 1),
    )

    quote = await ChainlinkPriceAdapter(feed).fetch_quote()

    assert quote == PriceQuote(price=6_000_000_000_000, decimals=8)


@pytest.mark.asyncio
async def test_fetch_quote_reads_at_requested_block():
    seen: list = []

    def _round(block_identifier):
        seen.append(block_identifier)
        return (1, 42, 0, 0, 1)

    feed = FakeContract(ORACLE, decimals=8, latestRoundData=_round)

    quote = await ChainlinkPriceAdapter(feed).fetch_quote(123)

    assert quote.price == 42
    assert seen == [123]


@pytest.mark.asyncio
async def test_fetch_quote_propagates_rpc_failure():
    feed = FakeContract(
        ORACLE,
        decimals=requests.exceptions.ConnectionError("connection refused"),
        latestRoundData=(1, 42, 0, 0, 1),
    )

    with pytest.raises(RpcFailureError, match="oracle.decimals failed"):
        await ChainlinkPriceAdapter(feed).fetch_quote()

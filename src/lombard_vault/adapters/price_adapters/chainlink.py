from __future__ import annotations

import logging

from web3.contract import Contract
from web3.types import BlockIdentifier

from ...contracts import call_contract
from .base import BasePriceAdapter, PriceQuote

logger = logging.getLogger(__name__)


class ChainlinkPriceAdapter(BasePriceAdapter):
    """Adapter for querying a Chainlink-style LBTC/USD price feed."""

    def __init__(self, feed_contract: Contract):
        self.feed_contract = feed_contract

    async def fetch_quote(
        self, block_identifier: BlockIdentifier = "latest"
    ) -> PriceQuote:
        """Read ``decimals()`` and the ``answer`` of ``latestRoundData()``.

        Errors propagate to the caller; there is no retry.
        """
        decimals = await call_contract(
            self.feed_contract.functions.decimals(),
            "oracle.decimals",
            block_identifier,
        )
        _, answer, _, updated_at, _ = await call_contract(
            self.feed_contract.functions.latestRoundData(),
            "oracle.latestRoundData",
            block_identifier,
        )
        logger.debug(
            "Oracle answer %s (decimals %s, updated at %s)", answer, decimals, updated_at
        )
        return PriceQuote(price=int(answer), decimals=int(decimals))

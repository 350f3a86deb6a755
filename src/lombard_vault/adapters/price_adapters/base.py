from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from web3.types import BlockIdentifier


@dataclass(frozen=True)
class PriceQuote:
    """Fixed-point price: ``price / 10**decimals`` USD per unit."""

    price: int
    decimals: int


class BasePriceAdapter(ABC):
    """Abstract base class for price adapters."""

    @abstractmethod
    async def fetch_quote(
        self, block_identifier: BlockIdentifier = "latest"
    ) -> PriceQuote:
        """Fetch the latest price quote."""
        ...

from .base import BasePriceAdapter, PriceQuote
from .chainlink import ChainlinkPriceAdapter

__all__ = ["BasePriceAdapter", "ChainlinkPriceAdapter", "PriceQuote"]

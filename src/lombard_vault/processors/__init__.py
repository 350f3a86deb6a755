from .apy import (
    VaultSnapshot,
    annualize,
    apy_from_snapshots,
    calculate_apy,
    format_apy,
    historical_block,
)
from .tvl import calculate_tvl, format_tvl, format_usd

__all__ = [
    "VaultSnapshot",
    "annualize",
    "apy_from_snapshots",
    "calculate_apy",
    "calculate_tvl",
    "format_apy",
    "format_tvl",
    "format_usd",
    "historical_block",
]

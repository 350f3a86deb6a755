from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class VaultMetadata:
    """Vault metrics gathered by the metadata step."""

    name: str
    apy: str
    tvl: str
    token_symbol: str
    token_decimals: int
    block_number: int | None = None


@dataclass
class DepositResult:
    """Outcome of the deposit step."""

    wallet_address: str
    deposit_amount: int
    token_decimals: int
    shares_before: int
    shares_after: int
    submitted: bool = False
    tx_hashes: list[str] = field(default_factory=list)

    @property
    def shares_minted(self) -> int:
        return self.shares_after - self.shares_before

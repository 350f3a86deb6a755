from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from ..constants import APY_UNAVAILABLE, DAYS_PER_YEAR
from ..contracts import ContractHandles, call_contract
from ..settings import VaultSettings
from ..units import format_units, round_half_up

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VaultSnapshot:
    """Vault LBTC holdings and share supply at one block."""

    lbtc_balance: int
    total_supply: int
    token_decimals: int
    vault_decimals: int
    block: int | None = None
    name: str | None = None

    @property
    def ratio(self) -> float | None:
        """Assets per share, or None when no shares exist."""
        if self.total_supply == 0:
            return None
        balance = float(format_units(self.lbtc_balance, self.token_decimals))
        supply = float(format_units(self.total_supply, self.vault_decimals))
        return balance / supply


def historical_block(current_block: int, window_days: int, blocks_per_day: int) -> int:
    """Block number ``window_days`` before ``current_block``.

    Raises:
        ValueError: If the chain is younger than the window.
    """
    block = current_block - window_days * blocks_per_day
    if block < 0:
        raise ValueError(
            f"Historical block for a {window_days}-day window is negative "
            f"(current block {current_block}, {blocks_per_day} blocks/day)"
        )
    return block


def annualize(current_ratio: float, historical_ratio: float, window_days: int) -> float:
    """Compound the ratio growth over the window into a yearly rate."""
    rate_change = current_ratio / historical_ratio
    return rate_change ** (DAYS_PER_YEAR / window_days) - 1


def format_apy(yearly_rate: float) -> str:
    """Percentage with two decimals; ties round away from zero."""
    percent = Decimal(repr(yearly_rate)) * 100
    return f"{round_half_up(percent):.2f}%"


def apy_from_snapshots(
    current: VaultSnapshot, historical: VaultSnapshot, window_days: int
) -> str:
    """APY string for two snapshots, or ``N/A`` if either has no shares."""
    current_ratio = current.ratio
    historical_ratio = historical.ratio
    if current_ratio is None or historical_ratio is None:
        return APY_UNAVAILABLE
    return format_apy(annualize(current_ratio, historical_ratio, window_days))


async def _snapshot(
    handles: ContractHandles,
    block: int,
    token_decimals: int,
    vault_decimals: int,
) -> VaultSnapshot:
    lbtc_balance = await call_contract(
        handles.token.functions.balanceOf(handles.vault_address),
        "token.balanceOf(vault)",
        block,
    )
    total_supply = await call_contract(
        handles.vault.functions.totalSupply(), "vault.totalSupply", block
    )
    return VaultSnapshot(
        lbtc_balance=int(lbtc_balance),
        total_supply=int(total_supply),
        token_decimals=token_decimals,
        vault_decimals=vault_decimals,
        block=block,
    )


async def calculate_apy(
    handles: ContractHandles,
    settings: VaultSettings,
    current_block: int,
    log: logging.Logger = logger,
) -> str:
    """Annualized growth of the vault's assets-per-share ratio.

    Compares the ratio at ``current_block`` with the ratio
    ``apy_window_days`` earlier. The historical read needs an archive-capable
    RPC endpoint.

    Best effort: any failure is logged and ``N/A`` is returned.
    """
    window_days = settings.apy_window_days
    try:
        vault_decimals = int(
            await call_contract(
                handles.vault.functions.decimals(), "vault.decimals", current_block
            )
        )
        token_decimals = int(
            await call_contract(
                handles.token.functions.decimals(), "token.decimals", current_block
            )
        )

        current = await _snapshot(
            handles, current_block, token_decimals, vault_decimals
        )
        if current.total_supply == 0:
            return APY_UNAVAILABLE

        past_block = historical_block(
            current_block, window_days, settings.blocks_per_day
        )
        historical = await _snapshot(
            handles, past_block, token_decimals, vault_decimals
        )
        log.debug(
            "APY snapshots: current=%s historical=%s", current, historical
        )
        return apy_from_snapshots(current, historical, window_days)
    except Exception as e:
        log.warning("Could not fetch APY data: %s", e)
        return APY_UNAVAILABLE

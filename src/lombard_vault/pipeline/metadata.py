"""Vault metadata step: name, APY, TVL and token info."""

from __future__ import annotations

from web3.types import BlockIdentifier

from ..adapters.price_adapters import ChainlinkPriceAdapter
from ..contracts import ContractHandles, call_contract, get_block_number
from ..processors import calculate_apy, format_tvl
from ..report import VaultMetadata, print_metadata
from .context import PipelineContext


async def calculate_tvl_usd(
    handles: ContractHandles, block_identifier: BlockIdentifier = "latest"
) -> str:
    """Read the vault's LBTC balance and the oracle price, and format the TVL."""
    vault_balance = await call_contract(
        handles.token.functions.balanceOf(handles.vault_address),
        "token.balanceOf(vault)",
        block_identifier,
    )
    token_decimals = await call_contract(
        handles.token.functions.decimals(), "token.decimals", block_identifier
    )
    quote = await ChainlinkPriceAdapter(handles.oracle).fetch_quote(block_identifier)
    return format_tvl(int(vault_balance), int(token_decimals), quote)


async def get_vault_metadata(ctx: PipelineContext) -> VaultMetadata:
    """Collect and print the vault report.

    APY failures are absorbed into ``N/A``; any other failure is logged and
    re-raised.
    """
    s = ctx.state.settings
    log = ctx.state.logger
    handles = ctx.handles

    try:
        block = s.block_number
        if block is None:
            block = await get_block_number(handles.w3)
        log.debug("Reading vault metadata at block %d", block)

        vault_name = await call_contract(
            handles.vault.functions.name(), "vault.name", block
        )
        token_symbol = await call_contract(
            handles.token.functions.symbol(), "token.symbol", block
        )
        token_decimals = await call_contract(
            handles.token.functions.decimals(), "token.decimals", block
        )

        apy = await calculate_apy(handles, s, block, log)
        tvl = await calculate_tvl_usd(handles, block)

        metadata = VaultMetadata(
            name=vault_name,
            apy=apy,
            tvl=tvl,
            token_symbol=token_symbol,
            token_decimals=int(token_decimals),
            block_number=block,
        )
    except Exception as e:
        log.error("Error fetching vault metadata: %s", e)
        raise

    ctx.metadata = metadata
    print_metadata(metadata, s.report_format)
    return metadata

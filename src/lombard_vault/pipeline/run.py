"""High-level pipeline orchestration."""

from __future__ import annotations

import asyncio

from ..contracts import ContractHandles
from ..state import AppState
from .context import PipelineContext
from .deposit import deposit
from .metadata import get_vault_metadata


async def run_vault(state: AppState, handles: ContractHandles) -> PipelineContext:
    """Execute the metadata report followed by the deposit flow.

    Steps run strictly in sequence. Either can be skipped through settings.

    Args:
        state: Application state containing settings and logger
        handles: Contracts bound to the RPC connection and signer
    """
    s = state.settings
    log = state.logger

    log.info("Starting run", extra={"vault": handles.vault_address})

    timeout_s = s.global_timeout_seconds
    ctx = PipelineContext(state=state, handles=handles)

    async def _run_pipeline() -> None:
        if not s.skip_metadata:
            await get_vault_metadata(ctx)
        if not s.skip_deposit:
            await deposit(ctx)

    try:
        if timeout_s is None or timeout_s <= 0:
            await _run_pipeline()
        else:
            async with asyncio.timeout(timeout_s):
                await _run_pipeline()
    except asyncio.TimeoutError as exc:
        log.error(
            "Run timed out",
            extra={"vault": handles.vault_address, "timeout_seconds": timeout_s},
        )
        raise asyncio.TimeoutError(
            f"Run exceeded global timeout {timeout_s}s (vault={handles.vault_address})\n"
            " N.B. This can be changed via `global_timeout_seconds`."
        ) from exc

    log.info("Run completed", extra={"vault": handles.vault_address})
    return ctx

"""Deposit step: balance guard, optional approve + enter, balance report."""

from __future__ import annotations

from dataclasses import dataclass

from web3 import Web3

from ..contracts import ContractHandles, call_contract, send_transaction
from ..errors import InsufficientBalanceError
from ..report import DepositResult
from ..settings import VaultSettings
from ..units import format_units, parse_units
from .context import PipelineContext


@dataclass(frozen=True)
class DepositRequest:
    """Deposit amount in the token's smallest unit."""

    amount: int
    decimals: int

    @classmethod
    def from_human(cls, quantity: str, decimals: int) -> "DepositRequest":
        return cls(amount=parse_units(quantity, decimals), decimals=decimals)

    @property
    def human(self) -> str:
        return format_units(self.amount, self.decimals)


def check_deposit_balance(
    token_balance: int, request: DepositRequest, symbol: str = "LBTC"
) -> None:
    """Fail before submission when the wallet cannot cover the deposit.

    Raises:
        InsufficientBalanceError: If ``token_balance`` is below the request.
    """
    if token_balance < request.amount:
        raise InsufficientBalanceError(
            available=format_units(token_balance, request.decimals),
            required=request.human,
            symbol=symbol,
        )


def min_shares_for(
    settings: VaultSettings, request: DepositRequest, vault_decimals: int
) -> int:
    """Minimum shares accepted by ``enter``; defaults to the raw deposit amount."""
    if settings.min_shares_amount is None:
        return request.amount
    return parse_units(settings.min_shares_amount, vault_decimals)


async def _vault_shares(handles: ContractHandles, wallet: str) -> int:
    return int(
        await call_contract(
            handles.vault.functions.balanceOf(wallet), "vault.balanceOf(wallet)"
        )
    )


async def _submit_deposit(
    ctx: PipelineContext, request: DepositRequest, min_shares: int
) -> list[str]:
    s = ctx.state.settings
    log = ctx.state.logger
    handles = ctx.handles
    wallet = handles.wallet_address

    print("Approving LBTC transfer...")
    approve_receipt = await send_transaction(
        handles,
        handles.token.functions.approve(handles.vault_address, request.amount),
        "token.approve",
        s.tx_receipt_timeout,
    )

    print("Depositing LBTC into vault...")
    enter_receipt = await send_transaction(
        handles,
        handles.vault.functions.enter(
            wallet, handles.token_address, request.amount, wallet, min_shares
        ),
        "vault.enter",
        s.tx_receipt_timeout,
    )
    tx_hashes = [
        Web3.to_hex(approve_receipt["transactionHash"]),
        Web3.to_hex(enter_receipt["transactionHash"]),
    ]
    log.info("Deposit submitted: %s", ", ".join(tx_hashes))
    return tx_hashes


async def deposit(ctx: PipelineContext) -> DepositResult:
    """Run the deposit flow for the configured wallet.

    Submission of ``approve`` and ``enter`` only happens when
    ``submit_deposit`` is enabled; each transaction is waited to inclusion
    before the next read. Any failure is logged and re-raised.
    """
    s = ctx.state.settings
    log = ctx.state.logger
    handles = ctx.handles

    try:
        wallet = handles.wallet_address
        print(f"Wallet: {wallet}")

        vault_decimals = int(
            await call_contract(handles.vault.functions.decimals(), "vault.decimals")
        )
        shares_before = await _vault_shares(handles, wallet)
        print(f"Balance before: {format_units(shares_before, vault_decimals)}")

        token_decimals = int(
            await call_contract(handles.token.functions.decimals(), "token.decimals")
        )
        request = DepositRequest.from_human(s.deposit_amount, token_decimals)
        print("Depositing...")

        token_balance = int(
            await call_contract(
                handles.token.functions.balanceOf(wallet), "token.balanceOf(wallet)"
            )
        )
        check_deposit_balance(token_balance, request)

        tx_hashes: list[str] = []
        if s.submit_deposit:
            min_shares = min_shares_for(s, request, vault_decimals)
            tx_hashes = await _submit_deposit(ctx, request, min_shares)
        else:
            log.info(
                "Deposit submission disabled; skipping approve and enter for %s LBTC",
                request.human,
            )

        shares_after = await _vault_shares(handles, wallet)
        print(f"Balance after: {format_units(shares_after, vault_decimals)}")
    except Exception as e:
        log.error("Error during deposit: %s", e)
        raise

    result = DepositResult(
        wallet_address=wallet,
        deposit_amount=request.amount,
        token_decimals=token_decimals,
        shares_before=shares_before,
        shares_after=shares_after,
        submitted=s.submit_deposit,
        tx_hashes=tx_hashes,
    )
    ctx.deposit = result
    return result

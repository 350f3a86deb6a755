"""Contract handles bound once at startup and the RPC call helpers around them."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

import requests
from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_typing import URI, ChecksumAddress
from web3 import Web3
from web3.contract import Contract
from web3.exceptions import (
    BadFunctionCallOutput,
    ContractLogicError,
    TimeExhausted,
    Web3Exception,
)
from web3.types import BlockIdentifier, TxReceipt

from .abi import load_aggregator_abi, load_erc20_abi, load_vault_abi
from .errors import ContractCallError, RpcFailureError
from .settings import VaultSettings

logger = logging.getLogger(__name__)


@dataclass
class ContractHandles:
    """Contracts bound to the RPC connection and signer, shared by every step."""

    w3: Web3
    account: LocalAccount | None
    vault: Contract
    token: Contract
    oracle: Contract

    @property
    def vault_address(self) -> ChecksumAddress:
        return self.vault.address

    @property
    def token_address(self) -> ChecksumAddress:
        return self.token.address

    @property
    def wallet_address(self) -> ChecksumAddress:
        if self.account is None:
            raise ValueError("A signing account is required for wallet operations")
        return self.account.address


def build_handles(settings: VaultSettings) -> ContractHandles:
    """Connect to the RPC endpoint and bind the vault, token and oracle contracts."""
    w3 = Web3(Web3.HTTPProvider(URI(settings.rpc_url_required)))

    account: LocalAccount = Account.from_key(
        settings.private_key_required.get_secret_value()
    )

    vault = w3.eth.contract(
        address=Web3.to_checksum_address(settings.vault_address_required),
        abi=load_vault_abi(),
    )
    token = w3.eth.contract(
        address=Web3.to_checksum_address(settings.token_address_required),
        abi=load_erc20_abi(),
    )
    oracle = w3.eth.contract(
        address=Web3.to_checksum_address(settings.price_oracle_required),
        abi=load_aggregator_abi(),
    )
    logger.debug(
        "Bound contracts: vault=%s token=%s oracle=%s",
        vault.address,
        token.address,
        oracle.address,
    )
    return ContractHandles(
        w3=w3, account=account, vault=vault, token=token, oracle=oracle
    )


def _translate(label: str, exc: Exception) -> Exception:
    if isinstance(exc, (ContractLogicError, BadFunctionCallOutput)):
        return ContractCallError(f"{label} failed: {exc}")
    if isinstance(
        exc, (Web3Exception, requests.exceptions.RequestException, ConnectionError)
    ):
        return RpcFailureError(f"{label} failed: {exc}")
    return exc


async def call_contract(
    fn: Any,
    label: str,
    block_identifier: BlockIdentifier = "latest",
) -> Any:
    """Run a bound contract read in a worker thread.

    Args:
        fn: A bound contract function, e.g. ``token.functions.balanceOf(addr)``
        label: Human-readable name used in error messages
        block_identifier: Block tag or number to read state at

    Raises:
        ContractCallError: If the call reverts or returns no data
        RpcFailureError: If the RPC transport fails
    """
    logger.debug("Calling %s at block %s", label, block_identifier)
    try:
        return await asyncio.to_thread(fn.call, block_identifier=block_identifier)
    except Exception as e:
        translated = _translate(label, e)
        if translated is e:
            raise
        raise translated from e


async def get_block_number(w3: Web3) -> int:
    """Fetch the latest block number."""
    try:
        return await asyncio.to_thread(w3.eth.get_block_number)
    except Exception as e:
        translated = _translate("eth_blockNumber", e)
        if translated is e:
            raise
        raise translated from e


async def send_transaction(
    handles: ContractHandles,
    fn: Any,
    label: str,
    timeout: float,
) -> TxReceipt:
    """Build, sign and send a contract transaction, then wait for its inclusion.

    Raises:
        ContractCallError: If the transaction reverts or is mined with status 0
        RpcFailureError: If the RPC transport fails or the receipt never arrives
    """
    w3 = handles.w3
    sender = handles.wallet_address
    account = handles.account
    assert account is not None

    def _submit() -> TxReceipt:
        nonce = w3.eth.get_transaction_count(sender, "pending")
        tx = fn.build_transaction({"from": sender, "nonce": nonce})
        signed = account.sign_transaction(tx)
        tx_hash = w3.eth.send_raw_transaction(signed.raw_transaction)
        logger.info("%s sent: %s", label, Web3.to_hex(tx_hash))
        return w3.eth.wait_for_transaction_receipt(tx_hash, timeout=timeout)

    try:
        receipt = await asyncio.to_thread(_submit)
    except TimeExhausted as e:
        raise RpcFailureError(
            f"{label} was not included within {timeout:.0f}s: {e}"
        ) from e
    except Exception as e:
        translated = _translate(label, e)
        if translated is e:
            raise
        raise translated from e

    if receipt["status"] != 1:
        raise ContractCallError(
            f"{label} reverted in block {receipt['blockNumber']} "
            f"(tx {Web3.to_hex(receipt['transactionHash'])})"
        )
    logger.info("%s confirmed in block %s", label, receipt["blockNumber"])
    return receipt

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
import requests
from web3.exceptions import BadFunctionCallOutput, ContractLogicError

from conftest import ORACLE, TOKEN, VAULT, WALLET, FakeContract
from lombard_vault.contracts import (
    ContractHandles,
    build_handles,
    call_contract,
    get_block_number,
    send_transaction,
)
from lombard_vault.errors import ContractCallError, RpcFailureError


def test_build_handles_binds_contracts(settings):
    handles = build_handles(settings)

    assert handles.vault_address == VAULT
    assert handles.token_address == TOKEN
    assert handles.oracle.address == ORACLE
    assert handles.account is not None
    assert handles.wallet_address == handles.account.address
    assert hasattr(handles.vault.functions, "enter")


def test_wallet_address_requires_account(make_handles):
    handles = make_handles(FakeContract(VAULT), FakeContract(TOKEN))
    handles.account = None

    with pytest.raises(ValueError, match="signing account"):
        _ = handles.wallet_address


@pytest.mark.asyncio
async def test_call_contract_passes_block_identifier():
    contract = FakeContract(VAULT, totalSupply=lambda block_identifier: block_identifier)

    assert await call_contract(contract.functions.totalSupply(), "supply", 17) == 17


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error", [ContractLogicError("execution reverted"), BadFunctionCallOutput("0x")]
)
async def test_call_contract_wraps_contract_errors(error):
    contract = FakeContract(VAULT, name=error)

    with pytest.raises(ContractCallError, match="vault.name failed"):
        await call_contract(contract.functions.name(), "vault.name")


@pytest.mark.asyncio
async def test_call_contract_wraps_transport_errors():
    contract = FakeContract(VAULT, name=requests.exceptions.Timeout("read timed out"))

    with pytest.raises(RpcFailureError, match="read timed out"):
        await call_contract(contract.functions.name(), "vault.name")


@pytest.mark.asyncio
async def test_call_contract_leaves_other_errors_untouched():
    contract = FakeContract(VAULT, name=KeyError("boom"))

    with pytest.raises(KeyError):
        await call_contract(contract.functions.name(), "vault.name")


@pytest.mark.asyncio
async def test_get_block_number_wraps_transport_errors():
    w3 = MagicMock()
    w3.eth.get_block_number.side_effect = requests.exceptions.ConnectionError("down")

    with pytest.raises(RpcFailureError, match="eth_blockNumber failed"):
        await get_block_number(w3)


def _signing_handles(receipt: dict) -> ContractHandles:
    w3 = MagicMock()
    w3.eth.get_transaction_count.return_value = 7
    w3.eth.send_raw_transaction.return_value = b"\xab" * 32
    w3.eth.wait_for_transaction_receipt.return_value = receipt
    account = MagicMock()
    account.address = WALLET
    account.sign_transaction.return_value = SimpleNamespace(raw_transaction=b"\x01\x02")
    return ContractHandles(
        w3=w3,
        account=account,
        vault=FakeContract(VAULT),
        token=FakeContract(TOKEN),
        oracle=FakeContract(ORACLE),
    )


@pytest.mark.asyncio
async def test_send_transaction_signs_sends_and_waits():
    receipt = {"status": 1, "blockNumber": 100, "transactionHash": b"\xab" * 32}
    handles = _signing_handles(receipt)
    fn = MagicMock()
    fn.build_transaction.return_value = {"to": TOKEN, "data": "0x"}

    result = await send_transaction(handles, fn, "token.approve", timeout=30)

    assert result is receipt
    fn.build_transaction.assert_called_once_with({"from": WALLET, "nonce": 7})
    handles.w3.eth.get_transaction_count.assert_called_once_with(WALLET, "pending")
    handles.w3.eth.send_raw_transaction.assert_called_once_with(b"\x01\x02")
    handles.w3.eth.wait_for_transaction_receipt.assert_called_once_with(
        b"\xab" * 32, timeout=30
    )


@pytest.mark.asyncio
async def test_send_transaction_failed_receipt_raises():
    receipt = {"status": 0, "blockNumber": 100, "transactionHash": b"\xab" * 32}
    handles = _signing_handles(receipt)
    fn = MagicMock()
    fn.build_transaction.return_value = {}

    with pytest.raises(ContractCallError, match="vault.enter reverted in block 100"):
        await send_transaction(handles, fn, "vault.enter", timeout=30)

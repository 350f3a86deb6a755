from __future__ import annotations

import logging
from types import SimpleNamespace
from typing import Any
from unittest.mock import MagicMock

import pytest

from lombard_vault.contracts import ContractHandles
from lombard_vault.settings import VaultSettings
from lombard_vault.state import AppState

RPC_URL = "https://rpc.example"
PRIVATE_KEY = "0x" + "11" * 32
ORACLE = "0x1111111111111111111111111111111111111111"
TOKEN = "0x2222222222222222222222222222222222222222"
VAULT = "0x3333333333333333333333333333333333333333"
WALLET = "0x4444444444444444444444444444444444444444"

ENV_VARS = [
    "RPC_URL",
    "PRIVATE_KEY",
    "LBTC_USD_PRICE_ORACLE",
    "LBTC_TOKEN_CONTRACT_ADDRESS",
    "VAULT_CONTRACT_ADDRESS",
    "LOMBARD_VAULT_CONFIG",
    "LOG_LEVEL",
    "BLOCK_NUMBER",
    "DEPOSIT_AMOUNT",
    "SUBMIT_DEPOSIT",
]


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep developer environment, .env and config files out of the tests."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))


class FakeCall:
    """Bound contract function whose ``call`` answers from a value or resolver."""

    def __init__(self, value: Any, args: tuple):
        self._value = value
        self.args = args

    def call(self, block_identifier="latest"):
        value = self._value
        if callable(value):
            value = value(*self.args, block_identifier=block_identifier)
        if isinstance(value, Exception):
            raise value
        return value

    def build_transaction(self, tx_params):
        return {"data": "0x", **tx_params}


class FakeContract:
    """Minimal stand-in for a web3 contract: ``functions.<name>(*args).call()``."""

    def __init__(self, address: str, **methods: Any):
        self.address = address
        self.calls: list[tuple[str, tuple]] = []
        self.functions = SimpleNamespace()
        for name, value in methods.items():
            setattr(self.functions, name, self._bind(name, value))

    def _bind(self, name: str, value: Any):
        def _fn(*args):
            self.calls.append((name, args))
            return FakeCall(value, args)

        return _fn


@pytest.fixture
def settings() -> VaultSettings:
    return VaultSettings(
        rpc_url=RPC_URL,
        private_key=PRIVATE_KEY,
        lbtc_usd_price_oracle=ORACLE,
        lbtc_token_contract_address=TOKEN,
        vault_contract_address=VAULT,
    )


@pytest.fixture
def make_handles():
    def _make(
        vault: FakeContract,
        token: FakeContract,
        oracle: FakeContract | None = None,
        block_number: int = 20_000_000,
    ) -> ContractHandles:
        w3 = MagicMock()
        w3.eth.get_block_number.return_value = block_number
        return ContractHandles(
            w3=w3,
            account=SimpleNamespace(address=WALLET),
            vault=vault,
            token=token,
            oracle=oracle or FakeContract(ORACLE),
        )

    return _make


@pytest.fixture
def app_state(settings) -> AppState:
    return AppState(settings=settings, logger=logging.getLogger("test"))

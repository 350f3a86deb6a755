"""Settings module with unified configuration precedence: CLI > ENV > CONFIG FILE."""

from __future__ import annotations

import os
import tomllib
from enum import Enum
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import Field, SecretStr, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)
from web3 import Web3

from .constants import (
    CONFIG_ENV_VAR,
    CONFIG_TABLE,
    DEFAULT_APY_WINDOW_DAYS,
    DEFAULT_BLOCK_TIME_SECONDS,
    DEFAULT_DEPOSIT_AMOUNT,
    DEFAULT_TX_RECEIPT_TIMEOUT,
    LOCAL_CONFIG_FILE,
    SECONDS_PER_DAY,
)
from .errors import ConfigMissingError

load_dotenv()


class ReportFormat(str, Enum):
    TEXT = "text"
    TABLE = "table"


# field name -> environment variable name
REQUIRED_FIELDS = {
    "rpc_url": "RPC_URL",
    "private_key": "PRIVATE_KEY",
    "lbtc_usd_price_oracle": "LBTC_USD_PRICE_ORACLE",
    "lbtc_token_contract_address": "LBTC_TOKEN_CONTRACT_ADDRESS",
    "vault_contract_address": "VAULT_CONTRACT_ADDRESS",
}

SECRET_FIELDS = {"private_key"}


class TomlConfigSource(PydanticBaseSettingsSource):
    """Lowest-precedence source reading a TOML file (top level or [lombard_vault])."""

    def __init__(self, settings_cls: type[BaseSettings], path: Path | None):
        super().__init__(settings_cls)
        self._path = path

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return None, "", False

    def _resolve_path(self) -> Path | None:
        if self._path:
            return self._path
        local_config = Path(LOCAL_CONFIG_FILE)
        user_config = Path.home() / ".config" / "lombard-vault" / "config.toml"
        if local_config.exists():
            return local_config
        if user_config.exists():
            return user_config
        return None

    def __call__(self) -> dict[str, Any]:
        path = self._resolve_path()
        if path is None or not path.exists():
            return {}

        with path.open("rb") as f:
            data = tomllib.load(f)
        body = data.get(CONFIG_TABLE, data)
        if not isinstance(body, dict):
            return {}

        for key in SECRET_FIELDS:
            if key in body:
                raise ValueError(
                    f"Security violation: '{key}' found in TOML config file. "
                    f"Secrets must only be provided via environment variables or CLI flags."
                )

        return body


class VaultSettings(BaseSettings):
    """Single source of truth for configuration. Values may come from:
    - CLI (init kwargs)
    - ENV / .env (unprefixed, e.g. RPC_URL, VAULT_CONTRACT_ADDRESS)
    - Config file (TOML), lowest precedence

    Do not read os.environ or files elsewhere in the codebase.
    """

    # --- endpoints / addresses ---
    rpc_url: str | None = None
    lbtc_usd_price_oracle: str | None = None
    lbtc_token_contract_address: str | None = None
    vault_contract_address: str | None = None

    # --- signing ---
    private_key: SecretStr | None = None

    # --- metrics ---
    block_number: int | None = Field(default=None, ge=0)
    block_time_seconds: float = Field(
        default=DEFAULT_BLOCK_TIME_SECONDS,
        gt=0,
        description="Expected block time of the target chain, used to size the APY window.",
    )
    apy_window_days: int = Field(default=DEFAULT_APY_WINDOW_DAYS, gt=0)

    # --- deposit ---
    deposit_amount: str = DEFAULT_DEPOSIT_AMOUNT
    min_shares_amount: str | None = None
    submit_deposit: bool = False
    tx_receipt_timeout: float = Field(default=DEFAULT_TX_RECEIPT_TIMEOUT, gt=0)

    # --- flow ---
    skip_metadata: bool = False
    skip_deposit: bool = False
    global_timeout_seconds: float | None = None

    # --- output / logging ---
    report_format: ReportFormat = ReportFormat.TEXT
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    @field_validator("private_key", mode="before")
    @classmethod
    def wrap_secrets(cls, v: Any) -> SecretStr | None:
        """Wrap string secrets in SecretStr."""
        if v is None or isinstance(v, SecretStr):
            return v
        if v == "":
            return None
        return SecretStr(v)

    @field_validator(
        "lbtc_usd_price_oracle",
        "lbtc_token_contract_address",
        "vault_contract_address",
        mode="before",
    )
    @classmethod
    def checksum_addresses(cls, v: Any) -> str | None:
        """Normalize contract addresses to checksum form."""
        if v is None or v == "":
            return None
        if not isinstance(v, str) or not Web3.is_address(v):
            raise ValueError(f"Invalid address: {v!r}")
        return Web3.to_checksum_address(v)

    @field_validator("rpc_url", mode="before")
    @classmethod
    def empty_to_none(cls, v: Any) -> Any:
        return None if v == "" else v

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Custom config-file source with explicit precedence: CLI > ENV > FILE."""
        env_cfg = os.environ.get(CONFIG_ENV_VAR)
        cfg_path = Path(env_cfg) if env_cfg else None

        return (
            init_settings,  # CLI (highest)
            env_settings,  # ENV
            dotenv_settings,  # .env
            TomlConfigSource(settings_cls, cfg_path),  # CONFIG (lowest)
            file_secret_settings,
        )

    def missing_required(self) -> list[str]:
        """Return the environment variable names of unset required values."""
        return [
            env_name
            for field_name, env_name in REQUIRED_FIELDS.items()
            if getattr(self, field_name) is None
        ]

    def ensure_required(self) -> None:
        """Raise ConfigMissingError naming every missing required value."""
        missing = self.missing_required()
        if missing:
            raise ConfigMissingError(missing)

    def as_safe_dict(self) -> dict[str, Any]:
        """Return the config as a dict with secrets redacted."""
        data = self.model_dump(mode="json")
        if self.private_key:
            data["private_key"] = "***redacted***"
        return data

    def _required(self, field_name: str) -> Any:
        value = getattr(self, field_name)
        if value is None:
            raise ConfigMissingError([REQUIRED_FIELDS[field_name]])
        return value

    @property
    def blocks_per_day(self) -> int:
        """Approximate number of blocks produced in 24h on the target chain."""
        return int(SECONDS_PER_DAY // self.block_time_seconds)

    @property
    def rpc_url_required(self) -> str:
        return self._required("rpc_url")

    @property
    def private_key_required(self) -> SecretStr:
        return self._required("private_key")

    @property
    def price_oracle_required(self) -> str:
        return self._required("lbtc_usd_price_oracle")

    @property
    def token_address_required(self) -> str:
        return self._required("lbtc_token_contract_address")

    @property
    def vault_address_required(self) -> str:
        return self._required("vault_contract_address")

from __future__ import annotations

APY_UNAVAILABLE = "N/A"

SECONDS_PER_DAY = 86_400
DAYS_PER_YEAR = 365

# Ethereum mainnet post-merge slot time; 7200 blocks per day.
DEFAULT_BLOCK_TIME_SECONDS = 12.0
DEFAULT_APY_WINDOW_DAYS = 14

DEFAULT_DEPOSIT_AMOUNT = "0.000001"
DEFAULT_TX_RECEIPT_TIMEOUT = 120.0

CONFIG_ENV_VAR = "LOMBARD_VAULT_CONFIG"
LOCAL_CONFIG_FILE = "lombard-vault.toml"
CONFIG_TABLE = "lombard_vault"

"""Fatal-tier error kinds raised by the vault client."""

from __future__ import annotations


class VaultClientError(Exception):
    """Base class for errors that terminate a run."""


class ConfigMissingError(VaultClientError):
    """Raised when required configuration values are not set."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(
            f"Missing required environment variables: {', '.join(missing)}"
        )


class RpcFailureError(VaultClientError):
    """Raised when the RPC endpoint fails to answer a request."""


class ContractCallError(VaultClientError):
    """Raised when a contract call reverts, returns no data, or a transaction fails."""


class InsufficientBalanceError(VaultClientError):
    """Raised when the wallet holds fewer tokens than the requested deposit."""

    def __init__(self, available: str, required: str, symbol: str = "LBTC"):
        self.available = available
        self.required = required
        self.symbol = symbol
        super().__init__(
            f"Insufficient {symbol} balance. Have: {available}, Need: {required}"
        )

from __future__ import annotations

from dataclasses import dataclass

from ..contracts import ContractHandles
from ..report import DepositResult, VaultMetadata
from ..state import AppState


@dataclass
class PipelineContext:
    state: AppState
    handles: ContractHandles
    metadata: VaultMetadata | None = None
    deposit: DepositResult | None = None

    @property
    def metadata_required(self) -> VaultMetadata:
        if self.metadata is None:
            raise RuntimeError(
                "Metadata has not been set. Ensure get_vault_metadata() is called before accessing this property."
            )
        return self.metadata

    @property
    def deposit_required(self) -> DepositResult:
        if self.deposit is None:
            raise RuntimeError(
                "Deposit result has not been set. Ensure deposit() is called before accessing this property."
            )
        return self.deposit

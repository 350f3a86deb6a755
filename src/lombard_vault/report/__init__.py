from .formatter import format_metadata_lines, print_metadata
from .generator import DepositResult, VaultMetadata

__all__ = ["DepositResult", "VaultMetadata", "format_metadata_lines", "print_metadata"]

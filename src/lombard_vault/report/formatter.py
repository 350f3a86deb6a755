"""Console rendering of the vault metadata report."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from ..settings import ReportFormat
from .generator import VaultMetadata


def format_metadata_lines(metadata: VaultMetadata) -> list[str]:
    """Plain report lines in fixed order."""
    return [
        f"Vault: {metadata.name}",
        f"APY: {metadata.apy}",
        f"TVL: {metadata.tvl}",
        f"Token: {metadata.token_symbol} ({metadata.token_decimals} decimals)",
    ]


def _metadata_table(metadata: VaultMetadata) -> Table:
    table = Table(title="[bold]Vault Metadata[/]", show_header=False, box=None)
    table.add_column("Key", style="dim")
    table.add_column("Value", style="cyan")
    table.add_row("Vault", metadata.name)
    table.add_row("APY", metadata.apy)
    table.add_row("TVL", metadata.tvl)
    table.add_row(
        "Token", f"{metadata.token_symbol} ({metadata.token_decimals} decimals)"
    )
    if metadata.block_number is not None:
        table.add_row("Block", str(metadata.block_number))
    return table


def print_metadata(
    metadata: VaultMetadata,
    report_format: ReportFormat = ReportFormat.TEXT,
    console: Console | None = None,
) -> None:
    """Print the metadata report to stdout."""
    if report_format == ReportFormat.TABLE:
        (console or Console()).print(_metadata_table(metadata))
        return

    for line in format_metadata_lines(metadata):
        print(line)

"""CLI entrypoint for lombard-vault."""

from __future__ import annotations

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Annotated, Any

import typer

from .constants import CONFIG_ENV_VAR
from .errors import ConfigMissingError
from .logger import setup_logging
from .settings import ReportFormat, VaultSettings
from .state import AppState

app = typer.Typer(
    add_completion=False,
    no_args_is_help=False,
    add_help_option=True,
    pretty_exceptions_enable=True,
    pretty_exceptions_short=True,
    pretty_exceptions_show_locals=False,
    rich_markup_mode="rich",
    help="Report Lombard vault metrics and deposit LBTC.",
)


def _build_logger() -> logging.Logger:
    """Build a logger instance."""
    return logging.getLogger("lombard_vault")


@app.callback(invoke_without_command=True)
def main(
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to a TOML config file (can include [lombard_vault] table).",
        ),
    ] = None,
    rpc_url: Annotated[
        str | None,
        typer.Option("--rpc-url", help="JSON-RPC endpoint; overrides RPC_URL."),
    ] = None,
    block_number: Annotated[
        int | None,
        typer.Option(
            "--block-number",
            help="Block number to read metrics at. If not provided, the latest block will be used.",
        ),
    ] = None,
    block_time: Annotated[
        float | None,
        typer.Option(
            "--block-time",
            help="Expected block time in seconds of the target chain (sizes the APY window).",
        ),
    ] = None,
    apy_window_days: Annotated[
        int | None,
        typer.Option("--apy-window-days", help="Days between the two APY snapshots."),
    ] = None,
    deposit_amount: Annotated[
        str | None,
        typer.Option("--deposit-amount", help="Human-readable LBTC amount to deposit."),
    ] = None,
    submit: Annotated[
        bool | None,
        typer.Option(
            "--submit/--no-submit",
            help="Send the approve and enter transactions (disabled by default).",
        ),
    ] = None,
    skip_metadata: Annotated[
        bool,
        typer.Option("--skip-metadata", help="Do not print the vault metadata report."),
    ] = False,
    skip_deposit: Annotated[
        bool,
        typer.Option("--skip-deposit", help="Do not run the deposit flow."),
    ] = False,
    report_format: Annotated[
        ReportFormat | None,
        typer.Option("--format", help="Metadata output format (text or table)."),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option(
            "--log-level",
            help="Override logging verbosity (TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL).",
        ),
    ] = None,
    show_config: Annotated[
        bool,
        typer.Option(
            "--show-config",
            help="Print effective config (with secrets redacted) and exit.",
        ),
    ] = False,
):
    """Print vault metadata, then run the deposit flow."""
    if config_path:
        os.environ[CONFIG_ENV_VAR] = str(config_path)

    init_kwargs: dict[str, Any] = {}
    if rpc_url is not None:
        init_kwargs["rpc_url"] = rpc_url
    if block_number is not None:
        init_kwargs["block_number"] = block_number
    if block_time is not None:
        init_kwargs["block_time_seconds"] = block_time
    if apy_window_days is not None:
        init_kwargs["apy_window_days"] = apy_window_days
    if deposit_amount is not None:
        init_kwargs["deposit_amount"] = deposit_amount
    if submit is not None:
        init_kwargs["submit_deposit"] = submit
    if skip_metadata:
        init_kwargs["skip_metadata"] = True
    if skip_deposit:
        init_kwargs["skip_deposit"] = True
    if report_format is not None:
        init_kwargs["report_format"] = report_format
    if log_level is not None:
        init_kwargs["log_level"] = log_level.upper()

    settings = VaultSettings(**init_kwargs)

    setup_logging(settings.log_level)
    logger = _build_logger()
    state = AppState(settings=settings, logger=logger)

    if show_config:
        typer.echo(json.dumps(settings.as_safe_dict(), indent=2))
        raise typer.Exit(code=0)

    try:
        settings.ensure_required()
    except ConfigMissingError as e:
        raise typer.BadParameter(str(e)) from e

    from .contracts import build_handles
    from .pipeline.run import run_vault

    handles = build_handles(settings)
    asyncio.run(run_vault(state, handles))


def run() -> None:
    """Entrypoint used by the console script."""
    app()


if __name__ == "__main__":
    run()

"""Command-line client for reading Lombard vault metrics and depositing LBTC."""

__version__ = "0.1.0"

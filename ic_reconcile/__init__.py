"""Employee IC reconciliation between two spreadsheet files."""

__version__ = "0.3.0"

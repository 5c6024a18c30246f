"""File source package."""

from ledger.services.files.csv_source import CsvFileSource

__all__ = ["CsvFileSource"]

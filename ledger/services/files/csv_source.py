"""
CSV File Source

The file-side collaborator of the import flow:
1. A lazy, finite, non-restartable stream of decoded CSV rows
2. A delete primitive keyed by path

DESIGN DECISION: rows() is an async generator. The importer drains it
completely before touching storage; stopping iteration early (or
cancelling the task) simply stops reading and closes the file.

The reads themselves are blocking file I/O: the generator never awaits, so
the event loop is held for the duration of a read. Callers close it with
contextlib.aclosing so the file is released on early exit too.

Errors are NOT wrapped: a missing or unreadable file surfaces as the
OSError subclass the operating system reported.
"""

import csv
import os
from typing import AsyncIterator, Optional

import structlog

from ledger.config import ImportSettings, get_settings


logger = structlog.get_logger(__name__)


class CsvFileSource:
    """
    Streams rows out of CSV files and removes them afterwards.

    Lines before `from_line` (1-based) are never yielded; with the default
    settings that is exactly the header line.
    """

    def __init__(self, settings: Optional[ImportSettings] = None):
        self._settings = settings or get_settings().imports

    async def rows(self, path: str) -> AsyncIterator[tuple[int, list[str]]]:
        """
        Yield (line_number, cells) for every data row of the file.

        Cells are returned raw (untrimmed). Blank lines come through as
        empty cell lists.
        """
        with open(
            path,
            newline="",
            encoding=self._settings.encoding,
            errors=self._settings.encoding_errors,
        ) as handle:
            reader = csv.reader(handle, delimiter=self._settings.delimiter)
            for cells in reader:
                # line_num counts physical lines, so quoted newlines stay correct
                line_number = reader.line_num
                if line_number < self._settings.from_line:
                    continue
                yield line_number, cells

    async def remove(self, path: str) -> None:
        """Delete the file at `path`."""
        os.remove(path)
        logger.debug("csv_source_removed", path=path)

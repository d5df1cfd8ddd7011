"""Exceptions raised at the import boundaries."""
from __future__ import annotations


class FileFormatError(ValueError):
    """Raised when an uploaded workbook or CSV cannot be read at all.

    Fatal to the import operation; nothing from the file should be persisted.
    """

    def __init__(self, message: str, source: str = ""):
        self.source = source
        super().__init__(f"[{source}] {message}" if source else message)

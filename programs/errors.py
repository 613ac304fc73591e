from __future__ import annotations

from typing import Iterable, List


class IngestError(ValueError):
    """An upload could not be turned into a program dataset."""


class UnreadableFile(IngestError):
    pass


class EmptyWorkbook(IngestError):
    def __init__(self, message: str = "No sheets found in the workbook.") -> None:
        super().__init__(message)


class MissingColumns(IngestError):
    def __init__(self, names: Iterable[str]) -> None:
        self.names: List[str] = list(names)
        super().__init__(f"Missing expected columns: {', '.join(self.names)}")

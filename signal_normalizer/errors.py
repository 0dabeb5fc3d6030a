from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Sequence


class ErrorKind(str, Enum):
    UNREADABLE = "unreadable"
    EMPTY = "empty"
    COLUMN_DETECTION = "column_detection"
    NO_VALID_DATA = "no_valid_data"


class CaptureError(Exception):
    """Base class for every failure raised while normalizing a capture."""

    kind: ErrorKind

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_detail(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "message": self.message}


class UnreadableCaptureError(CaptureError):
    kind = ErrorKind.UNREADABLE


class EmptyCaptureError(CaptureError):
    kind = ErrorKind.EMPTY


class NoValidDataError(CaptureError):
    """Columns were identified but no row produced a finite frequency/power pair."""

    kind = ErrorKind.NO_VALID_DATA


class ColumnDetectionError(CaptureError):
    """
    Automatic column detection failed.

    Carries the header list and a few tokenized data rows so the caller can
    offer a manual column picker and retry with explicit indices.
    """

    kind = ErrorKind.COLUMN_DETECTION

    def __init__(self, message: str, headers: Sequence[str], sample_data: Sequence[Sequence[str]]):
        super().__init__(message)
        self.headers: List[str] = list(headers)
        self.sample_data: List[List[str]] = [list(row) for row in sample_data]

    def to_detail(self) -> Dict[str, Any]:
        detail = super().to_detail()
        detail["headers"] = self.headers
        detail["sampleData"] = self.sample_data
        return detail

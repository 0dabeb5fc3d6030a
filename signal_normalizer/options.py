"""Per-call parse options.

Column selection is a tagged union: either let the resolver infer the
frequency/power columns (:class:`AutoColumns`) or pin them explicitly
(:class:`ManualColumns`), which skips role resolution entirely.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union


class DelimiterMode(str, Enum):
    # fixed split on any run of tab, comma, semicolon or space
    SIMPLE = "simple"
    # statistical choice among comma, semicolon, tab and whitespace runs
    ADAPTIVE = "adaptive"


@dataclass(frozen=True)
class AutoColumns:
    pass


@dataclass(frozen=True)
class ManualColumns:
    freq_index: int
    power_index: int

    def __post_init__(self) -> None:
        for name in ("freq_index", "power_index"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValueError(f"{name} must be a non-negative integer, got {value!r}")


ColumnSelection = Union[AutoColumns, ManualColumns]


@dataclass(frozen=True)
class ParseOptions:
    columns: ColumnSelection = field(default_factory=AutoColumns)
    delimiter_mode: DelimiterMode = DelimiterMode.ADAPTIVE

    @classmethod
    def from_indices(
        cls,
        freq_index: Optional[int] = None,
        power_index: Optional[int] = None,
        delimiter_mode: DelimiterMode = DelimiterMode.ADAPTIVE,
    ) -> "ParseOptions":
        """Manual selection only when both indices are given; otherwise auto-detect."""
        if freq_index is not None and power_index is not None:
            columns: ColumnSelection = ManualColumns(freq_index, power_index)
        else:
            columns = AutoColumns()
        return cls(columns=columns, delimiter_mode=delimiter_mode)

"""
Line structure detection: delimiter, start of the data table, header row.

These helpers look only at the shape of the text. They use a light numeric
test (:func:`is_numeric`) rather than the unit-aware cell cleaner.
"""

from __future__ import annotations

import csv
import logging
import re
import statistics
from dataclasses import dataclass
from typing import Callable, Dict, List, Sequence, Tuple

from .options import DelimiterMode
from .rules import DATA_START_SCAN_LINES, DELIMITER_PRIORITY, DELIMITER_SAMPLE_LINES

logger = logging.getLogger(__name__)

Row = List[str]
Splitter = Callable[[str], Row]

_SIMPLE_SPLIT = re.compile(r"[\t,; ]+")
_NUMERIC = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")


def _split_on(char: str) -> Splitter:
    def split(line: str) -> Row:
        # quoted fields may hold the delimiter itself, e.g. "2,400.5"
        try:
            cells = next(csv.reader([line], delimiter=char, skipinitialspace=True), [])
        except csv.Error:
            cells = line.split(char)
        return [cell.strip() for cell in cells]
    return split


def _split_whitespace(line: str) -> Row:
    return line.split()


def _split_simple(line: str) -> Row:
    return _SIMPLE_SPLIT.split(line.strip())


SPLITTERS: Dict[str, Splitter] = {
    "comma": _split_on(","),
    "semicolon": _split_on(";"),
    "tab": _split_on("\t"),
    "whitespace": _split_whitespace,
    "simple": _split_simple,
}


@dataclass(frozen=True)
class DelimiterChoice:
    name: str
    mean_columns: float
    stdev_columns: float


def detect_delimiter(lines: Sequence[str]) -> str:
    """
    Pick the field separator from a prefix of non-blank lines.

    A candidate survives when at least half of the sampled lines split into
    more than one column. The survivor with the most consistent column count
    (lowest population standard deviation) wins; ties go to the earlier entry
    of DELIMITER_PRIORITY. Falls back to whitespace runs, never raises.
    """
    sample = list(lines[:DELIMITER_SAMPLE_LINES])
    if not sample:
        return "whitespace"

    survivors: List[DelimiterChoice] = []
    for name in DELIMITER_PRIORITY:
        counts = [len(SPLITTERS[name](line)) for line in sample]
        multi = sum(1 for c in counts if c > 1)
        if multi * 2 < len(sample):
            continue
        survivors.append(DelimiterChoice(
            name=name,
            mean_columns=statistics.mean(counts),
            stdev_columns=statistics.pstdev(counts),
        ))

    if not survivors:
        logger.debug("no delimiter candidate survived, using whitespace runs")
        return "whitespace"

    # min() keeps the first of equal keys, so priority order breaks ties
    best = min(survivors, key=lambda choice: choice.stdev_columns)
    logger.debug(
        "delimiter %s (mean %.2f, stdev %.3f columns)",
        best.name, best.mean_columns, best.stdev_columns,
    )
    return best.name


def choose_splitter(lines: Sequence[str], mode: DelimiterMode) -> Tuple[str, Splitter]:
    if mode is DelimiterMode.SIMPLE:
        return "simple", SPLITTERS["simple"]
    name = detect_delimiter(lines)
    return name, SPLITTERS[name]


def is_numeric(value: str) -> bool:
    """Structural numeric test: sign, digits, decimal point, exponent; thousands commas ignored."""
    if value is None:
        return False
    stripped = value.strip().replace(",", "")
    if not stripped:
        return False
    return _NUMERIC.match(stripped) is not None


def locate_data_start(rows: Sequence[Row]) -> int:
    """
    Index of the first row that looks like real tabular data.

    Instrument exports often prepend banner lines (device ids, settings).
    A row qualifies when it has at least two cells and a numeric first cell.
    A preceding row with the same column count that is not fully numeric is
    taken as the header, so the start moves back onto it.
    """
    for i, row in enumerate(rows[:DATA_START_SCAN_LINES]):
        if len(row) < 2 or not is_numeric(row[0]):
            continue
        if i > 0:
            previous = rows[i - 1]
            if len(previous) == len(row) and not all(is_numeric(cell) for cell in previous):
                return i - 1
        return i
    return 0


def classify_header(first_row: Sequence[str]) -> bool:
    """True when any cell is non-empty and fails the numeric test."""
    return any(cell != "" and not is_numeric(cell) for cell in first_row)


def synthetic_headers(column_count: int) -> List[str]:
    return [f"Column {i + 1}" for i in range(column_count)]

"""
Capture normalization pipeline.

Stages (each failure is terminal for the call and raised to the caller):
- acquire text (decode bytes)
- split lines, detect delimiter
- locate the start of the data table, skipping banner lines
- classify header vs. headerless
- resolve frequency/power columns (or take manual indices)
- materialize finite (frequency, power) pairs
- assemble statistics and sample windows into a FileAnalysisReport

The whole capture is held in memory; callers bound the input size (the HTTP
layer rejects uploads above the configured limit).
"""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import List, NamedTuple, Optional, Sequence, Tuple, Union

from .cleaning import clean_numeric
from .columns import resolve_columns
from .decoding import decode_capture, split_lines
from .errors import EmptyCaptureError, NoValidDataError, UnreadableCaptureError
from .models import (
    CaptureSamples,
    CaptureStats,
    FileAnalysisReport,
    FrequencyStats,
    PowerStats,
    SpectrumDataPoint,
)
from .options import ManualColumns, ParseOptions
from .rules import SAMPLE_WINDOW, SEGMENT_FILE_NAME
from .structure import (
    Row,
    choose_splitter,
    classify_header,
    locate_data_start,
    synthetic_headers,
)

logger = logging.getLogger(__name__)


class Point(NamedTuple):
    frequency: float
    power: float


class ParsedTable(NamedTuple):
    delimiter: str
    headers: List[str]
    has_header: bool
    rows: List[Row]


def parse_table(text: str, options: ParseOptions) -> ParsedTable:
    lines = split_lines(text)
    if not lines:
        raise EmptyCaptureError("File must contain at least one data row.")

    delimiter, split = choose_splitter(lines, options.delimiter_mode)
    rows = [split(line) for line in lines]

    start = locate_data_start(rows)
    relevant = rows[start:]
    if not relevant:
        raise EmptyCaptureError("No valid data rows found after skipping metadata.")
    logger.debug("data starts at line %d of %d (delimiter %s)", start, len(rows), delimiter)

    first = relevant[0]
    has_header = classify_header(first)
    if has_header:
        headers = list(first)
        data_rows = relevant[1:]
    else:
        headers = synthetic_headers(len(first))
        data_rows = relevant

    if not data_rows:
        raise EmptyCaptureError("File contains a header but no data rows.")
    return ParsedTable(delimiter, headers, has_header, data_rows)


def materialize_points(rows: Sequence[Row], freq_index: int, power_index: int) -> Tuple[List[Point], float]:
    """Finite (frequency, power) pairs in file order plus the sum of their power."""
    width = max(freq_index, power_index) + 1
    points: List[Point] = []
    power_sum = 0.0
    for row in rows:
        if len(row) < width:
            continue
        frequency = clean_numeric(row[freq_index])
        power = clean_numeric(row[power_index])
        if math.isnan(frequency) or math.isnan(power):
            continue
        points.append(Point(frequency, power))
        power_sum += power
    return points, power_sum


def _to_models(points: Sequence[Point]) -> Tuple[SpectrumDataPoint, ...]:
    return tuple(SpectrumDataPoint(frequency=p.frequency, power=p.power) for p in points)


def build_report(
    file_name: str,
    table: ParsedTable,
    freq_index: int,
    power_index: int,
    points: Sequence[Point],
    power_sum: float,
) -> FileAnalysisReport:
    by_frequency = sorted(points, key=lambda p: p.frequency)
    by_power = sorted(points, key=lambda p: p.power, reverse=True)

    stats = CaptureStats(
        frequency=FrequencyStats(min=by_frequency[0].frequency, max=by_frequency[-1].frequency),
        power=PowerStats(
            min=by_power[-1].power,
            max=by_power[0].power,
            avg=power_sum / len(points),
        ),
    )
    samples = CaptureSamples(
        first_rows=_to_models(points[:SAMPLE_WINDOW]),
        last_rows=_to_models(points[-SAMPLE_WINDOW:]),
        peak_power_rows=_to_models(by_power[:SAMPLE_WINDOW]),
    )
    return FileAnalysisReport(
        file_name=file_name,
        row_count=len(table.rows),
        column_count=len(table.headers),
        headers=tuple(table.headers),
        stats=stats,
        samples=samples,
        point_count=len(points),
        freq_index=freq_index,
        power_index=power_index,
        delimiter=table.delimiter,
    )


def resolve_indices(table: ParsedTable, options: ParseOptions) -> Tuple[int, int]:
    if isinstance(options.columns, ManualColumns):
        logger.debug(
            "using manual columns freq=%d power=%d",
            options.columns.freq_index, options.columns.power_index,
        )
        return options.columns.freq_index, options.columns.power_index
    return resolve_columns(table.headers, table.rows, table.has_header)


def _require_points(points: Sequence[Point]) -> None:
    if not points:
        raise NoValidDataError(
            "No valid numerical data found. Please ensure columns are correctly "
            "formatted and delimited (e.g., comma, space, tab)."
        )


def extract_points(text: str, options: ParseOptions = ParseOptions()) -> List[Point]:
    """Every retained (frequency, power) pair of a capture, in file order."""
    table = parse_table(text, options)
    freq_index, power_index = resolve_indices(table, options)
    points, _ = materialize_points(table.rows, freq_index, power_index)
    _require_points(points)
    return points


def analyze_text(
    text: str,
    file_name: Optional[str] = None,
    options: ParseOptions = ParseOptions(),
) -> FileAnalysisReport:
    table = parse_table(text, options)
    freq_index, power_index = resolve_indices(table, options)
    points, power_sum = materialize_points(table.rows, freq_index, power_index)
    _require_points(points)

    name = file_name or SEGMENT_FILE_NAME
    logger.info(
        "%s: %d of %d rows kept (freq column %d, power column %d)",
        name, len(points), len(table.rows), freq_index, power_index,
    )
    return build_report(name, table, freq_index, power_index, points, power_sum)


def analyze_bytes(
    raw: bytes,
    file_name: Optional[str] = None,
    options: ParseOptions = ParseOptions(),
) -> FileAnalysisReport:
    return analyze_text(decode_capture(raw), file_name, options)


def analyze_path(path: Union[str, Path], options: ParseOptions = ParseOptions()) -> FileAnalysisReport:
    path = Path(path)
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise UnreadableCaptureError(f"Failed to read the file: {path}") from exc
    return analyze_bytes(raw, path.name, options)

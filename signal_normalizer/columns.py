"""
Column role resolution: which column is frequency and which is power.

Two strategies, tried in order:

* Header keywords. Each header cell is scored against the frequency and power
  keyword lists; the top scorer of each role wins, with a conflict rule when
  one column tops both lists.
* Statistical profiling. Without usable headers, a small sample of rows is
  profiled per column. Power in dBm is characteristically negative, so the
  numeric column with the most negative values is taken as power and the
  next most numeric column as frequency.

Either strategy failing raises :class:`ColumnDetectionError` with enough
context (headers, a few sample rows) to ask the user for a manual mapping.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .cleaning import clean_numeric
from .errors import ColumnDetectionError
from .rules import (
    ERROR_SAMPLE_ROWS,
    EXACT_MATCH_BONUS,
    FREQUENCY_KEYWORDS,
    POWER_KEYWORDS,
    STATISTICAL_SAMPLE_ROWS,
)

logger = logging.getLogger(__name__)

DETECTION_FAILED = "Could not automatically detect the required columns."


@dataclass(frozen=True)
class KeywordCandidate:
    index: int
    freq_score: int
    power_score: int


@dataclass(frozen=True)
class NumericCandidate:
    index: int
    numeric_count: int
    negative_count: int


def score_header(header: str, keywords: Sequence[str]) -> int:
    text = header.strip().lower()
    score = sum(1 for keyword in keywords if keyword in text)
    if text in keywords:
        score += EXACT_MATCH_BONUS
    return score


def score_headers(headers: Sequence[str]) -> List[KeywordCandidate]:
    return [
        KeywordCandidate(
            index=i,
            freq_score=score_header(h, FREQUENCY_KEYWORDS),
            power_score=score_header(h, POWER_KEYWORDS),
        )
        for i, h in enumerate(headers)
    ]


def _next_distinct(ranked: Sequence[KeywordCandidate], taken: int) -> Optional[int]:
    for candidate in ranked:
        if candidate.index != taken:
            return candidate.index
    return None


def resolve_by_keywords(headers: Sequence[str]) -> Optional[Tuple[int, int]]:
    """
    Resolve (freq_index, power_index) from header text.

    Returns None when either role has no keyword match at all, meaning the
    header carries no usable hint.

    When one column tops both rankings it keeps the role it scored higher in
    (frequency on a tie) and the other role takes its next distinct
    candidate. Raises ValueError when no such candidate exists.
    """
    candidates = score_headers(headers)
    # sorted() is stable, so equal scores keep left-to-right column order
    freq_ranked = sorted((c for c in candidates if c.freq_score > 0), key=lambda c: -c.freq_score)
    power_ranked = sorted((c for c in candidates if c.power_score > 0), key=lambda c: -c.power_score)

    if not freq_ranked or not power_ranked:
        return None

    best_freq = freq_ranked[0]
    best_power = power_ranked[0]
    if best_freq.index != best_power.index:
        return best_freq.index, best_power.index

    shared = best_freq.index
    if best_freq.freq_score >= best_power.power_score:
        power_index = _next_distinct(power_ranked, shared)
        if power_index is None:
            raise ValueError(f"column {shared} wins frequency and no other power column exists")
        return shared, power_index

    freq_index = _next_distinct(freq_ranked, shared)
    if freq_index is None:
        raise ValueError(f"column {shared} wins power and no other frequency column exists")
    return freq_index, shared


def profile_columns(rows: Sequence[Sequence[str]]) -> List[NumericCandidate]:
    """Numeric and negative counts per column over the first rows of data."""
    sample = rows[:STATISTICAL_SAMPLE_ROWS]
    if not sample:
        return []
    column_count = len(sample[0])
    numeric = [0] * column_count
    negative = [0] * column_count
    for row in sample:
        for i in range(min(column_count, len(row))):
            value = clean_numeric(row[i])
            if math.isnan(value):
                continue
            numeric[i] += 1
            if value < 0:
                negative[i] += 1
    return [NumericCandidate(i, numeric[i], negative[i]) for i in range(column_count)]


def resolve_by_statistics(rows: Sequence[Sequence[str]]) -> Optional[Tuple[int, int]]:
    sample_size = min(STATISTICAL_SAMPLE_ROWS, len(rows))
    if sample_size == 0 or len(rows[0]) < 2:
        return None

    profiles = profile_columns(rows)
    numeric_ranked = sorted(
        (p for p in profiles if p.numeric_count > sample_size / 2),
        key=lambda p: -p.numeric_count,
    )
    if len(numeric_ranked) < 2:
        return None

    power = max(numeric_ranked, key=lambda p: p.negative_count)
    freq = next(p for p in numeric_ranked if p.index != power.index)
    return freq.index, power.index


def resolve_columns(
    headers: Sequence[str],
    rows: Sequence[Sequence[str]],
    has_header: bool,
) -> Tuple[int, int]:
    """
    Resolve (freq_index, power_index) for a parsed table.

    Header keywords are tried first when a real header exists; the statistical
    profile is used for synthetic headers or when the header gives no hint
    for one of the roles.
    """
    resolved: Optional[Tuple[int, int]] = None
    if has_header:
        try:
            resolved = resolve_by_keywords(headers)
        except ValueError as exc:
            logger.info("header keyword conflict unresolved: %s", exc)
            raise ColumnDetectionError(DETECTION_FAILED, headers, rows[:ERROR_SAMPLE_ROWS]) from exc
        if resolved is not None:
            logger.debug("columns resolved from header keywords: %s", resolved)

    if resolved is None:
        resolved = resolve_by_statistics(rows)
        if resolved is not None:
            logger.debug("columns resolved from value statistics: %s", resolved)

    if resolved is None:
        raise ColumnDetectionError(DETECTION_FAILED, headers, rows[:ERROR_SAMPLE_ROWS])
    return resolved

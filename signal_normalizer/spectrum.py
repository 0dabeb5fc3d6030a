"""Spectral views over normalized points.

Functions
---------
filter_points
    Inclusive frequency/power window over a point sequence.
pad_to_power_of_two
    Zero-pad a series to the next power-of-two length.
fft_magnitudes
    Magnitude of the FFT of the padded power series (first half of the bins).
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

import numpy as np

from .normalize import Point


def filter_points(
    points: Sequence[Point],
    *,
    min_freq: Optional[float] = None,
    max_freq: Optional[float] = None,
    min_power: Optional[float] = None,
    max_power: Optional[float] = None,
) -> List[Point]:
    """Keep points inside all given bounds; ``None`` leaves that side open."""
    kept = []
    for p in points:
        if min_freq is not None and p.frequency < min_freq:
            continue
        if max_freq is not None and p.frequency > max_freq:
            continue
        if min_power is not None and p.power < min_power:
            continue
        if max_power is not None and p.power > max_power:
            continue
        kept.append(p)
    return kept


def pad_to_power_of_two(values: Sequence[float]) -> np.ndarray:
    n = len(values)
    if n == 0:
        return np.zeros(0, dtype=float)
    size = 1 << (n - 1).bit_length()
    padded = np.zeros(size, dtype=float)
    padded[:n] = values
    return padded


def fft_magnitudes(points: Sequence[Point]) -> List[Tuple[int, float]]:
    """
    FFT of the power series, as ``(quefrency bin, magnitude)`` pairs.

    The power values are zero-padded to a power-of-two length; only the first
    half of the spectrum is returned because the input is real. Fewer than
    two points give no bins.
    """
    padded = pad_to_power_of_two([p.power for p in points])
    if padded.size < 2:
        return []
    spectrum = np.abs(np.fft.fft(padded))
    half = padded.size // 2
    return [(i, float(spectrum[i])) for i in range(half)]

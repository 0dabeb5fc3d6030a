from __future__ import annotations

import math
import re
from typing import Optional

from .rules import UNIT_SUFFIXES

_UNIT_SUFFIX = re.compile(r"(" + "|".join(UNIT_SUFFIXES) + r")$")


def clean_numeric(value: Optional[str]) -> float:
    """
    Turn a frequency or power cell into a float, NaN when it does not parse.

    "1,234.5 MHz" -> 1234.5, "-48.2dBm" -> -48.2, "" -> nan.
    """
    if value is None:
        return math.nan
    cleaned = value.strip().replace(",", "").lower()
    cleaned = _UNIT_SUFFIX.sub("", cleaned).strip()
    if not cleaned:
        return math.nan
    try:
        number = float(cleaned)
    except ValueError:
        return math.nan
    return number if math.isfinite(number) else math.nan

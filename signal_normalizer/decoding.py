"""
Byte-to-text acquisition for uploaded captures.

Captures are assumed to be UTF-8-ish text, but instrument exports are often
Latin-1 or Windows code pages. The whole segment is decoded at once; callers
bound the input size before handing it over.
"""

from __future__ import annotations

import logging
from typing import List

from charset_normalizer import from_bytes

from .errors import EmptyCaptureError, UnreadableCaptureError

logger = logging.getLogger(__name__)

_UTF8_BOM = b"\xef\xbb\xbf"


def decode_capture(raw: bytes) -> str:
    """
    Decode raw capture bytes to text.

    Rules:
    - Detect encoding best-effort via charset-normalizer.
    - A UTF-8 BOM is consumed, never returned as part of the first cell.
    - If the detected codec fails, fall back to UTF-8, then to UTF-8 with
      replacement characters so the parse can still proceed.
    - Zero bytes are unreadable; text holding only whitespace has no data rows.
    """
    if not raw:
        raise UnreadableCaptureError("File is empty or could not be read.")

    if raw.startswith(_UTF8_BOM):
        decode_used = "utf-8-sig"
    else:
        match = from_bytes(raw).best()
        decode_used = match.encoding if match is not None else "utf-8"

    try:
        text = raw.decode(decode_used)
    except (UnicodeDecodeError, LookupError):
        try:
            text = raw.decode("utf-8")
            decode_used = "utf-8"
        except UnicodeDecodeError:
            text = raw.decode("utf-8", errors="replace")
            decode_used = "utf-8 (replace)"

    logger.debug("decoded %d bytes using %s", len(raw), decode_used)

    text = text.lstrip("\ufeff")
    if not text.strip():
        raise EmptyCaptureError("File must contain at least one data row.")
    return text


def split_lines(text: str) -> List[str]:
    """Split on CRLF, CR or LF and drop blank lines."""
    normalized = text.replace("\r\n", "\n").replace("\r", "\n")
    return [line for line in normalized.split("\n") if line.strip()]

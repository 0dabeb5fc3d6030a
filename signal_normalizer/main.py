from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, FastAPI, File, Form, HTTPException, Request, UploadFile
from fastapi.responses import JSONResponse

from .config import Settings, configure_logging, get_settings
from .decoding import decode_capture
from .errors import CaptureError, ColumnDetectionError
from .models import CaptureErrorResponse, FftBin, FftResponse, FileAnalysisReport, HealthResponse
from .normalize import analyze_bytes, extract_points
from .options import DelimiterMode, ParseOptions
from .rules import ACCEPTED_EXTENSIONS, SEGMENT_FILE_NAME
from .spectrum import fft_magnitudes, filter_points

logger = logging.getLogger(__name__)

CAPTURE_ERRORS = {422: {"model": CaptureErrorResponse}}

configure_logging(get_settings().log_level)

app = FastAPI(
    title="spectrum-normalizer",
    description="Heuristic normalization of RF frequency/power captures",
    version="0.1.0",
)


@app.exception_handler(CaptureError)
async def capture_error_handler(request: Request, exc: CaptureError):
    if isinstance(exc, ColumnDetectionError):
        logger.warning("column detection failed for %s; manual mapping needed", request.url.path)
    else:
        logger.warning("capture rejected (%s): %s", exc.kind.value, exc.message)
    return JSONResponse(status_code=422, content=exc.to_detail())


def _parse_options(
    freq_index: Optional[int],
    power_index: Optional[int],
    delimiter_mode: Optional[DelimiterMode],
    settings: Settings,
) -> ParseOptions:
    try:
        return ParseOptions.from_indices(
            freq_index,
            power_index,
            delimiter_mode or settings.delimiter_mode,
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e


async def _read_capture(
    file: UploadFile,
    start: Optional[int],
    end: Optional[int],
    settings: Settings,
) -> tuple[bytes, str]:
    """
    Read the upload (or the [start, end) byte slice of it) within the size limit.

    At most one byte past the limit is read, so an oversized capture is
    rejected without loading it whole. The limit applies to the slice, so a
    segment of a larger file is accepted.
    """
    name = file.filename or ""
    if not name.lower().endswith(ACCEPTED_EXTENSIONS):
        raise HTTPException(status_code=422, detail="Only CSV or TXT files are supported")

    limit = settings.max_upload_bytes
    if start is None and end is None:
        if file.size is not None and file.size > limit:
            raise _too_large(limit)
        raw = await file.read(limit + 1)
    else:
        lo = start or 0
        if lo < 0 or (end is not None and end < lo):
            raise HTTPException(status_code=422, detail="Invalid byte range")
        await file.seek(lo)
        wanted = limit + 1 if end is None else min(end - lo, limit + 1)
        raw = await file.read(wanted) if wanted > 0 else b""
        name = SEGMENT_FILE_NAME

    if len(raw) > limit:
        raise _too_large(limit)
    return raw, name


def _too_large(limit: int) -> HTTPException:
    return HTTPException(
        status_code=413,
        detail=f"Capture exceeds {limit} bytes; analyze a smaller segment",
    )


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}


@app.post("/analyze", response_model=FileAnalysisReport, responses=CAPTURE_ERRORS)
async def analyze_capture(
    file: UploadFile = File(...),
    freq_index: Optional[int] = Form(default=None),
    power_index: Optional[int] = Form(default=None),
    delimiter_mode: Optional[DelimiterMode] = Form(default=None),
    start: Optional[int] = Form(default=None),
    end: Optional[int] = Form(default=None),
    settings: Settings = Depends(get_settings),
):
    options = _parse_options(freq_index, power_index, delimiter_mode, settings)
    raw, name = await _read_capture(file, start, end, settings)
    return analyze_bytes(raw, name, options)


@app.post("/fft", response_model=FftResponse, responses=CAPTURE_ERRORS)
async def capture_fft(
    file: UploadFile = File(...),
    freq_index: Optional[int] = Form(default=None),
    power_index: Optional[int] = Form(default=None),
    delimiter_mode: Optional[DelimiterMode] = Form(default=None),
    start: Optional[int] = Form(default=None),
    end: Optional[int] = Form(default=None),
    min_freq: Optional[float] = Form(default=None),
    max_freq: Optional[float] = Form(default=None),
    min_power: Optional[float] = Form(default=None),
    max_power: Optional[float] = Form(default=None),
    settings: Settings = Depends(get_settings),
):
    options = _parse_options(freq_index, power_index, delimiter_mode, settings)
    raw, _ = await _read_capture(file, start, end, settings)
    points = extract_points(decode_capture(raw), options)
    window = filter_points(
        points,
        min_freq=min_freq,
        max_freq=max_freq,
        min_power=min_power,
        max_power=max_power,
    )
    return FftResponse(bins=[FftBin(quefrency=i, magnitude=m) for i, m in fft_magnitudes(window)])

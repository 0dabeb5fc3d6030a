from __future__ import annotations

from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _ReportModel(BaseModel):
    # Reports are built once and never mutated; JSON uses camelCase keys.
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class SpectrumDataPoint(_ReportModel):
    frequency: float = Field(description="Frequency in MHz")
    power: float = Field(description="Power in dBm")


class FrequencyStats(_ReportModel):
    min: float
    max: float


class PowerStats(_ReportModel):
    min: float
    max: float
    avg: float


class CaptureStats(_ReportModel):
    frequency: FrequencyStats
    power: PowerStats


class CaptureSamples(_ReportModel):
    first_rows: Tuple[SpectrumDataPoint, ...] = ()
    last_rows: Tuple[SpectrumDataPoint, ...] = ()
    peak_power_rows: Tuple[SpectrumDataPoint, ...] = ()


class FileAnalysisReport(_ReportModel):
    file_name: str
    row_count: int
    column_count: int
    headers: Tuple[str, ...]
    stats: CaptureStats
    samples: CaptureSamples
    point_count: int = Field(description="Rows that produced a finite frequency/power pair")
    freq_index: int
    power_index: int
    delimiter: str


class CaptureErrorResponse(BaseModel):
    kind: str
    message: str
    headers: Optional[List[str]] = None
    sample_data: Optional[List[List[str]]] = Field(default=None, alias="sampleData")


class FftBin(BaseModel):
    quefrency: int
    magnitude: float


class FftResponse(BaseModel):
    bins: List[FftBin] = Field(default_factory=list)


class HealthResponse(BaseModel):
    ok: bool = True

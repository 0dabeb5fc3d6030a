"""Service settings and logging setup.

Settings are read from the environment once per process:

- ``SPECTRUM_MAX_UPLOAD_BYTES``: largest capture the HTTP layer will parse
- ``SPECTRUM_DELIMITER_MODE``: ``adaptive`` (default) or ``simple``
- ``SPECTRUM_LOG_LEVEL``: level name for the package logger
"""

from __future__ import annotations

import logging
import os
import sys
from functools import lru_cache
from typing import Mapping, Optional

from pydantic import BaseModel, Field, ValidationError

from .options import DelimiterMode
from .rules import DEFAULT_MAX_UPLOAD_BYTES

__all__ = [
    "ConfigError",
    "Settings",
    "get_settings",
    "configure_logging",
]

PACKAGE_LOGGER = "signal_normalizer"


class ConfigError(Exception):
    pass


class Settings(BaseModel):
    max_upload_bytes: int = Field(default=DEFAULT_MAX_UPLOAD_BYTES, gt=0)
    delimiter_mode: DelimiterMode = DelimiterMode.ADAPTIVE
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        raw = {
            "max_upload_bytes": env.get("SPECTRUM_MAX_UPLOAD_BYTES"),
            "delimiter_mode": env.get("SPECTRUM_DELIMITER_MODE"),
            "log_level": env.get("SPECTRUM_LOG_LEVEL"),
        }
        try:
            settings = cls(**{k: v for k, v in raw.items() if v is not None})
        except ValidationError as e:
            raise ConfigError(f"invalid environment settings: {e}") from e
        if not isinstance(logging.getLevelName(settings.log_level.upper()), int):
            raise ConfigError(f"unknown log level: {settings.log_level}")
        return settings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()


class LabeledFormatter(logging.Formatter):
    """Formats records as ``LABEL logger: message``."""

    LEVEL_LABELS = {
        logging.DEBUG: "DEBUG",
        logging.INFO: "INFO",
        logging.WARNING: "WARN",
        logging.ERROR: "ERROR",
        logging.CRITICAL: "CRITICAL",
    }

    def format(self, record: logging.LogRecord) -> str:
        label = self.LEVEL_LABELS.get(record.levelno, record.levelname)
        message = f"{label} {record.name}: {record.getMessage()}"
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return message


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach a single stdout handler to the package logger. Safe to call repeatedly."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level.upper())

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)
    logger.propagate = False
    return logger

"""Shared types for k2000: configuration, readings, statuses and errors."""

from .config import CancelReason, MeasurementMode, SessionConfig, SessionStatus
from .errors import (
    ConfigError,
    FileError,
    K2000Error,
    PlotLaunchError,
    TransportError,
)
from .readings import (
    OVERFLOW_SENTINEL,
    OVERFLOW_TEXT,
    Numeric,
    Overflow,
    Reading,
    Sample,
    classify_reading,
)

__all__ = [
    "CancelReason",
    "ConfigError",
    "FileError",
    "K2000Error",
    "MeasurementMode",
    "Numeric",
    "OVERFLOW_SENTINEL",
    "OVERFLOW_TEXT",
    "Overflow",
    "PlotLaunchError",
    "Reading",
    "Sample",
    "SessionConfig",
    "SessionStatus",
    "TransportError",
    "classify_reading",
]

"""
Common utilities and infrastructure for the storm track viewer.

This package provides foundational components used across all modules:
- Fixed normalization bounds and error-growth constants
- Unit registry for display conversions
- Type definitions for tracks, storms and timeline state
- Logging and audit trail infrastructure
"""

from common.constants import TrackConstants, TRACK_COLORS
from common.units import ureg, Q_, convert
from common.errors import (
    StormViewerError,
    DatasetError,
    BackendInitError,
    ModelBuildError,
    TrainingError,
    WeatherFetchError,
)
from common.types import (
    TrackPoint,
    Storm,
    City,
    PredictionSet,
    ModelSelection,
    TrackSource,
    TimelineState,
    StormDataset,
)
from common.logging_config import get_logger, AuditLogger

__all__ = [
    "TrackConstants",
    "TRACK_COLORS",
    "ureg",
    "Q_",
    "convert",
    "StormViewerError",
    "DatasetError",
    "BackendInitError",
    "ModelBuildError",
    "TrainingError",
    "WeatherFetchError",
    "TrackPoint",
    "Storm",
    "City",
    "PredictionSet",
    "ModelSelection",
    "TrackSource",
    "TimelineState",
    "StormDataset",
    "get_logger",
    "AuditLogger",
]

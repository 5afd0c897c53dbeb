"""
Validation Module for the Storm Track Viewer.

This module provides track error metrics and the error chart data.
"""

from validation.metrics import (
    TrackErrorSummary,
    compute_track_error,
    forecast_hours,
    build_error_table,
    chart_labels,
    summarize_errors,
)

__all__ = [
    "TrackErrorSummary",
    "compute_track_error",
    "forecast_hours",
    "build_error_table",
    "chart_labels",
    "summarize_errors",
]

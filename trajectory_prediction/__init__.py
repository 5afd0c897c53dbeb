"""
Trajectory Prediction Module for the Storm Track Viewer.

This module generates the learned forecast and the two synthetic
comparison tracks for each storm.
"""

from trajectory_prediction.track_predictor import (
    TrackPredictor,
    PredictorConfig,
    forecast_error_scale,
)

from trajectory_prediction.comparison import (
    ComparisonProfile,
    ComparisonTracks,
    ECMWF_PROFILE,
    GFS_PROFILE,
    generate_comparison,
)

__all__ = [
    "TrackPredictor",
    "PredictorConfig",
    "forecast_error_scale",
    "ComparisonProfile",
    "ComparisonTracks",
    "ECMWF_PROFILE",
    "GFS_PROFILE",
    "generate_comparison",
]

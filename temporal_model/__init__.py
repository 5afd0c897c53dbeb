"""
Temporal Model Module for the Storm Track Viewer.

This module provides the next-point regression backend.
"""

from temporal_model.lstm import (
    RegressorConfig,
    EpochResult,
    SequenceRegressor,
    TrackLSTM,
    TorchSequenceRegressor,
    select_device,
)

__all__ = [
    "RegressorConfig",
    "EpochResult",
    "SequenceRegressor",
    "TrackLSTM",
    "TorchSequenceRegressor",
    "select_device",
]

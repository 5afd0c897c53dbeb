"""
Preprocessing Module for the Storm Track Viewer.

This module provides the fixed-bound, reversible normalization between
track points and regressor features.
"""

from preprocessing.normalization import (
    TrackNormalizer,
    AffineScaler,
    ReversibleTransform,
    NormalizationParams,
)

__all__ = [
    "TrackNormalizer",
    "AffineScaler",
    "ReversibleTransform",
    "NormalizationParams",
]

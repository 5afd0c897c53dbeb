"""
Fixed-Bound Normalization for Track Points.

This module maps track points to the 4-feature vectors consumed by the
regressor and back again. The scales are fixed constants rather than
statistics fitted to the dataset, so the mapping does not shift when a
new storm is added and forecasts stay bounded for out-of-distribution
inputs.

Design Principles
-----------------
1. All transformations are reversible (before clamping)
2. Normalized features are roughly in [0, 1] for real tropical cyclones
3. Denormalization clamps intensity into physical bounds
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Sequence

import numpy as np
from numpy.typing import NDArray

from common.constants import TrackConstants
from common.logging_config import AuditLogger, get_logger
from common.types import TrackPoint

logger = get_logger(__name__)


@dataclass
class NormalizationParams:
    """Parameters of one reversible feature transform.

    Attributes
    ----------
    method : str
        Normalization method used.
    offset : float
        Value added before scaling.
    scale : float
        Divisor applied after the offset.
    unit : str
        Physical unit of the original data.
    """
    method: str
    offset: float = 0.0
    scale: float = 1.0
    unit: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            'method': self.method,
            'offset': float(self.offset),
            'scale': float(self.scale),
            'unit': self.unit,
        }


class ReversibleTransform(ABC):
    """Abstract base class for reversible transforms."""

    @abstractmethod
    def forward(self, x: NDArray) -> NDArray:
        """Apply forward transform."""
        pass

    @abstractmethod
    def inverse(self, x: NDArray) -> NDArray:
        """Apply inverse transform."""
        pass

    @abstractmethod
    def get_params(self) -> NormalizationParams:
        """Get parameters for persistence."""
        pass


class AffineScaler(ReversibleTransform):
    """Affine normalization: (x + offset) / scale."""

    def __init__(self, offset: float, scale: float, unit: str = ""):
        self.offset = offset
        self.scale = scale
        self.unit = unit

        if scale <= 0:
            raise ValueError("Scale must be positive")

    def forward(self, x: NDArray) -> NDArray:
        return (x + self.offset) / self.scale

    def inverse(self, x: NDArray) -> NDArray:
        return x * self.scale - self.offset

    def get_params(self) -> NormalizationParams:
        return NormalizationParams(
            method='affine',
            offset=self.offset,
            scale=self.scale,
            unit=self.unit
        )


class TrackNormalizer:
    """Normalizer between ``TrackPoint`` and 4-feature vectors.

    The feature order is ``[latitude, longitude, wind_speed, central_pressure]``:

    - latitude / 90
    - (longitude + 180) / 360
    - wind / 200
    - (pressure - 900) / 120

    Parameters
    ----------
    audit : AuditLogger, optional
        Receives a record every time denormalization clamps a value.
    """

    def __init__(self, audit: Optional[AuditLogger] = None):
        C = TrackConstants
        self.scalers: Dict[str, ReversibleTransform] = {
            'latitude': AffineScaler(0.0, C.LATITUDE_SCALE.value, 'degree'),
            'longitude': AffineScaler(
                C.LONGITUDE_OFFSET.value, C.LONGITUDE_SCALE.value, 'degree'
            ),
            'wind_speed': AffineScaler(0.0, C.WIND_SCALE.value, 'knot'),
            'central_pressure': AffineScaler(
                -C.PRESSURE_OFFSET.value, C.PRESSURE_SCALE.value, 'hPa'
            ),
        }
        self.wind_bounds = (C.WIND_MIN.value, C.WIND_MAX.value)
        self.pressure_bounds = (C.PRESSURE_MIN.value, C.PRESSURE_MAX.value)
        self.audit = audit

    def normalize(self, point: TrackPoint) -> NDArray[np.float64]:
        """Map a track point to its normalized 4-vector."""
        return np.array([
            self.scalers['latitude'].forward(point.latitude),
            self.scalers['longitude'].forward(point.longitude),
            self.scalers['wind_speed'].forward(point.wind_speed),
            self.scalers['central_pressure'].forward(point.central_pressure),
        ], dtype=np.float64)

    def normalize_track(self, points: Sequence[TrackPoint]) -> NDArray[np.float64]:
        """Map a sequence of points to an (N, 4) array."""
        if not points:
            return np.zeros((0, 4), dtype=np.float64)
        return np.stack([self.normalize(p) for p in points])

    def denormalize(
        self,
        vector: Sequence[float],
        timestamp: Optional[datetime] = None,
        context: Optional[Dict[str, Any]] = None
    ) -> TrackPoint:
        """Map a 4-vector back to a track point.

        Wind is clamped to [20, 180] kt and pressure to [880, 1020] hPa;
        position is not clamped.

        Parameters
        ----------
        vector : sequence of float
            Normalized ``[lat, lon, wind, pressure]``.
        timestamp : datetime, optional
            Valid time to attach.
        context : dict, optional
            Extra audit context for clamp records.

        Returns
        -------
        TrackPoint
            Denormalized point.
        """
        v = np.asarray(vector, dtype=np.float64).reshape(-1)
        if v.shape[0] != 4:
            raise ValueError(f"Expected a 4-vector, got shape {np.shape(vector)}")

        latitude = float(self.scalers['latitude'].inverse(v[0]))
        longitude = float(self.scalers['longitude'].inverse(v[1]))
        raw_wind = float(self.scalers['wind_speed'].inverse(v[2]))
        raw_pressure = float(self.scalers['central_pressure'].inverse(v[3]))

        wind = self._clamp('wind_speed', raw_wind, self.wind_bounds, context)
        pressure = self._clamp('central_pressure', raw_pressure, self.pressure_bounds, context)

        return TrackPoint(
            longitude=longitude,
            latitude=latitude,
            wind_speed=wind,
            central_pressure=pressure,
            timestamp=timestamp,
        )

    def _clamp(
        self,
        name: str,
        value: float,
        bounds: tuple,
        context: Optional[Dict[str, Any]]
    ) -> float:
        lo, hi = bounds
        clamped = min(max(value, lo), hi)
        if clamped != value and self.audit is not None:
            self.audit.record_clamp(
                field_name=name,
                original=value,
                clamped=clamped,
                context=context
            )
        return clamped

    def get_params(self) -> Dict[str, Dict[str, Any]]:
        """Parameters of every feature transform, keyed by feature name."""
        return {name: s.get_params().to_dict() for name, s in self.scalers.items()}

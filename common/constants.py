"""
Fixed Constants for Storm Track Forecasting.

This module collects the numeric constants shared by the predictor, the
comparison generators and the scene. None of them are derived from the
loaded dataset: normalization bounds in particular are fixed so that
forecasts stay bounded even for storms unlike anything seen in training.

Conventions
-----------
- Positions are in DEGREES (latitude positive north, longitude positive east).
- Wind speed is in KNOTS.
- Central pressure is in HECTOPASCALS.
- Track index ``i`` corresponds to ``i * 12`` hours after the first fix.
"""

from dataclasses import dataclass
from typing import Final


@dataclass(frozen=True)
class Constant:
    """A named model constant with its unit.

    Attributes
    ----------
    value : float
        The nominal value.
    unit : str
        Unit of the value ("" for dimensionless).
    description : str
        Human-readable description.
    """
    value: float
    unit: str
    description: str


class TrackConstants:
    """Registry of constants used throughout the forecasting pipeline.

    Normalization
    -------------
    Every track point is mapped to a 4-vector
    ``[lat/90, (lon+180)/360, wind/200, (pressure-900)/120]``.

    Physical Bounds
    ---------------
    Denormalized forecasts are clamped into the wind and pressure ranges
    below before they are handed to any consumer.
    """

    # =========================================================================
    # Normalization scales
    # =========================================================================

    LATITUDE_SCALE: Final[Constant] = Constant(
        value=90.0,
        unit="degree",
        description="Latitude divisor for normalization"
    )

    LONGITUDE_OFFSET: Final[Constant] = Constant(
        value=180.0,
        unit="degree",
        description="Offset added to longitude before scaling"
    )

    LONGITUDE_SCALE: Final[Constant] = Constant(
        value=360.0,
        unit="degree",
        description="Longitude divisor for normalization"
    )

    WIND_SCALE: Final[Constant] = Constant(
        value=200.0,
        unit="knot",
        description="Wind speed divisor for normalization"
    )

    PRESSURE_OFFSET: Final[Constant] = Constant(
        value=900.0,
        unit="hPa",
        description="Offset subtracted from central pressure"
    )

    PRESSURE_SCALE: Final[Constant] = Constant(
        value=120.0,
        unit="hPa",
        description="Central pressure divisor for normalization"
    )

    # =========================================================================
    # Physical clamps applied on denormalization
    # =========================================================================

    WIND_MIN: Final[Constant] = Constant(
        value=20.0,
        unit="knot",
        description="Lowest wind speed a forecast may report"
    )

    WIND_MAX: Final[Constant] = Constant(
        value=180.0,
        unit="knot",
        description="Highest wind speed a forecast may report"
    )

    PRESSURE_MIN: Final[Constant] = Constant(
        value=880.0,
        unit="hPa",
        description="Lowest central pressure a forecast may report"
    )

    PRESSURE_MAX: Final[Constant] = Constant(
        value=1020.0,
        unit="hPa",
        description="Highest central pressure a forecast may report"
    )

    # =========================================================================
    # Track timing
    # =========================================================================

    HOURS_PER_INDEX: Final[Constant] = Constant(
        value=12.0,
        unit="hour",
        description="Forecast hours represented by one track index"
    )

    # =========================================================================
    # Synthetic error growth
    # =========================================================================

    AI_ERROR_GROWTH: Final[Constant] = Constant(
        value=0.15,
        unit="degree",
        description="Error scale coefficient for the autoregressive forecast"
    )

    ECMWF_ERROR_GROWTH: Final[Constant] = Constant(
        value=0.4,
        unit="degree",
        description="Error scale coefficient for the ECMWF stand-in"
    )

    GFS_ERROR_GROWTH: Final[Constant] = Constant(
        value=0.7,
        unit="degree",
        description="Error scale coefficient for the GFS stand-in"
    )


# Number of points the regressor consumes as context
CONTEXT_LENGTH: Final[int] = 5

# Feature order of a normalized vector
FEATURE_NAMES: Final[tuple] = ("latitude", "longitude", "wind_speed", "central_pressure")

# Fixed per-source track colours; themes never change these
TRACK_COLORS: Final[dict] = {
    "ai": "#4285f4",
    "ecmwf": "#34a853",
    "gfs": "#fbbc04",
    "actual": "#ea4335",
}

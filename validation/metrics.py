"""
Verification Metrics for Storm Track Forecasts.

This module compares each forecast sequence with the ground-truth track at
the same index and provides the data behind the error chart.

Metrics
-------
- Track Error: geodesic distance between forecast and observed position
- Error table: track error per forecast hour for every forecast source
- Summary: mean, maximum and final track error per source
"""

from dataclasses import dataclass
from typing import Dict, Sequence

import numpy as np
from numpy.typing import NDArray
import xarray as xr

from common.constants import TrackConstants
from common.logging_config import get_logger
from common.types import FORECAST_SOURCES, Storm, TrackPoint
from geospatial.distance_calculations import geodesic_distance_batch_km

logger = get_logger(__name__)


@dataclass
class TrackErrorSummary:
    """Track error statistics for one forecast source.

    Attributes
    ----------
    mean_error_km : float
        Mean track error in km.
    max_error_km : float
        Maximum track error in km.
    final_error_km : float
        Track error at the last index in km.
    """
    mean_error_km: float
    max_error_km: float
    final_error_km: float


def compute_track_error(
    forecast: Sequence[TrackPoint],
    observed: Sequence[TrackPoint]
) -> NDArray[np.float64]:
    """Compute track error between forecast and observed positions.

    Index ``i`` of the forecast is compared with index ``i`` of the
    observation. Where the forecast is shorter, the observed point stands
    in for the missing forecast point (zero error).

    Parameters
    ----------
    forecast : sequence of TrackPoint
        Forecast sequence.
    observed : sequence of TrackPoint
        Ground-truth track.

    Returns
    -------
    ndarray
        Track errors in km, one per observed point.
    """
    matched = [
        forecast[i] if i < len(forecast) else obs
        for i, obs in enumerate(observed)
    ]

    return geodesic_distance_batch_km(
        [p.latitude for p in observed],
        [p.longitude for p in observed],
        [p.latitude for p in matched],
        [p.longitude for p in matched],
    )


def forecast_hours(length: int) -> NDArray[np.int64]:
    """Forecast hour of each index (12 hours per index)."""
    return np.arange(length, dtype=np.int64) * int(TrackConstants.HOURS_PER_INDEX.value)


def build_error_table(storm: Storm) -> xr.Dataset:
    """Assemble the error chart data for one storm.

    Returns
    -------
    xr.Dataset
        Variables ``ai``, ``ecmwf`` and ``gfs`` (km) over the
        ``forecast_hour`` coordinate.
    """
    hours = forecast_hours(len(storm.track))

    data_vars = {}
    for source in FORECAST_SOURCES:
        errors = compute_track_error(storm.points_for(source), storm.track)
        data_vars[source.value] = xr.DataArray(
            errors,
            dims=("forecast_hour",),
            attrs={"units": "km", "long_name": f"{source.value} track error"}
        )

    ds = xr.Dataset(
        data_vars,
        coords={"forecast_hour": ("forecast_hour", hours, {"units": "hour"})},
        attrs={"storm_id": storm.id, "storm_name": storm.name}
    )
    return ds


def chart_labels(table: xr.Dataset) -> list:
    """X-axis labels (``"0h"``, ``"12h"``, ...) for an error table."""
    return [f"{int(h)}h" for h in table["forecast_hour"].values]


def summarize_errors(table: xr.Dataset) -> Dict[str, TrackErrorSummary]:
    """Per-source error statistics from an error table."""
    summary = {}
    for name in table.data_vars:
        values = table[name].values
        if values.size == 0:
            summary[name] = TrackErrorSummary(0.0, 0.0, 0.0)
            continue
        summary[name] = TrackErrorSummary(
            mean_error_km=float(np.mean(values)),
            max_error_km=float(np.max(values)),
            final_error_km=float(values[-1]),
        )
    return summary

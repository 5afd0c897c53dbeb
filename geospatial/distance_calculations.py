"""
Geodesic Distance Calculations on the WGS84 Ellipsoid.

Track error is the distance between a forecast position and the observed
position at the same index. It is computed here, and nowhere else, so that
the error chart and any accuracy summary agree on a single definition.

Implementation
--------------
This module wraps the `pyproj` library, which uses the GeographicLib
algorithms by Charles Karney. One degree of longitude along the equator
measures 111.32 km on WGS84.

References
----------
- Karney, C.F.F. (2013). Algorithms for geodesics. Journal of Geodesy, 87(1), 43-55.
"""

from dataclasses import dataclass
from typing import Union

import numpy as np
from numpy.typing import NDArray

from pyproj import Geod

from common.units import convert


# Create the geodesic calculator for WGS84
_wgs84_geod = Geod(ellps='WGS84')


@dataclass
class GeodesicResult:
    """Result of a geodesic calculation.

    Attributes
    ----------
    distance_m : float
        Geodesic (shortest path) distance in meters.
    azimuth_forward_deg : float
        Forward azimuth from point 1 to point 2 in degrees, clockwise
        from north, in [0, 360).
    azimuth_back_deg : float
        Back azimuth from point 2 to point 1 in degrees, in [0, 360).
    """
    distance_m: float
    azimuth_forward_deg: float
    azimuth_back_deg: float


def geodesic_inverse(
    lat1_deg: float,
    lon1_deg: float,
    lat2_deg: float,
    lon2_deg: float
) -> GeodesicResult:
    """Solve the inverse geodesic problem.

    Parameters
    ----------
    lat1_deg, lon1_deg : float
        First point in degrees.
    lat2_deg, lon2_deg : float
        Second point in degrees.

    Returns
    -------
    GeodesicResult
        Distance in meters, forward and back azimuths in degrees.

    Examples
    --------
    >>> result = geodesic_inverse(0.0, 0.0, 0.0, 1.0)
    >>> round(result.distance_m / 1000, 2)
    111.32
    """
    az_forward, az_back, distance_m = _wgs84_geod.inv(
        lon1_deg, lat1_deg, lon2_deg, lat2_deg
    )

    return GeodesicResult(
        distance_m=float(distance_m),
        azimuth_forward_deg=float(az_forward % 360.0),
        azimuth_back_deg=float(az_back % 360.0)
    )


def geodesic_distance_km(
    lat1_deg: float,
    lon1_deg: float,
    lat2_deg: float,
    lon2_deg: float
) -> float:
    """Compute geodesic distance between two points in kilometres."""
    result = geodesic_inverse(lat1_deg, lon1_deg, lat2_deg, lon2_deg)
    return convert(result.distance_m, 'm', 'km')


def geodesic_distance_batch_km(
    lat1_deg: Union[NDArray[np.float64], list],
    lon1_deg: Union[NDArray[np.float64], list],
    lat2_deg: Union[NDArray[np.float64], list],
    lon2_deg: Union[NDArray[np.float64], list]
) -> NDArray[np.float64]:
    """Compute geodesic distances for arrays of point pairs.

    Parameters
    ----------
    lat1_deg, lon1_deg : array_like
        First points in degrees.
    lat2_deg, lon2_deg : array_like
        Second points in degrees.

    Returns
    -------
    ndarray
        Distances in kilometres, one per pair.
    """
    lat1 = np.asarray(lat1_deg, dtype=np.float64)
    lon1 = np.asarray(lon1_deg, dtype=np.float64)
    lat2 = np.asarray(lat2_deg, dtype=np.float64)
    lon2 = np.asarray(lon2_deg, dtype=np.float64)

    if lat1.size == 0:
        return np.zeros(0, dtype=np.float64)

    _, _, distances = _wgs84_geod.inv(lon1, lat1, lon2, lat2)

    return np.asarray(distances, dtype=np.float64) / 1000.0

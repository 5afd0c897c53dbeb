"""
Globe Projection for Scene Coordinates.

Tracks are drawn on a unit sphere whose north pole points along +y. This
module maps geographic coordinates onto that sphere. The scene only needs
a visual mapping, so the sphere is not an ellipsoid: geodesic measurements
belong in ``geospatial.distance_calculations``.
"""

from typing import Sequence

import numpy as np
from numpy.typing import NDArray


def lat_lon_to_globe(
    lat_deg: float,
    lon_deg: float,
    radius: float = 1.01
) -> NDArray[np.float64]:
    """Project a geographic position onto the scene sphere.

    Parameters
    ----------
    lat_deg, lon_deg : float
        Position in degrees.
    radius : float
        Sphere radius in scene units. Slightly above 1 so tracks sit on
        top of the globe surface.

    Returns
    -------
    ndarray
        Scene position ``[x, y, z]``.
    """
    phi = np.radians(90.0 - lat_deg)
    theta = np.radians(lon_deg + 180.0)

    return np.array([
        -radius * np.sin(phi) * np.cos(theta),
        radius * np.cos(phi),
        radius * np.sin(phi) * np.sin(theta),
    ], dtype=np.float64)


def project_track(
    latitudes: Sequence[float],
    longitudes: Sequence[float],
    radius: float = 1.01
) -> NDArray[np.float64]:
    """Project a sequence of positions; returns an (N, 3) array."""
    lat = np.radians(90.0 - np.asarray(latitudes, dtype=np.float64))
    lon = np.radians(np.asarray(longitudes, dtype=np.float64) + 180.0)

    return np.stack([
        -radius * np.sin(lat) * np.cos(lon),
        radius * np.cos(lat),
        radius * np.sin(lat) * np.sin(lon),
    ], axis=-1)


def catmull_rom_path(
    control_points: NDArray[np.float64],
    samples_per_point: int = 8
) -> NDArray[np.float64]:
    """Sample a smooth uniform Catmull-Rom curve through control points.

    The curve passes through every control point; end segments reuse the
    end points as phantom neighbours.

    Parameters
    ----------
    control_points : ndarray
        Points of shape (N, 3) with N >= 2.
    samples_per_point : int
        Curve samples per control point.

    Returns
    -------
    ndarray
        Sampled path of shape (N * samples_per_point + 1, 3).
    """
    pts = np.asarray(control_points, dtype=np.float64)
    if pts.ndim != 2 or len(pts) < 2:
        raise ValueError("A path needs at least two control points")

    padded = np.vstack([pts[:1], pts, pts[-1:]])
    num_segments = len(pts) - 1
    total_samples = len(pts) * samples_per_point

    # Global parameter in [0, num_segments]
    u = np.linspace(0.0, num_segments, total_samples + 1)
    seg = np.minimum(np.floor(u).astype(int), num_segments - 1)
    t = (u - seg)[:, None]

    p0 = padded[seg]
    p1 = padded[seg + 1]
    p2 = padded[seg + 2]
    p3 = padded[seg + 3]

    t2 = t * t
    t3 = t2 * t

    return 0.5 * (
        2.0 * p1
        + (p2 - p0) * t
        + (2.0 * p0 - 5.0 * p1 + 4.0 * p2 - p3) * t2
        + (3.0 * p1 - p0 - 3.0 * p2 + p3) * t3
    )

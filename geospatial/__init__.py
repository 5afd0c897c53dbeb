"""
Geospatial Module for the Storm Track Viewer.

All Earth-surface calculations originate from this module:
- Geodesic distances on WGS84 (track error)
- Projection of positions onto the scene globe
"""

from geospatial.distance_calculations import (
    GeodesicResult,
    geodesic_inverse,
    geodesic_distance_km,
    geodesic_distance_batch_km,
)

from geospatial.projections import (
    lat_lon_to_globe,
    project_track,
    catmull_rom_path,
)

__all__ = [
    # Distance calculations
    "GeodesicResult",
    "geodesic_inverse",
    "geodesic_distance_km",
    "geodesic_distance_batch_km",
    # Projections
    "lat_lon_to_globe",
    "project_track",
    "catmull_rom_path",
]

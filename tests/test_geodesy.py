import numpy as np
import pytest

from common.units import convert
from geospatial.distance_calculations import (
    geodesic_distance_batch_km,
    geodesic_distance_km,
    geodesic_inverse,
)
from geospatial.projections import lat_lon_to_globe, project_track


def test_one_degree_of_longitude_on_the_equator():
    assert geodesic_distance_km(0.0, 0.0, 0.0, 1.0) == pytest.approx(111.32, abs=0.01)


def test_distance_is_zero_for_identical_points():
    assert geodesic_distance_km(25.8, -80.2, 25.8, -80.2) == pytest.approx(0.0, abs=1e-9)


def test_azimuth_due_east_on_the_equator():
    result = geodesic_inverse(0.0, 0.0, 0.0, 1.0)

    assert result.azimuth_forward_deg == pytest.approx(90.0)


def test_batch_matches_scalar():
    lat1, lon1 = [10.0, 20.0, 30.0], [-50.0, -60.0, -70.0]
    lat2, lon2 = [10.5, 19.0, 30.0], [-51.0, -60.0, -72.0]

    batch = geodesic_distance_batch_km(lat1, lon1, lat2, lon2)

    expected = [geodesic_distance_km(*args) for args in zip(lat1, lon1, lat2, lon2)]
    assert batch == pytest.approx(expected)


def test_batch_of_nothing():
    assert geodesic_distance_batch_km([], [], [], []).shape == (0,)


def test_unit_conversion():
    assert convert(100.0, "knot", "m/s") == pytest.approx(51.4444, rel=1e-4)
    assert convert(1500.0, "m", "km") == pytest.approx(1.5)


def test_globe_projection_poles_and_radius():
    north = lat_lon_to_globe(90.0, 0.0, radius=1.0)

    assert north == pytest.approx([0.0, 1.0, 0.0], abs=1e-12)
    assert np.linalg.norm(lat_lon_to_globe(23.0, -71.0)) == pytest.approx(1.01)


def test_project_track_matches_pointwise():
    lats, lons = [10.0, 20.0], [-40.0, 150.0]

    projected = project_track(lats, lons)

    assert projected.shape == (2, 3)
    assert np.allclose(projected[1], lat_lon_to_globe(20.0, 150.0))

import numpy as np
import pytest

from trajectory_prediction.comparison import (
    ECMWF_PROFILE,
    GFS_PROFILE,
    generate_comparison,
    perturb_track,
)

from conftest import make_track


def test_comparison_tracks_match_actual_length():
    track = make_track(13)

    tracks = generate_comparison(track, np.random.default_rng(0))

    assert len(tracks.ecmwf) == 13
    assert len(tracks.gfs) == 13


def test_first_point_is_not_perturbed():
    track = make_track(6)

    tracks = generate_comparison(track, np.random.default_rng(0))

    assert tracks.ecmwf[0] == track[0]
    assert tracks.gfs[0] == track[0]


def test_intensity_and_time_are_copied():
    track = make_track(8)

    ecmwf = perturb_track(track, ECMWF_PROFILE, np.random.default_rng(1))

    for actual, forecast in zip(track, ecmwf):
        assert forecast.wind_speed == actual.wind_speed
        assert forecast.central_pressure == actual.central_pressure
        assert forecast.timestamp == actual.timestamp


@pytest.mark.parametrize("profile", [ECMWF_PROFILE, GFS_PROFILE])
def test_perturbation_is_bounded_by_profile(profile):
    track = make_track(20)

    perturbed = perturb_track(track, profile, np.random.default_rng(5))

    for i, (actual, forecast) in enumerate(zip(track, perturbed)):
        e = profile.error_growth * np.sqrt(i)
        assert abs(forecast.latitude - actual.latitude) <= 0.5 * e * profile.lat_factor + 1e-9
        assert abs(forecast.longitude - actual.longitude) <= 0.5 * e * profile.lon_factor + 1e-9


def test_gfs_grows_faster_than_ecmwf():
    assert GFS_PROFILE.error_scale(9) == pytest.approx(2.1)
    assert ECMWF_PROFILE.error_scale(9) == pytest.approx(1.2)


def test_seeded_generation_is_reproducible():
    track = make_track(10)

    first = generate_comparison(track, np.random.default_rng(42))
    second = generate_comparison(track, np.random.default_rng(42))

    assert first == second

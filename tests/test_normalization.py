import numpy as np
import pytest

from common.logging_config import AuditLogger
from common.types import TrackPoint
from preprocessing.normalization import AffineScaler, TrackNormalizer


def test_normalize_maps_reference_point_to_midpoints():
    point = TrackPoint(longitude=0.0, latitude=45.0, wind_speed=100.0, central_pressure=960.0)

    vector = TrackNormalizer().normalize(point)

    assert vector == pytest.approx([0.5, 0.5, 0.5, 0.5])


def test_denormalize_inverts_normalize_inside_bounds():
    normalizer = TrackNormalizer()
    point = TrackPoint(longitude=-75.3, latitude=22.1, wind_speed=115.0, central_pressure=947.0)

    restored = normalizer.denormalize(normalizer.normalize(point))

    assert restored.longitude == pytest.approx(point.longitude)
    assert restored.latitude == pytest.approx(point.latitude)
    assert restored.wind_speed == pytest.approx(point.wind_speed)
    assert restored.central_pressure == pytest.approx(point.central_pressure)


def test_denormalize_clamps_intensity_and_records_it():
    audit = AuditLogger()
    normalizer = TrackNormalizer(audit=audit)
    # wind 250 kt, pressure 1080 hPa
    vector = [0.2, 0.3, 1.25, 1.5]

    with audit.run_context("clamp-test") as run:
        point = normalizer.denormalize(vector, context={"forecast_index": 7})

    assert point.wind_speed == 180.0
    assert point.central_pressure == 1020.0
    names = [c.field_name for c in run.clamps]
    assert names == ["wind_speed", "central_pressure"]
    assert run.clamps[0].original == pytest.approx(250.0)
    assert run.clamps[0].context["forecast_index"] == 7


def test_denormalize_does_not_clamp_position():
    point = TrackNormalizer().denormalize([1.2, -0.1, 0.5, 0.5])

    assert point.latitude == pytest.approx(108.0)
    assert point.longitude == pytest.approx(-216.0)


def test_denormalize_rejects_wrong_shape():
    with pytest.raises(ValueError):
        TrackNormalizer().denormalize([0.1, 0.2, 0.3])


def test_normalize_track_of_nothing_is_empty():
    assert TrackNormalizer().normalize_track([]).shape == (0, 4)


def test_affine_scaler_rejects_non_positive_scale():
    with pytest.raises(ValueError):
        AffineScaler(0.0, 0.0)


def test_affine_scaler_params():
    params = AffineScaler(-900.0, 120.0, "hPa").get_params()

    assert params.to_dict() == {"method": "affine", "offset": -900.0, "scale": 120.0, "unit": "hPa"}
    assert np.isclose(AffineScaler(-900.0, 120.0).inverse(0.5), 960.0)

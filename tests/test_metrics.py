from dataclasses import replace

import numpy as np
import pytest

from common.types import PredictionSet, Storm
from validation.metrics import (
    build_error_table,
    chart_labels,
    compute_track_error,
    summarize_errors,
)

from conftest import make_track


@pytest.fixture
def storm():
    track = tuple(make_track(6, lat0=0.0, lon0=0.0))
    ai = tuple(replace(p, longitude=p.longitude + 1.0) if p.latitude == 0.0 else p for p in track)
    return Storm(
        id="s", name="S", category="", date_range="", basin="",
        track=track,
        predictions=PredictionSet(ai=ai, ecmwf=track, gfs=track),
    )


def test_error_table_layout(storm):
    table = build_error_table(storm)

    assert list(table.data_vars) == ["ai", "ecmwf", "gfs"]
    assert list(table["forecast_hour"].values) == [0, 12, 24, 36, 48, 60]
    assert table["ai"].attrs["units"] == "km"
    assert table.attrs["storm_id"] == "s"


def test_error_table_values(storm):
    table = build_error_table(storm)

    assert table["ai"].values[0] == pytest.approx(111.32, abs=0.01)
    assert np.allclose(table["ai"].values[1:], 0.0)
    assert np.allclose(table["ecmwf"].values, 0.0)


def test_missing_forecast_points_fall_back_to_truth():
    track = make_track(5)

    errors = compute_track_error(track[:2], track)

    assert errors.shape == (5,)
    assert np.allclose(errors, 0.0)


def test_storm_without_predictions_has_zero_error():
    storm = Storm(id="n", name="N", category="", date_range="", basin="", track=tuple(make_track(4)))

    table = build_error_table(storm)

    assert all(np.allclose(table[name].values, 0.0) for name in table.data_vars)


def test_chart_labels(storm):
    assert chart_labels(build_error_table(storm)) == ["0h", "12h", "24h", "36h", "48h", "60h"]


def test_summary(storm):
    summary = summarize_errors(build_error_table(storm))

    assert summary["ai"].max_error_km == pytest.approx(111.32, abs=0.01)
    assert summary["ai"].final_error_km == pytest.approx(0.0, abs=1e-6)
    assert summary["ai"].mean_error_km == pytest.approx(111.32 / 6, abs=0.01)

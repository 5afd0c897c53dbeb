import numpy as np
import pytest

from common.errors import ModelBuildError, TrainingError
from common.types import Storm
from trajectory_prediction.track_predictor import (
    PredictorConfig,
    TrackPredictor,
    forecast_error_scale,
)

from conftest import FailingRegressor, FakeRegressor, make_track


def built_predictor(regressor=None, seed=3, **config):
    regressor = regressor or FakeRegressor()
    predictor = TrackPredictor(
        PredictorConfig(random_seed=seed, **config),
        regressor_factory=lambda _device: regressor,
    )
    predictor.build()
    return predictor


def test_training_data_has_one_window_per_point_after_the_fifth(embedded_storms):
    predictor = built_predictor()

    sequences, targets = predictor.prepare_training_data(embedded_storms)

    windows = sum(len(s.track) - 5 for s in embedded_storms)
    assert sequences.shape == (windows + 200, 5, 4)
    assert targets.shape == (windows + 200, 4)


def test_training_windows_follow_the_track(embedded_storms):
    predictor = built_predictor(synthetic_count=0)
    storm = embedded_storms[0]

    sequences, targets = predictor.prepare_training_data([storm])
    normalized = predictor.normalizer.normalize_track(storm.track)

    assert np.allclose(sequences[0], normalized[:5])
    assert np.allclose(targets[0], normalized[5])
    assert np.allclose(targets[-1], normalized[-1])


def test_synthetic_examples_drift_north_west_and_intensify():
    predictor = built_predictor()

    sequences, targets = predictor.prepare_training_data([])

    assert len(sequences) == 200
    lat = sequences[:, :, 0] * 90.0
    lon = sequences[:, :, 1] * 360.0 - 180.0
    assert np.all((lat[:, 0] >= 10.0) & (lat[:, 0] <= 35.0))
    assert np.all((lon[:, 0] >= -100.0) & (lon[:, 0] <= -30.0))
    assert np.allclose(targets[:, 0] * 90.0 - lat[:, 4], 0.8)
    assert np.allclose(targets[:, 2] * 200.0, 40.0 + 5 * 15.0)
    assert np.allclose(targets[:, 3] * 120.0 + 900.0, 1005.0 - 5 * 10.0)


@pytest.mark.parametrize("length, steps, expected", [
    (20, 20, 20),
    (20, 3, 8),
    (7, 10, 7),
    (5, 10, 5),
])
def test_predict_length(length, steps, expected):
    predictor = built_predictor()

    assert len(predictor.predict(make_track(length), steps)) == expected


def test_predict_keeps_the_seed_region():
    track = make_track(12)

    forecast = built_predictor().predict(track, 12)

    assert forecast[:5] == track[:5]
    assert forecast[5] != track[5]


def test_predict_returns_short_track_unchanged():
    track = make_track(4)

    assert built_predictor().predict(track, 10) == track


def test_predict_without_regressor_returns_track_unchanged():
    track = make_track(9)

    assert TrackPredictor().predict(track, 9) == track


def test_predict_is_reproducible_with_a_seed():
    track = make_track(15)

    first = built_predictor(seed=11).predict(track, 15)
    second = built_predictor(seed=11).predict(track, 15)

    assert first == second


def test_predict_without_noise_follows_the_regressor():
    track = make_track(10)

    forecast = built_predictor(error_growth=0.0).predict(track, 10)

    for i in range(5, 10):
        assert forecast[i].latitude == pytest.approx(forecast[i - 1].latitude + 0.45)
        assert forecast[i].longitude == pytest.approx(forecast[i - 1].longitude - 0.72)


def test_first_forecast_perturbation_is_bounded():
    track = make_track(10)

    noisy = built_predictor().predict(track, 10)
    exact = built_predictor(error_growth=0.0).predict(track, 10)

    # both start from the same seed window, so only the noise differs
    scale = forecast_error_scale(5)
    assert abs(noisy[5].latitude - exact[5].latitude) <= 0.5 * scale * 0.5
    assert abs(noisy[5].longitude - exact[5].longitude) <= 0.5 * scale


def test_error_scale_grows_with_lead_time():
    scales = [forecast_error_scale(i) for i in range(4, 30)]

    assert scales[0] == 0.0
    assert all(b >= a for a, b in zip(scales, scales[1:]))
    assert forecast_error_scale(8) == pytest.approx(0.15 * 2)


def test_predict_storm_sequences_match_track_length(embedded_storms):
    predictor = built_predictor()

    for storm in embedded_storms:
        predictions = predictor.predict_storm(storm)
        assert len(predictions.ai) == len(storm.track)
        assert len(predictions.ecmwf) == len(storm.track)
        assert len(predictions.gfs) == len(storm.track)


def test_train_reports_progress(embedded_storms):
    regressor = FakeRegressor(epochs=4)
    predictor = built_predictor(regressor)
    progress = []

    history = predictor.train(embedded_storms, lambda msg, frac: progress.append((msg, frac)))

    assert len(history) == 4
    assert [f for _, f in progress] == [0.25, 0.5, 0.75, 1.0]
    assert progress[0][0].startswith("Training: epoch 1/4")
    assert predictor.is_trained
    assert regressor.fit_shapes[0][1:] == (5, 4)


def test_train_before_build_raises():
    with pytest.raises(TrainingError):
        list(TrackPredictor().iter_train([]))


def test_training_failure_is_wrapped(embedded_storms):
    predictor = built_predictor(FailingRegressor())

    with pytest.raises(TrainingError, match="loss exploded"):
        predictor.train(embedded_storms)
    assert not predictor.is_trained


def test_build_failure_is_wrapped():
    def broken(_device):
        raise RuntimeError("out of memory")

    predictor = TrackPredictor(regressor_factory=broken)

    with pytest.raises(ModelBuildError, match="out of memory"):
        predictor.build()
    assert not predictor.is_ready


def test_dispose_releases_regressor():
    regressor = FakeRegressor()
    predictor = built_predictor(regressor)

    predictor.dispose()

    assert regressor.disposed
    assert not predictor.is_ready


def test_predict_storm_does_not_attach_predictions():
    storm = Storm(id="x", name="X", category="", date_range="", basin="", track=tuple(make_track(6)))

    built_predictor().predict_storm(storm)

    assert storm.predictions is None

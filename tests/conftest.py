from typing import Iterator, List, Optional

import numpy as np
import pytest

from common.types import TrackPoint
from data_ingestion.loaders import load_embedded_dataset
from temporal_model.lstm import EpochResult, SequenceRegressor

# Normalized drift per step: +0.45 deg lat, -0.72 deg lon
DRIFT = np.array([0.005, -0.002, 0.0, 0.0])


class FakeRegressor(SequenceRegressor):
    """Deterministic regressor: extends the last point by a fixed drift."""

    def __init__(self, epochs: int = 3):
        self.epochs = epochs
        self.fit_shapes = None
        self.disposed = False

    def fit(self, sequences, targets) -> Iterator[EpochResult]:
        self.fit_shapes = (np.shape(sequences), np.shape(targets))
        for epoch in range(self.epochs):
            yield EpochResult(epoch=epoch, epochs=self.epochs, loss=1.0 / (epoch + 1))

    def predict_next(self, window):
        return np.asarray(window)[-1] + DRIFT

    def dispose(self) -> None:
        self.disposed = True


class FailingRegressor(FakeRegressor):
    def fit(self, sequences, targets):
        yield EpochResult(epoch=0, epochs=self.epochs, loss=1.0)
        raise RuntimeError("loss exploded")


def make_track(length: int, lat0: float = 15.0, lon0: float = -50.0) -> List[TrackPoint]:
    return [
        TrackPoint(
            longitude=lon0 - 1.0 * i,
            latitude=lat0 + 0.5 * i,
            wind_speed=60.0 + 5.0 * i,
            central_pressure=1000.0 - 4.0 * i,
        )
        for i in range(length)
    ]


@pytest.fixture
def fake_regressor():
    return FakeRegressor()


@pytest.fixture
def fake_factory(fake_regressor):
    def factory(_device: Optional[object]):
        return fake_regressor
    return factory


@pytest.fixture
def embedded_storms():
    return load_embedded_dataset().storms

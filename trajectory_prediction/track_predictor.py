"""
Track Predictor for Storm Trajectory Forecasting.

This module turns a historical track into a same-length forecast sequence
using a next-point regressor applied autoregressively.

Training Data
-------------
Every window of six consecutive fixes in every storm yields one example:
five normalized points as input, the sixth as target (stride 1). Storms
shorter than six fixes contribute nothing. A fixed number of synthetic
straight-line storms is appended so the regressor learns smooth motion
even when the real dataset holds only a handful of storms.

Forecast
--------
The first five forecast points are the observed fixes. Each later point
is estimated from the five previously *produced* points, so errors
compound. A uniform perturbation whose scale grows with ``sqrt(i - 4)``
is then added to the position, widening the forecast cone with lead time.
"""

from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

import torch

from common.constants import CONTEXT_LENGTH, TrackConstants
from common.errors import ModelBuildError, TrainingError
from common.logging_config import AuditLogger, get_logger
from common.types import PredictionSet, Storm, TrackPoint
from preprocessing.normalization import TrackNormalizer
from temporal_model.lstm import (
    EpochResult,
    RegressorConfig,
    SequenceRegressor,
    TorchSequenceRegressor,
)
from trajectory_prediction.comparison import ComparisonTracks, generate_comparison

logger = get_logger(__name__)

RegressorFactory = Callable[[Optional[torch.device]], SequenceRegressor]
ProgressCallback = Callable[[str, float], None]


@dataclass
class PredictorConfig:
    """Configuration for the track predictor.

    Attributes
    ----------
    context_length : int
        Points of context per regressor call.
    synthetic_count : int
        Number of synthetic straight-line examples added to training.
    synthetic_lat_range : tuple
        Range of synthetic start latitudes (degrees).
    synthetic_lon_range : tuple
        Range of synthetic start longitudes (degrees).
    synthetic_lat_step : float
        Latitude drift per step (degrees).
    synthetic_lon_step : float
        Longitude drift per step (degrees).
    synthetic_wind_start : float
        Wind at the first synthetic point (kt).
    synthetic_wind_step : float
        Wind drift per step (kt).
    synthetic_pressure_start : float
        Pressure at the first synthetic point (hPa).
    synthetic_pressure_step : float
        Pressure drift per step (hPa).
    error_growth : float
        Coefficient of ``sqrt(i - 4)`` in the forecast error scale.
    lat_error_factor : float
        Latitude perturbation relative to longitude.
    default_steps : int
        Forecast steps when the caller does not specify any.
    random_seed : int, optional
        Seed for synthetic data, forecast noise and the regressor.
    """
    context_length: int = CONTEXT_LENGTH
    synthetic_count: int = 200
    synthetic_lat_range: Tuple[float, float] = (10.0, 35.0)
    synthetic_lon_range: Tuple[float, float] = (-100.0, -30.0)
    synthetic_lat_step: float = 0.8
    synthetic_lon_step: float = -1.2
    synthetic_wind_start: float = 40.0
    synthetic_wind_step: float = 15.0
    synthetic_pressure_start: float = 1005.0
    synthetic_pressure_step: float = -10.0
    error_growth: float = TrackConstants.AI_ERROR_GROWTH.value
    lat_error_factor: float = 0.5
    default_steps: int = 10
    random_seed: Optional[int] = None


def forecast_error_scale(index: int, error_growth: float = TrackConstants.AI_ERROR_GROWTH.value) -> float:
    """Perturbation scale for forecast index ``index`` (>= 5).

    Non-decreasing in ``index``; zero inside the seed region.
    """
    return error_growth * float(np.sqrt(max(index - 4, 0)))


class TrackPredictor:
    """Autoregressive storm track predictor.

    Parameters
    ----------
    config : PredictorConfig, optional
        Predictor configuration.
    regressor_config : RegressorConfig, optional
        Configuration for the default torch regressor.
    regressor_factory : callable, optional
        Builds the regressor for a device. Defaults to the torch LSTM.
    audit : AuditLogger, optional
        Receives clamping records from denormalization.

    Examples
    --------
    >>> predictor = TrackPredictor(PredictorConfig(random_seed=7))
    >>> predictor.build()
    >>> predictor.train(storms)
    >>> forecast = predictor.predict(storms[0].track, steps=len(storms[0].track))
    """

    def __init__(
        self,
        config: Optional[PredictorConfig] = None,
        regressor_config: Optional[RegressorConfig] = None,
        regressor_factory: Optional[RegressorFactory] = None,
        audit: Optional[AuditLogger] = None
    ):
        self.config = config or PredictorConfig()
        self.regressor_config = regressor_config or RegressorConfig(
            random_seed=self.config.random_seed
        )
        self._regressor_factory = regressor_factory or self._default_factory
        self.normalizer = TrackNormalizer(audit=audit)
        self.rng = np.random.default_rng(self.config.random_seed)
        self.regressor: Optional[SequenceRegressor] = None
        self.is_trained = False
        self._logger = get_logger("TrackPredictor")

    def _default_factory(self, device: Optional[torch.device]) -> SequenceRegressor:
        return TorchSequenceRegressor(self.regressor_config, device)

    @property
    def is_ready(self) -> bool:
        return self.regressor is not None

    def build(self, device: Optional[torch.device] = None) -> None:
        """Construct the regressor.

        Raises
        ------
        ModelBuildError
            If the regressor cannot be constructed.
        """
        try:
            self.regressor = self._regressor_factory(device)
        except Exception as e:
            raise ModelBuildError(f"Failed to build regressor: {e}") from e
        self.is_trained = False

    def prepare_training_data(
        self,
        storms: Sequence[Storm]
    ) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
        """Build sliding-window and synthetic training examples.

        Parameters
        ----------
        storms : sequence of Storm
            Storms with ground-truth tracks.

        Returns
        -------
        sequences : ndarray
            Inputs of shape (N, 5, 4).
        targets : ndarray
            Targets of shape (N, 4).
        """
        n = self.config.context_length
        sequences: List[NDArray[np.float64]] = []
        targets: List[NDArray[np.float64]] = []

        for storm in storms:
            normalized = self.normalizer.normalize_track(storm.track)
            for i in range(len(normalized) - n):
                sequences.append(normalized[i:i + n])
                targets.append(normalized[i + n])

        num_real = len(sequences)

        synth_seq, synth_tgt = self._synthetic_examples()
        sequences.extend(synth_seq)
        targets.extend(synth_tgt)

        self._logger.info(
            f"Prepared {num_real} real and {len(synth_seq)} synthetic training examples"
        )

        if not sequences:
            return np.zeros((0, n, 4)), np.zeros((0, 4))
        return np.stack(sequences), np.stack(targets)

    def _synthetic_examples(self) -> Tuple[List[NDArray[np.float64]], List[NDArray[np.float64]]]:
        """Straight-line storms drifting north-west while intensifying."""
        cfg = self.config
        n = cfg.context_length
        steps = np.arange(n + 1, dtype=np.float64)

        sequences = []
        targets = []
        for _ in range(cfg.synthetic_count):
            base_lat = self.rng.uniform(*cfg.synthetic_lat_range)
            base_lon = self.rng.uniform(*cfg.synthetic_lon_range)

            points = [
                TrackPoint(
                    longitude=base_lon + s * cfg.synthetic_lon_step,
                    latitude=base_lat + s * cfg.synthetic_lat_step,
                    wind_speed=cfg.synthetic_wind_start + s * cfg.synthetic_wind_step,
                    central_pressure=cfg.synthetic_pressure_start + s * cfg.synthetic_pressure_step,
                )
                for s in steps
            ]
            normalized = self.normalizer.normalize_track(points)
            sequences.append(normalized[:n])
            targets.append(normalized[n])

        return sequences, targets

    def iter_train(self, storms: Sequence[Storm]) -> Iterator[EpochResult]:
        """Train the regressor, yielding after every epoch.

        Raises
        ------
        TrainingError
            If the regressor is missing or fitting fails.
        """
        if self.regressor is None:
            raise TrainingError("Regressor must be built before training")

        sequences, targets = self.prepare_training_data(storms)

        try:
            for result in self.regressor.fit(sequences, targets):
                self._logger.info(
                    f"Epoch {result.epoch + 1}/{result.epochs} loss={result.loss:.4f}"
                )
                yield result
        except TrainingError:
            raise
        except Exception as e:
            raise TrainingError(f"Training failed: {e}") from e

        self.is_trained = True

    def train(
        self,
        storms: Sequence[Storm],
        on_progress: Optional[ProgressCallback] = None
    ) -> List[EpochResult]:
        """Train the regressor to completion.

        Parameters
        ----------
        storms : sequence of Storm
            Training storms.
        on_progress : callable, optional
            Called as ``on_progress(message, fraction)`` after each epoch,
            with ``fraction`` in (0, 1].

        Returns
        -------
        list of EpochResult
            One result per epoch.
        """
        history = []
        for result in self.iter_train(storms):
            history.append(result)
            if on_progress is not None:
                on_progress(
                    f"Training: epoch {result.epoch + 1}/{result.epochs} (loss: {result.loss:.4f})",
                    (result.epoch + 1) / result.epochs
                )
        return history

    def predict(
        self,
        track: Sequence[TrackPoint],
        steps: Optional[int] = None
    ) -> List[TrackPoint]:
        """Forecast a track autoregressively.

        Parameters
        ----------
        track : sequence of TrackPoint
            Ground-truth track; the first five points seed the forecast and
            later points only supply timestamps.
        steps : int, optional
            Points to forecast after the seed region.

        Returns
        -------
        list of TrackPoint
            ``min(len(track), steps + 5)`` points. A track shorter than five
            points is returned unchanged.
        """
        n = self.config.context_length
        steps = self.config.default_steps if steps is None else steps

        if len(track) < n:
            return list(track)
        if self.regressor is None:
            self._logger.warning("Regressor not built; returning track unchanged")
            return list(track)

        output = list(track[:n])
        length = min(len(track), steps + n)

        for i in range(n, length):
            window = self.normalizer.normalize_track(output[i - n:i])
            estimate = self.regressor.predict_next(window)

            denorm = self.normalizer.denormalize(
                estimate,
                timestamp=track[i].timestamp,
                context={"forecast_index": i}
            )

            error_scale = forecast_error_scale(i, self.config.error_growth)
            d_lat = self.rng.uniform(-0.5, 0.5) * error_scale * self.config.lat_error_factor
            d_lon = self.rng.uniform(-0.5, 0.5) * error_scale

            output.append(TrackPoint(
                longitude=denorm.longitude + d_lon,
                latitude=denorm.latitude + d_lat,
                wind_speed=denorm.wind_speed,
                central_pressure=denorm.central_pressure,
                timestamp=denorm.timestamp,
            ))

        return output

    def generate_comparison(self, actual_track: Sequence[TrackPoint]) -> ComparisonTracks:
        """ECMWF and GFS stand-ins drawn from this predictor's random source."""
        return generate_comparison(actual_track, self.rng)

    def predict_storm(self, storm: Storm) -> PredictionSet:
        """Build the full prediction set for a storm.

        Every sequence is exactly as long as ``storm.track``.
        """
        ai = self.predict(storm.track, len(storm.track))
        comparison = self.generate_comparison(storm.track)
        return PredictionSet(
            ai=tuple(ai),
            ecmwf=comparison.ecmwf,
            gfs=comparison.gfs,
        )

    def dispose(self) -> None:
        """Release the regressor."""
        if self.regressor is not None:
            self.regressor.dispose()
        self.regressor = None
        self.is_trained = False

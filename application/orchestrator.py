"""
Startup Pipeline Orchestrator.

Runs the startup stages in a fixed order and reports progress as an async
stream of ``ProgressEvent``s:

    LoadData -> InitBackend -> BuildModel -> Train -> PredictAll
    -> InitScene -> PopulateUI -> FetchWeather -> Ready

Percentages never decrease. Training yields one event per epoch and hands
control back to the event loop between epochs so a consumer can redraw
the progress bar. A failing stage ends the stream with a single FAILED
event; dataset and weather problems are recovered inside their stages and
never reach that path.
"""

import asyncio
import math
from dataclasses import dataclass
from enum import Enum
from typing import AsyncIterator, Callable, List, Optional, Tuple

import torch

from common.logging_config import get_logger
from data_ingestion.loaders import StormDatasetLoader
from data_ingestion.weather import WeatherClient
from temporal_model.lstm import select_device
from trajectory_prediction.track_predictor import RegressorFactory, TrackPredictor
from visualization.globe import GlobeView
from visualization.rendering import InMemoryRenderBackend, RenderBackend
from visualization.scene import SceneTrackManager
from application import views
from application.state import AppState, StartupFailure

logger = get_logger(__name__)

BackendFactory = Callable[[], RenderBackend]
DeviceSelector = Callable[[str, str], torch.device]

TRAIN_START_PERCENT = 35
TRAIN_SPAN_PERCENT = 30


class Stage(Enum):
    LOAD_DATA = "load_data"
    INIT_BACKEND = "init_backend"
    BUILD_MODEL = "build_model"
    TRAIN = "train"
    PREDICT_ALL = "predict_all"
    INIT_SCENE = "init_scene"
    POPULATE_UI = "populate_ui"
    FETCH_WEATHER = "fetch_weather"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class ProgressEvent:
    """One progress report.

    Attributes
    ----------
    stage : Stage
        Stage that produced the event.
    message : str
        Human-readable status line.
    percent : int
        Overall progress in [0, 100].
    error : str, optional
        Failure detail, only set on FAILED events.
    """
    stage: Stage
    message: str
    percent: int
    error: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.stage in (Stage.READY, Stage.FAILED)


def training_percent(epoch: int, epochs: int) -> int:
    """Progress after ``epoch`` (0-based) of ``epochs``; 65 after the last."""
    return TRAIN_START_PERCENT + math.floor((epoch + 1) / epochs * TRAIN_SPAN_PERCENT)


class PipelineOrchestrator:
    """Drives application startup.

    Parameters
    ----------
    state : AppState
        State to populate. Its ``config`` supplies every component.
    loader : StormDatasetLoader, optional
        Dataset loader; built from ``state.config.dataset`` if omitted.
    weather_client : WeatherClient, optional
        Weather fetcher; built from ``state.config.weather`` if omitted.
    backend_factory : callable, optional
        Creates the render backend for the scene.
    regressor_factory : callable, optional
        Passed to ``TrackPredictor``; defaults to the torch regressor.
    device_selector : callable, optional
        ``(preferred, fallback) -> torch.device``.

    Examples
    --------
    >>> orchestrator = PipelineOrchestrator(AppState())
    >>> async for event in orchestrator.run():
    ...     print(event.percent, event.message)
    """

    def __init__(
        self,
        state: AppState,
        loader: Optional[StormDatasetLoader] = None,
        weather_client: Optional[WeatherClient] = None,
        backend_factory: Optional[BackendFactory] = None,
        regressor_factory: Optional[RegressorFactory] = None,
        device_selector: DeviceSelector = select_device
    ):
        self.state = state
        self.loader = loader or StormDatasetLoader(state.config.dataset)
        self.weather_client = weather_client or WeatherClient(state.config.weather)
        self.backend_factory = backend_factory or InMemoryRenderBackend
        self.regressor_factory = regressor_factory
        self.device_selector = device_selector
        self._device: Optional[torch.device] = None
        self._logger = get_logger("PipelineOrchestrator")

    def _event(self, stage: Stage, message: str, percent: int) -> ProgressEvent:
        return ProgressEvent(stage=stage, message=message, percent=percent)

    def _pipeline(self) -> List[Tuple[Stage, Callable[[], AsyncIterator[ProgressEvent]]]]:
        return [
            (Stage.LOAD_DATA, self._load_data),
            (Stage.INIT_BACKEND, self._init_backend),
            (Stage.BUILD_MODEL, self._build_model),
            (Stage.TRAIN, self._train),
            (Stage.PREDICT_ALL, self._predict_all),
            (Stage.INIT_SCENE, self._init_scene),
            (Stage.POPULATE_UI, self._populate_ui),
            (Stage.FETCH_WEATHER, self._fetch_weather),
            (Stage.READY, self._ready),
        ]

    async def run(self) -> AsyncIterator[ProgressEvent]:
        """Run every stage, yielding progress events.

        The stream ends after a READY or a FAILED event. Exceptions raised by
        a stage are converted into the FAILED event rather than propagated.
        """
        audit = self.state.audit
        with audit.run_context("startup", self.state.config.to_dict()):
            for stage, step in self._pipeline():
                events = step()
                while True:
                    try:
                        event = await events.__anext__()
                    except StopAsyncIteration:
                        break
                    except Exception as e:
                        failed = self._fail(stage, e)
                        audit.record_stage(failed.stage.value, failed.message, failed.percent)
                        yield failed
                        return

                    self._logger.info(f"[{event.percent:3d}%] {event.message}")
                    audit.record_stage(event.stage.value, event.message, event.percent)
                    yield event

    def _fail(self, stage: Stage, error: Exception) -> ProgressEvent:
        self._logger.error(f"Startup failed during {stage.value}: {error}")
        self.state.failure = StartupFailure(stage=stage.value, message=str(error))
        self.state.is_ready = False
        return ProgressEvent(
            stage=Stage.FAILED,
            message=f"Error: {error}",
            percent=0,
            error=str(error),
        )

    async def _load_data(self) -> AsyncIterator[ProgressEvent]:
        yield self._event(Stage.LOAD_DATA, "Loading data...", 5)
        dataset = await self.loader.load()
        self.state.storms = list(dataset.storms)
        self.state.cities = list(dataset.cities)
        self.state.dataset_source = dataset.source
        self.state.current_storm = 0
        self._logger.info(
            f"Dataset '{dataset.source}': {len(self.state.storms)} storms, "
            f"{len(self.state.cities)} cities"
        )

    async def _init_backend(self) -> AsyncIterator[ProgressEvent]:
        cfg = self.state.config.regressor
        self._device = self.device_selector(cfg.preferred_device, cfg.fallback_device)
        self.state.device = str(self._device)
        yield self._event(Stage.INIT_BACKEND, f"Torch ready ({self._device.type} backend)", 15)

    async def _build_model(self) -> AsyncIterator[ProgressEvent]:
        yield self._event(Stage.BUILD_MODEL, "Building LSTM model...", 20)
        cfg = self.state.config
        predictor = TrackPredictor(
            config=cfg.predictor,
            regressor_config=cfg.regressor,
            regressor_factory=self.regressor_factory,
            audit=self.state.audit,
        )
        predictor.build(self._device)
        self.state.predictor = predictor
        yield self._event(Stage.BUILD_MODEL, "Model architecture ready", 25)

    async def _train(self) -> AsyncIterator[ProgressEvent]:
        predictor = self.state.predictor
        yield self._event(Stage.TRAIN, "Preparing training data...", 30)
        yield self._event(Stage.TRAIN, "Training model...", TRAIN_START_PERCENT)

        for result in predictor.iter_train(self.state.storms):
            yield self._event(
                Stage.TRAIN,
                f"Training: epoch {result.epoch + 1}/{result.epochs} (loss: {result.loss:.4f})",
                training_percent(result.epoch, result.epochs),
            )
            await asyncio.sleep(0)

        yield self._event(Stage.TRAIN, "Training complete", TRAIN_START_PERCENT + TRAIN_SPAN_PERCENT)

    async def _predict_all(self) -> AsyncIterator[ProgressEvent]:
        yield self._event(Stage.PREDICT_ALL, "Generating predictions...", 70)
        predictor = self.state.predictor
        for storm in self.state.storms:
            storm.predictions = predictor.predict_storm(storm)
            await asyncio.sleep(0)

    async def _init_scene(self) -> AsyncIterator[ProgressEvent]:
        yield self._event(Stage.INIT_SCENE, "Creating 3D globe...", 80)
        cfg = self.state.config
        self.state.scene = SceneTrackManager(self.backend_factory(), cfg.scene)
        self.state.globe = GlobeView(cfg.globe)
        views.apply_theme(self.state)

    async def _populate_ui(self) -> AsyncIterator[ProgressEvent]:
        yield self._event(Stage.POPULATE_UI, "Setting up interface...", 90)
        views.populate_panels(self.state)

    async def _fetch_weather(self) -> AsyncIterator[ProgressEvent]:
        yield self._event(Stage.FETCH_WEATHER, "Fetching weather...", 95)
        if not self.state.config.weather.enabled:
            self._logger.info("Weather fetching disabled")
            return
        self.state.weather = await self.weather_client.fetch_all(self.state.cities)

    async def _ready(self) -> AsyncIterator[ProgressEvent]:
        views.update_visualization(self.state)
        self.state.is_ready = True
        yield self._event(Stage.READY, "Ready!", 100)

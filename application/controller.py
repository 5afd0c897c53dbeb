"""
Storm Viewer Controller.

The user-facing control surface. Every operation mutates ``AppState`` and
redraws synchronously before returning, so each control action is observed
as one atomic step. Controls are only available once startup has reached
Ready.
"""

import asyncio
from typing import List, Optional, Union

from common.logging_config import get_logger
from common.types import ModelSelection
from data_ingestion.weather import WeatherClient, WeatherOutcome
from visualization.themes import Theme
from visualization.timeline import TimelineController
from application import views
from application.state import AppState, ErrorChart, StormInfo, StormListItem

DISPLAY_FRAME_INTERVAL_S = 1 / 60


class StormViewerController:
    """Control surface over a started application.

    Parameters
    ----------
    state : AppState
        State populated by ``PipelineOrchestrator``.
    weather_client : WeatherClient, optional
        Used by ``refresh_weather``.
    """

    def __init__(self, state: AppState, weather_client: Optional[WeatherClient] = None):
        self.state = state
        self.timeline = TimelineController(state.timeline, state.config.timeline)
        self.weather_client = weather_client or WeatherClient(state.config.weather)
        self._stop = asyncio.Event()
        self._logger = get_logger("StormViewerController")

    def _require_ready(self) -> None:
        if not self.state.is_ready:
            raise RuntimeError("Viewer is not ready; run the startup pipeline first")

    def render(self) -> None:
        """Redraw tracks and the info panel from the current state."""
        self._require_ready()
        views.update_visualization(self.state)

    def select_storm(self, index: int) -> None:
        """Select a storm and show its full track.

        Raises
        ------
        IndexError
            If ``index`` is outside the storm list.
        """
        self._require_ready()
        if not 0 <= index < len(self.state.storms):
            raise IndexError(f"Storm index {index} out of range (0..{len(self.state.storms) - 1})")

        self.state.current_storm = index
        self.timeline.set_scrub(100)
        views.populate_panels(self.state)
        self.render()
        self._logger.info(f"Selected storm {self.state.storm.name}")

    def set_model(self, selection: Union[str, ModelSelection]) -> bool:
        """Select the forecast(s) to draw.

        Unknown tags are logged and ignored.

        Returns
        -------
        bool
            True if the selection was applied.
        """
        self._require_ready()
        if not isinstance(selection, ModelSelection):
            try:
                selection = ModelSelection.parse(selection)
            except ValueError as e:
                self._logger.warning(f"Ignoring model selection: {e}")
                return False

        self.timeline.set_model(selection)
        self.render()
        return True

    def set_scrub(self, value: float) -> int:
        self._require_ready()
        scrub = self.timeline.set_scrub(value)
        self.render()
        return scrub

    def step_back(self) -> int:
        self._require_ready()
        scrub = self.timeline.step_back()
        self.render()
        return scrub

    def step_forward(self) -> int:
        self._require_ready()
        scrub = self.timeline.step_forward()
        self.render()
        return scrub

    def toggle_play(self) -> bool:
        self._require_ready()
        return self.timeline.toggle_play()

    def on_autoplay_tick(self) -> bool:
        """Advance playback by one tick if playing.

        Returns
        -------
        bool
            True if the timeline advanced.
        """
        if not self.state.timeline.is_playing:
            return False
        self.timeline.tick()
        self.render()
        return True

    def toggle_theme(self) -> Theme:
        """Switch between dark and light; track colours are unaffected."""
        self._require_ready()
        self.state.theme = self.state.theme.toggled()
        views.apply_theme(self.state)
        self._logger.info(f"Theme set to {self.state.theme.value}")
        return self.state.theme

    def storm_list(self) -> List[StormListItem]:
        return list(self.state.storm_list)

    def storm_info(self) -> Optional[StormInfo]:
        return self.state.storm_info

    def error_chart(self) -> Optional[ErrorChart]:
        return self.state.error_chart

    async def refresh_weather(self) -> List[WeatherOutcome]:
        """Re-fetch the weather cards."""
        self._require_ready()
        self.state.weather = await self.weather_client.fetch_all(self.state.cities)
        return self.state.weather

    def on_frame(self) -> bool:
        globe = self.state.globe
        return globe.frame() if globe is not None else False

    def pointer_down(self, x: float, y: float) -> None:
        self.state.globe.pointer_down(x, y)

    def pointer_move(self, x: float, y: float) -> None:
        self.state.globe.pointer_move(x, y)

    def pointer_up(self) -> None:
        self.state.globe.pointer_up()

    def wheel(self, delta_y: float) -> float:
        return self.state.globe.wheel(delta_y)

    async def run_autoplay(self) -> None:
        """Tick the timeline at the configured interval until ``stop()``."""
        interval = self.state.config.timeline.autoplay_interval_s
        while not await self._sleep(interval):
            self.on_autoplay_tick()

    async def run_frames(self, interval_s: float = DISPLAY_FRAME_INTERVAL_S) -> None:
        """Advance the globe's idle rotation once per frame until ``stop()``."""
        while not await self._sleep(interval_s):
            self.on_frame()

    async def _sleep(self, seconds: float) -> bool:
        """Wait one interval; True if ``stop()`` was called meanwhile."""
        try:
            await asyncio.wait_for(self._stop.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            return False
        return True

    def stop(self) -> None:
        """End the autoplay and frame loops and release the drawn scene."""
        self._stop.set()
        if self.state.scene is not None:
            self.state.scene.clear()
        self._logger.info("Viewer stopped")

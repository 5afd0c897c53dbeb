"""
Timeline Controller.

The timeline is a 0-100 scrub position that selects how much of a track is
visible. The controller only mutates ``TimelineState``; redrawing after a
change is the caller's job, which keeps every operation here a plain state
transition.
"""

import math
from dataclasses import dataclass
from typing import Optional

from common.logging_config import get_logger
from common.types import ModelSelection, TimelineState

logger = get_logger(__name__)

SCRUB_MIN = 0
SCRUB_MAX = 100


@dataclass
class TimelineConfig:
    """Configuration for timeline stepping and autoplay.

    Attributes
    ----------
    step_delta : int
        Scrub change for manual back/forward steps.
    tick_delta : int
        Scrub change per autoplay tick.
    autoplay_interval_s : float
        Seconds between autoplay ticks.
    """
    step_delta: int = 5
    tick_delta: int = 2
    autoplay_interval_s: float = 0.2


def clamp_scrub(value: float) -> int:
    """Clamp a scrub value into [0, 100] as an integer."""
    return int(min(max(int(value), SCRUB_MIN), SCRUB_MAX))


def index_for(scrub_percent: float, track_length: int) -> int:
    """Map a scrub position to a track index.

    ``floor(scrub_percent / 100 * (track_length - 1))``, clamped into
    ``[0, track_length - 1]``.

    Parameters
    ----------
    scrub_percent : float
        Scrub position in [0, 100].
    track_length : int
        Number of points in the track (>= 1).

    Returns
    -------
    int
        The last visible track index.

    Examples
    --------
    >>> index_for(50, 19)
    9
    """
    if track_length < 1:
        raise ValueError(f"Track length must be positive, got {track_length}")
    idx = math.floor(scrub_percent * (track_length - 1) / 100)
    return min(max(idx, 0), track_length - 1)


class TimelineController:
    """State transitions on a shared ``TimelineState``.

    Parameters
    ----------
    state : TimelineState
        The state object to mutate (owned by the application state).
    config : TimelineConfig, optional
        Step sizes.
    """

    def __init__(self, state: TimelineState, config: Optional[TimelineConfig] = None):
        self.state = state
        self.config = config or TimelineConfig()

    @property
    def scrub_percent(self) -> int:
        return self.state.scrub_percent

    @property
    def is_playing(self) -> bool:
        return self.state.is_playing

    def set_scrub(self, value: float) -> int:
        self.state.scrub_percent = clamp_scrub(value)
        return self.state.scrub_percent

    def set_model(self, selection: ModelSelection) -> None:
        if not isinstance(selection, ModelSelection):
            raise TypeError(f"Expected ModelSelection, got {type(selection).__name__}")
        self.state.selected_model = selection

    def step_back(self) -> int:
        return self.set_scrub(self.state.scrub_percent - self.config.step_delta)

    def step_forward(self) -> int:
        return self.set_scrub(self.state.scrub_percent + self.config.step_delta)

    def tick(self) -> int:
        """Advance autoplay by one tick.

        A position already at 100 wraps to 0; otherwise it advances by the
        tick delta, never beyond 100.
        """
        current = self.state.scrub_percent
        if current >= SCRUB_MAX:
            self.state.scrub_percent = SCRUB_MIN
        else:
            self.state.scrub_percent = min(current + self.config.tick_delta, SCRUB_MAX)
        return self.state.scrub_percent

    def toggle_play(self) -> bool:
        self.state.is_playing = not self.state.is_playing
        logger.debug(f"Autoplay {'started' if self.state.is_playing else 'stopped'}")
        return self.state.is_playing

    def index_for(self, track_length: int) -> int:
        """Track index for the current scrub position."""
        return index_for(self.state.scrub_percent, track_length)

"""
Globe view state: idle rotation, drag rotation and zoom.

Frame ticks rotate the globe slowly unless the user is dragging it; a drag
in progress always wins over the idle rotation.
"""

import math
from dataclasses import dataclass
from typing import Optional, Tuple

from common.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class GlobeConfig:
    """Interaction constants for the globe view.

    Attributes
    ----------
    idle_rotation_speed : float
        Yaw increment per frame while idle (radians).
    drag_sensitivity : float
        Rotation per pixel of drag (radians).
    pitch_limit : float
        Absolute limit on pitch (radians).
    camera_distance : float
        Initial camera distance from the globe centre.
    min_camera_distance, max_camera_distance : float
        Zoom limits.
    zoom_sensitivity : float
        Camera distance change per wheel delta unit.
    initial_yaw : float
        Starting yaw, facing the Atlantic.
    """
    idle_rotation_speed: float = 0.0005
    drag_sensitivity: float = 0.005
    pitch_limit: float = 1.2
    camera_distance: float = 2.8
    min_camera_distance: float = 1.5
    max_camera_distance: float = 5.0
    zoom_sensitivity: float = 0.002
    initial_yaw: float = math.pi * 0.4


class GlobeView:
    """Rotation and zoom of the globe that carries the tracks."""

    def __init__(self, config: Optional[GlobeConfig] = None):
        self.config = config or GlobeConfig()
        self.yaw = self.config.initial_yaw
        self.pitch = 0.0
        self.camera_distance = self.config.camera_distance
        self.is_dragging = False
        self._last_pointer: Tuple[float, float] = (0.0, 0.0)

    def frame(self) -> bool:
        """Advance idle rotation by one display frame.

        Returns
        -------
        bool
            False if skipped because a drag is in progress.
        """
        if self.is_dragging:
            return False
        self.yaw += self.config.idle_rotation_speed
        return True

    def pointer_down(self, x: float, y: float) -> None:
        self.is_dragging = True
        self._last_pointer = (x, y)

    def pointer_move(self, x: float, y: float) -> None:
        if not self.is_dragging:
            return
        dx = x - self._last_pointer[0]
        dy = y - self._last_pointer[1]
        s = self.config.drag_sensitivity
        limit = self.config.pitch_limit

        self.yaw += dx * s
        self.pitch = max(-limit, min(limit, self.pitch + dy * s))
        self._last_pointer = (x, y)

    def pointer_up(self) -> None:
        self.is_dragging = False

    def wheel(self, delta_y: float) -> float:
        """Zoom by a wheel delta; returns the new camera distance."""
        cfg = self.config
        self.camera_distance = max(
            cfg.min_camera_distance,
            min(cfg.max_camera_distance, self.camera_distance + delta_y * cfg.zoom_sensitivity)
        )
        return self.camera_distance

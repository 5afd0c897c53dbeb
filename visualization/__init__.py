"""
Visualization Module for the Storm Track Viewer.

This module provides the timeline, the drawn-track lifecycle, the render
backend contract, globe interaction state and theme palettes.
"""

from visualization.timeline import (
    TimelineConfig,
    TimelineController,
    index_for,
)

from visualization.rendering import (
    RenderBackend,
    InMemoryRenderBackend,
    RenderResource,
    ResourceKind,
)

from visualization.scene import (
    SceneConfig,
    SceneTrackManager,
    RenderedTrackSet,
)

from visualization.globe import GlobeConfig, GlobeView

from visualization.themes import (
    Theme,
    Palette,
    ChartStyle,
    palette_for,
    chart_style_for,
)

__all__ = [
    "TimelineConfig",
    "TimelineController",
    "index_for",
    "RenderBackend",
    "InMemoryRenderBackend",
    "RenderResource",
    "ResourceKind",
    "SceneConfig",
    "SceneTrackManager",
    "RenderedTrackSet",
    "GlobeConfig",
    "GlobeView",
    "Theme",
    "Palette",
    "ChartStyle",
    "palette_for",
    "chart_style_for",
]

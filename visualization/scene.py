"""
Scene Track Manager.

Keeps the set of drawn tracks consistent with ``(storm, max_index,
selected_model)``. Every update disposes the entire previous set before
anything new is created, so the scene can never hold a stale or duplicate
resource, at the cost of rebuilding unchanged tracks.

Drawn per source
----------------
- A smooth tube through the visible points
- A marker at the most recent visible point
- A larger translucent glow at the same position

The ground-truth track is always drawn; forecasts follow the selection.
A source with fewer than two visible points is skipped.
"""

from dataclasses import dataclass
from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from common.constants import TRACK_COLORS
from common.logging_config import get_logger
from common.types import ModelSelection, Storm, TrackPoint, TrackSource
from geospatial.projections import catmull_rom_path, project_track
from visualization.rendering import RenderBackend, RenderResource, ResourceKind

logger = get_logger(__name__)


@dataclass
class SceneConfig:
    """Geometry of drawn tracks, in scene units (globe radius 1).

    Attributes
    ----------
    track_radius : float
        Radius of the sphere tracks are projected onto.
    tube_radius : float
        Radius of the track tube.
    path_opacity : float
        Opacity of the track tube.
    samples_per_point : int
        Curve samples per visible point.
    marker_radius : float
        Radius of the current-position marker.
    glow_radius : float
        Radius of the glow around the marker.
    glow_opacity : float
        Opacity of the glow.
    """
    track_radius: float = 1.01
    tube_radius: float = 0.008
    path_opacity: float = 0.9
    samples_per_point: int = 8
    marker_radius: float = 0.025
    glow_radius: float = 0.035
    glow_opacity: float = 0.4


class RenderedTrackSet:
    """Resources drawn by one update, indexed by source."""

    def __init__(self):
        self._resources: Dict[TrackSource, List[RenderResource]] = {}

    def add(self, source: TrackSource, resource: RenderResource) -> None:
        self._resources.setdefault(source, []).append(resource)

    @property
    def sources(self) -> Tuple[TrackSource, ...]:
        return tuple(self._resources)

    def resources_for(self, source: TrackSource) -> Tuple[RenderResource, ...]:
        return tuple(self._resources.get(source, ()))

    def __iter__(self) -> Iterator[RenderResource]:
        for resources in self._resources.values():
            yield from resources

    def __len__(self) -> int:
        return sum(len(r) for r in self._resources.values())


class SceneTrackManager:
    """Single owner of the drawn track resources.

    Parameters
    ----------
    backend : RenderBackend
        Backend that creates and disposes resources.
    config : SceneConfig, optional
        Track geometry.
    colors : mapping, optional
        Hex colour per source name; defaults to the fixed track colours.
    """

    def __init__(
        self,
        backend: RenderBackend,
        config: Optional[SceneConfig] = None,
        colors: Optional[Mapping[str, str]] = None
    ):
        self.backend = backend
        self.config = config or SceneConfig()
        self.colors = dict(colors or TRACK_COLORS)
        self._current = RenderedTrackSet()
        self._logger = get_logger("SceneTrackManager")

    @property
    def current(self) -> RenderedTrackSet:
        return self._current

    def update(
        self,
        storm: Storm,
        max_index: int,
        selection: ModelSelection
    ) -> RenderedTrackSet:
        """Replace the drawn set with the tracks for this selection.

        Parameters
        ----------
        storm : Storm
            Storm whose track (and predictions) to draw.
        max_index : int
            Last visible index, inclusive.
        selection : ModelSelection
            Forecast(s) to draw alongside the ground truth.

        Returns
        -------
        RenderedTrackSet
            The new current set.
        """
        self.clear()

        # Resources join the current set as they are created so a failed
        # draw leaves nothing that clear() cannot reach.
        rendered = self._current
        for source in selection.sources() + (TrackSource.ACTUAL,):
            for resource in self._draw_track(source, storm.points_for(source), max_index):
                rendered.add(source, resource)

        self._logger.debug(
            f"Drew {len(rendered)} resources for {storm.id} "
            f"(index {max_index}, {selection.value})"
        )
        return rendered

    def clear(self) -> None:
        """Dispose every drawn resource, leaving an empty set."""
        for resource in self._current:
            self.backend.dispose(resource)
        self._current = RenderedTrackSet()

    def _draw_track(
        self,
        source: TrackSource,
        points: Sequence[TrackPoint],
        max_index: int
    ) -> Iterator[RenderResource]:
        visible = points[:max_index + 1]
        if len(visible) < 2:
            return

        cfg = self.config
        color = self.colors[source.value]
        tag = source.value

        control = project_track(
            [p.latitude for p in visible],
            [p.longitude for p in visible],
            radius=cfg.track_radius
        )
        vertices = catmull_rom_path(control, cfg.samples_per_point)
        head = control[-1]

        yield self.backend.create_path(vertices, color, cfg.tube_radius, cfg.path_opacity, tag)
        yield self.backend.create_marker(head, color, cfg.marker_radius, 1.0, tag, ResourceKind.MARKER)
        yield self.backend.create_marker(
            head, color, cfg.glow_radius, cfg.glow_opacity, tag, ResourceKind.GLOW
        )

from dataclasses import replace

import numpy as np
import pytest

from common.constants import TRACK_COLORS
from common.types import ModelSelection, PredictionSet, Storm, TrackSource
from geospatial.projections import catmull_rom_path
from visualization.rendering import InMemoryRenderBackend, ResourceKind
from visualization.scene import SceneConfig, SceneTrackManager

from conftest import make_track


@pytest.fixture
def storm():
    track = tuple(make_track(10))
    shifted = tuple(replace(p, latitude=p.latitude + 0.3) for p in track)
    return Storm(
        id="test", name="Test", category="Category 3", date_range="", basin="Atlantic",
        track=track,
        predictions=PredictionSet(ai=shifted, ecmwf=shifted, gfs=shifted),
    )


@pytest.fixture
def backend():
    return InMemoryRenderBackend()


def test_each_drawn_source_has_path_marker_and_glow(storm, backend):
    scene = SceneTrackManager(backend)

    rendered = scene.update(storm, 9, ModelSelection.ALL)

    assert set(rendered.sources) == set(TrackSource)
    for source in TrackSource:
        kinds = [r.kind for r in rendered.resources_for(source)]
        assert kinds == [ResourceKind.PATH, ResourceKind.MARKER, ResourceKind.GLOW]
    assert len(backend.live) == 12


def test_single_model_draws_it_with_ground_truth(storm, backend):
    scene = SceneTrackManager(backend)

    rendered = scene.update(storm, 9, ModelSelection.GFS)

    assert set(rendered.sources) == {TrackSource.GFS, TrackSource.ACTUAL}
    assert len(backend.live) == 6


def test_update_disposes_previous_set(storm, backend):
    scene = SceneTrackManager(backend)

    for index in (9, 5, 7, 9):
        scene.update(storm, index, ModelSelection.ALL)

    assert len(backend.live) == 12
    assert backend.disposed_count == backend.created_count - 12
    assert {r.handle for r in scene.current} == set(backend.live)


def test_single_visible_point_draws_nothing(storm, backend):
    scene = SceneTrackManager(backend)
    scene.update(storm, 9, ModelSelection.ALL)

    rendered = scene.update(storm, 0, ModelSelection.ALL)

    assert len(rendered) == 0
    assert backend.live == {}


def test_missing_predictions_draw_only_ground_truth(storm, backend):
    storm.predictions = None
    scene = SceneTrackManager(backend)

    rendered = scene.update(storm, 9, ModelSelection.ALL)

    assert rendered.sources == (TrackSource.ACTUAL,)


def test_clear_releases_everything(storm, backend):
    scene = SceneTrackManager(backend)
    scene.update(storm, 9, ModelSelection.ALL)

    scene.clear()

    assert backend.live == {}
    assert len(scene.current) == 0


def test_geometry_and_colours(storm, backend):
    config = SceneConfig()
    scene = SceneTrackManager(backend, config)

    rendered = scene.update(storm, 4, ModelSelection.AI)

    path, marker, glow = rendered.resources_for(TrackSource.AI)
    assert path.color == TRACK_COLORS["ai"]
    assert path.radius == config.tube_radius
    assert path.opacity == config.path_opacity
    assert len(path.vertices) == 5 * config.samples_per_point + 1
    assert marker.radius == config.marker_radius
    assert glow.radius == config.glow_radius
    assert glow.opacity == config.glow_opacity
    assert np.allclose(marker.position, path.vertices[-1])
    assert np.allclose(np.linalg.norm(marker.position), config.track_radius)


def test_path_passes_through_control_points():
    control = np.array([[1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [0.0, 0.0, 1.0]])

    path = catmull_rom_path(control, samples_per_point=4)

    assert np.allclose(path[0], control[0])
    assert np.allclose(path[-1], control[-1])
    assert any(np.allclose(p, control[1]) for p in path)


def test_path_needs_two_points():
    with pytest.raises(ValueError):
        catmull_rom_path(np.zeros((1, 3)))


class FailingBackend(InMemoryRenderBackend):
    """Raises on the n-th resource creation."""

    def __init__(self, fail_on: int):
        super().__init__()
        self.fail_on = fail_on

    def _register(self, resource):
        if self.created_count + 1 == self.fail_on:
            raise RuntimeError("out of GPU memory")
        return super()._register(resource)


def test_partial_draw_is_released_by_clear(storm):
    backend = FailingBackend(fail_on=5)
    scene = SceneTrackManager(backend)

    with pytest.raises(RuntimeError, match="out of GPU memory"):
        scene.update(storm, 9, ModelSelection.ALL)

    assert len(backend.live) == 4
    assert len(scene.current) == 4

    scene.clear()

    assert backend.live == {}


def test_update_after_failed_draw_releases_partial_set(storm):
    backend = FailingBackend(fail_on=5)
    scene = SceneTrackManager(backend)
    with pytest.raises(RuntimeError):
        scene.update(storm, 9, ModelSelection.ALL)

    backend.fail_on = 0
    scene.update(storm, 9, ModelSelection.AI)

    assert len(backend.live) == 6
    assert set(backend.live) == {r.handle for r in scene.current}

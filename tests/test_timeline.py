import pytest

from common.types import ModelSelection, TimelineState
from visualization.timeline import TimelineConfig, TimelineController, clamp_scrub, index_for


def test_index_for_endpoints():
    assert index_for(0, 19) == 0
    assert index_for(100, 19) == 18
    assert index_for(50, 19) == 9


def test_index_for_single_point_track():
    assert index_for(0, 1) == 0
    assert index_for(100, 1) == 0


def test_index_for_is_monotone():
    for length in (2, 7, 20):
        indices = [index_for(s, length) for s in range(101)]
        assert all(b >= a for a, b in zip(indices, indices[1:]))
        assert all(0 <= i < length for i in indices)


def test_index_for_rejects_empty_track():
    with pytest.raises(ValueError):
        index_for(50, 0)


def test_clamp_scrub():
    assert clamp_scrub(-10) == 0
    assert clamp_scrub(140) == 100
    assert clamp_scrub(42) == 42


def test_initial_state_shows_full_track():
    timeline = TimelineController(TimelineState())

    assert timeline.scrub_percent == 100
    assert not timeline.is_playing
    assert timeline.state.selected_model is ModelSelection.AI
    assert timeline.config == TimelineConfig()


def test_steps_are_clamped():
    timeline = TimelineController(TimelineState(scrub_percent=3))

    assert timeline.step_back() == 0
    assert timeline.step_back() == 0
    timeline.set_scrub(98)
    assert timeline.step_forward() == 100


@pytest.mark.parametrize("start, expected", [
    (0, 2),
    (50, 52),
    (98, 100),
    (99, 100),
    (100, 0),
])
def test_tick(start, expected):
    timeline = TimelineController(TimelineState(scrub_percent=start))

    assert timeline.tick() == expected


def test_tick_holds_full_track_for_one_tick_before_wrapping():
    timeline = TimelineController(TimelineState(scrub_percent=96))

    positions = [timeline.tick() for _ in range(4)]

    assert positions == [98, 100, 0, 2]


def test_toggle_play():
    timeline = TimelineController(TimelineState())

    assert timeline.toggle_play()
    assert not timeline.toggle_play()


def test_set_model_requires_selection():
    timeline = TimelineController(TimelineState())

    timeline.set_model(ModelSelection.ALL)
    assert timeline.state.selected_model is ModelSelection.ALL

    with pytest.raises(TypeError):
        timeline.set_model("gfs")


def test_model_selection_parse():
    assert ModelSelection.parse("ECMWF") is ModelSelection.ECMWF
    with pytest.raises(ValueError):
        ModelSelection.parse("ukmo")

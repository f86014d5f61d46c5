"""Tests for ViewportController zoom bounds and the one-time recenter."""
import pytest

from mapfeed.models.dto import AnimationMode
from mapfeed.services.viewport import ViewportController


@pytest.fixture
def directives():
    return []


@pytest.fixture
def viewport(directives):
    vp = ViewportController(min_zoom=0, max_zoom=9, zoom_step=0.5, zoom=5)
    vp.changed.connect(directives.append)
    return vp


class TestZoom:
    def test_zoom_in_steps_then_stops_at_max(self, viewport, directives):
        for _ in range(5):
            assert viewport.zoom_in()
        assert viewport.zoom == 7.5

        results = [viewport.zoom_in() for _ in range(9)]

        assert viewport.zoom == 9
        assert results == [True, True, True] + [False] * 6
        # One directive per effective step, none once at the bound
        assert len(directives) == 8
        assert directives[-1].zoom == 9

    def test_zoom_in_at_max_publishes_nothing(self, directives):
        vp = ViewportController(min_zoom=0, max_zoom=9, zoom_step=0.5, zoom=9)
        vp.changed.connect(directives.append)
        before = vp.camera
        assert vp.zoom_in() is False
        assert vp.zoom == 9
        assert vp.camera is before
        assert directives == []
        assert not vp.can_zoom_in

    def test_zoom_out_at_min_publishes_nothing(self, directives):
        vp = ViewportController(min_zoom=0, max_zoom=9, zoom_step=0.5, zoom=0)
        vp.changed.connect(directives.append)
        assert vp.zoom_out() is False
        assert vp.zoom == 0
        assert directives == []
        assert not vp.can_zoom_out
        # Zoom-out bound does not block zooming in
        assert vp.can_zoom_in

    def test_zoom_out_steps_down(self, viewport):
        assert viewport.zoom_out()
        assert viewport.zoom == 4.5

    def test_partial_step_is_clamped_to_bound(self):
        vp = ViewportController(min_zoom=0, max_zoom=9, zoom_step=0.5, zoom=8.8)
        assert vp.zoom_in()
        assert vp.zoom == 9
        assert vp.zoom_in() is False

    def test_zoom_directive_keeps_center_and_eases(self, viewport):
        viewport.on_first_data((100.5, 13.75))
        viewport.zoom_in()
        camera = viewport.camera
        assert camera.center == (100.5, 13.75)
        assert camera.zoom == 5.5
        assert camera.animation.mode == AnimationMode.EASE
        assert camera.animation.duration_ms == viewport.zoom_duration_ms

    def test_invalid_bounds(self):
        with pytest.raises(ValueError):
            ViewportController(min_zoom=5, max_zoom=2)
        with pytest.raises(ValueError):
            ViewportController(zoom_step=0)
        with pytest.raises(ValueError):
            ViewportController(zoom_duration_ms=500, recenter_duration_ms=500)


class TestRecenter:
    def test_initial_directive_is_not_animated(self):
        vp = ViewportController()
        assert vp.camera.center == (0.0, 0.0)
        assert vp.camera.zoom == 4.0
        assert vp.camera.animation.mode == AnimationMode.NONE

    def test_only_first_call_has_effect(self, viewport, directives):
        assert viewport.on_first_data((10.0, 20.0)) is True
        assert viewport.on_first_data((30.0, 40.0)) is False
        assert viewport.camera.center == (10.0, 20.0)
        assert len(directives) == 1

    def test_recenter_is_slower_than_zoom(self, viewport):
        viewport.on_first_data((1.0, 2.0))
        assert viewport.camera.animation.mode == AnimationMode.EASE
        assert viewport.camera.animation.duration_ms > viewport.zoom_duration_ms
        assert viewport.camera.zoom == 5

    def test_zoom_after_recenter_wins(self, viewport):
        viewport.on_first_data((1.0, 2.0))
        viewport.zoom_out()
        assert viewport.camera.zoom == 4.5
        assert viewport.camera.center == (1.0, 2.0)
        assert viewport.camera.animation.duration_ms == viewport.zoom_duration_ms

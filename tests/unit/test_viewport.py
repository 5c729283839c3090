"""
Viewport interaction unit tests

Run: pytest tests/unit/test_viewport.py -v
"""

import pytest

from ui_mapper.vision import viewport as vp


class TestFitViewport:
    """Initial fit"""

    def test_large_raster_scaled_down(self):
        state = vp.fit_viewport((800, 600), (1600, 1200))
        assert state.zoom == pytest.approx(min(720 / 1600, 520 / 1200))
        assert state.offset == (0.0, 0.0)

    def test_small_raster_not_upscaled(self):
        state = vp.fit_viewport((1920, 1080), (320, 240))
        assert state.zoom == 1.0

    def test_tiny_container_clamped_to_min_zoom(self):
        state = vp.fit_viewport((50, 50), (4000, 4000))
        assert state.zoom == pytest.approx(0.1)

    def test_rejects_empty_raster(self):
        with pytest.raises(ValueError):
            vp.fit_viewport((800, 600), (0, 100))


class TestDrag:
    """Pointer driven panning"""

    def test_drag_moves_offset(self):
        state = vp.ViewportState(offset=(10.0, 20.0))
        state = vp.pointer_down(state, (100, 100))
        assert state.is_dragging
        state = vp.pointer_move(state, (150, 130))
        assert state.offset == (60.0, 50.0)
        state = vp.pointer_up(state)
        assert not state.is_dragging
        assert state.offset == (60.0, 50.0)

    def test_move_without_drag_is_noop(self):
        state = vp.ViewportState()
        assert vp.pointer_move(state, (40, 40)) == state

    def test_secondary_button_ignored(self):
        state = vp.pointer_down(vp.ViewportState(), (0, 0), button=2)
        assert not state.is_dragging

    def test_editing_blocks_drag(self):
        state = vp.pointer_down(vp.ViewportState(), (0, 0), editing=True)
        assert not state.is_dragging

    def test_leave_ends_drag(self):
        state = vp.pointer_down(vp.ViewportState(), (5, 5))
        state = vp.pointer_leave(state)
        assert state.mode is vp.InteractionMode.IDLE
        assert state.drag_anchor is None


class TestZoom:
    """Zoom buttons and clamping"""

    def test_zoom_in_out_steps(self):
        state = vp.zoom_in(vp.ViewportState())
        assert state.zoom == pytest.approx(1.2)
        state = vp.zoom_out(state)
        assert state.zoom == pytest.approx(0.96)

    def test_zoom_clamped_high(self):
        state = vp.ViewportState(zoom=4.9)
        assert vp.zoom_in(state).zoom == pytest.approx(5.0)

    def test_zoom_clamped_low(self):
        state = vp.ViewportState(zoom=0.11)
        assert vp.zoom_out(state).zoom == pytest.approx(0.1)

    def test_zoom_keeps_offset(self):
        state = vp.zoom(vp.ViewportState(offset=(30.0, -10.0)), 2.0)
        assert state.offset == (30.0, -10.0)

    def test_non_positive_factor_rejected(self):
        with pytest.raises(ValueError):
            vp.zoom(vp.ViewportState(), 0)

    def test_reset_view(self):
        state = vp.pan(vp.zoom_in(vp.ViewportState()), (40, 40))
        assert vp.reset_view(state) == vp.ViewportState()


class TestTransform:
    """Screen mapping"""

    def test_css_transform(self):
        state = vp.ViewportState(zoom=0.5, offset=(12.0, -4.5))
        assert vp.css_transform(state) == "translate(12px, -4.5px) scale(0.5)"

    def test_raster_centre_maps_to_container_centre_plus_offset(self):
        state = vp.ViewportState(zoom=0.5, offset=(10.0, 20.0))
        point = vp.content_to_screen(state, (800, 600), (1600, 1200), (800, 600))
        assert point == pytest.approx((410, 320))

    def test_offset_not_scaled_by_zoom(self):
        a = vp.content_to_screen(vp.ViewportState(zoom=2.0, offset=(10.0, 0.0)), (800, 600), (400, 300), (0, 0))
        b = vp.content_to_screen(vp.ViewportState(zoom=2.0), (800, 600), (400, 300), (0, 0))
        assert a[0] - b[0] == pytest.approx(10)

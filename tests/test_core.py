import pytest

from inpaint_mask_editor.core import (
    CropRect,
    EditorConfig,
    PointerInput,
    ViewportState,
    clamp_pan,
    compute_fit_size,
    container_relative,
    crop_fill_viewport,
    device_size,
    fit_budget,
    is_degenerate,
    normalize_rect,
    pinch_zoom,
    reset_viewport,
    round_px,
    to_image_space,
    to_screen_space,
    zoom_at,
)


def _viewport(size=(400, 400), **kwargs) -> ViewportState:
    w, h = size
    return ViewportState(container_w=w, container_h=h, display_w=w, display_h=h, **kwargs)


def test_compute_fit_size_scales_down_preserving_aspect():
    assert compute_fit_size((1000, 800), (900, 600)) == (750, 600)


def test_compute_fit_size_never_upscales():
    assert compute_fit_size((100, 50), (900, 600)) == (100, 50)


def test_compute_fit_size_rejects_empty_image():
    with pytest.raises(ValueError):
        compute_fit_size((0, 10), (900, 600))


def test_compute_fit_size_degenerate_budget():
    assert compute_fit_size((100, 50), (0, 0)) == (1, 1)


def test_fit_budget():
    assert fit_budget(1000, 800, 100) == (900, 619)


def test_fit_budget_short_window_uses_minimum_height():
    assert fit_budget(1000, 300, 100, EditorConfig()) == (900, 216)


def test_round_px_rounds_half_up():
    assert round_px(2.5) == 3
    assert round_px(0.49) == 0
    assert device_size(200.5, 100, 1.5) == (301, 150)
    assert device_size(0, 0, 2) == (1, 1)


def test_container_relative():
    assert container_relative(110, 60, 100, 50) == (10, 10)


def test_to_image_space_and_back():
    state = _viewport(zoom=2.0, offset_x=-10.0, offset_y=-20.0)
    assert to_image_space(state, 30, 40) == (20.0, 30.0)
    assert to_screen_space(state, 20, 30) == (30.0, 40.0)


def test_to_image_space_allows_out_of_bounds():
    state = _viewport()
    assert to_image_space(state, -5, 900) == (-5.0, 900.0)


def test_clamp_pan_keeps_zoomed_image_covering_container():
    state = ViewportState(
        zoom=2.0, offset_x=-500.0, offset_y=10.0, container_w=200, container_h=150, display_w=200, display_h=150
    )
    clamped = clamp_pan(state)
    assert clamped.offset_x == -200.0
    assert clamped.offset_y == 0.0


def test_clamp_pan_pins_small_image_top_left():
    state = ViewportState(
        zoom=1.0, offset_x=-30.0, offset_y=40.0, container_w=200, container_h=200, display_w=100, display_h=100
    )
    clamped = clamp_pan(state)
    assert (clamped.offset_x, clamped.offset_y) == (0.0, 0.0)


def test_zoom_stays_in_bounds():
    state = _viewport()
    for _ in range(20):
        state = zoom_at(state, 1.25, 123, 45, 1.0, 8.0)
        assert 1.0 <= state.zoom <= 8.0
    assert state.zoom == 8.0
    for _ in range(20):
        state = zoom_at(state, 0.8, 300, 10, 1.0, 8.0)
        assert 1.0 <= state.zoom <= 8.0
    assert state.zoom == 1.0


def test_zoom_at_recenters_anchor_point():
    state = zoom_at(_viewport(), 2.0, 300, 300, 1.0, 8.0)
    assert state.zoom == 2.0
    assert (state.offset_x, state.offset_y) == (-400.0, -400.0)
    assert to_image_space(state, 200, 200) == (300.0, 300.0)


def test_zoom_at_clamps_pan_after_recentering():
    state = zoom_at(_viewport(), 2.0, 10, 10, 1.0, 8.0)
    assert (state.offset_x, state.offset_y) == (0.0, 0.0)


def test_pinch_zoom():
    assert pinch_zoom(1.0, 100, 250, 1.0, 8.0) == 2.5
    assert pinch_zoom(2.0, 100, 10, 1.0, 8.0) == 1.0
    assert pinch_zoom(3.0, 0, 50, 1.0, 8.0) == 3.0


def test_reset_viewport():
    state = reset_viewport(_viewport(zoom=3.0, offset_x=-100.0, offset_y=-50.0))
    assert (state.zoom, state.offset_x, state.offset_y) == (1.0, 0.0, 0.0)


def test_normalize_rect_is_order_independent():
    pairs = [((10, 20), (50, 5)), ((-20, 30), (250, 400)), ((5, 5), (5, 5)), ((199, 0), (0, 149))]
    for a, b in pairs:
        assert normalize_rect(a, b, 200, 150) == normalize_rect(b, a, 200, 150)


def test_normalize_rect_values():
    assert normalize_rect((10, 20), (50, 5), 200, 150) == CropRect(10, 5, 40, 15)
    assert normalize_rect((-20, 30), (250, 400), 200, 150) == CropRect(0, 30, 200, 120)


def test_normalize_rect_floors_size_at_one():
    rect = normalize_rect((5, 5), (5, 5), 200, 150)
    assert (rect.w, rect.h) == (1, 1)
    assert is_degenerate(rect)
    assert not is_degenerate(CropRect(0, 0, 2, 2))


def test_crop_fill_viewport_symmetric_case():
    state = crop_fill_viewport(_viewport(), CropRect(0, 0, 100, 100), 1.0, 32.0)
    assert state.zoom == 4.0
    assert (state.offset_x, state.offset_y) == (0.0, 0.0)


def test_crop_fill_viewport_centers_rect():
    state = crop_fill_viewport(_viewport(), CropRect(100, 100, 100, 100), 1.0, 32.0)
    assert state.zoom == 4.0
    assert (state.offset_x, state.offset_y) == (-400.0, -400.0)
    assert to_image_space(state, 0, 0) == (100.0, 100.0)


def test_crop_fill_viewport_uses_auto_zoom_ceiling():
    state = crop_fill_viewport(_viewport(), CropRect(0, 0, 5, 5), 1.0, 32.0)
    assert state.zoom == 32.0


def test_crop_insets():
    assert CropRect(10, 20, 50, 40).insets(200, 150) == (20, 140, 90, 10)


def test_pointer_input_gesture_helpers():
    pointer = PointerInput(0, 0, pointer_count=2, secondary=(30, 40))
    assert pointer.is_multi
    assert pointer.spread() == 50
    assert pointer.midpoint() == (15, 20)
    assert not PointerInput(1, 2).is_multi

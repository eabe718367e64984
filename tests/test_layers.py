import pytest
from PIL import Image

from inpaint_mask_editor.core import CropRect, ViewportState
from inpaint_mask_editor.layers import (
    VIEW_BACKGROUND,
    VEIL_COLOR,
    Layer,
    LayerStack,
    crop_box,
    draw_base,
    draw_crop_marquee,
    export_size,
    paint_segment,
    render_export,
    render_view,
)

RED = (255, 0, 0, 255)
BLUE = (0, 0, 255, 255)
GREEN = (0, 255, 0, 255)
CLEAR = (0, 0, 0, 0)


def _stack(width, height, dpr=1.0, color=BLUE):
    stack = LayerStack.create(width, height, dpr)
    draw_base(stack.base, Image.new("RGB", stack.base.pixel_size, color[:3]))
    return stack


def test_layer_pixel_size_uses_device_pixel_ratio():
    layer = Layer.blank(10, 5, 2.0)
    assert layer.pixel_size == (20, 10)
    assert layer.is_empty()


def test_layer_rejects_bad_ratio():
    with pytest.raises(ValueError):
        Layer.blank(10, 10, 0)


def test_paint_segment_single_point_draws_dot():
    layer = Layer.blank(20, 20, 1.0)
    paint_segment(layer, (10, 10), (10, 10), 4, RED)
    assert layer.image.getpixel((10, 10)) == RED
    assert layer.image.getpixel((0, 0)) == CLEAR


def test_paint_segment_draws_line_in_device_pixels():
    layer = Layer.blank(20, 20, 2.0)
    paint_segment(layer, (2, 10), (18, 10), 2, RED)
    assert layer.image.getpixel((20, 20)) == RED
    assert layer.image.getpixel((20, 2)) == CLEAR


def test_draw_base_resizes_source_to_layer():
    layer = Layer.blank(10, 10, 1.0)
    draw_base(layer, Image.new("RGB", (40, 40), (0, 0, 255)))
    assert layer.pixel_size == (10, 10)
    assert layer.image.mode == "RGBA"
    assert layer.image.getpixel((5, 5)) == BLUE


def test_export_without_crop_matches_base_size():
    stack = _stack(200, 150, dpr=1.5)
    out = render_export(stack.base, stack.mask)
    assert out.size == (300, 225)
    assert export_size(stack.base, None) == (300, 225)


def test_export_with_crop_extracts_sub_rectangle():
    stack = _stack(200, 150)
    stack.base.image.putpixel((10, 10), GREEN)
    crop = CropRect(10, 10, 50, 40)
    out = render_export(stack.base, stack.mask, crop)
    assert out.size == (50, 40)
    assert export_size(stack.base, crop) == (50, 40)
    assert out.getpixel((0, 0)) == GREEN
    assert out.getpixel((1, 1)) == BLUE


def test_export_crop_scales_with_device_pixel_ratio():
    stack = _stack(200, 150, dpr=2.0)
    crop = CropRect(10, 10, 50, 40)
    assert crop_box(crop, 2.0) == (20, 20, 120, 100)
    assert render_export(stack.base, stack.mask, crop).size == (100, 80)


def test_crop_box_stays_inside_surface():
    crop = CropRect(0.5, 10, 199.5, 50)
    assert crop_box(crop, 1.0) == (1, 10, 200, 60)
    assert crop_box(CropRect(190, 140, 20, 20), 1.0, (200, 150)) == (190, 140, 200, 150)


def test_export_crop_on_fractional_edge_has_no_padding():
    stack = _stack(200, 150)
    crop = CropRect(0.5, 10, 199.5, 50)
    out = render_export(stack.base, stack.mask, crop)
    assert out.size == export_size(stack.base, crop) == (199, 50)
    assert out.getpixel((out.width - 1, 0)) == BLUE


def test_mask_paints_over_base():
    stack = _stack(20, 20)
    stack.mask.image.putpixel((5, 5), RED)
    out = render_export(stack.base, stack.mask)
    assert out.getpixel((5, 5)) == RED
    assert out.getpixel((6, 6)) == BLUE


def test_overlay_is_never_exported():
    stack = _stack(40, 40)
    draw_crop_marquee(stack.overlay, CropRect(10, 10, 10, 10))
    out = render_export(stack.base, stack.mask)
    assert out.getpixel((1, 1)) == BLUE


def test_export_rejects_mismatched_layers():
    base = Layer.blank(10, 10, 1.0)
    mask = Layer.blank(20, 20, 1.0)
    with pytest.raises(ValueError):
        render_export(base, mask)


def test_crop_marquee_veils_outside_and_marks_corners():
    layer = Layer.blank(100, 100, 1.0)
    draw_crop_marquee(layer, CropRect(20, 20, 40, 40))
    assert layer.image.getpixel((5, 5)) == VEIL_COLOR
    assert layer.image.getpixel((40, 40)) == CLEAR
    assert layer.image.getpixel((20, 20)) == (255, 255, 255, 255)
    assert layer.image.getpixel((60, 60)) == (255, 255, 255, 255)

    draw_crop_marquee(layer, None)
    assert layer.is_empty()


def test_resized_stack_resamples_mask():
    stack = _stack(10, 10)
    stack.mask.image.putpixel((2, 2), RED)
    bigger = stack.resized(20, 20, 1.0)
    assert bigger.mask.pixel_size == (20, 20)
    assert bigger.mask.image.getpixel((4, 4)) == RED
    assert bigger.mask.image.getpixel((5, 5)) == RED
    assert bigger.base.is_empty()


def test_render_view_applies_zoom():
    stack = _stack(10, 10)
    stack.base.image.putpixel((2, 2), GREEN)
    viewport = ViewportState(zoom=2.0, container_w=10, container_h=10, display_w=10, display_h=10)
    view = render_view(stack, viewport)
    assert view.size == (10, 10)
    assert view.getpixel((4, 4)) == GREEN
    assert view.getpixel((5, 5)) == GREEN
    assert view.getpixel((8, 8)) == BLUE


def test_render_view_follows_pan_offset():
    stack = _stack(10, 10)
    stack.base.image.putpixel((5, 5), GREEN)
    viewport = ViewportState(
        zoom=2.0, offset_x=-10.0, offset_y=-10.0, container_w=10, container_h=10, display_w=10, display_h=10
    )
    view = render_view(stack, viewport)
    assert view.getpixel((0, 0)) == GREEN
    assert view.getpixel((1, 1)) == GREEN
    assert view.getpixel((2, 2)) == BLUE


def test_render_view_hides_outside_crop():
    stack = _stack(10, 10)
    viewport = ViewportState(container_w=10, container_h=10, display_w=10, display_h=10)
    view = render_view(stack, viewport, CropRect(5, 5, 5, 5))
    assert view.getpixel((1, 1)) == VIEW_BACKGROUND
    assert view.getpixel((7, 7)) == BLUE

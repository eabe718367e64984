from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from PIL import Image, ImageDraw

from .core import CropRect, Point, ViewportState, device_size, round_px, to_screen_space

TRANSPARENT = (0, 0, 0, 0)
VEIL_COLOR = (0, 0, 0, 89)
MARQUEE_COLOR = (255, 255, 255, 255)
MARQUEE_DASH = (6.0, 4.0)
HANDLE_SIZE = 6.0
VIEW_BACKGROUND = (20, 17, 13, 255)


@dataclass
class Layer:
    width: float
    height: float
    dpr: float
    image: Image.Image

    @classmethod
    def blank(cls, width: float, height: float, dpr: float) -> "Layer":
        if dpr <= 0:
            raise ValueError("Device pixel ratio must be positive.")
        image = Image.new("RGBA", device_size(width, height, dpr), TRANSPARENT)
        return cls(width=width, height=height, dpr=dpr, image=image)

    @property
    def pixel_size(self) -> tuple[int, int]:
        return self.image.size

    def to_pixels(self, x: float, y: float) -> Point:
        return x * self.dpr, y * self.dpr

    def clear(self) -> None:
        self.image = Image.new("RGBA", self.image.size, TRANSPARENT)

    def is_empty(self) -> bool:
        return self.image.getbbox() is None


@dataclass
class LayerStack:
    base: Layer
    mask: Layer
    overlay: Layer

    @classmethod
    def create(cls, width: float, height: float, dpr: float) -> "LayerStack":
        return cls(
            base=Layer.blank(width, height, dpr),
            mask=Layer.blank(width, height, dpr),
            overlay=Layer.blank(width, height, dpr),
        )

    def resized(self, width: float, height: float, dpr: float) -> "LayerStack":
        """New stack of the given size; the mask is carried over, base and overlay start blank."""
        stack = LayerStack.create(width, height, dpr)
        stack.mask.image = resample_mask(self.mask.image, stack.mask.pixel_size)
        return stack


def resample_mask(image: Image.Image, size: tuple[int, int]) -> Image.Image:
    if image.size == size:
        return image.copy()
    return image.resize(size, resample=Image.NEAREST)


def draw_base(layer: Layer, source: Image.Image) -> None:
    image = source.convert("RGBA")
    if image.size != layer.pixel_size:
        image = image.resize(layer.pixel_size, resample=Image.LANCZOS)
    layer.image = image


def paint_segment(
    layer: Layer,
    start: Point,
    end: Point,
    brush_size: float,
    color: tuple[int, int, int, int],
) -> None:
    """Stroke from ``start`` to ``end`` (layout units) with round caps."""
    draw = ImageDraw.Draw(layer.image)
    width = max(1, round_px(brush_size * layer.dpr))
    x0, y0 = layer.to_pixels(*start)
    x1, y1 = layer.to_pixels(*end)
    if (x0, y0) != (x1, y1):
        draw.line([(x0, y0), (x1, y1)], fill=color, width=width)
    radius = width / 2.0
    for cx, cy in ((x0, y0), (x1, y1)):
        draw.ellipse((cx - radius, cy - radius, cx + radius, cy + radius), fill=color)


def draw_crop_marquee(layer: Layer, rect: Optional[CropRect]) -> None:
    layer.clear()
    if rect is None:
        return

    s = layer.dpr
    layer.image.paste(VEIL_COLOR, (0, 0) + layer.pixel_size)
    layer.image.paste(TRANSPARENT, crop_box(rect, s, layer.pixel_size))

    draw = ImageDraw.Draw(layer.image)
    left = (rect.x + 0.5) * s
    top = (rect.y + 0.5) * s
    right = (rect.x + rect.w - 0.5) * s
    bottom = (rect.y + rect.h - 0.5) * s
    line_w = max(1, round_px(s))
    for start, end in (
        ((left, top), (right, top)),
        ((right, top), (right, bottom)),
        ((right, bottom), (left, bottom)),
        ((left, bottom), (left, top)),
    ):
        _dashed_line(draw, start, end, MARQUEE_DASH[0] * s, MARQUEE_DASH[1] * s, line_w)

    half = HANDLE_SIZE / 2.0
    for cx, cy in (
        (rect.x, rect.y),
        (rect.x + rect.w, rect.y),
        (rect.x, rect.y + rect.h),
        (rect.x + rect.w, rect.y + rect.h),
    ):
        _fill_box(draw, (cx - half) * s, (cy - half) * s, HANDLE_SIZE * s, HANDLE_SIZE * s)


def crop_box(
    rect: CropRect,
    dpr: float,
    bounds: Optional[tuple[int, int]] = None,
) -> tuple[int, int, int, int]:
    """Device-pixel box of ``rect``, at least one pixel, kept inside ``bounds`` when given."""
    left = round_px(rect.x * dpr)
    top = round_px(rect.y * dpr)
    right = max(left + 1, round_px((rect.x + rect.w) * dpr))
    bottom = max(top + 1, round_px((rect.y + rect.h) * dpr))
    if bounds is not None:
        width, height = bounds
        left = min(max(0, left), width - 1)
        top = min(max(0, top), height - 1)
        right = min(max(left + 1, right), width)
        bottom = min(max(top + 1, bottom), height)
    return (left, top, right, bottom)


def export_size(base: Layer, crop: Optional[CropRect]) -> tuple[int, int]:
    if crop is None:
        return base.pixel_size
    left, top, right, bottom = crop_box(crop, base.dpr, base.pixel_size)
    return right - left, bottom - top


def render_export(base: Layer, mask: Layer, crop: Optional[CropRect] = None) -> Image.Image:
    if base.pixel_size != mask.pixel_size:
        raise ValueError("Base and mask layers must have the same dimensions.")
    full = Image.new("RGBA", base.pixel_size, TRANSPARENT)
    full.alpha_composite(base.image)
    full.alpha_composite(mask.image)
    if crop is None:
        return full
    return full.crop(crop_box(crop, base.dpr, base.pixel_size))


def render_view(
    stack: LayerStack,
    viewport: ViewportState,
    crop: Optional[CropRect] = None,
    background: tuple[int, int, int, int] = VIEW_BACKGROUND,
) -> Image.Image:
    """Picture of the container: all layers, clipped to the crop, zoomed and panned."""
    dpr = stack.base.dpr
    composed = Image.new("RGBA", stack.base.pixel_size, TRANSPARENT)
    for layer in (stack.base, stack.mask, stack.overlay):
        composed.alpha_composite(layer.image)

    if crop is not None:
        box = crop_box(crop, dpr, composed.size)
        clipped = Image.new("RGBA", composed.size, TRANSPARENT)
        clipped.paste(composed.crop(box), box[:2])
        composed = clipped

    out_size = (max(1, round_px(viewport.container_w)), max(1, round_px(viewport.container_h)))
    # Pillow's affine maps output pixels back to source pixels.
    origin_x, origin_y = to_screen_space(viewport, 0.0, 0.0)
    scale = dpr / viewport.zoom
    matrix = (scale, 0.0, -origin_x * scale, 0.0, scale, -origin_y * scale)
    resample = Image.NEAREST if viewport.zoom >= 2 else Image.BILINEAR
    view = composed.transform(out_size, Image.AFFINE, matrix, resample=resample, fillcolor=TRANSPARENT)

    canvas = Image.new("RGBA", out_size, background)
    canvas.alpha_composite(view)
    return canvas


def _dashed_line(
    draw: ImageDraw.ImageDraw,
    start: Point,
    end: Point,
    dash: float,
    gap: float,
    width: int,
) -> None:
    dx = end[0] - start[0]
    dy = end[1] - start[1]
    length = (dx * dx + dy * dy) ** 0.5
    if length == 0:
        return
    ux, uy = dx / length, dy / length
    pos = 0.0
    while pos < length:
        stop = min(pos + dash, length)
        draw.line(
            [(start[0] + ux * pos, start[1] + uy * pos), (start[0] + ux * stop, start[1] + uy * stop)],
            fill=MARQUEE_COLOR,
            width=width,
        )
        pos = stop + gap


def _fill_box(draw: ImageDraw.ImageDraw, x: float, y: float, w: float, h: float) -> None:
    x0, y0 = round_px(x), round_px(y)
    x1, y1 = round_px(x + w) - 1, round_px(y + h) - 1
    if x1 < x0 or y1 < y0:
        return
    draw.rectangle((x0, y0, x1, y1), fill=MARQUEE_COLOR)

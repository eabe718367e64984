from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Optional, Tuple

Point = Tuple[float, float]

ZOOM_NONE = "none"
ZOOM_IN = "in"
ZOOM_OUT = "out"
ZOOM_MODES = (ZOOM_NONE, ZOOM_IN, ZOOM_OUT)


class NoImageError(ValueError):
    """Raised when a tool that needs a loaded image is used without one."""


class ExportError(RuntimeError):
    """Raised when the combined image cannot be rendered or encoded."""


@dataclass
class EditorConfig:
    zoom_in_factor: float = 1.25
    zoom_out_factor: float = 0.8
    min_zoom: float = 1.0
    max_zoom: float = 8.0
    max_auto_zoom: float = 32.0
    viewport_scale: float = 0.90
    safe_bottom: int = 12
    min_avail_h: int = 240
    resize_debounce_ms: int = 100
    history_limit: int = 50
    brush_size: int = 40
    mask_color: tuple[int, int, int, int] = (255, 0, 0, 255)
    export_filename: str = "combined-image.png"


@dataclass
class ViewportState:
    zoom: float = 1.0
    offset_x: float = 0.0
    offset_y: float = 0.0
    container_w: float = 0.0
    container_h: float = 0.0
    display_w: float = 0.0
    display_h: float = 0.0


@dataclass(frozen=True)
class CropRect:
    x: float
    y: float
    w: float
    h: float

    def insets(self, display_w: float, display_h: float) -> tuple[float, float, float, float]:
        """Return the (top, right, bottom, left) clip that leaves only this rect visible."""
        return (
            self.y,
            display_w - (self.x + self.w),
            display_h - (self.y + self.h),
            self.x,
        )


@dataclass
class PointerInput:
    """One pointer or touch event, reduced to what the editor needs.

    ``x``/``y`` are the primary pointer in container-relative layout units.
    ``secondary`` carries the second finger of a two-finger gesture.
    """

    x: float
    y: float
    pointer_count: int = 1
    secondary: Optional[Point] = None

    @property
    def is_multi(self) -> bool:
        return self.pointer_count >= 2 and self.secondary is not None

    def midpoint(self) -> Point:
        if self.secondary is None:
            return (self.x, self.y)
        return ((self.x + self.secondary[0]) / 2.0, (self.y + self.secondary[1]) / 2.0)

    def spread(self) -> float:
        if self.secondary is None:
            return 0.0
        return math.hypot(self.secondary[0] - self.x, self.secondary[1] - self.y)


def clamp(value: float, low: float, high: float) -> float:
    # The upper bound wins when the bounds cross.
    return min(high, max(low, value))


def round_px(value: float) -> int:
    return int(math.floor(value + 0.5))


def device_size(width: float, height: float, dpr: float) -> tuple[int, int]:
    return max(1, round_px(width * dpr)), max(1, round_px(height * dpr))


def fit_budget(
    window_w: float,
    window_h: float,
    top: float,
    config: Optional[EditorConfig] = None,
) -> tuple[int, int]:
    """Largest display box available below ``top`` inside a window."""
    config = config or EditorConfig()
    max_w = round_px(window_w * config.viewport_scale)
    avail_h = max(0.0, window_h - top - config.safe_bottom)
    if avail_h < config.min_avail_h:
        avail_h = min(max(config.min_avail_h, window_h * 0.6), window_h)
    max_h = round_px(avail_h * config.viewport_scale)
    return max(0, max_w), max(0, max_h)


def compute_fit_size(natural_size: tuple[int, int], max_size: tuple[float, float]) -> tuple[int, int]:
    natural_w, natural_h = natural_size
    if natural_w <= 0 or natural_h <= 0:
        raise ValueError("Image has no pixels.")
    max_w, max_h = (max(0.0, float(v)) for v in max_size)
    scale = min(max_w / natural_w, max_h / natural_h, 1.0)
    return max(1, round_px(natural_w * scale)), max(1, round_px(natural_h * scale))


def container_relative(client_x: float, client_y: float, origin_x: float, origin_y: float) -> Point:
    return client_x - origin_x, client_y - origin_y


def to_image_space(state: ViewportState, screen_x: float, screen_y: float) -> Point:
    return (screen_x - state.offset_x) / state.zoom, (screen_y - state.offset_y) / state.zoom


def to_screen_space(state: ViewportState, x: float, y: float) -> Point:
    return x * state.zoom + state.offset_x, y * state.zoom + state.offset_y


def clamp_pan(state: ViewportState) -> ViewportState:
    img_w = state.zoom * state.display_w
    img_h = state.zoom * state.display_h
    return replace(
        state,
        offset_x=clamp(state.offset_x, state.container_w - img_w, 0.0),
        offset_y=clamp(state.offset_y, state.container_h - img_h, 0.0),
    )


def zoom_to(state: ViewportState, new_zoom: float, anchor_x: float, anchor_y: float) -> ViewportState:
    """Set ``new_zoom`` and bring the image point under the anchor to the container center."""
    image_x, image_y = to_image_space(state, anchor_x, anchor_y)
    moved = replace(
        state,
        zoom=new_zoom,
        offset_x=state.container_w / 2.0 - new_zoom * image_x,
        offset_y=state.container_h / 2.0 - new_zoom * image_y,
    )
    return clamp_pan(moved)


def zoom_at(
    state: ViewportState,
    factor: float,
    anchor_x: float,
    anchor_y: float,
    min_zoom: float,
    max_zoom: float,
) -> ViewportState:
    new_zoom = clamp(state.zoom * factor, min_zoom, max_zoom)
    return zoom_to(state, new_zoom, anchor_x, anchor_y)


def pinch_zoom(
    start_zoom: float,
    start_distance: float,
    distance: float,
    min_zoom: float,
    max_zoom: float,
) -> float:
    if start_distance <= 0:
        return clamp(start_zoom, min_zoom, max_zoom)
    return clamp(start_zoom * distance / start_distance, min_zoom, max_zoom)


def reset_viewport(state: ViewportState) -> ViewportState:
    return clamp_pan(replace(state, zoom=1.0, offset_x=0.0, offset_y=0.0))


def normalize_rect(a: Point, b: Point, display_w: float, display_h: float) -> CropRect:
    x1 = clamp(a[0], 0.0, display_w)
    y1 = clamp(a[1], 0.0, display_h)
    x2 = clamp(b[0], 0.0, display_w)
    y2 = clamp(b[1], 0.0, display_h)
    return CropRect(
        x=min(x1, x2),
        y=min(y1, y2),
        w=max(1.0, abs(x2 - x1)),
        h=max(1.0, abs(y2 - y1)),
    )


def is_degenerate(rect: CropRect) -> bool:
    return rect.w <= 1 or rect.h <= 1


def crop_fill_viewport(
    state: ViewportState,
    rect: CropRect,
    min_zoom: float,
    max_auto_zoom: float,
) -> ViewportState:
    """Zoom so ``rect`` fills the container, then center it."""
    scale_w = state.container_w / rect.w
    scale_h = state.container_h / rect.h
    zoom = clamp(min(scale_w, scale_h), min_zoom, max_auto_zoom)
    centered = replace(
        state,
        zoom=zoom,
        offset_x=(state.container_w - rect.w * zoom) / 2.0 - rect.x * zoom,
        offset_y=(state.container_h - rect.h * zoom) / 2.0 - rect.y * zoom,
    )
    return clamp_pan(centered)

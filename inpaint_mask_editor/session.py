from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Optional

from PIL import Image

from . import core
from .core import (
    ZOOM_IN,
    ZOOM_MODES,
    ZOOM_NONE,
    ZOOM_OUT,
    CropRect,
    EditorConfig,
    ExportError,
    NoImageError,
    Point,
    PointerInput,
    ViewportState,
)
from .export import ExportResult, build_inpaint_prompt, encode_png
from .history import MaskHistory
from .layers import (
    LayerStack,
    draw_base,
    draw_crop_marquee,
    export_size,
    paint_segment,
    render_export,
    render_view,
    resample_mask,
)

logger = logging.getLogger(__name__)


@dataclass
class _Pinch:
    start_zoom: float
    start_distance: float


class EditorSession:
    """All state of one editing session: viewport, tools, crop, layers and mask history.

    Pointer coordinates passed in are container-relative layout units. Every
    mutation happens through these methods, so several sessions can coexist.
    """

    def __init__(self, config: Optional[EditorConfig] = None, dpr: float = 1.0) -> None:
        if dpr <= 0:
            raise ValueError("Device pixel ratio must be positive.")
        self.config = config or EditorConfig()
        self.dpr = dpr
        self.source: Optional[Image.Image] = None
        self.layers: Optional[LayerStack] = None
        self.viewport = ViewportState()
        self.history = MaskHistory(limit=self.config.history_limit)
        self.zoom_mode = ZOOM_NONE
        self.brush_size = float(self.config.brush_size)

        self.crop_tool_active = False
        self.crop_selecting = False
        self.crop_start: Optional[Point] = None
        self.crop_rect: Optional[CropRect] = None

        self.painting = False
        self._last_point: Optional[Point] = None
        self._pinch: Optional[_Pinch] = None
        self._exporting = False

    @property
    def has_image(self) -> bool:
        return self.source is not None and self.layers is not None

    @property
    def zoom(self) -> float:
        return self.viewport.zoom

    @property
    def offset(self) -> Point:
        return self.viewport.offset_x, self.viewport.offset_y

    @property
    def is_pinching(self) -> bool:
        return self._pinch is not None

    @property
    def is_exporting(self) -> bool:
        return self._exporting

    @property
    def clip_insets(self) -> Optional[tuple[float, float, float, float]]:
        if self.crop_rect is None:
            return None
        return self.crop_rect.insets(self.viewport.display_w, self.viewport.display_h)

    def debug_info(self) -> dict:
        return {
            "zoom": self.viewport.zoom,
            "offset": self.offset,
            "zoom_mode": self.zoom_mode,
            "crop_tool_active": self.crop_tool_active,
            "crop_rect": self.crop_rect,
            "history": (len(self.history), self.history.index),
        }

    # Image lifecycle

    def load_image(
        self,
        image: Image.Image,
        max_size: tuple[float, float],
        container_size: Optional[tuple[float, float]] = None,
    ) -> tuple[int, int]:
        display_w, display_h = core.compute_fit_size(image.size, max_size)
        self._cancel_gestures()
        self.source = image
        self.layers = LayerStack.create(display_w, display_h, self.dpr)
        draw_base(self.layers.base, image)
        self._set_geometry(display_w, display_h, container_size)
        self.exit_crop_mode()
        self.clear_crop_view()
        self.reset_zoom()
        self.history.reset(self.layers.mask.image)
        logger.debug("Loaded %dx%d image at display size %dx%d", image.width, image.height, display_w, display_h)
        return display_w, display_h

    def relayout(
        self,
        max_size: tuple[float, float],
        container_size: Optional[tuple[float, float]] = None,
        dpr: Optional[float] = None,
    ) -> bool:
        """Refit to a new window budget, keeping the mask and its history."""
        if not self.has_image:
            return False
        if dpr is not None:
            if dpr <= 0:
                raise ValueError("Device pixel ratio must be positive.")
            self.dpr = dpr
        display_w, display_h = core.compute_fit_size(self.source.size, max_size)
        self.end_stroke()
        self._cancel_selection()
        self._pinch = None
        self.layers = self.layers.resized(display_w, display_h, self.dpr)
        draw_base(self.layers.base, self.source)
        self.history.rescale(self.layers.mask.pixel_size)
        self._set_geometry(display_w, display_h, container_size)
        self.reset_zoom()
        self.clear_crop_view()
        logger.debug("Relayout to display size %dx%d", display_w, display_h)
        return True

    def unload(self) -> None:
        self._cancel_gestures()
        self.exit_crop_mode()
        self.source = None
        self.layers = None
        self.crop_rect = None
        self.viewport = ViewportState()
        self.history = MaskHistory(limit=self.config.history_limit)

    def _set_geometry(
        self,
        display_w: float,
        display_h: float,
        container_size: Optional[tuple[float, float]],
    ) -> None:
        container_w, container_h = container_size or (display_w, display_h)
        self.viewport = replace(
            self.viewport,
            display_w=float(display_w),
            display_h=float(display_h),
            container_w=max(0.0, float(container_w)),
            container_h=max(0.0, float(container_h)),
        )

    # Viewport

    def to_image_space(self, screen_x: float, screen_y: float) -> Point:
        return core.to_image_space(self.viewport, screen_x, screen_y)

    def zoom_at(self, factor: float, anchor_x: float, anchor_y: float) -> None:
        before = self.viewport.zoom
        self.viewport = core.zoom_at(
            self.viewport, factor, anchor_x, anchor_y, self.config.min_zoom, self.config.max_zoom
        )
        logger.debug("Zoom %.4f -> %.4f at (%.1f, %.1f)", before, self.viewport.zoom, anchor_x, anchor_y)

    def clamp_pan(self) -> None:
        self.viewport = core.clamp_pan(self.viewport)

    def reset_zoom(self) -> None:
        self.viewport = core.reset_viewport(self.viewport)
        self.zoom_mode = ZOOM_NONE

    def set_zoom_mode(self, mode: str) -> None:
        if mode not in ZOOM_MODES:
            raise ValueError(f"Unknown zoom mode: {mode}")
        self.zoom_mode = mode

    def handle_zoom_key(self, key: str) -> bool:
        """Ctrl/Cmd shortcuts: ``+``/``=`` zoom in, ``-``/``_`` zoom out, ``0`` reset."""
        if not self.has_image:
            return False
        center_x = self.viewport.container_w / 2.0
        center_y = self.viewport.container_h / 2.0
        if key in ("+", "="):
            self.zoom_at(self.config.zoom_in_factor, center_x, center_y)
            self.set_zoom_mode(ZOOM_NONE)
            return True
        if key in ("-", "_"):
            self.zoom_at(self.config.zoom_out_factor, center_x, center_y)
            self.set_zoom_mode(ZOOM_NONE)
            return True
        if key == "0":
            self.reset_zoom()
            self.clear_crop_view()
            return True
        return False

    # Tools

    def activate_cursor_tool(self) -> None:
        self.exit_crop_mode()
        self.set_zoom_mode(ZOOM_NONE)

    def toggle_zoom_in_tool(self) -> None:
        previous = self.zoom_mode
        self.exit_crop_mode()
        self.set_zoom_mode(ZOOM_NONE if previous == ZOOM_IN else ZOOM_IN)

    def toggle_zoom_out_tool(self) -> None:
        previous = self.zoom_mode
        self.exit_crop_mode()
        self.set_zoom_mode(ZOOM_NONE if previous == ZOOM_OUT else ZOOM_OUT)

    def toggle_crop_tool(self) -> bool:
        if not self.has_image:
            raise NoImageError("Upload an image first.")
        if self.crop_tool_active:
            self.exit_crop_mode()
        else:
            self.crop_tool_active = True
            self.crop_selecting = False
            self.crop_start = None
            self.zoom_mode = ZOOM_NONE
        draw_crop_marquee(self.layers.overlay, None)
        return self.crop_tool_active

    def exit_crop_mode(self) -> None:
        self.crop_tool_active = False
        self.crop_selecting = False
        self.crop_start = None
        self.zoom_mode = ZOOM_NONE

    def set_brush_size(self, size: float) -> None:
        self.brush_size = max(1.0, float(size))

    # Crop

    def apply_crop(self, rect: CropRect) -> None:
        if not self.has_image:
            raise NoImageError("Upload an image first.")
        self.crop_rect = rect
        self.viewport = core.crop_fill_viewport(
            self.viewport, rect, self.config.min_zoom, self.config.max_auto_zoom
        )
        self.exit_crop_mode()
        self.layers.overlay.clear()
        logger.debug("Crop %s applied at zoom %.4f", rect, self.viewport.zoom)

    def clear_crop_view(self) -> None:
        self.crop_rect = None
        if self.layers is not None:
            self.layers.overlay.clear()

    def _selection_rect(self, point: Point) -> CropRect:
        start = self.crop_start if self.crop_start is not None else point
        return core.normalize_rect(start, point, self.viewport.display_w, self.viewport.display_h)

    def _finish_selection(self, point: Point) -> Optional[CropRect]:
        rect = self._selection_rect(point)
        self.crop_selecting = False
        self.crop_start = None
        if core.is_degenerate(rect):
            self.layers.overlay.clear()
            return None
        self.apply_crop(rect)
        return rect

    def _cancel_selection(self) -> None:
        if not self.crop_selecting:
            return
        self.crop_selecting = False
        self.crop_start = None
        if self.layers is not None:
            self.layers.overlay.clear()

    # Pointer input

    def pointer_down(self, pointer: PointerInput) -> None:
        if not self.has_image:
            return
        if pointer.is_multi:
            self._begin_pinch(pointer)
            return
        if self._pinch is not None:
            return
        if self.crop_tool_active:
            start = self.to_image_space(pointer.x, pointer.y)
            self.crop_selecting = True
            self.crop_start = start
            draw_crop_marquee(self.layers.overlay, self._selection_rect(start))
            return
        if self.zoom_mode != ZOOM_NONE:
            factor = self.config.zoom_in_factor if self.zoom_mode == ZOOM_IN else self.config.zoom_out_factor
            self.zoom_at(factor, pointer.x, pointer.y)
            return
        self.begin_stroke(*self.to_image_space(pointer.x, pointer.y))

    def pointer_move(self, pointer: PointerInput) -> None:
        if not self.has_image:
            return
        if pointer.is_multi:
            if self._pinch is None:
                self._begin_pinch(pointer)
            else:
                self._update_pinch(pointer)
            return
        if self._pinch is not None:
            return
        point = self.to_image_space(pointer.x, pointer.y)
        if self.crop_tool_active and self.crop_selecting:
            draw_crop_marquee(self.layers.overlay, self._selection_rect(point))
            return
        if self.painting:
            self.extend_stroke(*point)

    def pointer_up(self, pointer: PointerInput) -> Optional[CropRect]:
        """Finish the current gesture. Lifting any finger ends a pinch."""
        if not self.has_image:
            return None
        if self._pinch is not None:
            self._pinch = None
            return None
        if self.crop_tool_active and self.crop_selecting:
            return self._finish_selection(self.to_image_space(pointer.x, pointer.y))
        self.end_stroke()
        return None

    def pointer_leave(self) -> None:
        self.end_stroke()

    def _begin_pinch(self, pointer: PointerInput) -> None:
        self.cancel_stroke()
        self._cancel_selection()
        self._pinch = _Pinch(start_zoom=self.viewport.zoom, start_distance=pointer.spread())

    def _update_pinch(self, pointer: PointerInput) -> None:
        new_zoom = core.pinch_zoom(
            self._pinch.start_zoom,
            self._pinch.start_distance,
            pointer.spread(),
            self.config.min_zoom,
            self.config.max_zoom,
        )
        self.viewport = core.zoom_to(self.viewport, new_zoom, *pointer.midpoint())

    def _cancel_gestures(self) -> None:
        self.painting = False
        self._last_point = None
        self._pinch = None
        self._cancel_selection()

    # Mask painting and history

    def begin_stroke(self, x: float, y: float) -> None:
        if not self.has_image:
            raise NoImageError("Upload an image first.")
        self.painting = True
        self._last_point = (x, y)
        paint_segment(self.layers.mask, (x, y), (x, y), self.brush_size, self.config.mask_color)

    def extend_stroke(self, x: float, y: float) -> None:
        if not self.painting or self._last_point is None:
            return
        paint_segment(self.layers.mask, self._last_point, (x, y), self.brush_size, self.config.mask_color)
        self._last_point = (x, y)

    def end_stroke(self) -> bool:
        if not self.painting:
            return False
        self.painting = False
        self._last_point = None
        self.history.save_state(self.layers.mask.image)
        return True

    def cancel_stroke(self) -> None:
        if not self.painting:
            return
        self.painting = False
        self._last_point = None
        self._restore_mask(self.history.current())

    def undo(self) -> bool:
        if self.painting or not self.has_image:
            return False
        snapshot = self.history.undo()
        if snapshot is None:
            return False
        self._restore_mask(snapshot)
        return True

    def redo(self) -> bool:
        if self.painting or not self.has_image:
            return False
        snapshot = self.history.redo()
        if snapshot is None:
            return False
        self._restore_mask(snapshot)
        return True

    def clear_mask(self) -> bool:
        if not self.has_image or self.painting or self.layers.mask.is_empty():
            return False
        self.layers.mask.clear()
        self.history.save_state(self.layers.mask.image)
        return True

    def _restore_mask(self, snapshot: Optional[Image.Image]) -> None:
        mask = self.layers.mask
        if snapshot is None:
            mask.clear()
            return
        mask.image = resample_mask(snapshot, mask.pixel_size)

    # Output

    def render_view(self) -> Optional[Image.Image]:
        if not self.has_image:
            return None
        return render_view(self.layers, self.viewport, self.crop_rect)

    def current_output_dimensions(self) -> tuple[int, int]:
        if not self.has_image:
            raise NoImageError("Upload an image first.")
        return export_size(self.layers.base, self.crop_rect)

    def build_prompt(self) -> str:
        width, height = self.current_output_dimensions()
        return build_inpaint_prompt(width, height, filename=self.config.export_filename)

    def export(self) -> Optional[ExportResult]:
        """Render and encode the combined image; ``None`` while another export is running."""
        if self._exporting:
            logger.debug("Export already in progress; request ignored.")
            return None
        if not self.has_image:
            raise NoImageError("Upload an image first.")
        self._exporting = True
        try:
            combined = render_export(self.layers.base, self.layers.mask, self.crop_rect)
            data = encode_png(combined)
        except (OSError, ValueError) as exc:
            logger.exception("Failed to prepare image")
            raise ExportError(f"There was a problem preparing the image: {exc}") from exc
        finally:
            self._exporting = False
        return ExportResult(
            data=data,
            width=combined.width,
            height=combined.height,
            filename=self.config.export_filename,
        )

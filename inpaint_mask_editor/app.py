from __future__ import annotations

import argparse
import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional

import tkinter as tk
from tkinter import filedialog, messagebox, ttk
from tkinter import font as tkfont
from urllib.parse import unquote, urlparse

from PIL import ImageTk

try:
    from tkinterdnd2 import DND_FILES, TkinterDnD
    DND_AVAILABLE = True
except ImportError:  # pragma: no cover - depends on optional dependency
    DND_AVAILABLE = False
    DND_FILES = None
    TkinterDnD = None

from .core import (
    ZOOM_IN,
    ZOOM_NONE,
    ZOOM_OUT,
    EditorConfig,
    ExportError,
    NoImageError,
    PointerInput,
    container_relative,
    fit_budget,
)
from .export import SUPPORTED_EXTENSIONS, ExportResult, load_image_file, save_export
from .session import EditorSession

logger = logging.getLogger(__name__)

ZOOM_KEYSYMS = {
    "plus": "+",
    "equal": "=",
    "KP_Add": "+",
    "minus": "-",
    "underscore": "_",
    "KP_Subtract": "-",
    "0": "0",
    "KP_0": "0",
}


def parse_drop_files(data: str) -> List[str]:
    if not data:
        return []
    tokens = re.findall(r"{[^}]+}|[^\s]+", data)
    paths = [normalize_drop_path(token.strip().strip("{}")) for token in tokens]
    return [p for p in paths if p]


def normalize_drop_path(value: str) -> str:
    if value.startswith("file://"):
        parsed = urlparse(value)
        value = unquote(parsed.path)
        if os.name == "nt" and value.startswith("/"):
            value = value[1:]
    return value


def zoom_key_for_keysym(keysym: str) -> Optional[str]:
    return ZOOM_KEYSYMS.get(keysym)


def pointer_from_event(event: tk.Event, origin: Optional[tuple[int, int]] = None) -> PointerInput:
    """Build a single-pointer input from a Tk mouse event.

    Canvas events already carry container-relative ``x``/``y``. Events bound
    elsewhere pass the canvas ``origin`` (its root position) and are mapped
    from their root coordinates.
    """
    if origin is None:
        return PointerInput(x=float(event.x), y=float(event.y))
    x, y = container_relative(event.x_root, event.y_root, origin[0], origin[1])
    return PointerInput(x=x, y=y)


def format_zoom_label(zoom: float) -> str:
    return f"Zoom: {int(round(zoom * 100))}%"


class Tooltip:
    def __init__(self, widget: tk.Widget, text: str) -> None:
        self.widget = widget
        self.text = text
        self.tip: Optional[tk.Toplevel] = None
        widget.bind("<Enter>", self._show)
        widget.bind("<Leave>", self._hide)

    def _show(self, _: tk.Event) -> None:
        if self.tip or not self.text:
            return
        x = self.widget.winfo_rootx() + 16
        y = self.widget.winfo_rooty() + 18
        self.tip = tk.Toplevel(self.widget)
        self.tip.wm_overrideredirect(True)
        self.tip.wm_geometry(f"+{x}+{y}")
        label = ttk.Label(self.tip, text=self.text, style="Tooltip.TLabel", justify="left")
        label.pack(ipadx=6, ipady=4)

    def _hide(self, _: tk.Event) -> None:
        if self.tip:
            self.tip.destroy()
            self.tip = None


@dataclass
class UiTokens:
    pad_sm: int = 6
    pad_md: int = 12
    pad_lg: int = 18
    window_w: int = 1280
    window_h: int = 860
    brush_min: int = 2
    brush_max: int = 200
    button_feedback_ms: int = 1200


@dataclass
class UiColors:
    bg: str = "#F4F1EC"
    panel: str = "#FBF9F5"
    text: str = "#1E1914"
    muted: str = "#6F665F"
    accent: str = "#C06A33"
    accent_dark: str = "#A15426"
    canvas_bg: str = "#14110D"
    highlight: str = "#F2E6D8"


class InpaintMaskEditorApp(ttk.Frame):
    CURSORS = {"crop": "crosshair", ZOOM_IN: "plus", ZOOM_OUT: "dotbox", ZOOM_NONE: "crosshair"}

    def __init__(
        self,
        master: tk.Tk,
        path: Optional[str] = None,
        config: Optional[EditorConfig] = None,
        dpr: float = 1.0,
    ) -> None:
        super().__init__(master)
        self.master = master
        self.tokens = UiTokens()
        self.colors = UiColors()
        self.session = EditorSession(config=config, dpr=dpr)
        self.config_values = self.session.config

        self._photo: Optional[ImageTk.PhotoImage] = None
        self._resize_job: Optional[str] = None
        self._window_size: Optional[tuple[int, int]] = None
        self._export_dialog: Optional[tk.Toplevel] = None
        self._last_export: Optional[ExportResult] = None
        self.source_path: Optional[str] = None
        self.dnd_enabled = False
        self.tool_buttons: Dict[str, ttk.Button] = {}

        self.brush_var = tk.DoubleVar(value=self.session.brush_size)
        self.brush_label_var = tk.StringVar(value=f"{int(self.session.brush_size)}px")
        self.zoom_label_var = tk.StringVar(value=format_zoom_label(1.0))

        self._build_ui()
        self._bind_keys()
        self._configure_drag_drop()

        if path:
            self.load_image(path)
        else:
            self._render_empty_state()

    def _build_ui(self) -> None:
        self.master.title("Inpaint Mask Editor")
        self.master.geometry(f"{self.tokens.window_w}x{self.tokens.window_h}")
        self.master.minsize(720, 520)
        self.master.configure(background=self.colors.bg)

        style = ttk.Style(self.master)
        if "clam" in style.theme_names():
            style.theme_use("clam")
        self._setup_fonts()

        style.configure("Editor.TFrame", background=self.colors.bg)
        style.configure("Editor.TLabel", background=self.colors.bg, foreground=self.colors.text, font=self.fonts["body"])
        style.configure(
            "Muted.TLabel",
            background=self.colors.bg,
            foreground=self.colors.muted,
            font=self.fonts["caption"],
        )
        style.configure(
            "Primary.TButton",
            background=self.colors.accent,
            foreground="#FFFFFF",
            padding=(12, 6),
            font=self.fonts["button"],
        )
        style.map(
            "Primary.TButton",
            background=[("active", self.colors.accent_dark)],
            foreground=[("active", "#FFFFFF")],
        )
        style.configure(
            "Secondary.TButton",
            background=self.colors.panel,
            foreground=self.colors.text,
            padding=(10, 6),
            font=self.fonts["button"],
        )
        style.configure(
            "Active.TButton",
            background=self.colors.highlight,
            foreground=self.colors.accent_dark,
            padding=(10, 6),
            font=self.fonts["button"],
        )
        style.configure(
            "Tooltip.TLabel",
            background="#1C1916",
            foreground="#F7F2EB",
            font=self.fonts["caption"],
            relief="solid",
            borderwidth=1,
        )

        self.pack(fill="both", expand=True)
        self.configure(style="Editor.TFrame")

        header = ttk.Frame(self, style="Editor.TFrame")
        header.pack(fill="x", padx=self.tokens.pad_lg, pady=(self.tokens.pad_lg, self.tokens.pad_sm))
        title = ttk.Label(header, text="Inpaint Mask Editor", style="Editor.TLabel")
        title.configure(font=self.fonts["title"])
        title.pack(side="left")

        file_bar = ttk.Frame(header, style="Editor.TFrame")
        file_bar.pack(side="right")
        self._add_button(file_bar, "Open Image", self._open_image_dialog, "Load a PNG, JPEG, WebP or TIFF image.")
        self._add_button(
            file_bar,
            "Save Combined",
            self._export,
            "Render image + red mask (cropped if set) and build the prompt.",
            style="Primary.TButton",
        )
        self._add_button(file_bar, "Clear Image", self._clear_image, "Discard the image and start over.")

        self.controls_bar = ttk.Frame(self, style="Editor.TFrame")
        self.controls_bar.pack(fill="x", padx=self.tokens.pad_lg, pady=(0, self.tokens.pad_md))
        tools = [
            ("cursor", "Brush", self._activate_cursor_tool, "Paint the removal mask."),
            (ZOOM_IN, "Zoom +", self._toggle_zoom_in_tool, "Click to zoom in (Ctrl + =)."),
            (ZOOM_OUT, "Zoom −", self._toggle_zoom_out_tool, "Click to zoom out (Ctrl + -)."),
            ("crop", "Crop", self._toggle_crop_tool, "Drag a rectangle to crop the export."),
        ]
        for key, text, command, help_text in tools:
            self.tool_buttons[key] = self._add_button(self.controls_bar, text, command, help_text)
        self._add_button(self.controls_bar, "Reset View", self._reset_view, "Reset zoom and remove the crop (Ctrl + 0).")
        self._add_button(self.controls_bar, "Undo", self._undo, "Undo last stroke (Ctrl + Z).")
        self._add_button(self.controls_bar, "Redo", self._redo, "Redo stroke (Ctrl + Shift + Z).")
        self._add_button(self.controls_bar, "Clear Mask", self._clear_mask, "Erase every stroke.")

        brush_frame = ttk.Frame(self.controls_bar, style="Editor.TFrame")
        brush_frame.pack(side="right")
        ttk.Label(brush_frame, text="Brush", style="Editor.TLabel").pack(side="left", padx=(0, self.tokens.pad_sm))
        ttk.Scale(
            brush_frame,
            from_=self.tokens.brush_min,
            to=self.tokens.brush_max,
            orient="horizontal",
            variable=self.brush_var,
            command=self._on_brush_change,
            length=160,
        ).pack(side="left")
        ttk.Label(brush_frame, textvariable=self.brush_label_var, style="Muted.TLabel", width=6).pack(
            side="left", padx=(self.tokens.pad_sm, 0)
        )

        self.canvas_holder = ttk.Frame(self, style="Editor.TFrame")
        self.canvas_holder.pack(fill="both", expand=True, padx=self.tokens.pad_lg)
        self.canvas = tk.Canvas(
            self.canvas_holder,
            width=480,
            height=320,
            background=self.colors.canvas_bg,
            highlightthickness=0,
            takefocus=1,
            cursor="crosshair",
        )
        self.canvas.pack(anchor="n")

        status_frame = ttk.Frame(self, style="Editor.TFrame")
        status_frame.pack(fill="x", padx=self.tokens.pad_lg, pady=(self.tokens.pad_sm, self.tokens.pad_sm))
        self.status_var = tk.StringVar(value="Ready")
        ttk.Label(status_frame, textvariable=self.status_var, style="Muted.TLabel").pack(side="left")
        ttk.Label(status_frame, textvariable=self.zoom_label_var, style="Muted.TLabel").pack(side="right")
        self._update_tool_ui()

    def _add_button(
        self,
        parent: ttk.Frame,
        text: str,
        command: Callable[[], None],
        help_text: str,
        style: str = "Secondary.TButton",
    ) -> ttk.Button:
        button = ttk.Button(parent, text=text, command=command, style=style)
        button.pack(side="left", padx=(0, self.tokens.pad_sm))
        Tooltip(button, help_text)
        return button

    def _setup_fonts(self) -> None:
        base_family = self._pick_font_family(
            [
                "Avenir Next",
                "Segoe UI",
                "Helvetica Neue",
                "Inter",
                "Noto Sans",
                "DejaVu Sans",
                "Arial",
            ]
        )
        self.fonts = {
            "title": tkfont.Font(family=base_family, size=18, weight="bold"),
            "section": tkfont.Font(family=base_family, size=12, weight="bold"),
            "body": tkfont.Font(family=base_family, size=11),
            "caption": tkfont.Font(family=base_family, size=10),
            "button": tkfont.Font(family=base_family, size=11, weight="bold"),
        }
        self.master.option_add("*Font", self.fonts["body"])

    def _pick_font_family(self, preferred: List[str]) -> str:
        available = set(tkfont.families(self.master))
        for name in preferred:
            if name in available:
                return name
        return tkfont.nametofont("TkDefaultFont").actual("family")

    def _bind_keys(self) -> None:
        modifiers = ["Control"]
        if self.master.tk.call("tk", "windowingsystem") == "aqua":
            modifiers.append("Command")
        for modifier in modifiers:
            self.master.bind_all(f"<{modifier}-Key>", self._on_shortcut, add=True)
        self.master.bind_all("<Escape>", lambda _: self._activate_cursor_tool(), add=True)
        self.master.bind("<Configure>", self._on_window_configure, add=True)
        self.canvas.bind("<ButtonPress-1>", self._on_pointer_down)
        self.canvas.bind("<B1-Motion>", self._on_pointer_move)
        self.canvas.bind("<ButtonRelease-1>", self._on_pointer_up)
        self.canvas.bind("<Leave>", self._on_pointer_leave)
        self.canvas.bind("<MouseWheel>", self._on_mousewheel)
        self.canvas.bind("<Button-4>", self._on_mousewheel_linux)
        self.canvas.bind("<Button-5>", self._on_mousewheel_linux)

    def _configure_drag_drop(self) -> None:
        if not DND_AVAILABLE:
            self.dnd_enabled = False
            return
        self.dnd_enabled = True
        self._register_drop_targets(self.master)
        if not self.dnd_enabled:
            self._set_status("Drag & drop disabled. Use Open Image.")

    def _on_drop(self, event: tk.Event) -> str:
        paths = parse_drop_files(str(getattr(event, "data", "")))
        paths = [p for p in paths if os.path.isfile(p) and self._is_supported_image(p)]
        if not paths:
            messagebox.showerror("Unsupported file", "Drop an image file (png, jpg, webp, bmp, gif, tif).")
            return "break"
        self.load_image(paths[0])
        return "break"

    def _is_supported_image(self, path: str) -> bool:
        return Path(path).suffix.lower() in SUPPORTED_EXTENSIONS

    def _register_drop_targets(self, widget: tk.Widget) -> None:
        if hasattr(widget, "drop_target_register"):
            try:
                widget.drop_target_register(DND_FILES)
                widget.dnd_bind("<<Drop>>", self._on_drop)
            except tk.TclError:
                self.dnd_enabled = False
        for child in widget.winfo_children():
            self._register_drop_targets(child)

    def _open_image_dialog(self) -> None:
        path = filedialog.askopenfilename(
            title="Open image",
            filetypes=[
                ("Image files", " ".join(f"*{ext}" for ext in sorted(SUPPORTED_EXTENSIONS))),
                ("All files", "*.*"),
            ],
        )
        if path:
            self.load_image(path)

    def load_image(self, path: str) -> None:
        try:
            image = load_image_file(path)
            self.update_idletasks()
            self.session.load_image(image, self._fit_budget())
        except (OSError, ValueError) as exc:
            logger.exception("Failed to load image %s", path)
            messagebox.showerror("Load failed", str(exc))
            return

        self.source_path = path
        self._window_size = (self.master.winfo_width(), self.master.winfo_height())
        self._sync_canvas_size()
        self._update_tool_ui()
        self._refresh_display()
        width, height = self.session.current_output_dimensions()
        self._set_status(f"Loaded {os.path.basename(path)} ({width}×{height}). Paint over what should be removed.")
        self.canvas.focus_set()

    def _fit_budget(self) -> tuple[int, int]:
        window_w = self.master.winfo_width()
        window_h = self.master.winfo_height()
        if window_w <= 1 or window_h <= 1:
            window_w, window_h = self.tokens.window_w, self.tokens.window_h
        top = self.canvas_holder.winfo_rooty() - self.master.winfo_rooty()
        return fit_budget(window_w, window_h, max(top, 0), self.config_values)

    def _sync_canvas_size(self) -> None:
        viewport = self.session.viewport
        self.canvas.configure(width=int(round(viewport.container_w)), height=int(round(viewport.container_h)))

    def _on_window_configure(self, event: tk.Event) -> None:
        if event.widget is not self.master:
            return
        size = (event.width, event.height)
        if size == self._window_size:
            return
        self._window_size = size
        if not self.session.has_image:
            return
        if self._resize_job is not None:
            self.after_cancel(self._resize_job)
        self._resize_job = self.after(self.config_values.resize_debounce_ms, self._on_resize_settled)

    def _on_resize_settled(self) -> None:
        self._resize_job = None
        # Let pending geometry changes land before measuring the new budget.
        self.after_idle(self._relayout)

    def _relayout(self) -> None:
        if not self.session.relayout(self._fit_budget()):
            return
        self._sync_canvas_size()
        self._update_tool_ui()
        self._refresh_display()

    def _on_pointer_down(self, event: tk.Event) -> None:
        self.canvas.focus_set()
        self.session.pointer_down(pointer_from_event(event))
        self._refresh_display()

    def _on_pointer_move(self, event: tk.Event) -> None:
        if not (self.session.painting or self.session.crop_selecting):
            return
        self.session.pointer_move(pointer_from_event(event))
        self._refresh_display()

    def _on_pointer_up(self, event: tk.Event) -> None:
        was_cropping = self.session.crop_tool_active
        rect = self.session.pointer_up(pointer_from_event(event))
        if rect is not None:
            self._set_status(f"Cropped to {int(round(rect.w))}×{int(round(rect.h))}. Reset View removes the crop.")
        elif was_cropping and self.session.crop_tool_active:
            self._set_status("Crop mode: drag a larger rectangle.")
        self._update_tool_ui()
        self._refresh_display()

    def _on_pointer_leave(self, _: tk.Event) -> None:
        self.session.pointer_leave()

    def _on_mousewheel(self, event: tk.Event) -> None:
        if event.delta == 0 or not self.session.has_image:
            return
        factor = self.config_values.zoom_in_factor if event.delta > 0 else self.config_values.zoom_out_factor
        self.session.zoom_at(factor, event.x, event.y)
        self._refresh_display()

    def _on_mousewheel_linux(self, event: tk.Event) -> None:
        if not self.session.has_image:
            return
        if getattr(event, "num", 0) == 4:
            factor = self.config_values.zoom_in_factor
        elif getattr(event, "num", 0) == 5:
            factor = self.config_values.zoom_out_factor
        else:
            return
        self.session.zoom_at(factor, event.x, event.y)
        self._refresh_display()

    def _on_shortcut(self, event: tk.Event) -> Optional[str]:
        keysym = event.keysym
        if keysym in ("z", "Z"):
            if keysym == "Z" or getattr(event, "state", 0) & 0x1:
                self._redo()
            else:
                self._undo()
            return "break"
        if keysym in ("y", "Y"):
            self._redo()
            return "break"
        key = zoom_key_for_keysym(keysym)
        if key is None:
            return None
        self.session.handle_zoom_key(key)
        self._update_tool_ui()
        self._refresh_display()
        return "break"

    def _on_brush_change(self, _: str | None = None) -> None:
        self.session.set_brush_size(round(float(self.brush_var.get())))
        self.brush_label_var.set(f"{int(self.session.brush_size)}px")

    def _activate_cursor_tool(self) -> None:
        self.session.activate_cursor_tool()
        self._update_tool_ui()
        self._refresh_display()

    def _toggle_zoom_in_tool(self) -> None:
        self.session.toggle_zoom_in_tool()
        self._update_tool_ui()
        self._refresh_display()

    def _toggle_zoom_out_tool(self) -> None:
        self.session.toggle_zoom_out_tool()
        self._update_tool_ui()
        self._refresh_display()

    def _toggle_crop_tool(self) -> None:
        try:
            active = self.session.toggle_crop_tool()
        except NoImageError as exc:
            messagebox.showerror("No image", str(exc))
            return
        if active:
            self._set_status("Crop mode: drag a rectangle over the area to keep.")
        self._update_tool_ui()
        self._refresh_display()

    def _reset_view(self) -> None:
        self.session.reset_zoom()
        self.session.clear_crop_view()
        self._update_tool_ui()
        self._refresh_display()

    def _undo(self) -> None:
        if self.session.undo():
            self._refresh_display()

    def _redo(self) -> None:
        if self.session.redo():
            self._refresh_display()

    def _clear_mask(self) -> None:
        if self.session.clear_mask():
            self._set_status("Mask cleared.")
            self._refresh_display()

    def _clear_image(self) -> None:
        if not self.session.has_image:
            return
        if not messagebox.askyesno("Clear image", "Clear the current image and start over?"):
            return
        self.session.unload()
        self.source_path = None
        self._last_export = None
        self._update_tool_ui()
        self._render_empty_state()

    def _export(self) -> None:
        try:
            result = self.session.export()
        except NoImageError as exc:
            messagebox.showerror("No image", str(exc))
            return
        except ExportError as exc:
            messagebox.showerror("Export failed", str(exc))
            return
        if result is None:
            return
        self._last_export = result
        self._show_export_dialog(result, self.session.build_prompt())
        self._set_status(f"Prepared {result.filename} ({result.width}×{result.height}).")

    def _show_export_dialog(self, result: ExportResult, prompt: str) -> None:
        if self._export_dialog is not None:
            self._export_dialog.destroy()
        dialog = tk.Toplevel(self.master)
        dialog.title("Inpainting prompt")
        dialog.configure(background=self.colors.bg)
        dialog.transient(self.master)
        self._export_dialog = dialog

        text = tk.Text(dialog, width=80, height=18, wrap="word", font=self.fonts["caption"])
        text.insert("1.0", prompt)
        text.pack(fill="both", expand=True, padx=self.tokens.pad_md, pady=self.tokens.pad_md)

        buttons = ttk.Frame(dialog, style="Editor.TFrame")
        buttons.pack(fill="x", padx=self.tokens.pad_md, pady=(0, self.tokens.pad_md))
        copy_button = self._add_button(buttons, "Copy Prompt", lambda: None, "Copy the prompt text.")
        copy_button.configure(command=lambda: self._copy_prompt(copy_button, text.get("1.0", "end-1c")))
        self._add_button(
            buttons,
            "Save Image…",
            lambda: self._save_export(result),
            f"Save {result.filename}.",
            style="Primary.TButton",
        )
        self._add_button(buttons, "Close", dialog.destroy, "Close this dialog.")

    def _copy_prompt(self, button: ttk.Button, prompt: str) -> None:
        self.master.clipboard_clear()
        self.master.clipboard_append(prompt)
        self._show_button_feedback(button, "Copied!")

    def _show_button_feedback(self, button: ttk.Button, feedback: str) -> None:
        original = button.cget("text")
        button.configure(text=feedback)

        def restore() -> None:
            if button.winfo_exists():
                button.configure(text=original)

        self.after(self.tokens.button_feedback_ms, restore)

    def _save_export(self, result: ExportResult) -> None:
        initial_dir = os.path.dirname(self.source_path) if self.source_path else None
        output_path = filedialog.asksaveasfilename(
            title="Save combined image",
            defaultextension=".png",
            initialdir=initial_dir,
            initialfile=result.filename,
            filetypes=[("PNG", "*.png"), ("All files", "*.*")],
        )
        if not output_path:
            return
        if self.source_path and os.path.abspath(output_path) == os.path.abspath(self.source_path):
            messagebox.showerror("Save failed", "Pick a new filename. The original image is never overwritten.")
            return
        try:
            save_export(result, output_path)
        except (OSError, ValueError) as exc:
            messagebox.showerror("Save failed", str(exc))
            return
        self._set_status(f"Saved {os.path.basename(output_path)} ({result.width}×{result.height}).")

    def _update_tool_ui(self) -> None:
        session = self.session
        if session.crop_tool_active:
            active = "crop"
        elif session.zoom_mode != ZOOM_NONE:
            active = session.zoom_mode
        else:
            active = "cursor"
        for key, button in self.tool_buttons.items():
            button.configure(style="Active.TButton" if key == active else "Secondary.TButton")
        self.canvas.configure(cursor=self.CURSORS.get(active, "crosshair"))
        self.zoom_label_var.set(format_zoom_label(session.zoom))

    def _refresh_display(self) -> None:
        view = self.session.render_view()
        if view is None:
            return
        self._photo = ImageTk.PhotoImage(view)
        self.canvas.delete("all")
        self.canvas.create_image(0, 0, anchor="nw", image=self._photo)
        self.zoom_label_var.set(format_zoom_label(self.session.zoom))

    def _render_empty_state(self) -> None:
        self._photo = None
        self.canvas.configure(width=480, height=320)
        self.canvas.delete("all")
        message = "Drop an image here or click Open Image"
        if not self.dnd_enabled:
            message += "\nDrag & drop disabled (install tkinterdnd2)"
        self.canvas.create_text(
            240,
            160,
            text=message,
            fill=self.colors.highlight,
            font=self.fonts["section"],
        )
        self._set_status("No image loaded.")

    def _set_status(self, message: str) -> None:
        self.status_var.set(message)


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Paint a removal mask and export it for inpainting.")
    parser.add_argument("path", nargs="?", help="Image to open")
    parser.add_argument(
        "--pixel-ratio",
        type=float,
        default=1.0,
        help="Raster pixels per screen pixel for the layers and the export.",
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level (DEBUG, INFO, WARNING...).")
    return parser.parse_args()


def main() -> None:
    args = _parse_args()
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s - %(name)s - %(message)s",
    )
    root = TkinterDnD.Tk() if DND_AVAILABLE else tk.Tk()
    app = InpaintMaskEditorApp(root, path=args.path, dpr=args.pixel_ratio)
    app.mainloop()


if __name__ == "__main__":
    main()

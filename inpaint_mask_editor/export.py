from __future__ import annotations

import io
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from PIL import Image, ImageOps

from .core import EditorConfig

EXPORT_FILENAME = EditorConfig.export_filename
SUPPORTED_EXTENSIONS = {".png", ".jpg", ".jpeg", ".bmp", ".gif", ".webp", ".tif", ".tiff"}


@dataclass
class ExportResult:
    data: bytes
    width: int
    height: int
    filename: str = EXPORT_FILENAME


def load_image_file(path: Union[str, Path]) -> Image.Image:
    image = Image.open(path)
    try:
        image.load()
        oriented = ImageOps.exif_transpose(image)
        return oriented.convert("RGBA")
    finally:
        image.close()


def encode_png(image: Image.Image) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def save_export(result: ExportResult, path: Union[str, Path]) -> None:
    if not result.data:
        raise ValueError("Nothing to save.")
    Path(path).write_bytes(result.data)


def build_inpaint_prompt(width: int, height: int, filename: str = EXPORT_FILENAME) -> str:
    return f"""You are an expert image editing assistant.

I will upload ONE file: {filename} (resolution: {width}×{height} px).
This image shows the original photo with SOLID RED (#ff0000) brush strokes drawn on top wherever content should be REMOVED/REPLACED.

Task:
- Remove ONLY the regions covered by the red strokes and synthesize realistic content consistent with nearby context.
- Preserve all unmarked areas exactly as in the original photo.
- Maintain scene lighting, perspective, textures, and edges.
- Output image must be {width}×{height} px.

IMPORTANT OUTPUT (no base64 wall):
- Return/attach the edited image as a rendered image preview or image file (PNG).
- Do NOT return a long base64 string in the message body.
- If your interface cannot render images, attach a PNG file instead of base64 text."""

from __future__ import annotations

from pathlib import Path

import numpy as np
from PIL import Image

from .texture import RGBA8_FORMAT, ChannelOrder, ConstPixelBufferAccess

PNG_MAGIC = b"\x89PNG\r\n\x1a\n"


def has_png_magic(path: Path) -> bool:
    try:
        with path.open("rb") as handle:
            return handle.read(len(PNG_MAGIC)) == PNG_MAGIC
    except OSError:
        return False


def load_rgba8_image(path: Path) -> ConstPixelBufferAccess:
    with Image.open(path) as image:
        rgba = image.convert("RGBA")
    pixels = np.asarray(rgba, dtype=np.uint8).copy()
    return ConstPixelBufferAccess(RGBA8_FORMAT, pixels)


def save_error_mask(mask: ConstPixelBufferAccess, path: Path, z: int = 0) -> None:
    """Write one slice of an RGBA mask as an 8-bit RGBA PNG."""
    if mask.format.order != ChannelOrder.RGBA:
        raise ValueError(f"Error mask must be RGBA, got {mask.format}")
    data = mask.data[z]
    if mask.format == RGBA8_FORMAT:
        pixels = np.ascontiguousarray(data)
    else:
        scale = 65535.0 if data.dtype == np.uint16 else 1.0
        normalized = data.astype(np.float32) / scale
        pixels = np.rint(np.clip(normalized, 0.0, 1.0) * 255.0).astype(np.uint8)
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(pixels).save(path, format="PNG")

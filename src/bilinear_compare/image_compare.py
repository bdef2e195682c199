from __future__ import annotations

from pathlib import Path

import numpy as np
from PIL import UnidentifiedImageError

from common.png_utils import has_png_magic, load_rgba8_image, save_error_mask
from common.rgba import RGBA
from common.texture import RGBA_FLOAT_FORMAT, ConstPixelBufferAccess, PixelBufferAccess

from .compare import bilinear_compare
from .errors import E1003_IMAGE_LOAD_FAILED, ImageLoadError
from .report import CompareReport


def bilinear_compare_images(
    reference: ConstPixelBufferAccess,
    result: ConstPixelBufferAccess,
    threshold: RGBA,
) -> tuple[bool, PixelBufferAccess]:
    """Run bilinear_compare with a freshly allocated float error mask."""
    error_mask = PixelBufferAccess.create(
        RGBA_FLOAT_FORMAT, reference.width, reference.height, reference.depth
    )
    return bilinear_compare(reference, result, error_mask, threshold), error_mask


def count_mismatches(error_mask: ConstPixelBufferAccess, z: int = 0) -> int:
    data = error_mask.data[z]
    red = (data[..., 0] > 0) & (data[..., 1] == 0)
    return int(np.count_nonzero(red))


def _load(path: Path) -> ConstPixelBufferAccess:
    try:
        return load_rgba8_image(path)
    except (OSError, UnidentifiedImageError) as exc:
        raise ImageLoadError(
            code=E1003_IMAGE_LOAD_FAILED,
            message=f"Failed to load image {path}: {exc}",
            hint=(
                "Provide a readable PNG (or other Pillow-supported) image."
                if has_png_magic(path) or path.suffix.lower() != ".png"
                else "File has a .png suffix but no PNG header; regenerate it."
            ),
        ) from exc


def compare_png_files(
    reference_png: Path,
    result_png: Path,
    threshold: RGBA,
    mask_png: Path | None = None,
) -> CompareReport:
    reference = _load(reference_png)
    result = _load(result_png)
    ok, error_mask = bilinear_compare_images(reference, result, threshold)
    if mask_png is not None:
        save_error_mask(error_mask, mask_png)
    return CompareReport(
        status="pass" if ok else "fail",
        width=reference.width,
        height=reference.height,
        depth=reference.depth,
        threshold=threshold.to_array(),
        mismatch_count=count_mismatches(error_mask),
        total_pixels=reference.width * reference.height,
        mask_path=str(mask_png) if mask_png is not None else None,
    )

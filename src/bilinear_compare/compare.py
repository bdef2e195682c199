from __future__ import annotations

import numpy as np

from common.rgba import RGBA
from common.texture import RGBA8_FORMAT, ConstPixelBufferAccess, PixelBufferAccess, RGBA8View

from .errors import (
    E1001_DIMENSION_MISMATCH,
    E1002_UNSUPPORTED_FORMAT,
    DimensionMismatchError,
    UnsupportedFormatError,
)
from .matcher import pixel_matches

MASK_OK = (0.0, 1.0, 0.0, 1.0)
MASK_ERROR = (1.0, 0.0, 0.0, 1.0)


def _extent(access: ConstPixelBufferAccess) -> tuple[int, int, int]:
    return access.width, access.height, access.depth


def _direct_match_mask(source: np.ndarray, candidate: np.ndarray, threshold: RGBA) -> np.ndarray:
    """Pixels of source matched by the edge-clamped 3x3 neighborhood of candidate.

    Same outcome as the direct neighborhood test in pixel_matches, for the
    whole slice at once.
    """
    height, width = source.shape[:2]
    limit = np.array(threshold.to_array(), dtype=np.int16)
    src = source.astype(np.int16)
    padded = np.pad(candidate.astype(np.int16), ((1, 1), (1, 1), (0, 0)), mode="edge")
    matched = np.zeros((height, width), dtype=bool)
    for dy in range(3):
        for dx in range(3):
            neighbor = padded[dy : dy + height, dx : dx + width]
            matched |= np.all(np.abs(src - neighbor) <= limit, axis=2)
    return matched


def bilinear_compare_rgba8(
    reference: RGBA8View,
    result: RGBA8View,
    error_mask: PixelBufferAccess,
    threshold: RGBA,
) -> bool:
    # RGBA8View rejects any other format on construction.
    error_mask.clear(MASK_OK)
    if reference.width == 0 or reference.height == 0:
        return True

    accepted = _direct_match_mask(reference.pixels, result.pixels, threshold)
    accepted |= _direct_match_mask(result.pixels, reference.pixels, threshold)

    all_ok = True
    for y in range(reference.height):
        for x in range(reference.width):
            if accepted[y, x]:
                continue
            if not pixel_matches(reference, result, threshold, x, y) and not pixel_matches(
                result, reference, threshold, x, y
            ):
                all_ok = False
                error_mask.set_pixel(MASK_ERROR, x, y)

    return all_ok


def bilinear_compare(
    reference: ConstPixelBufferAccess,
    result: ConstPixelBufferAccess,
    error_mask: PixelBufferAccess,
    threshold: RGBA,
) -> bool:
    """Compare result against reference, tolerating sub-pixel shifts.

    Paints error_mask green where pixels match and red where they do not.
    Raises DimensionMismatchError if the extents disagree and
    UnsupportedFormatError for anything other than RGBA / UNORM_INT8.
    """
    if _extent(result) != _extent(reference):
        raise DimensionMismatchError(
            code=E1001_DIMENSION_MISMATCH,
            message=(
                "Reference and result images have different dimensions: "
                f"{_extent(reference)} vs {_extent(result)}"
            ),
            hint="Render the result at the reference resolution.",
        )
    if _extent(error_mask) != _extent(reference):
        raise DimensionMismatchError(
            code=E1001_DIMENSION_MISMATCH,
            message=(
                "Reference and error mask images have different dimensions: "
                f"{_extent(reference)} vs {_extent(error_mask)}"
            ),
            hint="Allocate the error mask with the reference width, height and depth.",
        )

    for label, access in (("reference", reference), ("result", result)):
        if access.format != RGBA8_FORMAT:
            raise UnsupportedFormatError(
                code=E1002_UNSUPPORTED_FORMAT,
                message=f"Unsupported format for bilinear comparison ({label}: {access.format})",
                hint=f"Convert both images to {RGBA8_FORMAT} before comparing.",
            )

    return bilinear_compare_rgba8(RGBA8View(reference), RGBA8View(result), error_mask, threshold)

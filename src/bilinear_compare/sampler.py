from __future__ import annotations

from common.math_utils import in_bounds, in_range
from common.rgba import RGBA
from common.texture import RGBA8View

NUM_SUBPIXEL_BITS = 8

_ONE = 1 << NUM_SUBPIXEL_BITS
_HALF = 1 << (NUM_SUBPIXEL_BITS * 2 - 1)


def interpolate_channel(fx1: int, fy1: int, p00: int, p01: int, p10: int, p11: int) -> int:
    """Bilinearly interpolate one 8-bit channel with fixed-point weights.

    fx1 and fy1 are the fractional position in [0, 256); p10 is the right
    neighbor of p00 and p01 the one below it. The weighted sum carries 16
    fractional bits and is rounded half up before the shift.
    """
    fx0 = _ONE - fx1
    fy0 = _ONE - fy1
    total = fx0 * fy0 * p00 + fx1 * fy0 * p10 + fx0 * fy1 * p01 + fx1 * fy1 * p11
    rounded = (total + _HALF) >> (NUM_SUBPIXEL_BITS * 2)
    if not in_range(rounded, 0, 0xFF):
        raise AssertionError(f"Interpolated channel out of range: {rounded}")
    return rounded


def bilinear_sample_rgba8(view: RGBA8View, u: int, v: int) -> RGBA:
    """Sample view at fixed-point coordinates (u, v)."""
    x0 = u >> NUM_SUBPIXEL_BITS
    y0 = v >> NUM_SUBPIXEL_BITS
    x1 = x0 + 1
    y1 = y0 + 1
    if not (in_bounds(x0, 0, view.width - 1) and in_bounds(y0, 0, view.height - 1)):
        raise AssertionError(f"Bilinear sample at ({u}, {v}) needs pixels outside the view")

    fx1 = u - (x0 << NUM_SUBPIXEL_BITS)
    fy1 = v - (y0 << NUM_SUBPIXEL_BITS)

    p00 = view.read(x0, y0)
    p10 = view.read(x1, y0)
    p01 = view.read(x0, y1)
    p11 = view.read(x1, y1)

    return RGBA.from_array(
        interpolate_channel(fx1, fy1, p00[c], p01[c], p10[c], p11[c]) for c in range(4)
    )

from __future__ import annotations

from common.math_utils import clamp, in_bounds
from common.rgba import RGBA, compare_threshold
from common.texture import RGBA8View

from .sampler import NUM_SUBPIXEL_BITS, bilinear_sample_rgba8

# Fixed-point (u, v) offsets relative to the pixel up and to the left of the
# one being matched. Verdicts must be reproducible, so these never change.
SAMPLE_OFFSETS: tuple[tuple[int, int], ...] = (
    (226, 186),
    (335, 235),
    (279, 334),
    (178, 272),
    (112, 202),
    (306, 117),
    (396, 299),
    (206, 382),
    (146, 96),
    (423, 155),
    (361, 412),
    (84, 339),
    (48, 130),
    (367, 43),
    (455, 367),
    (105, 439),
    (83, 46),
    (217, 24),
    (461, 71),
    (450, 459),
    (239, 469),
    (67, 267),
    (459, 255),
    (13, 416),
    (10, 192),
    (141, 502),
    (503, 304),
    (380, 506),
)


def _direct_match(
    source_pixel: tuple[int, int, int, int],
    candidate: RGBA8View,
    threshold: RGBA,
    x: int,
    y: int,
) -> bool:
    max_x = candidate.width - 1
    max_y = candidate.height - 1
    xs = (x, clamp(x - 1, 0, max_x), clamp(x + 1, 0, max_x))
    ys = (y, clamp(y - 1, 0, max_y), clamp(y + 1, 0, max_y))
    return any(
        compare_threshold(source_pixel, candidate.read(nx, ny), threshold)
        for ny in ys
        for nx in xs
    )


def _sampled_match(
    source_pixel: tuple[int, int, int, int],
    candidate: RGBA8View,
    threshold: RGBA,
    x: int,
    y: int,
) -> bool:
    u_limit = (candidate.width - 1) << NUM_SUBPIXEL_BITS
    v_limit = (candidate.height - 1) << NUM_SUBPIXEL_BITS
    base_u = (x - 1) << NUM_SUBPIXEL_BITS
    base_v = (y - 1) << NUM_SUBPIXEL_BITS
    for offset_u, offset_v in SAMPLE_OFFSETS:
        u = base_u + offset_u
        v = base_v + offset_v
        if not in_bounds(u, 0, u_limit) or not in_bounds(v, 0, v_limit):
            continue
        if compare_threshold(source_pixel, bilinear_sample_rgba8(candidate, u, v), threshold):
            return True
    return False


def pixel_matches(
    source: RGBA8View,
    candidate: RGBA8View,
    threshold: RGBA,
    x: int,
    y: int,
) -> bool:
    """Check whether source's pixel at (x, y) has a counterpart near (x, y) in candidate.

    The pixel is first compared against candidate's 3x3 neighborhood, with
    coordinates clamped to the image edges. Failing that, candidate is
    bilinearly sampled at each of SAMPLE_OFFSETS around the pixel; samples
    whose bilinear footprint would leave the image are skipped.
    """
    source_pixel = source.read(x, y)
    if _direct_match(source_pixel, candidate, threshold, x, y):
        return True
    return _sampled_match(source_pixel, candidate, threshold, x, y)

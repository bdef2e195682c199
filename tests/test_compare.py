from __future__ import annotations

import numpy as np
import pytest

from bilinear_compare.compare import MASK_ERROR, MASK_OK, bilinear_compare, bilinear_compare_rgba8
from bilinear_compare.errors import (
    E1001_DIMENSION_MISMATCH,
    E1002_UNSUPPORTED_FORMAT,
    CompareError,
    DimensionMismatchError,
    UnsupportedFormatError,
)
from bilinear_compare.matcher import pixel_matches
from common.rgba import RGBA
from common.texture import (
    RGBA8_FORMAT,
    RGBA_FLOAT_FORMAT,
    ChannelOrder,
    ChannelType,
    ConstPixelBufferAccess,
    PixelBufferAccess,
    RGBA8View,
    TextureFormat,
)

EXACT = RGBA(0, 0, 0, 0)


def _image(data: np.ndarray) -> ConstPixelBufferAccess:
    return ConstPixelBufferAccess(RGBA8_FORMAT, data.astype(np.uint8))


def _mask_for(image: ConstPixelBufferAccess) -> PixelBufferAccess:
    return PixelBufferAccess.create(RGBA_FLOAT_FORMAT, image.width, image.height, image.depth)


def _mask_colors(mask: PixelBufferAccess) -> list[list[tuple[float, float, float, float]]]:
    return [[mask.get_pixel(x, y) for x in range(mask.width)] for y in range(mask.height)]


def _line_images() -> tuple[np.ndarray, np.ndarray]:
    """One-pixel white line on black, and the same line shifted half a pixel right."""
    reference = np.zeros((5, 7, 4), dtype=np.uint8)
    reference[..., 3] = 255
    reference[:, 3, :3] = 255
    result = np.zeros((5, 7, 4), dtype=np.uint8)
    result[..., 3] = 255
    result[:, 3:5, :3] = 128
    return reference, result


def test_identical_images_pass_with_green_mask() -> None:
    data = np.array(
        [
            [(10, 20, 30, 255), (50, 60, 70, 255)],
            [(90, 100, 110, 255), (130, 140, 150, 255)],
        ],
        dtype=np.uint8,
    )
    reference = _image(data)
    result = _image(data.copy())
    mask = _mask_for(reference)

    assert bilinear_compare(reference, result, mask, EXACT)
    assert all(color == MASK_OK for row in _mask_colors(mask) for color in row)


def test_single_channel_difference_marks_one_pixel() -> None:
    reference_data = np.zeros((2, 2, 4), dtype=np.uint8)
    reference_data[..., 3] = 255
    reference_data[0, 1] = (255, 255, 255, 255)
    result_data = reference_data.copy()
    result_data[0, 1] = (254, 255, 255, 255)
    reference = _image(reference_data)
    mask = _mask_for(reference)

    assert not bilinear_compare(reference, _image(result_data), mask, EXACT)

    colors = _mask_colors(mask)
    assert colors[0][1] == MASK_ERROR
    assert colors[0][0] == MASK_OK
    assert colors[1][0] == MASK_OK
    assert colors[1][1] == MASK_OK


def test_threshold_absorbs_small_difference() -> None:
    reference_data = np.zeros((2, 2, 4), dtype=np.uint8)
    reference_data[0, 1] = (255, 255, 255, 255)
    result_data = reference_data.copy()
    result_data[0, 1] = (254, 255, 255, 255)
    reference = _image(reference_data)

    assert bilinear_compare(reference, _image(result_data), _mask_for(reference), RGBA(1, 0, 0, 0))


def test_shifted_line_matches_in_one_direction_only() -> None:
    reference_data, result_data = _line_images()
    reference = RGBA8View(_image(reference_data))
    result = RGBA8View(_image(result_data))
    threshold = RGBA(20, 20, 20, 20)

    assert not pixel_matches(reference, result, threshold, 3, 2)
    assert pixel_matches(result, reference, threshold, 3, 2)


def test_comparison_is_symmetric_for_shifted_line() -> None:
    reference_data, result_data = _line_images()
    threshold = RGBA(20, 20, 20, 20)
    forward_mask = _mask_for(_image(reference_data))
    backward_mask = _mask_for(_image(reference_data))

    assert bilinear_compare(_image(reference_data), _image(result_data), forward_mask, threshold)
    assert bilinear_compare(_image(result_data), _image(reference_data), backward_mask, threshold)
    assert np.array_equal(forward_mask.data, backward_mask.data)


def test_mask_only_contains_red_and_green() -> None:
    rng = np.random.default_rng(7)
    reference_data = rng.integers(0, 256, size=(6, 5, 4), dtype=np.uint8)
    result_data = reference_data.copy()
    result_data[2:4, 1:3] = 255 - result_data[2:4, 1:3]
    reference = _image(reference_data)
    mask = _mask_for(reference)

    ok = bilinear_compare(reference, _image(result_data), mask, RGBA(4, 4, 4, 4))

    colors = {color for row in _mask_colors(mask) for color in row}
    assert colors <= {MASK_OK, MASK_ERROR}
    assert ok == (MASK_ERROR not in colors)


def test_mask_matches_per_pixel_verdicts() -> None:
    rng = np.random.default_rng(42)
    reference_data = rng.integers(0, 256, size=(7, 8, 4), dtype=np.uint8)
    result_data = np.clip(
        reference_data.astype(np.int16) + rng.integers(-40, 41, size=reference_data.shape),
        0,
        255,
    ).astype(np.uint8)
    threshold = RGBA(24, 24, 24, 24)
    reference = RGBA8View(_image(reference_data))
    result = RGBA8View(_image(result_data))
    mask = _mask_for(_image(reference_data))

    ok = bilinear_compare_rgba8(reference, result, mask, threshold)

    expected_ok = True
    for y in range(reference.height):
        for x in range(reference.width):
            matched = pixel_matches(reference, result, threshold, x, y) or pixel_matches(
                result, reference, threshold, x, y
            )
            expected_ok = expected_ok and matched
            assert mask.get_pixel(x, y) == (MASK_OK if matched else MASK_ERROR)
    assert ok == expected_ok


def test_dimension_mismatch_fails_before_comparing() -> None:
    reference = _image(np.zeros((4, 4, 4), dtype=np.uint8))
    result = _image(np.zeros((5, 4, 4), dtype=np.uint8))
    mask = _mask_for(reference)

    with pytest.raises(DimensionMismatchError) as excinfo:
        bilinear_compare(reference, result, mask, EXACT)

    assert excinfo.value.code == E1001_DIMENSION_MISMATCH
    assert not mask.data.any()


def test_error_mask_dimension_mismatch() -> None:
    reference = _image(np.zeros((4, 4, 4), dtype=np.uint8))
    mask = PixelBufferAccess.create(RGBA_FLOAT_FORMAT, 4, 4, depth=2)

    with pytest.raises(DimensionMismatchError):
        bilinear_compare(reference, reference, mask, EXACT)


def test_depth_mismatch_is_rejected() -> None:
    reference = ConstPixelBufferAccess(RGBA8_FORMAT, np.zeros((2, 3, 3, 4), dtype=np.uint8))
    result = _image(np.zeros((3, 3, 4), dtype=np.uint8))

    with pytest.raises(DimensionMismatchError):
        bilinear_compare(reference, result, _mask_for(reference), EXACT)


def test_unsupported_format_raises() -> None:
    rgb_half = TextureFormat(ChannelOrder.RGB, ChannelType.HALF_FLOAT)
    reference = ConstPixelBufferAccess(rgb_half, np.zeros((2, 2, 3), dtype=np.float16))
    result = ConstPixelBufferAccess(rgb_half, np.zeros((2, 2, 3), dtype=np.float16))
    mask = _mask_for(reference)

    with pytest.raises(UnsupportedFormatError) as excinfo:
        bilinear_compare(reference, result, mask, EXACT)

    assert isinstance(excinfo.value, CompareError)
    assert excinfo.value.code == E1002_UNSUPPORTED_FORMAT
    assert not mask.data.any()


def test_result_format_must_also_be_rgba8() -> None:
    reference = _image(np.zeros((2, 2, 4), dtype=np.uint8))
    result = ConstPixelBufferAccess(RGBA_FLOAT_FORMAT, np.zeros((2, 2, 4), dtype=np.float32))

    with pytest.raises(UnsupportedFormatError):
        bilinear_compare(reference, result, _mask_for(reference), EXACT)


def test_volumetric_images_compare_first_slice() -> None:
    data = np.zeros((2, 3, 3, 4), dtype=np.uint8)
    data[1] = 255
    reference = ConstPixelBufferAccess(RGBA8_FORMAT, data)
    result = ConstPixelBufferAccess(RGBA8_FORMAT, data.copy())
    mask = _mask_for(reference)

    assert bilinear_compare(reference, result, mask, EXACT)
    assert mask.get_pixel(1, 1, z=1) == MASK_OK


@pytest.mark.parametrize("shape", [(0, 3, 4), (3, 0, 4), (0, 0, 4)])
def test_empty_images_match(shape: tuple[int, int, int]) -> None:
    reference = _image(np.zeros(shape, dtype=np.uint8))
    result = _image(np.zeros(shape, dtype=np.uint8))
    mask = _mask_for(reference)

    assert bilinear_compare(reference, result, mask, EXACT)
    assert mask.data.size == 0

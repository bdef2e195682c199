"""Bilinear-sampling image comparison for rendering conformance tests."""

from .compare import bilinear_compare, bilinear_compare_rgba8
from .errors import CompareError, DimensionMismatchError, UnsupportedFormatError
from .image_compare import bilinear_compare_images, compare_png_files
from .matcher import SAMPLE_OFFSETS, pixel_matches
from .sampler import NUM_SUBPIXEL_BITS, bilinear_sample_rgba8, interpolate_channel

__all__ = [
    "NUM_SUBPIXEL_BITS",
    "SAMPLE_OFFSETS",
    "CompareError",
    "DimensionMismatchError",
    "UnsupportedFormatError",
    "bilinear_compare",
    "bilinear_compare_images",
    "bilinear_compare_rgba8",
    "bilinear_sample_rgba8",
    "compare_png_files",
    "interpolate_channel",
    "pixel_matches",
]

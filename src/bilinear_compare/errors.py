from __future__ import annotations

from dataclasses import dataclass

E1001_DIMENSION_MISMATCH = "E1001_DIMENSION_MISMATCH"
E1002_UNSUPPORTED_FORMAT = "E1002_UNSUPPORTED_FORMAT"
E1003_IMAGE_LOAD_FAILED = "E1003_IMAGE_LOAD_FAILED"
E1004_CONFIG_INVALID = "E1004_CONFIG_INVALID"


@dataclass
class CompareError(Exception):
    code: str
    message: str
    hint: str

    def __str__(self) -> str:
        return self.message


class DimensionMismatchError(CompareError):
    pass


class UnsupportedFormatError(CompareError):
    pass


class ImageLoadError(CompareError):
    pass


class ConfigError(CompareError):
    pass

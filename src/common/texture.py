from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence

import numpy as np


class ChannelOrder(str, Enum):
    R = "R"
    RG = "RG"
    RGB = "RGB"
    RGBA = "RGBA"
    BGRA = "BGRA"


class ChannelType(str, Enum):
    UNORM_INT8 = "UNORM_INT8"
    UNORM_INT16 = "UNORM_INT16"
    HALF_FLOAT = "HALF_FLOAT"
    FLOAT = "FLOAT"


# Position of each stored channel within an RGBA color.
_SWIZZLE: dict[ChannelOrder, tuple[int, ...]] = {
    ChannelOrder.R: (0,),
    ChannelOrder.RG: (0, 1),
    ChannelOrder.RGB: (0, 1, 2),
    ChannelOrder.RGBA: (0, 1, 2, 3),
    ChannelOrder.BGRA: (2, 1, 0, 3),
}

_DTYPES: dict[ChannelType, type[np.generic]] = {
    ChannelType.UNORM_INT8: np.uint8,
    ChannelType.UNORM_INT16: np.uint16,
    ChannelType.HALF_FLOAT: np.float16,
    ChannelType.FLOAT: np.float32,
}

_UNORM_SCALE: dict[ChannelType, float] = {
    ChannelType.UNORM_INT8: 255.0,
    ChannelType.UNORM_INT16: 65535.0,
}


@dataclass(frozen=True)
class TextureFormat:
    order: ChannelOrder
    type: ChannelType

    @property
    def num_channels(self) -> int:
        return len(_SWIZZLE[self.order])

    @property
    def dtype(self) -> np.dtype:
        return np.dtype(_DTYPES[self.type])

    def __str__(self) -> str:
        return f"{self.order.value}/{self.type.value}"


RGBA8_FORMAT = TextureFormat(ChannelOrder.RGBA, ChannelType.UNORM_INT8)
RGBA_FLOAT_FORMAT = TextureFormat(ChannelOrder.RGBA, ChannelType.FLOAT)


class ConstPixelBufferAccess:
    """Read-only access to pixel data laid out as (depth, height, width, channels).

    A 3-D array (height, width, channels) is treated as a single slice.
    """

    def __init__(self, format: TextureFormat, data: np.ndarray) -> None:
        if data.ndim == 3:
            data = data[np.newaxis, ...]
        if data.ndim != 4:
            raise ValueError(f"Expected pixel array of 3 or 4 dimensions, got shape {data.shape}")
        if data.shape[3] != format.num_channels:
            raise ValueError(
                f"Format {format} needs {format.num_channels} channels, array has {data.shape[3]}"
            )
        if data.dtype != format.dtype:
            raise ValueError(f"Format {format} needs dtype {format.dtype}, array has {data.dtype}")
        self._format = format
        self._data = data

    @property
    def format(self) -> TextureFormat:
        return self._format

    @property
    def data(self) -> np.ndarray:
        return self._data

    @property
    def width(self) -> int:
        return int(self._data.shape[2])

    @property
    def height(self) -> int:
        return int(self._data.shape[1])

    @property
    def depth(self) -> int:
        return int(self._data.shape[0])

    def get_pixel(self, x: int, y: int, z: int = 0) -> tuple[float, float, float, float]:
        """Return the pixel as normalized floats in RGBA order."""
        stored = self._data[z, y, x]
        scale = _UNORM_SCALE.get(self._format.type)
        color = [0.0, 0.0, 0.0, 1.0]
        for index, target in enumerate(_SWIZZLE[self._format.order]):
            value = float(stored[index])
            color[target] = value / scale if scale else value
        return color[0], color[1], color[2], color[3]


class PixelBufferAccess(ConstPixelBufferAccess):
    @classmethod
    def create(
        cls, format: TextureFormat, width: int, height: int, depth: int = 1
    ) -> "PixelBufferAccess":
        data = np.zeros((depth, height, width, format.num_channels), dtype=format.dtype)
        return cls(format, data)

    def _encode(self, color: Sequence[float]) -> np.ndarray:
        if len(color) != 4:
            raise ValueError(f"Expected RGBA color, got {len(color)} values")
        stored = np.array([color[target] for target in _SWIZZLE[self._format.order]], dtype=np.float64)
        scale = _UNORM_SCALE.get(self._format.type)
        if scale:
            stored = np.rint(np.clip(stored, 0.0, 1.0) * scale)
        return stored.astype(self._format.dtype)

    def clear(self, color: Sequence[float]) -> None:
        self._data[...] = self._encode(color)

    def set_pixel(self, color: Sequence[float], x: int, y: int, z: int = 0) -> None:
        self._data[z, y, x] = self._encode(color)


class RGBA8View:
    """Typed view of one RGBA / UNORM_INT8 slice, read as 8-bit integer channels."""

    def __init__(self, access: ConstPixelBufferAccess, z: int = 0) -> None:
        if access.format != RGBA8_FORMAT:
            raise ValueError(f"RGBA8View needs {RGBA8_FORMAT}, got {access.format}")
        self._access = access
        self._pixels = access.data[z]

    @property
    def format(self) -> TextureFormat:
        return self._access.format

    @property
    def pixels(self) -> np.ndarray:
        return self._pixels

    @property
    def width(self) -> int:
        return int(self._pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self._pixels.shape[0])

    def read(self, x: int, y: int) -> tuple[int, int, int, int]:
        r, g, b, a = self._pixels[y, x]
        return int(r), int(g), int(b), int(a)

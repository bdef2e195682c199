from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator

from .math_utils import in_range


@dataclass(frozen=True)
class RGBA:
    r: int
    g: int
    b: int
    a: int

    def __post_init__(self) -> None:
        for name in ("r", "g", "b", "a"):
            value = getattr(self, name)
            if not in_range(value, 0, 255):
                raise ValueError(f"RGBA channel {name} out of range: {value}")

    @classmethod
    def from_array(cls, values: Iterable[int]) -> "RGBA":
        channels = [int(value) for value in values]
        if len(channels) != 4:
            raise ValueError(f"Expected 4 channels, got {len(channels)}")
        return cls(*channels)

    def to_array(self) -> list[int]:
        return [self.r, self.g, self.b, self.a]

    def __iter__(self) -> Iterator[int]:
        return iter((self.r, self.g, self.b, self.a))


def compare_threshold(a: Iterable[int], b: Iterable[int], threshold: Iterable[int]) -> bool:
    """True when every channel of a and b differs by at most the threshold.

    Accepts RGBA values or plain 4-tuples as returned by RGBA8View.read().
    """
    return all(abs(x - y) <= t for x, y, t in zip(a, b, threshold))

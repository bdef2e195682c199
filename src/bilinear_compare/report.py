from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class CompareReport:
    status: str
    width: int
    height: int
    depth: int
    threshold: list[int]
    mismatch_count: int
    total_pixels: int
    mask_path: str | None = None

    @property
    def mismatch_ratio(self) -> float:
        if self.total_pixels == 0:
            return 0.0
        return self.mismatch_count / self.total_pixels

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "status": self.status,
            "size": {"width": self.width, "height": self.height, "depth": self.depth},
            "threshold": self.threshold,
            "mismatch_count": self.mismatch_count,
            "total_pixels": self.total_pixels,
            "mismatch_ratio": self.mismatch_ratio,
        }
        if self.mask_path:
            data["mask_path"] = self.mask_path
        return data

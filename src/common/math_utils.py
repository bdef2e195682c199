from __future__ import annotations


def in_range(value: int, low: int, high: int) -> bool:
    """Inclusive range check: low <= value <= high."""
    return low <= value <= high


def in_bounds(value: int, low: int, high: int) -> bool:
    """Half-open range check: low <= value < high."""
    return low <= value < high


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))

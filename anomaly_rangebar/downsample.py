from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Any, Iterator, Sequence


@dataclass(frozen=True)
class BucketPeak:
    index: int
    timestamp: float | None
    value: float | None


def defined_value(row: Sequence[Any], column: int) -> float | None:
    if column >= len(row):
        return None
    value = row[column]
    if value is None:
        return None
    value = float(value)
    if math.isnan(value):
        return None
    return value


def has_defined_values(rows: Sequence[Sequence[Any]], column: int) -> bool:
    """True when some row holds a numeric, non-NaN value in ``column``; other cells count as missing."""
    for row in rows:
        try:
            if defined_value(row, column) is not None:
                return True
        except (TypeError, ValueError):
            continue
    return False


def bucket_width(num_points: int, canvas_width: float) -> int:
    """Points folded into each pixel-wide bucket: ``ceil(num_points / canvas_width)``."""
    return max(1, math.ceil(num_points / canvas_width))


def iter_buckets(num_points: int, width: int) -> Iterator[tuple[int, int]]:
    for start in range(0, num_points, width):
        yield start, min(num_points, start + width)


def select_bucket_peaks(rows: Sequence[Sequence[Any]], *, column: int, canvas_width: float) -> list[BucketPeak]:
    """Pick the row with the largest value in ``column`` from each bucket.

    Peaks are kept instead of averages so a single spike is never smoothed
    away. Ties go to the first maximal row; undefined values lose to any
    defined one. A bucket with no defined value yields a peak with
    ``value=None``.
    """
    peaks: list[BucketPeak] = []
    if not rows:
        return peaks
    width = bucket_width(len(rows), canvas_width)
    for start, stop in iter_buckets(len(rows), width):
        best_index = start
        best_value = defined_value(rows[start], column)
        for i in range(start + 1, stop):
            value = defined_value(rows[i], column)
            if value is None:
                continue
            if best_value is None or value > best_value:
                best_index = i
                best_value = value
        peaks.append(BucketPeak(index=best_index, timestamp=_timestamp(rows[best_index]), value=best_value))
    return peaks


def _timestamp(row: Sequence[Any]) -> float | None:
    if not row or row[0] is None:
        return None
    return float(row[0])

# parkdash/stats/spots.py
import math
from typing import Optional, Union

DEFAULT_SPOT_MARKER = 'name'


def count_tracked_spots(descriptor: Optional[Union[str, bytes]],
                        marker: str = DEFAULT_SPOT_MARKER) -> int:
    """
    Count the parking spots encoded in a camera's spots_tracked field.

    Every tracked spot contributes exactly one occurrence of ``marker`` to
    the descriptor, so the spot count is the number of non-overlapping
    occurrences. Missing or empty descriptors count as zero spots.
    """
    if not descriptor:
        return 0
    if isinstance(descriptor, bytes):
        descriptor = descriptor.decode('utf-8', errors='replace')
    return str(descriptor).count(marker)


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves away from zero for positive values (0.5 -> 1, 2.5 -> 3)"""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def percentage(part: float, whole: float) -> int:
    """Whole-number percentage of part over whole, capped at 100, 0 when whole is not positive"""
    if whole <= 0:
        return 0
    return min(100, max(0, int(round_half_up(part / whole * 100))))

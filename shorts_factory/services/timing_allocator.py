"""Timing Allocator - partitions a fixed duration into contiguous slices.

The default policy gives every slice an equal share of the total. It knows
nothing about sentence length or narration pacing; ``weights`` is the hook
for a proportional policy if that is ever wanted.
"""

import math
from collections.abc import Sequence
from typing import Optional

from shorts_factory.core.exceptions import InvalidInput
from shorts_factory.models.schemas import TimeSlice


def allocate(
    total_duration: float,
    count: int,
    weights: Optional[Sequence[float]] = None,
) -> list[TimeSlice]:
    """
    Split ``[0, total_duration)`` into ``count`` contiguous slices.

    Boundaries are computed from the slice index rather than by summing
    durations, and the last slice always ends at exactly ``total_duration``.

    Args:
        total_duration: Total length in seconds (must be > 0)
        count: Number of slices (must be > 0)
        weights: Optional relative share per slice; equal shares when omitted

    Returns:
        Slices ordered by index

    Raises:
        InvalidInput: If the duration, count or weights are not usable
    """
    if isinstance(count, bool) or not isinstance(count, int) or count <= 0:
        raise InvalidInput(f"slice count must be a positive integer, got {count!r}")
    if not isinstance(total_duration, (int, float)) or isinstance(total_duration, bool):
        raise InvalidInput(f"total duration must be a number, got {total_duration!r}")
    if not math.isfinite(total_duration) or total_duration <= 0:
        raise InvalidInput(f"total duration must be positive, got {total_duration!r}")

    total = float(total_duration)
    boundaries = _boundaries(total, count, weights)

    slices = []
    for index in range(count):
        start = boundaries[index]
        end = total if index == count - 1 else boundaries[index + 1]
        if not end > start:
            raise InvalidInput(f"slice {index} has no duration ({start!r} to {end!r})")
        slices.append(TimeSlice(index=index, start=start, end=end))
    return slices


def _boundaries(total: float, count: int, weights: Optional[Sequence[float]]) -> list[float]:
    """Start time of every slice."""
    if weights is None:
        return [total * index / count for index in range(count)]

    if len(weights) != count:
        raise InvalidInput(f"expected {count} weights, got {len(weights)}")
    if any(not math.isfinite(w) or w <= 0 for w in weights):
        raise InvalidInput("weights must be positive finite numbers")

    weight_sum = math.fsum(weights)
    starts = []
    running = 0.0
    for weight in weights:
        starts.append(total * running / weight_sum)
        running += weight
    return starts

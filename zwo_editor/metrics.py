"""Duration and training load calculations."""

import math
from dataclasses import dataclass, field
from typing import Dict, Iterable

from .config import NOMINAL_POWER
from .models import Segment, SteadyState, RAMP_TYPES, REPEATED_TYPES
from .profile import zone_distribution


def segment_duration(segment: Segment) -> int:
    """Effective duration of a segment in seconds.

    Repeated blocks report ``repeat * sum(phase durations)``.
    """
    if isinstance(segment, REPEATED_TYPES):
        return segment.repeat * sum(duration for duration, _ in segment.phases)
    return segment.duration


def total_duration(segments: Iterable[Segment]) -> int:
    """Calculate total workout duration from segments."""
    return sum(segment_duration(seg) for seg in segments)


def ramp_mean_square(power_low: float, power_high: float) -> float:
    """Mean of the squared power over a linear ramp."""
    return (power_low ** 2 + power_low * power_high + power_high ** 2) / 3


def mean_square_intensity(segment: Segment) -> float:
    """Mean squared intensity of a single (non-repeated) segment."""
    if isinstance(segment, SteadyState):
        return segment.power ** 2
    if isinstance(segment, RAMP_TYPES):
        return ramp_mean_square(segment.power_low, segment.power_high)
    return NOMINAL_POWER ** 2


def _load(duration: float, msi: float) -> float:
    return (duration / 3600) * msi * 100


def segment_load(segment: Segment) -> float:
    """Training load contributed by one segment."""
    if isinstance(segment, REPEATED_TYPES):
        per_rep = sum(_load(duration, power ** 2) for duration, power in segment.phases)
        return per_rep * segment.repeat
    return _load(segment.duration, mean_square_intensity(segment))


def estimated_load(segments: Iterable[Segment]) -> float:
    """TSS-like load estimate: hours at intensity squared, times 100.

    One hour at FTP scores exactly 100.

    Args:
        segments: Workout segments

    Returns:
        Unrounded load
    """
    return sum(segment_load(seg) for seg in segments)


def display_load(value: float) -> int:
    """Round a load value half up for display."""
    return int(math.floor(value + 0.5))


def average_power(segments: Iterable[Segment]) -> float:
    """Calculate the time-weighted average power across all segments.

    Args:
        segments: List of workout segments

    Returns:
        Weighted average power (decimal), 0.0 for an empty workout
    """
    total_power_time = 0.0
    total_time = 0

    for seg in segments:
        if isinstance(seg, REPEATED_TYPES):
            for duration, power in seg.phases:
                total_power_time += power * duration * seg.repeat
                total_time += duration * seg.repeat
        elif isinstance(seg, RAMP_TYPES):
            total_power_time += (seg.power_low + seg.power_high) / 2 * seg.duration
            total_time += seg.duration
        elif isinstance(seg, SteadyState):
            total_power_time += seg.power * seg.duration
            total_time += seg.duration
        else:
            total_power_time += NOMINAL_POWER * seg.duration
            total_time += seg.duration

    if total_time == 0:
        return 0.0

    return total_power_time / total_time


@dataclass
class WorkoutStats:
    """Summary numbers shown alongside the chart."""
    total_duration: int
    estimated_load: float
    average_power: float
    zone_seconds: Dict[int, float] = field(default_factory=dict)

    @property
    def load(self) -> int:
        return display_load(self.estimated_load)

    @classmethod
    def from_segments(cls, segments: Iterable[Segment]) -> 'WorkoutStats':
        items = list(segments)
        return cls(
            total_duration=total_duration(items),
            estimated_load=estimated_load(items),
            average_power=average_power(items),
            zone_seconds=zone_distribution(items),
        )

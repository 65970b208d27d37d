"""Power zone classification."""

from dataclasses import dataclass
from typing import List

from .config import ZONE_TABLE, NOMINAL_POWER
from .models import Segment, SteadyState, IntervalsT, IntervalsBlock3, RAMP_TYPES


@dataclass(frozen=True)
class Zone:
    """One intensity band; ``limit`` is exclusive."""
    number: int
    name: str
    limit: float
    color: str
    background: str


ZONES: List[Zone] = [
    Zone(number=i, name=name, limit=limit, color=color, background=background)
    for i, (name, limit, color, background) in enumerate(ZONE_TABLE, start=1)
]


def classify(ratio: float) -> Zone:
    """Map a power ratio to its zone.

    Args:
        ratio: Power as a fraction of FTP

    Returns:
        The first zone whose limit exceeds the ratio, or the top zone
    """
    for zone in ZONES:
        if ratio < zone.limit:
            return zone
    return ZONES[-1]


def representative_power(segment: Segment) -> float:
    """Single power value used to colour a segment in the list."""
    if isinstance(segment, SteadyState):
        return segment.power
    if isinstance(segment, RAMP_TYPES):
        return segment.power_high
    if isinstance(segment, IntervalsT):
        return segment.on_power
    if isinstance(segment, IntervalsBlock3):
        return max(power for _, power in segment.phases)
    return NOMINAL_POWER


def segment_zone(segment: Segment) -> Zone:
    """Zone a segment is displayed in."""
    return classify(representative_power(segment))

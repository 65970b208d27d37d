"""Power-vs-time projection of a segment list."""

import logging
from typing import Dict, Iterable, Iterator, List, NamedTuple

from .config import NOMINAL_POWER
from .models import Segment, SteadyState, RAMP_TYPES, REPEATED_TYPES
from .zones import ZONES

logger = logging.getLogger(__name__)


class ProfilePoint(NamedTuple):
    """Breakpoint of the piecewise-linear power curve."""
    time: int
    power: float


def project(segments: Iterable[Segment]) -> Iterator[ProfilePoint]:
    """Walk the segments and yield the breakpoints of the power curve.

    Every segment contributes a start and an end point, so flat steps have
    width when drawn. Repeated blocks are expanded into one flat step per
    phase. Consecutive points may share a time (a vertical jump).

    Args:
        segments: Segments in execution order

    Yields:
        ProfilePoint in non-decreasing time order
    """
    t = 0
    for seg in segments:
        if isinstance(seg, RAMP_TYPES):
            yield ProfilePoint(t, seg.power_low)
            t += seg.duration
            yield ProfilePoint(t, seg.power_high)

        elif isinstance(seg, SteadyState):
            yield ProfilePoint(t, seg.power)
            t += seg.duration
            yield ProfilePoint(t, seg.power)

        elif isinstance(seg, REPEATED_TYPES):
            for _ in range(seg.repeat):
                for duration, power in seg.phases:
                    yield ProfilePoint(t, power)
                    t += duration
                    yield ProfilePoint(t, power)

        else:
            # No target power: draw at the nominal level
            yield ProfilePoint(t, NOMINAL_POWER)
            t += seg.duration
            yield ProfilePoint(t, NOMINAL_POWER)


def zone_distribution(segments: Iterable[Segment]) -> Dict[int, float]:
    """Seconds spent in each zone.

    Each span between consecutive breakpoints is linear, so a ramp is
    split at the zone boundaries it crosses.

    Args:
        segments: Segments in execution order

    Returns:
        Dict of zone number to seconds (every zone present, possibly 0)
    """
    distribution = {zone.number: 0.0 for zone in ZONES}
    points: List[ProfilePoint] = list(project(segments))

    for start, end in zip(points, points[1:]):
        span = end.time - start.time
        if span <= 0:
            continue

        low, high = sorted((start.power, end.power))
        if low == high:
            for zone in ZONES:
                if low < zone.limit:
                    distribution[zone.number] += span
                    break
            continue

        lower_edge = 0.0
        for zone in ZONES:
            overlap = min(high, zone.limit) - max(low, lower_edge)
            if overlap > 0:
                distribution[zone.number] += span * overlap / (high - low)
            lower_edge = zone.limit

    logger.debug(f"Zone distribution: {distribution}")
    return distribution

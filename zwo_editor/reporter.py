"""Console and markdown summaries of a workout."""

import logging
from datetime import datetime
from pathlib import Path
from typing import List

from .metrics import WorkoutStats, segment_duration
from .models import (
    Segment, Workout, SteadyState, IntervalsT, IntervalsBlock3, RAMP_TYPES,
)
from .profile import project
from .utils import format_time, format_duration
from .zones import ZONES, segment_zone

logger = logging.getLogger(__name__)


def pct(power: float) -> str:
    """Power ratio as a whole percentage of FTP."""
    return f"{round(power * 100)}%"


def describe_segment(segment: Segment) -> str:
    """One-line description, e.g. "5 x 1:00 @ 100% / 1:00 @ 50%"."""
    if isinstance(segment, SteadyState):
        return f"{format_time(segment.duration)} @ {pct(segment.power)}"
    if isinstance(segment, RAMP_TYPES):
        return (
            f"{format_time(segment.duration)} from "
            f"{pct(segment.power_low)} to {pct(segment.power_high)}"
        )
    if isinstance(segment, (IntervalsT, IntervalsBlock3)):
        phases = ' / '.join(
            f"{format_time(duration)} @ {pct(power)}" for duration, power in segment.phases
        )
        return f"{segment.repeat} x {phases}"
    return format_time(segment.duration)


def generate_workout_report(workout: Workout) -> str:
    """Generate a markdown report for a workout.

    Args:
        workout: The Workout to describe

    Returns:
        Markdown report string
    """
    meta = workout.metadata
    stats = WorkoutStats.from_segments(workout.segments)

    lines = [
        f"# {meta.name}",
        "",
        f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
        "",
    ]
    if meta.author:
        lines.append(f"- **Author:** {meta.author}")
    if meta.description:
        lines.append(f"- **Description:** {meta.description}")
    tags = meta.clean_tags()
    if tags:
        lines.append(f"- **Tags:** {', '.join(tags)}")

    lines.extend([
        f"- **Sport:** {meta.sport_type}",
        f"- **Duration:** {format_time(stats.total_duration)} "
        f"({format_duration(stats.total_duration)})",
        f"- **Estimated load:** {stats.load}",
        f"- **Average power:** {pct(stats.average_power)}",
        "",
        "## Segments",
        "",
        "| # | Type | Zone | Duration | Target |",
        "|---|------|------|----------|--------|",
    ])

    for i, seg in enumerate(workout.segments, start=1):
        zone = segment_zone(seg)
        lines.append(
            f"| {i} | {seg.xml_type} | Z{zone.number} | "
            f"{format_time(segment_duration(seg))} | {describe_segment(seg)} |"
        )

    lines.extend([
        "",
        "## Time in Zone",
        "",
    ])
    for zone in ZONES:
        seconds = int(round(stats.zone_seconds.get(zone.number, 0.0)))
        share = seconds / stats.total_duration * 100 if stats.total_duration else 0
        lines.append(
            f"- **Z{zone.number} {zone.name}:** {format_time(seconds)} ({share:.0f}%)"
        )
    lines.append("")

    return '\n'.join(lines)


def write_report(report: str, output_path: Path) -> bool:
    """Write report to file.

    Args:
        report: Report content
        output_path: Output file path

    Returns:
        True if successful
    """
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(report)
        logger.info(f"Report written to: {output_path}")
        return True
    except IOError as e:
        logger.error(f"Failed to write report: {e}")
        return False


def print_workout_summary(workout: Workout) -> None:
    """Print the segment list and totals to stdout."""
    stats = WorkoutStats.from_segments(workout.segments)

    print(f"{workout.metadata.name}")
    for i, seg in enumerate(workout.segments, start=1):
        zone = segment_zone(seg)
        print(f"  {i:>3}. [Z{zone.number}] {seg.xml_type:<15} {describe_segment(seg)}")
    print()
    print(f"  Duration:       {format_time(stats.total_duration)}")
    print(f"  Estimated load: {stats.load}")


def print_profile(segments: List[Segment]) -> None:
    """Print the projected power curve as time/percentage pairs."""
    for point in project(segments):
        print(f"  {format_time(point.time):>8}  {pct(point.power):>5}")

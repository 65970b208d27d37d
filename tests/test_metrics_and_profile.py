import itertools

import pytest

from zwo_editor.metrics import (
    WorkoutStats,
    average_power,
    display_load,
    estimated_load,
    total_duration,
)
from zwo_editor.models import (
    CoolDown,
    FreeRide,
    IntervalsBlock3,
    IntervalsT,
    MaxEffort,
    Ramp,
    SteadyState,
    Warmup,
)
from zwo_editor.profile import ProfilePoint, project, zone_distribution


def _mixed_segments():
    return [
        Warmup(duration=600, power_low=0.25, power_high=0.75),
        SteadyState(duration=300, power=0.9),
        IntervalsT(repeat=5, on_duration=60, off_duration=60, on_power=1.0, off_power=0.5),
        IntervalsBlock3(repeat=2),
        FreeRide(duration=120),
        CoolDown(duration=300, power_low=0.6, power_high=0.3),
    ]


def test_total_duration_of_intervals_is_derived() -> None:
    intervals = IntervalsT(repeat=5, on_duration=60, off_duration=60)
    assert total_duration([intervals]) == 600
    assert intervals.duration == 600

    block = IntervalsBlock3(repeat=2, duration_1=30, duration_2=40, duration_3=50)
    assert total_duration([block]) == 240


def test_total_duration_is_order_independent() -> None:
    segments = _mixed_segments()
    expected = total_duration(segments)
    for perm in itertools.permutations(segments[:4]):
        assert total_duration(list(perm) + segments[4:]) == expected


def test_one_hour_at_threshold_scores_100() -> None:
    assert estimated_load([SteadyState(duration=3600, power=1.0)]) == pytest.approx(100.0)


def test_ramp_load_uses_exact_mean_square() -> None:
    load = estimated_load([Warmup(duration=3600, power_low=0.0, power_high=1.0)])
    assert load == pytest.approx(100 / 3)
    assert display_load(load) == 33


def test_interval_load_sums_phases_times_repeat() -> None:
    intervals = IntervalsT(repeat=4, on_duration=900, on_power=1.0, off_duration=900, off_power=0.5)
    # per rep: 0.25h * 1.0 * 100 + 0.25h * 0.25 * 100 = 31.25
    assert estimated_load([intervals]) == pytest.approx(125.0)


def test_unstructured_segments_use_nominal_power() -> None:
    load = estimated_load([FreeRide(duration=3600), MaxEffort(duration=3600)])
    assert load == pytest.approx(50.0)


def test_display_load_rounds_half_up() -> None:
    assert display_load(32.5) == 33
    assert display_load(33.49) == 33
    assert display_load(0.0) == 0


def test_average_power_is_time_weighted() -> None:
    segments = [SteadyState(duration=100, power=1.0), SteadyState(duration=300, power=0.6)]
    assert average_power(segments) == pytest.approx(0.7)
    assert average_power([]) == 0.0


def test_project_ramp_and_steady() -> None:
    points = list(project([
        Ramp(duration=60, power_low=0.4, power_high=0.8),
        SteadyState(duration=30, power=0.9),
    ]))
    assert points == [
        ProfilePoint(0, 0.4),
        ProfilePoint(60, 0.8),
        ProfilePoint(60, 0.9),
        ProfilePoint(90, 0.9),
    ]


def test_project_expands_intervals() -> None:
    points = list(project([
        IntervalsT(repeat=2, on_duration=30, on_power=1.2, off_duration=15, off_power=0.5),
    ]))
    assert points == [
        (0, 1.2), (30, 1.2), (30, 0.5), (45, 0.5),
        (45, 1.2), (75, 1.2), (75, 0.5), (90, 0.5),
    ]


def test_project_block3_and_placeholders() -> None:
    block = IntervalsBlock3(repeat=1, duration_1=10, power_1=1.0,
                            duration_2=20, power_2=0.8, duration_3=30, power_3=0.5)
    points = list(project([block, MaxEffort(duration=5)]))
    assert [p.time for p in points] == [0, 10, 10, 30, 30, 60, 60, 65]
    assert points[-1].power == 0.5


def test_project_is_restartable_and_ends_at_total_duration() -> None:
    segments = _mixed_segments()
    first = list(project(segments))
    second = list(project(segments))
    assert first == second

    times = [p.time for p in first]
    assert times == sorted(times)
    assert times[-1] == total_duration(segments)


def test_project_empty() -> None:
    assert list(project([])) == []


def test_zone_distribution_splits_ramps() -> None:
    # 0.0 -> 1.2 over 120s: each 0.01 of power is 1 second
    distribution = zone_distribution([Warmup(duration=120, power_low=0.0, power_high=1.2)])
    assert distribution[1] == pytest.approx(60)
    assert distribution[2] == pytest.approx(16)
    assert distribution[3] == pytest.approx(14)
    assert distribution[4] == pytest.approx(15)
    assert distribution[5] == pytest.approx(14)
    assert distribution[6] == pytest.approx(1)
    assert sum(distribution.values()) == pytest.approx(120)


def test_zone_distribution_flat_segments() -> None:
    distribution = zone_distribution([
        SteadyState(duration=300, power=0.60),
        IntervalsT(repeat=3, on_duration=60, on_power=1.1, off_duration=60, off_power=0.4),
    ])
    assert distribution[2] == 300
    assert distribution[5] == 180
    assert distribution[1] == 180


def test_workout_stats_bundle() -> None:
    stats = WorkoutStats.from_segments(iter([SteadyState(duration=3600, power=1.0)]))
    assert stats.total_duration == 3600
    assert stats.load == 100
    assert stats.zone_seconds[4] == 3600

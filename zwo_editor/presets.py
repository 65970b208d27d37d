"""Built-in workouts available from the editor's library menu."""

from dataclasses import dataclass
from typing import List, Tuple

from .models import Metadata, Segment, Workout, Warmup, CoolDown, SteadyState


@dataclass(frozen=True)
class Preset:
    key: str
    name: str
    description: str
    segments: Tuple[Segment, ...]


def _steady(*steps: Tuple[int, float]) -> Tuple[SteadyState, ...]:
    return tuple(SteadyState(duration=duration, power=power) for duration, power in steps)


PRESETS: Tuple[Preset, ...] = (
    Preset(
        key='mywhoosh_45min',
        name='45minL3-5build-up',
        description='mywhoosh - 45minL3-5build-up',
        segments=(
            Warmup(duration=600, power_low=0.5, power_high=0.7),
            *_steady(
                (300, 0.8), (180, 0.9), (60, 1.0),
                (300, 0.86), (180, 0.9), (60, 1.05),
                (300, 0.86), (180, 0.95), (60, 1.1),
                (300, 0.86), (180, 0.95), (60, 1.15),
                (300, 0.86), (180, 0.95), (60, 1.21),
            ),
            CoolDown(duration=300, power_low=0.5, power_high=0.3),
        ),
    ),
    Preset(
        key='mywhoosh_hidit',
        name='HIDIT',
        description='mywhoosh - hidit',
        segments=(
            Warmup(duration=120, power_low=0.5, power_high=0.6),
            *_steady((360, 0.6)),
            Warmup(duration=120, power_low=0.65, power_high=1.4),
            *_steady(
                (60, 0.55), (60, 1.35),
                (170, 0.55), (180, 1.3),
                (120, 0.55), (120, 1.3),
                (90, 0.55), (90, 1.3),
                (60, 0.55), (60, 1.3),
                (40, 0.55), (40, 1.3),
                (30, 0.5), (30, 1.3),
                (20, 0.5), (30, 1.3),
                (20, 0.5), (30, 1.3),
                (20, 0.4), (30, 1.3),
                (20, 0.4),
            ),
            CoolDown(duration=300, power_low=0.55, power_high=0.4),
        ),
    ),
)


def list_presets() -> List[Preset]:
    return list(PRESETS)


def get_preset(key: str) -> Workout:
    """Build a fresh Workout from a preset.

    Raises:
        KeyError: If no preset has this key
    """
    for preset in PRESETS:
        if preset.key == key:
            segments = [seg.copy() for seg in preset.segments]
            for i, seg in enumerate(segments, start=1):
                seg.id = i
            return Workout(
                metadata=Metadata(name=preset.name, description=preset.description),
                segments=segments,
            )
    raise KeyError(f"Unknown preset: {key}")

"""Data structures for the ZWO Workout Editor.

A workout is an ordered list of segments. Each segment type is its own
dataclass so that only the fields a type actually has can be read. The
``id`` field is a session-local handle and is excluded from equality, so
two workouts compare equal when their content does.
"""

import copy
from dataclasses import dataclass, field, fields
from typing import ClassVar, Dict, List, Tuple, Type

from .config import (
    DEFAULT_DURATION, DEFAULT_RAMP_LOW, DEFAULT_RAMP_HIGH, DEFAULT_STEADY_POWER,
    DEFAULT_INTERVAL_REPEAT, DEFAULT_ON_DURATION, DEFAULT_OFF_DURATION,
    DEFAULT_ON_POWER, DEFAULT_OFF_POWER, DEFAULT_BLOCK3_REPEAT,
    DEFAULT_BLOCK3_PHASES, DEFAULT_WORKOUT_NAME, DEFAULT_SPORT_TYPE,
    DEFAULT_AUTHOR,
)


class Segment:
    """Base class of all workout segment types."""

    xml_type: ClassVar[str] = ''
    id: int

    @classmethod
    def field_names(cls) -> List[str]:
        """Editable field names, in declaration order (``id`` excluded)."""
        return [f.name for f in fields(cls) if f.name != 'id']

    def copy(self) -> 'Segment':
        """Create a deep copy of this segment, keeping its id."""
        return copy.deepcopy(self)


@dataclass
class Warmup(Segment):
    """Linear ramp, normally upward."""
    xml_type: ClassVar[str] = 'Warmup'

    duration: int = DEFAULT_DURATION
    power_low: float = DEFAULT_RAMP_LOW
    power_high: float = DEFAULT_RAMP_HIGH
    id: int = field(default=0, compare=False)


@dataclass
class CoolDown(Segment):
    """Linear ramp, normally downward."""
    xml_type: ClassVar[str] = 'CoolDown'

    duration: int = DEFAULT_DURATION
    power_low: float = DEFAULT_RAMP_HIGH
    power_high: float = DEFAULT_RAMP_LOW
    id: int = field(default=0, compare=False)


@dataclass
class Ramp(Segment):
    """Linear ramp in either direction."""
    xml_type: ClassVar[str] = 'Ramp'

    duration: int = DEFAULT_DURATION
    power_low: float = DEFAULT_RAMP_LOW
    power_high: float = DEFAULT_RAMP_HIGH
    id: int = field(default=0, compare=False)


@dataclass
class SteadyState(Segment):
    """Constant power."""
    xml_type: ClassVar[str] = 'SteadyState'

    duration: int = DEFAULT_DURATION
    power: float = DEFAULT_STEADY_POWER
    id: int = field(default=0, compare=False)


@dataclass
class IntervalsT(Segment):
    """On/off block repeated ``repeat`` times."""
    xml_type: ClassVar[str] = 'IntervalsT'

    repeat: int = DEFAULT_INTERVAL_REPEAT
    on_duration: int = DEFAULT_ON_DURATION
    on_power: float = DEFAULT_ON_POWER
    off_duration: int = DEFAULT_OFF_DURATION
    off_power: float = DEFAULT_OFF_POWER
    id: int = field(default=0, compare=False)

    @property
    def phases(self) -> List[Tuple[int, float]]:
        return [(self.on_duration, self.on_power), (self.off_duration, self.off_power)]

    @property
    def duration(self) -> int:
        return self.repeat * (self.on_duration + self.off_duration)


@dataclass
class IntervalsBlock3(Segment):
    """Three-phase block repeated ``repeat`` times.

    There is no ZWO element for this type; the codec writes it out as
    plain SteadyState steps.
    """
    xml_type: ClassVar[str] = 'IntervalsBlock3'

    repeat: int = DEFAULT_BLOCK3_REPEAT
    duration_1: int = DEFAULT_BLOCK3_PHASES[0][0]
    power_1: float = DEFAULT_BLOCK3_PHASES[0][1]
    duration_2: int = DEFAULT_BLOCK3_PHASES[1][0]
    power_2: float = DEFAULT_BLOCK3_PHASES[1][1]
    duration_3: int = DEFAULT_BLOCK3_PHASES[2][0]
    power_3: float = DEFAULT_BLOCK3_PHASES[2][1]
    id: int = field(default=0, compare=False)

    @property
    def phases(self) -> List[Tuple[int, float]]:
        return [
            (self.duration_1, self.power_1),
            (self.duration_2, self.power_2),
            (self.duration_3, self.power_3),
        ]

    @property
    def duration(self) -> int:
        return self.repeat * (self.duration_1 + self.duration_2 + self.duration_3)


@dataclass
class FreeRide(Segment):
    """Unstructured riding, no power target."""
    xml_type: ClassVar[str] = 'FreeRide'

    duration: int = DEFAULT_DURATION
    id: int = field(default=0, compare=False)


@dataclass
class MaxEffort(Segment):
    """All-out effort, no power target."""
    xml_type: ClassVar[str] = 'MaxEffort'

    duration: int = DEFAULT_DURATION
    id: int = field(default=0, compare=False)


RAMP_TYPES = (Warmup, CoolDown, Ramp)
REPEATED_TYPES = (IntervalsT, IntervalsBlock3)
UNSTRUCTURED_TYPES = (FreeRide, MaxEffort)

SEGMENT_TYPES: Dict[str, Type[Segment]] = {
    cls.xml_type: cls
    for cls in (Warmup, CoolDown, Ramp, SteadyState, IntervalsT,
                IntervalsBlock3, FreeRide, MaxEffort)
}


@dataclass
class Metadata:
    """Descriptive fields of a workout file."""
    name: str = DEFAULT_WORKOUT_NAME
    author: str = DEFAULT_AUTHOR
    description: str = ''
    sport_type: str = DEFAULT_SPORT_TYPE
    tags: List[str] = field(default_factory=list)

    def clean_tags(self) -> List[str]:
        """Tags with empty entries and duplicates removed, order kept."""
        seen = set()
        result = []
        for tag in self.tags:
            tag = (tag or '').strip()
            if tag and tag not in seen:
                seen.add(tag)
                result.append(tag)
        return result


@dataclass
class Workout:
    """Complete workout definition."""
    metadata: Metadata = field(default_factory=Metadata)
    segments: List[Segment] = field(default_factory=list)

    def copy(self) -> 'Workout':
        """Create a deep copy of this workout."""
        return copy.deepcopy(self)

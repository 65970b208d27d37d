"""Editing session: structural and field edits over one workout."""

import itertools
import logging
import math
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Tuple

from .config import STARTER_SEGMENTS
from .metrics import total_duration, estimated_load
from .models import Metadata, Segment, Workout, SEGMENT_TYPES
from .profile import ProfilePoint, project
from .utils import parse_time

logger = logging.getLogger(__name__)


class EditorError(Exception):
    """Base exception for editing errors."""
    pass


class SegmentTypeError(EditorError):
    """Unknown segment type requested."""
    pass


class SegmentNotFoundError(EditorError):
    """No segment with the given id."""
    pass


class FieldError(EditorError):
    """Unknown field name or a value that cannot be parsed."""
    pass


@dataclass(frozen=True)
class EditorView:
    """Read-only snapshot handed to the presentation layer."""
    segments: Tuple[Segment, ...]
    profile: Tuple[ProfilePoint, ...]
    total_duration: int
    estimated_load: float


def parse_field_value(field_name: str, raw_value: Any) -> Any:
    """Parse user input for a segment field.

    Power fields are entered as percentages of FTP and stored as ratios,
    duration fields accept "M:SS" or seconds, everything else is an integer.

    Raises:
        FieldError: If the value cannot be parsed or is negative
    """
    try:
        if 'power' in field_name:
            value = float(str(raw_value).strip()) / 100
        elif 'duration' in field_name:
            value = parse_time(raw_value)
        else:
            value = int(str(raw_value).strip())
    except ValueError as e:
        raise FieldError(f"Invalid value for {field_name}: {raw_value!r}") from e

    if value < 0 or not math.isfinite(value):
        raise FieldError(f"Invalid value for {field_name}: {raw_value!r}")
    return value


class EditorSession:
    """Owns the workout being edited and hands out segment ids.

    Ids start at 1 and are never reused within a session. After every
    successful mutation ``on_change`` (if given) receives a fresh view.
    """

    def __init__(
        self,
        workout: Optional[Workout] = None,
        on_change: Optional[Callable[[EditorView], None]] = None
    ):
        self._ids = itertools.count(1)
        self.on_change = on_change or (lambda view: None)
        self.workout = Workout()
        if workout is not None:
            self._install(workout)

    @classmethod
    def with_defaults(
        cls,
        on_change: Optional[Callable[[EditorView], None]] = None
    ) -> 'EditorSession':
        """Session pre-populated with the starter warmup and steady block."""
        session = cls(on_change=on_change)
        for xml_type, overrides in STARTER_SEGMENTS:
            session.workout.segments.append(session._build(xml_type, overrides))
        return session

    @property
    def segments(self) -> Tuple[Segment, ...]:
        return tuple(self.workout.segments)

    @property
    def metadata(self) -> Metadata:
        return self.workout.metadata

    def _next_id(self) -> int:
        return next(self._ids)

    def _install(self, workout: Workout) -> None:
        workout = workout.copy()
        for seg in workout.segments:
            seg.id = self._next_id()
        self.workout = workout

    def _build(self, xml_type: str, overrides: dict) -> Segment:
        cls = SEGMENT_TYPES.get(xml_type)
        if cls is None:
            raise SegmentTypeError(f"Unknown segment type: {xml_type}")

        allowed = cls.field_names()
        unknown = [name for name in overrides if name not in allowed]
        if unknown:
            raise FieldError(f"{xml_type} has no field(s): {', '.join(unknown)}")

        return cls(id=self._next_id(), **overrides)

    def _changed(self) -> None:
        self.on_change(self.view())

    def index_of(self, segment_id: int) -> int:
        """Index of a segment, or -1 if absent."""
        for i, seg in enumerate(self.workout.segments):
            if seg.id == segment_id:
                return i
        return -1

    def find_segment(self, segment_id: int) -> Optional[Segment]:
        idx = self.index_of(segment_id)
        return self.workout.segments[idx] if idx >= 0 else None

    def add_segment(self, xml_type: str, **overrides: Any) -> int:
        """Append a new segment with type defaults and overrides applied.

        Args:
            xml_type: Segment type tag, e.g. 'SteadyState'
            **overrides: Field values replacing the defaults

        Returns:
            Id of the new segment

        Raises:
            SegmentTypeError: If xml_type is not a known segment type
            FieldError: If an override names a field the type does not have
        """
        segment = self._build(xml_type, overrides)
        self.workout.segments.append(segment)
        logger.debug(f"Added {xml_type} #{segment.id}")
        self._changed()
        return segment.id

    def remove_segment(self, segment_id: int) -> None:
        """Delete a segment; unknown ids are ignored."""
        idx = self.index_of(segment_id)
        if idx < 0:
            return
        del self.workout.segments[idx]
        logger.debug(f"Removed segment #{segment_id}")
        self._changed()

    def move_segment(self, segment_id: int, target_index: int) -> None:
        """Move a segment to target_index, clamped to the list bounds."""
        idx = self.index_of(segment_id)
        if idx < 0:
            return
        segments = self.workout.segments
        target = max(0, min(target_index, len(segments) - 1))
        if target == idx:
            return
        segments.insert(target, segments.pop(idx))
        logger.debug(f"Moved segment #{segment_id} from {idx} to {target}")
        self._changed()

    def shift_segment(self, segment_id: int, step: int) -> None:
        """Move a segment up (negative step) or down (positive step)."""
        idx = self.index_of(segment_id)
        if idx < 0:
            return
        self.move_segment(segment_id, idx + step)

    def duplicate_segment(self, segment_id: int) -> Optional[int]:
        """Insert a copy of a segment right after it.

        Returns:
            Id of the copy, or None if segment_id is unknown
        """
        idx = self.index_of(segment_id)
        if idx < 0:
            return None
        clone = self.workout.segments[idx].copy()
        clone.id = self._next_id()
        self.workout.segments.insert(idx + 1, clone)
        logger.debug(f"Duplicated segment #{segment_id} as #{clone.id}")
        self._changed()
        return clone.id

    def update_field(self, segment_id: int, field_name: str, raw_value: Any) -> None:
        """Set one field of a segment from raw user input.

        Args:
            segment_id: Id of the segment to edit
            field_name: Field to set, e.g. 'power' or 'on_duration'
            raw_value: Text as typed; powers are percentages

        Raises:
            SegmentNotFoundError: If no segment has this id
            FieldError: If the field is unknown or the value unparseable
        """
        segment = self.find_segment(segment_id)
        if segment is None:
            raise SegmentNotFoundError(f"No segment with id {segment_id}")
        if field_name not in segment.field_names():
            raise FieldError(f"{segment.xml_type} has no editable field '{field_name}'")

        value = parse_field_value(field_name, raw_value)
        setattr(segment, field_name, value)
        logger.debug(f"Set {field_name}={value} on #{segment_id}")
        self._changed()

    def update_metadata(self, **values: Any) -> None:
        """Set metadata fields such as name, author or tags."""
        metadata = self.workout.metadata
        for key, value in values.items():
            if not hasattr(metadata, key):
                raise FieldError(f"Unknown metadata field '{key}'")
            setattr(metadata, key, list(value) if key == 'tags' else value)
        self._changed()

    def replace_workout(self, workout: Workout) -> None:
        """Replace the whole workout, e.g. after loading a file.

        Segments receive fresh ids from this session.
        """
        self._install(workout)
        logger.debug(f"Loaded '{workout.metadata.name}' with {len(workout.segments)} segments")
        self._changed()

    def view(self) -> EditorView:
        """Current segments with profile and summary numbers recomputed."""
        segments: List[Segment] = self.workout.segments
        return EditorView(
            segments=tuple(seg.copy() for seg in segments),
            profile=tuple(project(segments)),
            total_duration=total_duration(segments),
            estimated_load=estimated_load(segments),
        )

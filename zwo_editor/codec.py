"""Conversion between workouts and .zwo XML text."""

import logging
import math
import warnings
import xml.etree.ElementTree as ET
from typing import Callable, Dict, List, Optional, Union
from xml.sax.saxutils import escape

from bs4 import BeautifulSoup, XMLParsedAsHTMLWarning

from .config import DEFAULT_WORKOUT_NAME, DEFAULT_SPORT_TYPE
from .models import (
    Metadata, Segment, Workout, Warmup, CoolDown, Ramp, SteadyState,
    IntervalsT, IntervalsBlock3, FreeRide, MaxEffort, RAMP_TYPES,
)

logger = logging.getLogger(__name__)

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'
INDENT = '    '

# escape() covers & < >; quotes are added so text is safe anywhere
_ENTITIES = {'"': '&quot;', "'": '&apos;'}

# Element names accepted on decode; Zwift itself writes "Cooldown"
ELEMENT_ALIASES = {'Cooldown': 'CoolDown'}


def escape_xml(text: Optional[str]) -> str:
    """Escape the five XML-reserved characters."""
    return escape(text or '', _ENTITIES)


def format_power(value: float) -> str:
    """Shortest decimal form that reads back to the same float."""
    text = repr(float(value))
    if text.endswith('.0'):
        text = text[:-2]
    return text


def format_attributes(attributes: Dict[str, str]) -> str:
    return ' '.join(f'{key}="{escape_xml(value)}"' for key, value in attributes.items())


def segment_elements(segment: Segment) -> List[str]:
    """XML elements for one segment.

    Args:
        segment: The segment to encode

    Returns:
        Element strings; an IntervalsBlock3 yields one SteadyState per
        phase and repetition, everything else a single element
    """
    if isinstance(segment, IntervalsBlock3):
        return [
            steady_element(duration, power)
            for _ in range(segment.repeat)
            for duration, power in segment.phases
        ]

    if isinstance(segment, RAMP_TYPES):
        attributes = {
            'Duration': str(segment.duration),
            'PowerLow': format_power(segment.power_low),
            'PowerHigh': format_power(segment.power_high),
        }
    elif isinstance(segment, SteadyState):
        return [steady_element(segment.duration, segment.power)]
    elif isinstance(segment, IntervalsT):
        attributes = {
            'Repeat': str(segment.repeat),
            'OnDuration': str(segment.on_duration),
            'OffDuration': str(segment.off_duration),
            'OnPower': format_power(segment.on_power),
            'OffPower': format_power(segment.off_power),
        }
    else:
        attributes = {'Duration': str(segment.duration)}

    return [f'<{segment.xml_type} {format_attributes(attributes)}/>']


def steady_element(duration: int, power: float) -> str:
    attributes = {'Duration': str(duration), 'Power': format_power(power)}
    return f'<SteadyState {format_attributes(attributes)}/>'


def encode(workout: Workout) -> str:
    """Convert a Workout to .zwo XML text.

    Args:
        workout: The workout to serialize

    Returns:
        Indented XML document with declaration
    """
    meta = workout.metadata
    lines = [
        XML_DECLARATION,
        '<workout_file>',
        f'{INDENT}<author>{escape_xml(meta.author)}</author>',
        f'{INDENT}<name>{escape_xml(meta.name)}</name>',
        f'{INDENT}<description>{escape_xml(meta.description)}</description>',
        f'{INDENT}<sportType>{escape_xml(meta.sport_type or DEFAULT_SPORT_TYPE)}</sportType>',
    ]

    tags = meta.clean_tags()
    if tags:
        lines.append(f'{INDENT}<tags>')
        for tag in tags:
            lines.append(f'{INDENT * 2}<tag name="{escape_xml(tag)}"/>')
        lines.append(f'{INDENT}</tags>')
    else:
        lines.append(f'{INDENT}<tags/>')

    lines.append(f'{INDENT}<workout>')
    for segment in workout.segments:
        for element in segment_elements(segment):
            lines.append(f'{INDENT * 2}{element}')
    lines.append(f'{INDENT}</workout>')
    lines.append('</workout_file>')

    return '\n'.join(lines) + '\n'


def parse_float(value: Optional[str]) -> float:
    """Parse a float attribute, 0.0 if missing, malformed or negative."""
    if value is None:
        return 0.0
    try:
        result = float(value)
    except ValueError:
        return 0.0
    if not math.isfinite(result) or result < 0:
        return 0.0
    return result


def parse_int(value: Optional[str]) -> int:
    """Parse an integer attribute, 0 if missing, malformed or negative.

    Decimal text such as "300.0" is truncated.
    """
    if value is None:
        return 0
    try:
        result = int(value)
    except ValueError:
        return int(parse_float(value))
    return max(result, 0)


def _parse_ramp(cls) -> Callable[[ET.Element], Segment]:
    def parse(elem: ET.Element) -> Segment:
        return cls(
            duration=parse_int(elem.get('Duration')),
            power_low=parse_float(elem.get('PowerLow')),
            power_high=parse_float(elem.get('PowerHigh')),
        )
    return parse


def _parse_steady(elem: ET.Element) -> Segment:
    return SteadyState(
        duration=parse_int(elem.get('Duration')),
        power=parse_float(elem.get('Power')),
    )


def _parse_intervals(elem: ET.Element) -> Segment:
    # Duration is derived from Repeat/OnDuration/OffDuration; any
    # Duration attribute in the file is ignored
    return IntervalsT(
        repeat=parse_int(elem.get('Repeat')),
        on_duration=parse_int(elem.get('OnDuration')),
        off_duration=parse_int(elem.get('OffDuration')),
        on_power=parse_float(elem.get('OnPower')),
        off_power=parse_float(elem.get('OffPower')),
    )


def _parse_duration_only(cls) -> Callable[[ET.Element], Segment]:
    def parse(elem: ET.Element) -> Segment:
        return cls(duration=parse_int(elem.get('Duration')))
    return parse


ELEMENT_PARSERS: Dict[str, Callable[[ET.Element], Segment]] = {
    'Warmup': _parse_ramp(Warmup),
    'CoolDown': _parse_ramp(CoolDown),
    'Ramp': _parse_ramp(Ramp),
    'SteadyState': _parse_steady,
    'IntervalsT': _parse_intervals,
    'FreeRide': _parse_duration_only(FreeRide),
    'MaxEffort': _parse_duration_only(MaxEffort),
}


def parse_segment_element(elem: ET.Element) -> Optional[Segment]:
    """Parse a single segment element, None if the type is unknown."""
    xml_type = ELEMENT_ALIASES.get(elem.tag, elem.tag)
    parser = ELEMENT_PARSERS.get(xml_type)
    if parser is None:
        logger.debug(f"Skipping unknown segment type: {elem.tag}")
        return None
    return parser(elem)


def get_element_text(root: ET.Element, tag: str, default: str = '') -> str:
    """Get text content of an XML element."""
    elem = root.find(tag)
    if elem is not None and elem.text and elem.text.strip():
        return elem.text.strip()
    return default


def _recover_metadata(text: Union[str, bytes]) -> Metadata:
    """Best-effort metadata from a document that is not well-formed."""
    with warnings.catch_warnings():
        warnings.simplefilter('ignore', XMLParsedAsHTMLWarning)
        soup = BeautifulSoup(text, 'html.parser')

    def find_text(tag: str, default: str = '') -> str:
        # html.parser folds tag names to lower case
        elem = soup.find(tag.lower())
        if elem is None:
            return default
        value = elem.get_text(strip=True)
        return value or default

    tags = []
    for tag in soup.find_all('tag'):
        name = tag.get('name')
        if name:
            tags.append(name)

    return Metadata(
        name=find_text('name', DEFAULT_WORKOUT_NAME),
        author=find_text('author'),
        description=find_text('description'),
        sport_type=find_text('sportType', DEFAULT_SPORT_TYPE),
        tags=tags,
    )


def decode(text: Union[str, bytes]) -> Workout:
    """Parse .zwo XML text into a Workout.

    Decoding never fails: unknown elements and attributes are ignored,
    malformed numbers read as 0, and a document that is not well-formed
    yields whatever metadata can be recovered and no segments. Segments
    get ids 1..n in document order.

    Args:
        text: The XML document

    Returns:
        Workout
    """
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        logger.error(f"Invalid XML: {e}")
        return Workout(metadata=_recover_metadata(text), segments=[])

    if root.tag != 'workout_file':
        logger.warning(f"Unexpected root element '{root.tag}', reading anyway")

    # Extract tags
    tags = []
    tags_elem = root.find('tags')
    if tags_elem is not None:
        for tag in tags_elem.findall('tag'):
            tag_name = tag.get('name')
            if tag_name:
                tags.append(tag_name)

    metadata = Metadata(
        name=get_element_text(root, 'name', DEFAULT_WORKOUT_NAME),
        author=get_element_text(root, 'author'),
        description=get_element_text(root, 'description'),
        sport_type=get_element_text(root, 'sportType', DEFAULT_SPORT_TYPE),
        tags=tags,
    )

    # Extract segments
    segments: List[Segment] = []
    workout_elem = root.find('workout')
    if workout_elem is None:
        logger.warning("No <workout> element in document")
    else:
        for elem in workout_elem:
            segment = parse_segment_element(elem)
            if segment is not None:
                segment.id = len(segments) + 1
                segments.append(segment)

    logger.debug(f"Decoded '{metadata.name}' with {len(segments)} segments")
    return Workout(metadata=metadata, segments=segments)

"""Time and naming helpers shared across the editor."""

import re
from typing import Optional, Union

from .config import FILENAME_INVALID_CHARS, MAX_FILENAME_LENGTH


def format_time(seconds: int) -> str:
    """Format a duration in seconds as "M:SS".

    Args:
        seconds: Non-negative duration in seconds

    Returns:
        Formatted string like "5:30" or "75:00"

    Raises:
        ValueError: If seconds is negative
    """
    seconds = int(seconds)
    if seconds < 0:
        raise ValueError(f"Cannot format negative duration: {seconds}")
    return f"{seconds // 60}:{seconds % 60:02d}"


def parse_time(text: Optional[Union[str, int]]) -> int:
    """Parse "M:SS" or a bare count of seconds.

    Examples:
        "5:30" -> 330
        "125" -> 125
        "" -> 0

    Raises:
        ValueError: If the text is not a non-negative number or a single
            "M:SS" pair with seconds below 60
    """
    if text is None:
        return 0
    text = str(text).strip()
    if not text:
        return 0

    parts = text.split(':')
    if len(parts) == 2:
        minutes, secs = int(parts[0]), int(parts[1])
        if minutes < 0 or not 0 <= secs < 60:
            raise ValueError(f"Invalid time: {text}")
        return minutes * 60 + secs

    seconds = int(text)
    if seconds < 0:
        raise ValueError(f"Invalid time: {text}")
    return seconds


def format_duration(seconds: int) -> str:
    """Format duration in seconds as human-readable string.

    Args:
        seconds: Duration in seconds

    Returns:
        Formatted string like "1h 30m", "45m" or "30s"
    """
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60

    if hours > 0:
        if minutes > 0:
            return f"{hours}h {minutes}m"
        return f"{hours}h"
    if minutes == 0 and seconds > 0:
        return f"{seconds}s"
    return f"{minutes}m"


def sanitize_filename(name: str, max_length: int = MAX_FILENAME_LENGTH) -> str:
    """Sanitize a string for use as a filename.

    Args:
        name: The string to sanitize
        max_length: Maximum length for the result

    Returns:
        Sanitized filename string, "workout" if nothing usable remains
    """
    # Remove invalid characters
    result = re.sub(FILENAME_INVALID_CHARS, '', name)

    # Replace whitespace with underscores
    result = re.sub(r'\s+', '_', result.strip())

    # Remove multiple underscores
    result = re.sub(r'_+', '_', result)
    result = result.strip('_.')

    if len(result) > max_length:
        result = result[:max_length].rstrip('_.')

    return result or 'workout'

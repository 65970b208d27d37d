"""Configuration constants for the ZWO Workout Editor."""

import math
from pathlib import Path

# Power zones (decimal, % FTP): (name, exclusive upper limit, color, background)
ZONE_TABLE = [
    ('Recovery', 0.60, '#7f7f7f', 'rgba(127, 127, 127, 0.2)'),
    ('Endurance', 0.76, '#3284c9', 'rgba(50, 132, 201, 0.2)'),
    ('Tempo', 0.90, '#5aca5a', 'rgba(90, 202, 90, 0.2)'),
    ('Threshold', 1.05, '#ffca28', 'rgba(255, 202, 40, 0.2)'),
    ('VO2 Max', 1.19, '#ff6924', 'rgba(255, 105, 36, 0.2)'),
    ('Anaerobic', math.inf, '#ff3737', 'rgba(255, 55, 55, 0.2)'),
]

# Stand-in intensity for segments without a power target (FreeRide, MaxEffort)
NOMINAL_POWER = 0.5

# Segment defaults
DEFAULT_DURATION = 300  # 5 minutes
DEFAULT_RAMP_LOW = 0.25
DEFAULT_RAMP_HIGH = 0.75
DEFAULT_STEADY_POWER = 0.85
DEFAULT_INTERVAL_REPEAT = 5
DEFAULT_ON_DURATION = 60
DEFAULT_OFF_DURATION = 60
DEFAULT_ON_POWER = 1.0
DEFAULT_OFF_POWER = 0.5
DEFAULT_BLOCK3_REPEAT = 3
DEFAULT_BLOCK3_PHASES = [(60, 1.05), (60, 0.85), (60, 0.5)]

# Segments a fresh editor starts with: (xml_type, overrides)
STARTER_SEGMENTS = [
    ('Warmup', {'duration': 600, 'power_low': 0.25, 'power_high': 0.75}),
    ('SteadyState', {'duration': 300, 'power': 0.90}),
]

# Document defaults
DEFAULT_WORKOUT_NAME = 'Unknown Workout'
DEFAULT_SPORT_TYPE = 'bike'
DEFAULT_AUTHOR = ''

# Network loading
DEFAULT_TIMEOUT = 30  # seconds
MAX_RETRIES = 3
USER_AGENT = 'ZwoEditor/1.0 (Workout File Loader)'

# Library
LIBRARY_DIR = Path.home() / '.zwo-editor' / 'library'
LIBRARY_SUFFIX = '.zwo'

# File naming
MAX_FILENAME_LENGTH = 50
FILENAME_INVALID_CHARS = r'[<>:"/\\|?*]'

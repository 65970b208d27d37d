#!/usr/bin/env python3
"""
ZWO Workout Editor - Entry point script.

Inspect, convert and store .zwo interval workouts.

Usage:
    python zwo_editor.py <command> [options]

Examples:
    python zwo_editor.py show ./workout.zwo --profile
    python zwo_editor.py new --preset mywhoosh_45min -o ./45min.zwo
    python zwo_editor.py library list
"""

import sys
from zwo_editor.main import main

if __name__ == '__main__':
    sys.exit(main())

"""CLI entry point for the ZWO Workout Editor."""

import argparse
import logging
import sys
from pathlib import Path

from . import config
from .codec import encode
from .library import LibraryError, WorkoutLibrary
from .loader import LoaderError, WorkoutFetcher, load_source
from .metrics import total_duration
from .models import Workout
from .presets import list_presets
from .reporter import (
    generate_workout_report, print_profile, print_workout_summary, write_report,
)
from .session import EditorError, EditorSession
from .utils import format_time

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)

    if verbose:
        formatter = logging.Formatter('[%(levelname)s] %(name)s: %(message)s')
    else:
        formatter = logging.Formatter('%(message)s')

    console_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(console_handler)


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        prog='zwo_editor',
        description='Inspect, convert and store .zwo interval workouts',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Sources may be a file path, an http(s) URL, preset:<key> or library:<key>.

Examples:
  %(prog)s show ./workout.zwo --profile
  %(prog)s export https://example.com/vo2.zwo -o ./vo2.zwo
  %(prog)s new --preset mywhoosh_hidit -o ./hidit.zwo
  %(prog)s library save ./workout.zwo
        """
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose logging'
    )

    parser.add_argument(
        '--library-dir',
        type=Path,
        default=None,
        help=f'Workout library directory (default: {config.LIBRARY_DIR})'
    )

    parser.add_argument(
        '--timeout',
        type=int,
        default=config.DEFAULT_TIMEOUT,
        help=f'Request timeout in seconds (default: {config.DEFAULT_TIMEOUT})'
    )

    commands = parser.add_subparsers(dest='command', required=True)

    show = commands.add_parser('show', help='Print segments, duration and load')
    show.add_argument('source', help='Workout to show')
    show.add_argument('--profile', action='store_true', help='Print the power curve breakpoints')
    show.add_argument('--report', type=Path, help='Also write a markdown report to this path')

    export = commands.add_parser('export', help='Re-encode a workout as .zwo')
    export.add_argument('source', help='Workout to export')
    export.add_argument('--output', '-o', type=Path, required=True, help='Output .zwo file')

    new = commands.add_parser('new', help='Create a workout from the starter segments or a preset')
    new.add_argument('--preset', help='Preset key (see the presets command)')
    new.add_argument('--name', help='Workout name')
    new.add_argument('--output', '-o', type=Path, required=True, help='Output .zwo file')

    commands.add_parser('presets', help='List built-in workouts')

    library = commands.add_parser('library', help='Manage saved workouts')
    actions = library.add_subparsers(dest='action', required=True)
    actions.add_parser('list', help='List saved workouts')
    save = actions.add_parser('save', help='Save a workout to the library')
    save.add_argument('source', help='Workout to save')
    delete = actions.add_parser('delete', help='Remove a saved workout')
    delete.add_argument('key', help='Library key')

    return parser


def write_output(workout: Workout, output_path: Path) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w', encoding='utf-8', newline='\n') as f:
        f.write(encode(workout))
    logger.info(f"Wrote: {output_path}")


def run_command(args: argparse.Namespace) -> int:
    library = WorkoutLibrary(args.library_dir)
    fetcher = WorkoutFetcher(timeout=args.timeout)

    if args.command == 'show':
        workout = load_source(args.source, fetcher=fetcher, library=library)
        print_workout_summary(workout)
        if args.profile:
            print()
            print_profile(workout.segments)
        if args.report:
            write_report(generate_workout_report(workout), args.report)

    elif args.command == 'export':
        workout = load_source(args.source, fetcher=fetcher, library=library)
        write_output(workout, args.output)

    elif args.command == 'new':
        if args.preset:
            session = EditorSession(load_source(f"preset:{args.preset}"))
        else:
            session = EditorSession.with_defaults()
        if args.name:
            session.update_metadata(name=args.name)
        write_output(session.workout, args.output)

    elif args.command == 'presets':
        for preset in list_presets():
            duration = format_time(total_duration(preset.segments))
            print(f"  {preset.key:<20} {preset.name} ({duration})")

    elif args.command == 'library':
        if args.action == 'list':
            entries = library.list()
            if not entries:
                print("Library is empty")
            for entry in entries:
                saved = entry.saved_at.strftime('%Y-%m-%d %H:%M')
                print(f"  {entry.key:<30} {entry.name} (saved {saved})")
        elif args.action == 'save':
            workout = load_source(args.source, fetcher=fetcher, library=library)
            entry = library.save(workout)
            print(f"Saved as {entry.key}")
        elif args.action == 'delete':
            if not library.delete(args.key):
                logger.error(f"No saved workout '{args.key}'")
                return 1

    return 0


def main(argv=None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    try:
        return run_command(args)
    except (EditorError, LoaderError, LibraryError) as e:
        logger.error(str(e))
        return 1


if __name__ == '__main__':
    sys.exit(main())

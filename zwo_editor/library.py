"""Local library of saved workouts, one .zwo file per entry."""

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from . import config
from .codec import encode, decode
from .models import Workout
from .utils import sanitize_filename

logger = logging.getLogger(__name__)


class LibraryError(Exception):
    """Library read/write failure."""
    pass


@dataclass(frozen=True)
class LibraryEntry:
    key: str
    name: str
    saved_at: datetime
    path: Path


class WorkoutLibrary:
    """Workouts stored under a directory, keyed by sanitized name.

    Saving a workout whose name maps to an existing key replaces it.
    """

    def __init__(self, base_dir: Optional[Path] = None):
        self.base_dir = Path(base_dir) if base_dir is not None else config.LIBRARY_DIR

    def _path(self, key: str) -> Path:
        if not key or key != sanitize_filename(key):
            raise LibraryError(f"Invalid library key: {key!r}")
        return self.base_dir / f"{key}{config.LIBRARY_SUFFIX}"

    def save(self, workout: Workout) -> LibraryEntry:
        """Write a workout to the library.

        Args:
            workout: The Workout to store

        Returns:
            The LibraryEntry for the saved file

        Raises:
            LibraryError: If the file cannot be written
        """
        key = sanitize_filename(workout.metadata.name)
        path = self._path(key)

        try:
            self.base_dir.mkdir(parents=True, exist_ok=True)
            with open(path, 'w', encoding='utf-8', newline='\n') as f:
                f.write(encode(workout))
        except OSError as e:
            logger.error(f"Failed to write {path}: {e}")
            raise LibraryError(f"Failed to save '{workout.metadata.name}'") from e

        logger.info(f"Saved to library: {path}")
        return self._entry(path, name=workout.metadata.name)

    def _entry(self, path: Path, name: Optional[str] = None) -> LibraryEntry:
        if name is None:
            name = decode(path.read_text(encoding='utf-8')).metadata.name
        return LibraryEntry(
            key=path.stem,
            name=name,
            saved_at=datetime.fromtimestamp(path.stat().st_mtime),
            path=path,
        )

    def list(self) -> List[LibraryEntry]:
        """All saved workouts, most recently saved first."""
        if not self.base_dir.exists():
            return []

        entries = []
        for path in self.base_dir.glob(f"*{config.LIBRARY_SUFFIX}"):
            try:
                entries.append(self._entry(path))
            except (OSError, UnicodeDecodeError) as e:
                logger.warning(f"Skipping unreadable library file {path}: {e}")

        entries.sort(key=lambda entry: entry.saved_at, reverse=True)
        return entries

    def load(self, key: str) -> Workout:
        """Read a saved workout.

        Raises:
            LibraryError: If the key is invalid, there is no entry with this
                key, or the file cannot be read
        """
        path = self._path(key)
        try:
            text = path.read_text(encoding='utf-8')
        except FileNotFoundError as e:
            raise LibraryError(f"No saved workout '{key}'") from e
        except UnicodeDecodeError as e:
            raise LibraryError(f"Saved workout '{key}' is not valid UTF-8") from e
        except OSError as e:
            raise LibraryError(f"Failed to read {path}: {e}") from e
        return decode(text)

    def delete(self, key: str) -> bool:
        """Remove a saved workout; returns False if it did not exist.

        Raises:
            LibraryError: If the key is not a sanitized workout name
        """
        path = self._path(key)
        if not path.exists():
            return False
        path.unlink()
        logger.info(f"Deleted from library: {path}")
        return True

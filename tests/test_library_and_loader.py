import os
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import requests

from zwo_editor.library import LibraryError, WorkoutLibrary
from zwo_editor.loader import FetchError, LoaderError, WorkoutFetcher, load_source
from zwo_editor.metrics import total_duration
from zwo_editor.models import Metadata, SteadyState, Workout
from zwo_editor.presets import get_preset, list_presets


def _workout(name: str) -> Workout:
    return Workout(metadata=Metadata(name=name), segments=[SteadyState(duration=60, power=0.7)])


def test_library_save_list_load_delete(tmp_path: Path) -> None:
    library = WorkoutLibrary(tmp_path)
    entry = library.save(_workout("My Build"))

    assert entry.key == "My_Build"
    assert entry.path.exists()

    older = library.save(_workout("Recovery"))
    os.utime(older.path, (1_000_000, 1_000_000))

    entries = library.list()
    assert [e.name for e in entries] == ["My Build", "Recovery"]

    loaded = library.load("My_Build")
    assert loaded.metadata.name == "My Build"
    assert loaded.segments == [SteadyState(duration=60, power=0.7)]

    assert library.delete("My_Build") is True
    assert library.delete("My_Build") is False
    assert [e.key for e in library.list()] == ["Recovery"]


def test_library_save_overwrites_same_name(tmp_path: Path) -> None:
    library = WorkoutLibrary(tmp_path)
    library.save(_workout("Tempo"))
    replacement = _workout("Tempo")
    replacement.segments.append(SteadyState(duration=30, power=1.0))
    library.save(replacement)

    assert len(library.list()) == 1
    assert len(library.load("Tempo").segments) == 2


def test_library_missing(tmp_path: Path) -> None:
    library = WorkoutLibrary(tmp_path / "nothing-here")
    assert library.list() == []
    with pytest.raises(LibraryError):
        library.load("ghost")


def test_library_skips_and_rejects_undecodable_files(tmp_path: Path) -> None:
    library = WorkoutLibrary(tmp_path)
    library.save(_workout("Good"))
    (tmp_path / "bad.zwo").write_bytes(b"\xff\xfe")

    assert [e.key for e in library.list()] == ["Good"]
    with pytest.raises(LibraryError, match="UTF-8"):
        library.load("bad")


@pytest.mark.parametrize("key", ["../../x", "../Good", "sub/Good", ".."])
def test_library_rejects_keys_outside_its_directory(tmp_path: Path, key: str) -> None:
    library = WorkoutLibrary(tmp_path / "lib")
    library.save(_workout("Good"))
    (tmp_path / "x.zwo").write_text("<workout_file/>", encoding="utf-8")

    with pytest.raises(LibraryError, match="Invalid library key"):
        library.load(key)
    with pytest.raises(LibraryError, match="Invalid library key"):
        library.delete(key)
    with pytest.raises(LibraryError):
        load_source(f"library:{key}", library=library)
    assert (tmp_path / "x.zwo").exists()


def test_builtin_presets() -> None:
    keys = [preset.key for preset in list_presets()]
    assert keys == ["mywhoosh_45min", "mywhoosh_hidit"]

    build_up = get_preset("mywhoosh_45min")
    assert build_up.metadata.name == "45minL3-5build-up"
    assert len(build_up.segments) == 17
    # 45 minutes of build-up blocks between a 10 minute warmup and 5 minute cooldown
    assert total_duration(build_up.segments) == 60 * 60

    hidit = get_preset("mywhoosh_hidit")
    assert len(hidit.segments) == 25
    assert [seg.id for seg in hidit.segments] == list(range(1, 26))

    with pytest.raises(KeyError):
        get_preset("nope")


def test_get_preset_returns_independent_copies() -> None:
    first = get_preset("mywhoosh_hidit")
    first.segments[0].duration = 1
    assert get_preset("mywhoosh_hidit").segments[0].duration == 120


def test_load_source_from_file_preset_and_library(tmp_path: Path) -> None:
    path = tmp_path / "w.zwo"
    path.write_text(
        '<workout_file><name>File</name><workout>'
        '<SteadyState Duration="60" Power="0.8"/></workout></workout_file>',
        encoding="utf-8",
    )
    assert load_source(str(path)).metadata.name == "File"
    assert load_source("preset:mywhoosh_45min").metadata.name == "45minL3-5build-up"

    library = WorkoutLibrary(tmp_path / "lib")
    library.save(_workout("Saved"))
    assert load_source("library:Saved", library=library).metadata.name == "Saved"

    with pytest.raises(LoaderError):
        load_source("preset:unknown")
    with pytest.raises(LoaderError):
        load_source(str(tmp_path / "missing.zwo"))


def test_load_source_from_url_uses_fetcher() -> None:
    fetcher = WorkoutFetcher(timeout=5)
    response = MagicMock()
    response.text = '<workout_file><name>Remote</name><workout><FreeRide Duration="60"/></workout></workout_file>'
    fetcher.session = MagicMock()
    fetcher.session.get.return_value = response

    workout = load_source("https://example.com/remote.zwo", fetcher=fetcher)

    fetcher.session.get.assert_called_once_with("https://example.com/remote.zwo", timeout=5)
    assert workout.metadata.name == "Remote"
    assert len(workout.segments) == 1


def test_fetch_wraps_request_errors() -> None:
    fetcher = WorkoutFetcher()
    fetcher.session = MagicMock()

    fetcher.session.get.side_effect = requests.exceptions.Timeout("slow")
    with pytest.raises(FetchError):
        fetcher.fetch("https://example.com/a.zwo")

    not_found = MagicMock(status_code=404)
    response = MagicMock()
    response.raise_for_status.side_effect = requests.exceptions.HTTPError("404", response=not_found)
    fetcher.session.get.side_effect = None
    fetcher.session.get.return_value = response
    with pytest.raises(FetchError, match="404"):
        fetcher.fetch("https://example.com/b.zwo")

    fetcher.session.get.side_effect = requests.exceptions.ConnectionError("down")
    with pytest.raises(LoaderError):
        fetcher.fetch("https://example.com/c.zwo")

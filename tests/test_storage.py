"""Unit tests for JSON file storage."""

import json

import pytest

from bp_ledger.domain.reading import Reading
from bp_ledger.infrastructure.storage.json_storage import JsonFileStorage
from bp_ledger.utils.exceptions import StorageError
from bp_ledger.utils.parameters import StorageConfig


def test_load_missing_file_is_empty(tmp_path) -> None:
    """Test that a fresh device starts with an empty ledger."""
    storage = JsonFileStorage(StorageConfig(data_dir=str(tmp_path), storage_key="bp_entries"))

    if storage.load() != []:
        raise AssertionError("Expected empty ledger for missing file")


def test_save_and_load(tmp_path) -> None:
    """Test that saved readings load back in stored order."""
    storage = JsonFileStorage(StorageConfig(data_dir=str(tmp_path / "data"), storage_key="bp_entries"))
    readings = [
        Reading(id="a", sys=120, dia=80, puls=60, date="2024-01-01T07:00:00.000Z"),
        Reading(id="b", sys=145, dia=95, puls=88, date="2024-03-15T18:45:00.000Z"),
    ]

    storage.save(readings)

    if not (tmp_path / "data" / "bp_entries.json").exists():
        raise AssertionError("Expected file named after the storage key")

    stored = json.loads((tmp_path / "data" / "bp_entries.json").read_text(encoding="utf-8"))
    if stored[0] != {"id": "a", "sys": 120, "dia": 80, "puls": 60, "date": "2024-01-01T07:00:00.000Z"}:
        raise AssertionError(f"Stored shape must match the document shape, got {stored[0]}")

    if storage.load() != readings:
        raise AssertionError("Loaded readings differ from saved readings")


def test_load_corrupt_file_raises(tmp_path) -> None:
    """Test that a corrupted ledger is reported, not discarded."""
    (tmp_path / "bp_entries.json").write_text("{not json", encoding="utf-8")
    storage = JsonFileStorage(StorageConfig(data_dir=str(tmp_path)))

    with pytest.raises(StorageError):
        storage.load()


def test_load_wrong_shape_raises(tmp_path) -> None:
    """Test that non-list and invalid entries are rejected."""
    storage = JsonFileStorage(StorageConfig(data_dir=str(tmp_path)))

    (tmp_path / "bp_entries.json").write_text('{"id": "a"}', encoding="utf-8")
    with pytest.raises(StorageError):
        storage.load()

    (tmp_path / "bp_entries.json").write_text('[{"id": "a", "sys": 120}]', encoding="utf-8")
    with pytest.raises(StorageError):
        storage.load()


def test_save_failure_raises_storage_error(tmp_path) -> None:
    """Test that OS-level write failures surface as StorageError."""
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory", encoding="utf-8")
    storage = JsonFileStorage(StorageConfig(data_dir=str(blocker / "data")))

    with pytest.raises(StorageError):
        storage.save([])


def test_load_deeply_nested_file_raises(tmp_path) -> None:
    """Test that a file the JSON decoder cannot handle is reported as StorageError."""
    (tmp_path / "bp_entries.json").write_text("[" * 200000, encoding="utf-8")
    storage = JsonFileStorage(StorageConfig(data_dir=str(tmp_path)))

    with pytest.raises(StorageError):
        storage.load()


def test_interrupted_save_keeps_previous_ledger(tmp_path, monkeypatch) -> None:
    """Test that a failed write leaves the stored ledger and no temporary files."""
    storage = JsonFileStorage(StorageConfig(data_dir=str(tmp_path)))
    previous = [Reading(id="a", sys=120, dia=80, puls=60, date="2024-01-01T07:00:00.000Z")]
    storage.save(previous)

    def failing_replace(src, dst) -> None:
        raise OSError("disk full")

    monkeypatch.setattr("bp_ledger.infrastructure.storage.json_storage.os.replace", failing_replace)

    with pytest.raises(StorageError):
        storage.save(previous + [Reading(id="b", sys=130, dia=85, puls=65, date="2024-01-02T07:00:00.000Z")])

    monkeypatch.undo()

    if storage.load() != previous:
        raise AssertionError("Previous ledger must survive a failed write")
    if [p.name for p in tmp_path.iterdir()] != ["bp_entries.json"]:
        raise AssertionError(f"Temporary files left behind: {list(tmp_path.iterdir())}")

"""Tests for persisted state document storage."""

import json
from pathlib import Path

import pytest

from curator.errors import StoreError
from curator.infrastructure.state import JsonFileStorage, MemoryStorage


class TestJsonFileStorage:
    def test_missing_file_loads_none(self, tmp_path: Path) -> None:
        assert JsonFileStorage(tmp_path / "state.json").load() is None

    def test_round_trip_creates_parents(self, tmp_path: Path) -> None:
        storage = JsonFileStorage(tmp_path / ".curator" / "state.json")
        storage.save({"version": 1, "items": ["café"]})
        assert storage.load() == {"version": 1, "items": ["café"]}

    def test_save_replaces_whole_document(self, tmp_path: Path) -> None:
        storage = JsonFileStorage(tmp_path / "state.json")
        storage.save({"a": 1})
        storage.save({"b": 2})
        assert storage.load() == {"b": 2}
        assert [p.name for p in tmp_path.iterdir()] == ["state.json"]

    def test_corrupt_file(self, tmp_path: Path) -> None:
        path = tmp_path / "state.json"
        path.write_text("{not json")
        with pytest.raises(StoreError, match="Corrupt"):
            JsonFileStorage(path).load()

    def test_non_object_document(self, tmp_path: Path) -> None:
        path = tmp_path / "state.json"
        path.write_text(json.dumps([1, 2]))
        with pytest.raises(StoreError, match="expected a JSON object"):
            JsonFileStorage(path).load()


class TestMemoryStorage:
    def test_empty(self) -> None:
        assert MemoryStorage().load() is None

    def test_returns_copies(self) -> None:
        storage = MemoryStorage({"a": [1]})
        loaded = storage.load()
        assert loaded is not None
        loaded["a"].append(2)
        assert storage.load() == {"a": [1]}

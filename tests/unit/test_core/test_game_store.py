"""Tests for the JSON catalog store."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from gamecatalog.core.game_store import JsonGameStore, StoreError


class TestRead:
    """Tests for get_all() and get_by_id()."""

    def test_get_all(self, store: JsonGameStore) -> None:
        names = [entry.name for entry in store.get_all()]
        assert names == ["Alan Wake Remastered", "Obscure Game XYZ", "God of War"]

    def test_get_by_id(self, store: JsonGameStore) -> None:
        entry = store.get_by_id("3")
        assert entry is not None
        assert entry.metacritic == 94

    def test_get_by_id_unknown(self, store: JsonGameStore) -> None:
        assert store.get_by_id("999") is None

    def test_numeric_ids_match_strings(self, tmp_path: Path) -> None:
        path = tmp_path / "db.json"
        path.write_text(json.dumps({"games": [{"id": 5, "name": "Halo"}]}), encoding="utf-8")
        assert JsonGameStore(path).get_by_id("5") is not None

    def test_missing_file_is_empty(self, tmp_path: Path) -> None:
        assert JsonGameStore(tmp_path / "absent.json").get_all() == []

    def test_corrupt_file_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "db.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(StoreError):
            JsonGameStore(path).get_all()

    def test_wrong_shape_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "db.json"
        path.write_text(json.dumps({"games": {"id": 1}}), encoding="utf-8")
        with pytest.raises(StoreError):
            JsonGameStore(path).get_all()


class TestUpdate:
    """Tests for update() and update_many()."""

    def test_update_merges_fields(self, store: JsonGameStore, catalog_file: Path) -> None:
        updated = store.update("3", {"playTime": 22.0, "hltbAttempts": 0})
        assert updated is not None
        assert updated.play_time == 22.0

        record = json.loads(catalog_file.read_text(encoding="utf-8"))["games"][2]
        assert record == {
            "id": "3",
            "name": "God of War",
            "metacritic": 94,
            "playTime": 22.0,
            "platform": "PS4",
            "hltbAttempts": 0,
        }

    def test_update_unknown_id(self, store: JsonGameStore, catalog_file: Path) -> None:
        before = catalog_file.read_text(encoding="utf-8")
        assert store.update("999", {"metacritic": 50}) is None
        assert catalog_file.read_text(encoding="utf-8") == before

    def test_update_on_missing_file(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "db.json"
        assert JsonGameStore(path).update("1", {"metacritic": 1}) is None
        assert not path.exists()

    def test_write_failure_raises_store_error(self, store: JsonGameStore) -> None:
        with patch("gamecatalog.core.game_store.save_json", side_effect=OSError("disk full")):
            with pytest.raises(StoreError, match="disk full"):
                store.update("1", {"metacritic": 80})

    def test_update_many(self, store: JsonGameStore) -> None:
        count = store.update_many({"1": {"hltbAttempts": 0}, "2": {"hltbAttempts": 0}, "999": {"hltbAttempts": 0}})
        assert count == 2
        assert store.get_by_id("2").get("hltbAttempts") == 0

    def test_update_many_empty(self, store: JsonGameStore) -> None:
        assert store.update_many({}) == 0

    def test_no_temp_files_left(self, store: JsonGameStore, catalog_file: Path) -> None:
        store.update("1", {"metacritic": 85})
        assert [p.name for p in catalog_file.parent.iterdir()] == ["db.json"]

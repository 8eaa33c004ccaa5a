# gamecatalog/core/game_store.py

"""Flat-file catalog store.

The catalog is a single JSON document shaped ``{"games": [...]}``. Every
write rewrites the whole document atomically. Reads are forgiving about
a missing file (empty catalog) but a corrupt file is an error: silently
treating it as empty would let the next write wipe the catalog.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping

from gamecatalog.core.game import CatalogEntry
from gamecatalog.utils.json_utils import save_json

__all__ = ["JsonGameStore", "StoreError"]

logger = logging.getLogger("gamecatalog.game_store")


class StoreError(RuntimeError):
    """Raised when the catalog cannot be read or persisted."""


class JsonGameStore:
    """Entity store over a JSON catalog file."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    # ===== READ =====

    def _read(self) -> dict[str, Any]:
        """Loads the raw catalog document."""
        if not self.path.exists():
            return {"games": []}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as exc:
            raise StoreError(f"Catalog {self.path} is not valid JSON: {exc}") from exc
        except OSError as exc:
            raise StoreError(f"Cannot read catalog {self.path}: {exc}") from exc

        if not isinstance(data, dict):
            raise StoreError(f"Catalog {self.path} must be a JSON object")
        games = data.setdefault("games", [])
        if not isinstance(games, list):
            raise StoreError(f"Catalog {self.path} has a non-list 'games' entry")
        return data

    def get_all(self) -> list[CatalogEntry]:
        """Returns every catalog entry in file order."""
        return [CatalogEntry.from_dict(game) for game in self._read()["games"] if isinstance(game, dict)]

    def get_by_id(self, entry_id: str) -> CatalogEntry | None:
        """Returns one entry, or None when the id is unknown."""
        for game in self._read()["games"]:
            if isinstance(game, dict) and str(game.get("id")) == str(entry_id):
                return CatalogEntry.from_dict(game)
        return None

    # ===== WRITE =====

    def _write(self, data: dict[str, Any]) -> None:
        try:
            save_json(self.path, data)
        except OSError as exc:
            raise StoreError(f"Cannot write catalog {self.path}: {exc}") from exc

    def update(self, entry_id: str, fields: Mapping[str, Any]) -> CatalogEntry | None:
        """Merges fields into one entry and persists the catalog.

        Args:
            entry_id: Entry to update.
            fields: Partial record; keys are set, others are left untouched.

        Returns:
            The updated entry, or None when the id is unknown.

        Raises:
            StoreError: If the catalog cannot be read or written.
        """
        data = self._read()
        for game in data["games"]:
            if isinstance(game, dict) and str(game.get("id")) == str(entry_id):
                game.update(fields)
                self._write(data)
                logger.debug("Updated entry %s: %s", entry_id, sorted(fields))
                return CatalogEntry.from_dict(game)
        return None

    def update_many(self, updates: Mapping[str, Mapping[str, Any]]) -> int:
        """Applies several partial updates with a single write.

        Args:
            updates: Mapping of entry id to partial record.

        Returns:
            Number of entries that were found and updated.

        Raises:
            StoreError: If the catalog cannot be read or written.
        """
        if not updates:
            return 0

        wanted = {str(key): value for key, value in updates.items()}
        data = self._read()
        touched = 0
        for game in data["games"]:
            if not isinstance(game, dict):
                continue
            fields = wanted.get(str(game.get("id")))
            if fields is not None:
                game.update(fields)
                touched += 1

        if touched:
            self._write(data)
        return touched

from __future__ import annotations

__all__: list[str] = ["CatalogEntry", "JsonGameStore", "RetryState", "StoreError"]

from gamecatalog.core.game import CatalogEntry, RetryState
from gamecatalog.core.game_store import JsonGameStore, StoreError

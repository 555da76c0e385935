"""Shared application state for dependency injection."""

from functools import lru_cache

from asset_cache import ASSET_ORIGIN, AssetCache
from controller import AppController
from database import init_db
from kv_store import KeyValueStore
from storage import Storage


@lru_cache(maxsize=1)
def get_controller() -> AppController:
    """Dependency function that returns the single view controller.

    Tables are created and both collections are loaded from the store the
    first time this runs.
    """
    init_db()
    return AppController(Storage(KeyValueStore()))


@lru_cache(maxsize=1)
def get_asset_cache() -> AssetCache | None:
    """Dependency function for the offline asset cache (None if no origin)."""
    if not ASSET_ORIGIN:
        return None
    init_db()
    return AssetCache(ASSET_ORIGIN)

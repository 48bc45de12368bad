"""JSON file persistence."""

from recruitcrm.storage.json_store import JsonStore, StoreKey

__all__ = ["JsonStore", "StoreKey"]

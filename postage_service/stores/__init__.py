"""
Stores Package

File-backed JSON repositories under POSTAGE_DATA_DIR.

- ItemStore: items.json
- PackagingStore: packaging.json
- SettingsStore: settings.json (origin address and theme)
"""

from postage_service.stores.json_store import JsonFileStore
from postage_service.stores.items import ItemStore
from postage_service.stores.packaging import PackagingStore
from postage_service.stores.settings import SettingsStore

__all__ = [
    "JsonFileStore",
    "ItemStore",
    "PackagingStore",
    "SettingsStore",
]

"""Persistence for widget configs.

Example:
    >>> from widgy.storage import FileConfigStore
    >>> store = FileConfigStore()
    >>> store.save(config)
    >>> [c.name for c in store.load_all()]
"""

from .lib import ConfigNotFoundError, FileConfigStore, StorageError
from .protocol import ConfigStorage

__all__ = [
    "ConfigStorage",
    "FileConfigStore",
    "StorageError",
    "ConfigNotFoundError",
]

"""Storage protocol for widget configs.

Defines the interface that all config stores must implement.
"""

from typing import Protocol
from uuid import UUID

from widgy.schema import WidgetConfig


class ConfigStorage(Protocol):
    """Key-value store of widget configs keyed by config id.

    Stores keep the canonical JSON form and migrate every config they load
    to the current schema version.
    """

    def save(self, config: WidgetConfig) -> None:
        """Insert or replace `config` under its id."""
        ...

    def load(self, config_id: UUID | str) -> WidgetConfig:
        """Load a config by id.

        Raises:
            ConfigNotFoundError: If no config has that id.
            StorageError: If the stored data cannot be decoded.
        """
        ...

    def load_all(self) -> list[WidgetConfig]:
        """Load every readable config."""
        ...

    def delete(self, config_id: UUID | str) -> bool:
        """Delete a config.

        Returns:
            True if a config was deleted, False if none existed.
        """
        ...

    def list_ids(self) -> list[UUID]:
        ...

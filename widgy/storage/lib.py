"""File-backed config store.

Each config is one ``<id>.json`` file holding its canonical JSON form.
"""

import logging
import os
import tempfile
from pathlib import Path
from uuid import UUID

from widgy.config import get_store_dir
from widgy.schema import DecodeError, WidgetConfig, decode_config, dumps_config, migrate

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when the store cannot read or write a config."""


class ConfigNotFoundError(StorageError, KeyError):
    """Raised when no stored config has the requested id."""

    def __init__(self, config_id: UUID | str):
        super().__init__(f"Widget config not found: {config_id}")
        self.config_id = str(config_id)

    def __str__(self) -> str:
        return self.args[0]


def _parse_id(config_id: UUID | str) -> UUID:
    if isinstance(config_id, UUID):
        return config_id
    try:
        return UUID(config_id)
    except ValueError:
        raise ConfigNotFoundError(config_id) from None


class FileConfigStore:
    """Stores configs as JSON files in one directory.

    Args:
        directory: Store location. Defaults to WIDGY_STORE_DIR, then
            ``~/.widgy/widgets``. Created on first write.

    Example:
        >>> store = FileConfigStore(tmp_path)
        >>> store.save(config)
        >>> store.load(config.id).name
        'Simple Clock'
    """

    def __init__(self, directory: Path | str | None = None):
        self.directory = get_store_dir(directory)

    def _path(self, config_id: UUID) -> Path:
        return self.directory / f"{config_id}.json"

    def save(self, config: WidgetConfig) -> None:
        """Write `config` atomically, replacing any previous version."""
        self.directory.mkdir(parents=True, exist_ok=True)
        target = self._path(config.id)
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=".", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(dumps_config(config))
                f.write("\n")
            os.replace(tmp_name, target)
        except OSError as e:
            Path(tmp_name).unlink(missing_ok=True)
            raise StorageError(f"Failed to save {config.id}: {e}") from e
        logger.debug(f"Saved widget config {config.id} to {target}")

    def _read(self, path: Path) -> WidgetConfig:
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Failed to read {path.name}: {e}") from e
        try:
            return migrate(decode_config(raw))
        except DecodeError as e:
            raise StorageError(f"Failed to decode {path.name}: {e}") from e

    def load(self, config_id: UUID | str) -> WidgetConfig:
        """Load and migrate a config.

        Raises:
            ConfigNotFoundError: If no config has that id.
            StorageError: If the file cannot be read or decoded.
        """
        path = self._path(_parse_id(config_id))
        if not path.exists():
            raise ConfigNotFoundError(config_id)
        return self._read(path)

    def load_all(self) -> list[WidgetConfig]:
        """Load every config, skipping files that cannot be read.

        Returns:
            Configs sorted by name.
        """
        configs = []
        for path in self._files():
            try:
                configs.append(self._read(path))
            except StorageError as e:
                logger.warning(f"Skipping unreadable config: {e}")
        return sorted(configs, key=lambda c: c.name)

    def delete(self, config_id: UUID | str) -> bool:
        try:
            path = self._path(_parse_id(config_id))
        except ConfigNotFoundError:
            return False
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        logger.debug(f"Deleted widget config {config_id}")
        return True

    def list_ids(self) -> list[UUID]:
        """Ids of stored configs, sorted."""
        ids = []
        for path in self._files():
            try:
                ids.append(UUID(path.stem))
            except ValueError:
                continue
        return sorted(ids, key=str)

    def _files(self) -> list[Path]:
        if not self.directory.is_dir():
            return []
        return sorted(p for p in self.directory.glob("*.json") if not p.name.startswith("."))


__all__ = [
    "StorageError",
    "ConfigNotFoundError",
    "FileConfigStore",
]

"""Where the SQLite database and the wikitext page files live."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import optional_env_var

APP_DIR_NAME: Final[str] = "semprops"
DEFAULT_DB_FILENAME: Final[str] = "semprops.db"
PAGES_DIRNAME: Final[str] = "pages"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    """Data directory layout; ``pages_path`` overrides the ``pages/`` subdirectory."""

    data_dir: Path
    database_filename: str = DEFAULT_DB_FILENAME
    pages_path: Path | None = None

    def _directory(self, path: Path, *, ensure: bool) -> Path:
        resolved = path.expanduser().resolve()
        if ensure:
            resolved.mkdir(parents=True, exist_ok=True)
        return resolved

    def database_path(self, *, ensure: bool = True) -> Path:
        return self._directory(self.data_dir, ensure=ensure) / self.database_filename

    def pages_dir(self, *, ensure: bool = True) -> Path:
        return self._directory(self.pages_path or self.data_dir / PAGES_DIRNAME, ensure=ensure)

    def database_uri(self) -> str:
        return f"sqlite+pysqlite:///{self.database_path()}"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


def _default_data_dir() -> Path:
    if os.name == "nt":
        base = optional_env_var("LOCALAPPDATA")
        return Path(base or Path.home() / "AppData" / "Local") / APP_DIR_NAME
    base = optional_env_var("XDG_DATA_HOME")
    return Path(base or Path.home() / ".local" / "share") / APP_DIR_NAME


def get_storage_config() -> StorageConfig:
    data_dir = optional_env_var("SEMPROPS_DATA_DIR")
    pages_dir = optional_env_var("SEMPROPS_PAGES_DIR")
    return StorageConfig(
        data_dir=Path(data_dir) if data_dir else _default_data_dir(),
        database_filename=optional_env_var("SEMPROPS_DATABASE_FILE") or DEFAULT_DB_FILENAME,
        pages_path=Path(pages_dir) if pages_dir else None,
    )


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    """``DATABASE_URI`` wins; otherwise the SQLite file in the data directory."""

    uri = optional_env_var("DATABASE_URI")
    if uri:
        return DatabaseConfig(uri=uri)
    return DatabaseConfig(uri=(storage or get_storage_config()).database_uri())

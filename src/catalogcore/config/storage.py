"""Where the catalog database lives.

`DATABASE_URI` wins when set. Otherwise the catalog is a SQLite file named
`CATALOGCORE_DB_FILENAME` inside `CATALOGCORE_DATA_DIR` (default: the XDG data
home).
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Final

from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError

from .env import optional_env_str
from .errors import ConfigurationError

APP_DIR_NAME: Final[str] = "catalogcore"
DEFAULT_DB_FILENAME: Final[str] = "catalog.db"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path
    database_filename: str = DEFAULT_DB_FILENAME

    def database_path(self) -> Path:
        data_dir = self.data_dir.expanduser().resolve()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir / self.database_filename


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


def _xdg_data_dir() -> Path:
    base = optional_env_str("XDG_DATA_HOME")
    base_path = Path(base) if base else Path.home() / ".local" / "share"
    return base_path / APP_DIR_NAME


def _database_filename() -> str:
    filename = optional_env_str("CATALOGCORE_DB_FILENAME")
    if filename is None:
        return DEFAULT_DB_FILENAME
    if Path(filename).name != filename:
        raise ConfigurationError(
            f"CATALOGCORE_DB_FILENAME must be a bare file name, got {filename!r}"
        )
    return filename


def get_storage_config() -> StorageConfig:
    data_dir = optional_env_str("CATALOGCORE_DATA_DIR")
    return StorageConfig(
        data_dir=Path(data_dir) if data_dir else _xdg_data_dir(),
        database_filename=_database_filename(),
    )


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    uri = optional_env_str("DATABASE_URI")
    if uri is None:
        path = (storage or get_storage_config()).database_path()
        return DatabaseConfig(uri=f"sqlite+pysqlite:///{path}")
    try:
        make_url(uri)
    except ArgumentError as exc:
        raise ConfigurationError(f"DATABASE_URI is not a database URL: {uri!r}") from exc
    return DatabaseConfig(uri=uri)

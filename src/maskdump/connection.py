"""Opening DB-API connections for the supported dialects."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from pathlib import Path
from typing import Any, Mapping, Optional

from .dialects import MYSQL, SQLITE, Dialect, get_dialect
from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3306
DEFAULT_USER = "root"


def _expand(value: Any) -> Optional[str]:
    if value is None:
        return None
    return os.path.expandvars(str(value))


@dataclass(frozen=True)
class ConnectionSettings:
    """Where to read from.

    For SQLite ``database`` is the path of the database file; host, port and
    credentials are ignored.
    """

    dialect: str = MYSQL.name
    database: str = ""
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    user: str = DEFAULT_USER
    password: str = ""

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any] | None) -> "ConnectionSettings":
        if not payload:
            return cls()
        if not isinstance(payload, Mapping):
            raise ConfigError("'connection' must be an object", phase="config")

        dialect = get_dialect(str(payload.get("dialect", MYSQL.name))).name

        port_value = payload.get("port", DEFAULT_PORT)
        try:
            port = int(_expand(port_value) or DEFAULT_PORT)
        except ValueError as exc:
            raise ConfigError(f"'connection.port' must be an integer: {port_value!r}", phase="config") from exc
        if port <= 0:
            raise ConfigError("'connection.port' must be positive", phase="config")

        return cls(
            dialect=dialect,
            database=_expand(payload.get("database")) or "",
            host=_expand(payload.get("host")) or DEFAULT_HOST,
            port=port,
            user=_expand(payload.get("user")) or DEFAULT_USER,
            password=_expand(payload.get("password")) or "",
        )

    @property
    def resolved_dialect(self) -> Dialect:
        return get_dialect(self.dialect)

    def describe(self) -> str:
        if self.dialect == SQLITE.name:
            return f"sqlite:{self.database}"
        return f"{self.dialect}://{self.user}@{self.host}:{self.port}/{self.database}"


def _connect_sqlite(settings: ConnectionSettings) -> Any:
    import sqlite3

    path = Path(settings.database).expanduser()
    if not settings.database or not path.is_file():
        raise ConfigError(f"Database not found: {path}", phase="connect")
    try:
        return sqlite3.connect(str(path))
    except sqlite3.Error as exc:
        raise ConfigError(f"Unable to open {path}: {exc}", phase="connect") from exc


def _connect_mysql(settings: ConnectionSettings) -> Any:
    # Imported on demand so SQLite-only use does not load the MySQL driver.
    import mysql.connector as connector

    try:
        return connector.connect(
            host=settings.host,
            port=settings.port,
            user=settings.user,
            password=settings.password,
            database=settings.database,
            # Drop unread rows instead of refusing the next statement.
            consume_results=True,
        )
    except connector.Error as exc:
        raise ConfigError(f"Unable to connect to {settings.describe()}: {exc}", phase="connect") from exc


def connect(settings: ConnectionSettings) -> Any:
    """Open a DB-API 2.0 connection described by ``settings``."""

    dialect = settings.resolved_dialect
    logger.info("Connecting to %s", settings.describe())
    if dialect.name == SQLITE.name:
        return _connect_sqlite(settings)
    if not settings.database:
        raise ConfigError("A database name is required", phase="connect")
    return _connect_mysql(settings)


__all__ = ["ConnectionSettings", "DEFAULT_HOST", "DEFAULT_PORT", "DEFAULT_USER", "connect"]

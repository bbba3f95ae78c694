"""Catalog enumeration: table names and server version."""

from __future__ import annotations

from typing import Any, List

from .codec import to_nullable
from .cursors import close_cursor, open_cursor
from .dialects import Dialect
from .errors import CatalogError


def list_tables(connection: Any, dialect: Dialect) -> List[str]:
    """Return table names in the order the catalog reports them."""

    phase = "list tables"
    cursor = open_cursor(connection, CatalogError, phase=phase)
    try:
        cursor.execute(dialect.list_tables_sql)
        rows = cursor.fetchall()
    except Exception as exc:
        close_cursor(cursor, CatalogError, phase=phase, failed=True)
        raise CatalogError(str(exc), phase=phase) from exc
    close_cursor(cursor, CatalogError, phase=phase)
    # NULL names read as empty strings, as the catalog reported them.
    return [to_nullable(row[0]).raw for row in rows]


def server_version(connection: Any, dialect: Dialect) -> str:
    """Return the server version string, or ``""`` when the server reports none."""

    phase = "server version"
    cursor = open_cursor(connection, CatalogError, phase=phase)
    try:
        cursor.execute(dialect.server_version_sql)
        row = cursor.fetchone()
    except Exception as exc:
        close_cursor(cursor, CatalogError, phase=phase, failed=True)
        raise CatalogError(str(exc), phase=phase) from exc
    close_cursor(cursor, CatalogError, phase=phase)
    if not row:
        return ""
    return to_nullable(row[0]).raw


__all__ = ["list_tables", "server_version"]

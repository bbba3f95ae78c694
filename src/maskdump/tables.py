"""Per-table export: definition plus serialised rows."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .codec import ColumnTransform, to_nullable
from .cursors import close_cursor, open_cursor
from .dialects import Dialect
from .errors import DDLFetchError, DDLMismatchError
from .rows import serialize_rows

_PHASE = "fetch definition"


@dataclass(frozen=True)
class Table:
    """A single exported table."""

    name: str
    ddl: str
    values: str

    @property
    def has_rows(self) -> bool:
        return bool(self.values)


def fetch_table_ddl(connection: Any, dialect: Dialect, name: str) -> str:
    """Return the ``CREATE TABLE`` text for ``name``.

    Raises :class:`DDLMismatchError` when the server answers for a different
    table than the one requested.
    """

    statement, params = dialect.describe_statement(name)
    cursor = open_cursor(connection, DDLFetchError, table=name, phase=_PHASE)
    try:
        if params:
            cursor.execute(statement, params)
        else:
            cursor.execute(statement)
        row = cursor.fetchone()
    except Exception as exc:
        close_cursor(cursor, DDLFetchError, table=name, phase=_PHASE, failed=True)
        raise DDLFetchError(str(exc), table=name, phase=_PHASE) from exc
    close_cursor(cursor, DDLFetchError, table=name, phase=_PHASE)

    if not row or len(row) < 2:
        raise DDLFetchError("no definition returned", table=name, phase=_PHASE)
    returned = to_nullable(row[0]).raw
    ddl = to_nullable(row[1]).raw
    if returned != name:
        raise DDLMismatchError(
            f"returned table {returned!r} is not the same as requested table",
            table=name,
            phase=_PHASE,
        )
    return ddl


def export_table(
    connection: Any,
    dialect: Dialect,
    name: str,
    transforms: Optional[Mapping[str, ColumnTransform]] = None,
    *,
    escape: bool = False,
) -> Table:
    ddl = fetch_table_ddl(connection, dialect, name)
    values = serialize_rows(connection, dialect, name, transforms, escape=escape)
    return Table(name=name, ddl=ddl, values=values)


__all__ = ["Table", "export_table", "fetch_table_ddl"]

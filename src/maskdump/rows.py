"""Serialisation of a table's rows into an ``INSERT ... VALUES`` fragment."""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional, Sequence

from .codec import ColumnTransform, encode_value, to_nullable
from .cursors import close_cursor, open_cursor
from .dialects import Dialect
from .errors import DumpError, EmptySchemaError, RowFetchError

logger = logging.getLogger(__name__)

_PHASE = "fetch rows"


def _column_names(cursor: Any, table: str) -> List[str]:
    description = cursor.description or ()
    columns = [str(entry[0]) for entry in description]
    if not columns:
        raise EmptySchemaError("no columns in table", table=table, phase=_PHASE)
    return columns


def _encode_row(
    row: Sequence[Any],
    columns: Sequence[str],
    transforms: Mapping[str, ColumnTransform],
    *,
    table: str,
    escape: bool,
) -> str:
    if len(row) != len(columns):
        raise RowFetchError(
            f"row has {len(row)} values for {len(columns)} columns",
            table=table,
            phase=_PHASE,
        )
    cells = [
        encode_value(column, to_nullable(raw), transforms.get(column), escape=escape)
        for column, raw in zip(columns, row)
    ]
    return "(" + ",".join(cells) + ")"


def _scan(
    cursor: Any,
    dialect: Dialect,
    table: str,
    transforms: Mapping[str, ColumnTransform],
    escape: bool,
) -> List[str]:
    try:
        cursor.execute(dialect.select_statement(table))
    except Exception as exc:
        raise RowFetchError(str(exc), table=table, phase=_PHASE) from exc

    columns = _column_names(cursor, table)
    tuples: List[str] = []
    try:
        for row in cursor:
            tuples.append(_encode_row(row, columns, transforms, table=table, escape=escape))
    except DumpError:
        raise
    except Exception as exc:
        raise RowFetchError(str(exc), table=table, phase=_PHASE) from exc
    return tuples


def serialize_rows(
    connection: Any,
    dialect: Dialect,
    table: str,
    transforms: Optional[Mapping[str, ColumnTransform]] = None,
    *,
    escape: bool = False,
) -> str:
    """Return every row of ``table`` as a comma-joined list of tuples.

    Tuples keep the column order of the result set and the row order of the
    fetch. A table without rows yields ``""``. Any failure while opening or
    scanning the stream raises :class:`RowFetchError` and no fragment is
    returned.
    """

    cursor = open_cursor(connection, RowFetchError, table=table, phase=_PHASE)
    try:
        tuples = _scan(cursor, dialect, table, transforms or {}, escape)
    except BaseException:
        close_cursor(cursor, RowFetchError, table=table, phase=_PHASE, failed=True)
        raise
    close_cursor(cursor, RowFetchError, table=table, phase=_PHASE)

    logger.debug("Serialised %d rows from %s", len(tuples), table)
    return ",".join(tuples)


__all__ = ["serialize_rows"]

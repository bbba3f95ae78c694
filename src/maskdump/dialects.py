"""SQL statements used to read a catalog, per database engine.

A :class:`Dialect` is the only place that knows how an engine spells "list
tables", "describe table", "server version" and "select every row". Every
describe statement returns ``(table_name, ddl)`` as its first two columns so
the exporter can compare the returned identity with the requested one.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

from .errors import ConfigError


@dataclass(frozen=True)
class Dialect:
    name: str
    list_tables_sql: str
    server_version_sql: str
    describe_sql: str
    select_sql: str = "SELECT * FROM {table}"
    quote_char: str = '"'
    # When set, ``describe_sql`` takes the table name as a bound parameter
    # instead of a quoted ``{table}`` substitution.
    describe_binds_name: bool = False

    def quote(self, identifier: str) -> str:
        q = self.quote_char
        return f"{q}{identifier.replace(q, q * 2)}{q}"

    def describe_statement(self, table: str) -> Tuple[str, Tuple[str, ...]]:
        if self.describe_binds_name:
            return self.describe_sql, (table,)
        return self.describe_sql.format(table=self.quote(table)), ()

    def select_statement(self, table: str) -> str:
        return self.select_sql.format(table=self.quote(table))


MYSQL = Dialect(
    name="mysql",
    list_tables_sql="SHOW TABLES",
    server_version_sql="SELECT version()",
    describe_sql="SHOW CREATE TABLE {table}",
    quote_char="`",
)

SQLITE = Dialect(
    name="sqlite",
    list_tables_sql=(
        "SELECT name FROM sqlite_master "
        "WHERE type = 'table' AND name NOT LIKE 'sqlite\\_%' ESCAPE '\\'"
    ),
    server_version_sql="SELECT sqlite_version()",
    describe_sql="SELECT name, sql FROM sqlite_master WHERE type = 'table' AND name = ?",
    describe_binds_name=True,
)

_DIALECTS: Dict[str, Dialect] = {dialect.name: dialect for dialect in (MYSQL, SQLITE)}


def get_dialect(name: str) -> Dialect:
    dialect = _DIALECTS.get((name or "").strip().lower())
    if dialect is None:
        known = ", ".join(sorted(_DIALECTS))
        raise ConfigError(f"Unsupported dialect {name!r} (supported: {known})")
    return dialect


def dialect_names() -> Tuple[str, ...]:
    return tuple(sorted(_DIALECTS))


__all__ = ["Dialect", "MYSQL", "SQLITE", "dialect_names", "get_dialect"]

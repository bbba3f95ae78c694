"""maskdump: logical SQL dumps with per-column obfuscation.

The pipeline enumerates the catalog, exports each table's definition and
rows, and renders one restorable script. Column values can be replaced by
named transformers (hashes, masks) while they are written.
"""

from __future__ import annotations

from .assembler import DUMP_FORMAT_VERSION, DumpDocument, assemble_dump
from .catalog import list_tables, server_version
from .codec import NullableValue, encode_value, escape_literal, to_nullable
from .connection import ConnectionSettings, connect
from .dialects import MYSQL, SQLITE, Dialect, get_dialect
from .dumper import DEFAULT_FILENAME_FORMAT, Dumper
from .errors import (
    AlreadyExistsError,
    CatalogError,
    ConfigError,
    DDLFetchError,
    DDLMismatchError,
    DumpError,
    DumperClosedError,
    EmptySchemaError,
    RenderError,
    RowFetchError,
)
from .render import render_dump, write_dump
from .rows import serialize_rows
from .tables import Table, export_table, fetch_table_ddl
from .transformers import (
    ObfuscationMap,
    build_transformer,
    register_transformer,
    resolve_obfuscation,
    transformer_names,
)

__version__ = "0.3.0"

__all__ = [
    "AlreadyExistsError",
    "CatalogError",
    "ConfigError",
    "ConnectionSettings",
    "DDLFetchError",
    "DDLMismatchError",
    "DEFAULT_FILENAME_FORMAT",
    "DUMP_FORMAT_VERSION",
    "Dialect",
    "DumpDocument",
    "DumpError",
    "Dumper",
    "DumperClosedError",
    "EmptySchemaError",
    "MYSQL",
    "NullableValue",
    "ObfuscationMap",
    "RenderError",
    "RowFetchError",
    "SQLITE",
    "Table",
    "assemble_dump",
    "build_transformer",
    "connect",
    "encode_value",
    "escape_literal",
    "export_table",
    "fetch_table_ddl",
    "get_dialect",
    "list_tables",
    "register_transformer",
    "render_dump",
    "resolve_obfuscation",
    "serialize_rows",
    "server_version",
    "to_nullable",
    "transformer_names",
    "write_dump",
]

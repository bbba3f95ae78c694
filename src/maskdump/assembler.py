"""Assembly of a full dump document from the catalog."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
import logging
from typing import Any, Callable, Mapping, Optional, Sequence, Tuple, Union

from .catalog import list_tables, server_version
from .codec import ColumnTransform
from .dialects import Dialect
from .tables import Table, export_table
from .transformers import ColumnRule, ObfuscationMap, resolve_obfuscation

logger = logging.getLogger(__name__)

DUMP_FORMAT_VERSION = "0.2.3"
COMPLETION_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"

Clock = Callable[[], datetime]


def local_now() -> datetime:
    return datetime.now().astimezone()


@dataclass(frozen=True)
class DumpDocument:
    """Everything the renderer needs; built once per dump."""

    format_version: str
    server_version: str
    tables: Tuple[Table, ...]
    completed_at: str

    @property
    def table_names(self) -> Tuple[str, ...]:
        return tuple(table.name for table in self.tables)


def assemble_dump(
    connection: Any,
    dialect: Dialect,
    obfuscation: Union[ObfuscationMap, Mapping[str, Mapping[str, ColumnRule]], None] = None,
    *,
    table_names: Optional[Sequence[str]] = None,
    escape: bool = False,
    clock: Optional[Clock] = None,
) -> DumpDocument:
    """Export every table and return the finished :class:`DumpDocument`.

    Tables are processed in catalog order (or the order of ``table_names``
    when given). The first failing table aborts the whole dump; its error
    propagates unchanged. The completion time is stamped only after every
    table succeeded.
    """

    rules = resolve_obfuscation(obfuscation)
    clock = clock or local_now

    version = server_version(connection, dialect)
    names = list(table_names) if table_names is not None else list_tables(connection, dialect)
    logger.info("Dumping %d tables from %s server %s", len(names), dialect.name, version or "(unknown)")

    tables = []
    for name in names:
        logger.info("Dumping table %s", name)
        transforms: Mapping[str, ColumnTransform] = rules.for_table(name)
        if transforms:
            logger.debug("Obfuscating %s columns: %s", name, ", ".join(sorted(transforms)))
        table = export_table(connection, dialect, name, transforms, escape=escape)
        if not table.has_rows:
            logger.debug("Table %s has no rows", name)
        tables.append(table)

    return DumpDocument(
        format_version=DUMP_FORMAT_VERSION,
        server_version=version,
        tables=tuple(tables),
        completed_at=clock().strftime(COMPLETION_TIME_FORMAT),
    )


__all__ = [
    "COMPLETION_TIME_FORMAT",
    "Clock",
    "DUMP_FORMAT_VERSION",
    "DumpDocument",
    "assemble_dump",
    "local_now",
]

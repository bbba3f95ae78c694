"""Top-level dump orchestration.

``Dumper`` owns the database connection for its lifetime, picks the output
path from a ``strftime`` pattern and writes each finished dump exactly once::

    >>> dumper = Dumper(connection, "dumps", Dumper.filename_format_for("shop"))
    >>> path = dumper.dump({"user": {"email": "md5-email"}})
    >>> dumper.close()

The document is rendered in memory before the output file is created, and
the file is opened in exclusive-create mode so an existing dump is never
replaced. A write that fails midway removes the partial file.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from .assembler import Clock, assemble_dump, local_now
from .dialects import MYSQL, Dialect
from .errors import AlreadyExistsError, ConfigError, DumperClosedError
from .render import write_dump
from .transformers import ColumnRule, ObfuscationMap, describe_rules, resolve_obfuscation

logger = logging.getLogger(__name__)

DEFAULT_FILENAME_FORMAT = "{database}-%Y.%m.%d_%H.%M.%S"
DUMP_SUFFIX = ".sql"


class Dumper:
    """Writes dumps of one connection into a directory until closed."""

    def __init__(
        self,
        connection: Any,
        directory: Union[str, Path],
        filename_format: str,
        *,
        dialect: Dialect = MYSQL,
        escape_literals: bool = False,
        clock: Optional[Clock] = None,
    ) -> None:
        resolved = Path(directory).expanduser()
        if not resolved.is_dir():
            raise ConfigError(f"invalid directory: {resolved}", phase="register")
        if not filename_format:
            raise ConfigError("filename format must not be empty", phase="register")
        self._connection = connection
        self.directory = resolved
        self.filename_format = filename_format
        self.dialect = dialect
        self.escape_literals = escape_literals
        self._clock = clock or local_now

    @staticmethod
    def filename_format_for(database: str, pattern: str = DEFAULT_FILENAME_FORMAT) -> str:
        """Substitute ``{database}`` into ``pattern`` keeping ``%`` literal."""

        return pattern.replace("{database}", database.replace("%", "%%"))

    @property
    def closed(self) -> bool:
        return self._connection is None

    def _require_open(self) -> Any:
        if self._connection is None:
            raise DumperClosedError("dumper is closed")
        return self._connection

    def output_path(self) -> Path:
        name = self._clock().strftime(self.filename_format)
        return self.directory / f"{name}{DUMP_SUFFIX}"

    def dump(
        self,
        obfuscation: Union[ObfuscationMap, Mapping[str, Mapping[str, ColumnRule]], None] = None,
    ) -> Path:
        """Write a full dump and return its path."""

        connection = self._require_open()
        rules = resolve_obfuscation(obfuscation)
        path = self.output_path()
        if path.exists():
            raise AlreadyExistsError(f"Dump '{path.stem}' already exists.", phase="dump")

        if rules:
            logger.info("Obfuscating columns: %s", ", ".join(describe_rules(rules)))
        document = assemble_dump(
            connection,
            self.dialect,
            rules,
            escape=self.escape_literals,
            clock=self._clock,
        )
        write_dump(document, path)
        logger.info("Dump of %d tables written to %s", len(document.tables), path)
        return path

    def close(self) -> None:
        """Close the database connection; a second call raises."""

        connection = self._require_open()
        self._connection = None
        connection.close()

    def __enter__(self) -> "Dumper":
        return self

    def __exit__(self, *exc_info: object) -> None:
        if not self.closed:
            self.close()


__all__ = ["DEFAULT_FILENAME_FORMAT", "DUMP_SUFFIX", "Dumper"]

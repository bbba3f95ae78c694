"""Exception taxonomy shared by every stage of the dump pipeline."""

from __future__ import annotations

from typing import Optional


class DumpError(RuntimeError):
    """Base class for failures that abort a dump.

    ``table`` and ``phase`` are optional context used to locate the failure;
    both are folded into the message when present.
    """

    def __init__(
        self,
        message: str,
        *,
        table: Optional[str] = None,
        phase: Optional[str] = None,
    ) -> None:
        self.table = table
        self.phase = phase
        self.reason = message
        super().__init__(self._format(message))

    def _format(self, message: str) -> str:
        context = []
        if self.phase:
            context.append(self.phase)
        if self.table:
            context.append(f"table {self.table}")
        if not context:
            return message
        return f"{' '.join(context)}: {message}"

    def __repr__(self) -> str:  # pragma: no cover - trivial wrapper
        return (
            f"{type(self).__name__}(reason={self.reason!r}, "
            f"table={self.table!r}, phase={self.phase!r})"
        )


class ConfigError(DumpError):
    """Raised for invalid settings, output directories or transformer rules."""


class AlreadyExistsError(DumpError):
    """Raised when the dump target file is already present."""


class CatalogError(DumpError):
    """Raised when the table list or server version cannot be read."""


class DDLFetchError(DumpError):
    """Raised when a table definition lookup fails."""


class DDLMismatchError(DDLFetchError):
    """Raised when the definition returned belongs to a different table."""


class RowFetchError(DumpError):
    """Raised when the row stream cannot be opened, scanned or decoded."""


class EmptySchemaError(RowFetchError):
    """Raised when a table reports no columns."""


class RenderError(DumpError):
    """Raised when the dump document cannot be rendered or written."""


class DumperClosedError(DumpError):
    """Raised when a closed :class:`~maskdump.dumper.Dumper` is used again."""


__all__ = [
    "AlreadyExistsError",
    "CatalogError",
    "ConfigError",
    "DDLFetchError",
    "DDLMismatchError",
    "DumpError",
    "DumperClosedError",
    "EmptySchemaError",
    "RenderError",
    "RowFetchError",
]

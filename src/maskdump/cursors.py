"""Cursor lifetime shared by the catalog, definition and row readers.

Closing a cursor can itself fail: mysql-connector-python refuses to close an
unbuffered cursor that still has unread rows. When a read has already failed,
that close error is logged and dropped so the original :class:`DumpError`
reaches the caller unchanged.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Type

from .errors import DumpError

logger = logging.getLogger(__name__)


def open_cursor(
    connection: Any,
    error: Type[DumpError],
    *,
    phase: str,
    table: Optional[str] = None,
) -> Any:
    try:
        return connection.cursor()
    except Exception as exc:
        raise error(f"unable to open cursor: {exc}", table=table, phase=phase) from exc


def close_cursor(
    cursor: Any,
    error: Type[DumpError],
    *,
    phase: str,
    table: Optional[str] = None,
    failed: bool = False,
) -> None:
    """Close ``cursor``; with ``failed`` set, a close error is only logged."""

    try:
        cursor.close()
    except Exception as exc:
        if failed:
            logger.warning("Ignoring cursor close failure during %s: %s", phase, exc)
            return
        raise error(f"unable to close cursor: {exc}", table=table, phase=phase) from exc


__all__ = ["close_cursor", "open_cursor"]

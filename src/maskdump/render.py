"""Rendering of a :class:`DumpDocument` into the restorable SQL script.

The layout below is read by restore tooling, so every line (including the
blank lines around the optional ``INSERT``) is part of the format.
"""

from __future__ import annotations

import logging
from os import PathLike
from pathlib import Path
from typing import TextIO, Union

from .assembler import DumpDocument
from .codec import TEXT_ENCODING, TEXT_ERRORS
from .errors import AlreadyExistsError, RenderError
from .tables import Table

logger = logging.getLogger(__name__)

__all__ = ["TOOL_NAME", "render_dump", "write_dump"]

TOOL_NAME = "MaskDump SQL"

_PREAMBLE = """/*!40101 SET @OLD_CHARACTER_SET_CLIENT=@@CHARACTER_SET_CLIENT */;
/*!40101 SET @OLD_CHARACTER_SET_RESULTS=@@CHARACTER_SET_RESULTS */;
/*!40101 SET @OLD_COLLATION_CONNECTION=@@COLLATION_CONNECTION */;
/*!40101 SET NAMES utf8 */;
/*!40103 SET @OLD_TIME_ZONE=@@TIME_ZONE */;
/*!40103 SET TIME_ZONE='+00:00' */;
/*!40014 SET @OLD_UNIQUE_CHECKS=@@UNIQUE_CHECKS, UNIQUE_CHECKS=0 */;
/*!40014 SET @OLD_FOREIGN_KEY_CHECKS=@@FOREIGN_KEY_CHECKS, FOREIGN_KEY_CHECKS=0 */;
/*!40101 SET @OLD_SQL_MODE=@@SQL_MODE, SQL_MODE='NO_AUTO_VALUE_ON_ZERO' */;
/*!40111 SET @OLD_SQL_NOTES=@@SQL_NOTES, SQL_NOTES=0 */;
"""


def _render_header(document: DumpDocument) -> str:
    return (
        f"-- {TOOL_NAME} Dump {document.format_version}\n"
        "--\n"
        "-- ------------------------------------------------------\n"
        f"-- Server version\t{document.server_version}\n"
        + _PREAMBLE
    )


def _render_table(table: Table) -> str:
    name = table.name
    lines = [
        "",
        "--",
        f"-- Table structure for table {name}",
        "--",
        f"DROP TABLE IF EXISTS {name};",
        "/*!40101 SET @saved_cs_client     = @@character_set_client */;",
        "/*!40101 SET character_set_client = utf8 */;",
        f"{table.ddl};",
        "/*!40101 SET character_set_client = @saved_cs_client */;",
        "--",
        f"-- Dumping data for table {name}",
        "--",
        f"LOCK TABLES {name} WRITE;",
        f"/*!40000 ALTER TABLE {name} DISABLE KEYS */;",
        "",
    ]
    if table.values:
        lines.append(f"INSERT INTO {name} VALUES {table.values};")
        lines.append("")
    lines.extend(
        [
            f"/*!40000 ALTER TABLE {name} ENABLE KEYS */;",
            "UNLOCK TABLES;",
        ]
    )
    return "\n".join(lines) + "\n"


def render_dump(document: DumpDocument) -> str:
    """Return the complete dump script for ``document``."""

    parts = [_render_header(document)]
    parts.extend(_render_table(table) for table in document.tables)
    parts.append(f"\n-- Dump completed on {document.completed_at}\n")
    return "".join(parts)


def _write_new_file(path: Path, text: str) -> None:
    try:
        handle = path.open("x", encoding=TEXT_ENCODING, errors=TEXT_ERRORS)
    except FileExistsError as exc:
        raise AlreadyExistsError(f"Dump '{path.stem}' already exists.", phase="write") from exc
    except OSError as exc:
        raise RenderError(f"unable to create {path}: {exc}", phase="write") from exc

    try:
        with handle:
            handle.write(text)
    except (OSError, UnicodeError) as exc:
        logger.warning("Removing partial dump %s", path)
        path.unlink(missing_ok=True)
        raise RenderError(f"unable to write {path}: {exc}", phase="write") from exc


def write_dump(document: DumpDocument, destination: Union[TextIO, str, PathLike]) -> None:
    """Write the rendered dump to a text stream or a new file.

    The whole script is rendered before anything is written. A path must not
    exist yet (:class:`AlreadyExistsError`), and a file left incomplete by a
    failed write is removed before :class:`RenderError` is raised.
    """

    try:
        text = render_dump(document)
    except Exception as exc:
        raise RenderError(f"unable to render dump: {exc}", phase="render") from exc

    if isinstance(destination, (str, PathLike)):
        _write_new_file(Path(destination), text)
        return
    destination.write(text)

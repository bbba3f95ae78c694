"""Command-line entry point for ``maskdump``.

The short flags mirror the classic dump tools (``-u`` user, ``-s`` password,
``-d`` database, ``-h`` host, ``-p`` port), which is why help lives on
``--help`` only. Values given on the command line override the ``--config``
file.
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional, Sequence

from .config import DumpConfig, load_config
from .connection import ConnectionSettings, connect
from .dialects import SQLITE, dialect_names
from .dumper import Dumper
from .errors import DumpError
from .transformers import merge_rule_mappings, parse_obfuscation_arguments, transformer_names


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="maskdump",
        description="Dump a database schema and data into a restorable SQL script.",
        add_help=False,
    )
    parser.add_argument("--help", action="help", help="Show this message and exit.")
    parser.add_argument("-u", "--user", help="Database user (default: root).")
    parser.add_argument("-s", "--password", help="Database password.")
    parser.add_argument("-d", "--database", help="Database name, or file path for sqlite.")
    parser.add_argument("-h", "--host", help="Database host (default: 127.0.0.1).")
    parser.add_argument("-p", "--port", type=int, help="Database port (default: 3306).")
    parser.add_argument(
        "--dialect",
        choices=dialect_names(),
        help="Database engine (default: mysql).",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="JSON configuration file with connection, output and obfuscate sections.",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        help="Directory the dump is written to (default: dumps).",
    )
    parser.add_argument(
        "--filename-format",
        help="strftime pattern for the dump name; {database} is replaced "
        "(default: {database}-%%Y.%%m.%%d_%%H.%%M.%%S).",
    )
    parser.add_argument(
        "--obfuscate",
        action="append",
        default=[],
        metavar="TABLE.COLUMN=TRANSFORMER",
        help="Transform a column while dumping (repeatable). "
        f"Transformers: {', '.join(transformer_names())}.",
    )
    parser.add_argument(
        "--escape-literals",
        action="store_true",
        default=None,
        help="Backslash-escape quotes and backslashes in values (changes the output format).",
    )
    parser.add_argument("--verbose", action="store_true", help="Log progress to stderr.")
    return parser


def _resolve_config(args: argparse.Namespace) -> DumpConfig:
    config = load_config(args.config) if args.config else DumpConfig()

    overrides = {
        "dialect": args.dialect,
        "database": args.database,
        "host": args.host,
        "port": args.port,
        "user": args.user,
        "password": args.password,
    }
    connection = replace(
        config.connection, **{key: value for key, value in overrides.items() if value is not None}
    )

    output = config.output
    if args.output_dir is not None:
        output = replace(output, directory=args.output_dir.expanduser())
    if args.filename_format:
        output = replace(output, filename_format=args.filename_format)
    if args.escape_literals is not None:
        output = replace(output, escape_literals=args.escape_literals)

    obfuscate = merge_rule_mappings(config.obfuscate, parse_obfuscation_arguments(args.obfuscate))
    return DumpConfig(connection=connection, output=output, obfuscate=obfuscate)


def _database_label(settings: ConnectionSettings) -> str:
    if settings.resolved_dialect is SQLITE:
        return Path(settings.database).stem
    return settings.database


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    if args.port is not None and args.port <= 0:
        parser.error("--port must be positive")

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = _resolve_config(args)
        if not config.connection.database:
            parser.error("a database is required (-d or the config file)")
        obfuscation = config.obfuscation
        connection = connect(config.connection)
        try:
            dumper = Dumper(
                connection,
                config.output.directory,
                Dumper.filename_format_for(
                    _database_label(config.connection), config.output.filename_format
                ),
                dialect=config.connection.resolved_dialect,
                escape_literals=config.output.escape_literals,
            )
        except DumpError:
            connection.close()
            raise
        with dumper:
            path = dumper.dump(obfuscation)
    except DumpError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 1

    sys.stdout.write(f"File is saved to {path}\n")
    return 0


def console_main() -> None:
    """Entry point for the ``maskdump`` console script."""

    sys.exit(main())


if __name__ == "__main__":  # pragma: no cover - CLI entry
    sys.exit(main())

"""JSON configuration for dump runs.

A configuration file bundles the connection, the output location and the
obfuscation rules::

    {
      "connection": {"dialect": "mysql", "database": "shop",
                     "user": "backup", "password": "${SHOP_DB_PASSWORD}"},
      "output": {"directory": "~/dumps", "escape_literals": false},
      "obfuscate": {
        "user": {"email": "md5-email",
                 "auth_key": {"transformer": "sha256", "salt": "pepper"}}
      }
    }

``${VAR}`` references are expanded from the environment.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import json
import os
from pathlib import Path
from typing import Any, Mapping

from .connection import ConnectionSettings
from .dumper import DEFAULT_FILENAME_FORMAT
from .errors import ConfigError
from .transformers import ColumnRule, ObfuscationMap, resolve_obfuscation

DEFAULT_OUTPUT_DIRECTORY = "dumps"


@dataclass(frozen=True)
class OutputSettings:
    directory: Path = Path(DEFAULT_OUTPUT_DIRECTORY)
    filename_format: str = DEFAULT_FILENAME_FORMAT
    escape_literals: bool = False

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any] | None) -> "OutputSettings":
        if not payload:
            return cls()
        if not isinstance(payload, Mapping):
            raise ConfigError("'output' must be an object", phase="config")

        directory = payload.get("directory") or DEFAULT_OUTPUT_DIRECTORY
        filename_format = payload.get("filename_format") or DEFAULT_FILENAME_FORMAT
        if not str(filename_format).strip():
            raise ConfigError("'output.filename_format' must not be empty", phase="config")

        return cls(
            directory=Path(os.path.expandvars(str(directory))).expanduser(),
            filename_format=str(filename_format),
            escape_literals=bool(payload.get("escape_literals", False)),
        )


@dataclass(frozen=True)
class DumpConfig:
    connection: ConnectionSettings = field(default_factory=ConnectionSettings)
    output: OutputSettings = field(default_factory=OutputSettings)
    obfuscate: Mapping[str, Mapping[str, ColumnRule]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "DumpConfig":
        if not isinstance(payload, Mapping):
            raise ConfigError("Config payload must be an object", phase="config")

        obfuscate_payload = payload.get("obfuscate") or {}
        if not isinstance(obfuscate_payload, Mapping):
            raise ConfigError("'obfuscate' must map tables to column rules", phase="config")
        # Resolve once so unknown transformers fail at load time.
        resolve_obfuscation(obfuscate_payload)

        return cls(
            connection=ConnectionSettings.from_dict(payload.get("connection")),
            output=OutputSettings.from_dict(payload.get("output")),
            obfuscate={str(table): dict(columns) for table, columns in obfuscate_payload.items()},
        )

    @property
    def obfuscation(self) -> ObfuscationMap:
        return resolve_obfuscation(self.obfuscate)


def load_config(path: Path | str) -> DumpConfig:
    path = Path(path)
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"Unable to read config {path}: {exc}", phase="config") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Failed to parse JSON from {path}: {exc}", phase="config") from exc
    return DumpConfig.from_dict(payload)


__all__ = ["DEFAULT_OUTPUT_DIRECTORY", "DumpConfig", "OutputSettings", "load_config"]

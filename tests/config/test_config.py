from __future__ import annotations

import json
from pathlib import Path

import pytest

from maskdump.config import DumpConfig, OutputSettings, load_config
from maskdump.connection import ConnectionSettings
from maskdump.dumper import DEFAULT_FILENAME_FORMAT
from maskdump.errors import ConfigError


def test_from_dict_defaults() -> None:
    config = DumpConfig.from_dict({})

    assert config.connection == ConnectionSettings()
    assert config.connection.dialect == "mysql"
    assert config.connection.port == 3306
    assert config.output == OutputSettings()
    assert config.output.filename_format == DEFAULT_FILENAME_FORMAT
    assert not config.obfuscation


def test_from_dict_expands_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("SHOP_DB_PASSWORD", "s3cret")
    monkeypatch.setenv("DUMP_ROOT", str(tmp_path))

    config = DumpConfig.from_dict(
        {
            "connection": {
                "dialect": "MySQL",
                "database": "shop",
                "user": "backup",
                "password": "${SHOP_DB_PASSWORD}",
                "port": "3307",
            },
            "output": {"directory": "${DUMP_ROOT}/dumps", "escape_literals": True},
            "obfuscate": {
                "user": {
                    "email": "md5-email",
                    "auth_key": {"transformer": "sha256", "salt": "pepper"},
                }
            },
        }
    )

    assert config.connection.password == "s3cret"
    assert config.connection.port == 3307
    assert config.connection.dialect == "mysql"
    assert config.connection.describe() == "mysql://backup@127.0.0.1:3307/shop"
    assert config.output.directory == tmp_path / "dumps"
    assert config.output.escape_literals is True
    assert set(config.obfuscation.for_table("user")) == {"email", "auth_key"}


@pytest.mark.parametrize(
    "payload",
    [
        {"connection": {"dialect": "oracle"}},
        {"connection": {"port": "abc"}},
        {"connection": {"port": 0}},
        {"connection": "mysql://"},
        {"output": ["dumps"]},
        {"obfuscate": {"user": {"email": "rot13"}}},
        {"obfuscate": ["user.email"]},
    ],
)
def test_from_dict_rejects_invalid_payloads(payload: dict) -> None:
    with pytest.raises(ConfigError):
        DumpConfig.from_dict(payload)


def test_load_config_reads_json(tmp_path: Path) -> None:
    path = tmp_path / "maskdump.json"
    path.write_text(
        json.dumps({"connection": {"dialect": "sqlite", "database": "app.sqlite"}}),
        encoding="utf-8",
    )

    config = load_config(path)

    assert config.connection.dialect == "sqlite"
    assert config.connection.describe() == "sqlite:app.sqlite"


def test_load_config_reports_bad_json_and_missing_files(tmp_path: Path) -> None:
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")

    with pytest.raises(ConfigError, match="Failed to parse JSON"):
        load_config(broken)
    with pytest.raises(ConfigError, match="Unable to read config"):
        load_config(tmp_path / "absent.json")

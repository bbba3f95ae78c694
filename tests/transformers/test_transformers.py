from __future__ import annotations

import hashlib

import pytest

from maskdump.errors import ConfigError
from maskdump.transformers import (
    ObfuscationMap,
    build_transformer,
    describe_rules,
    merge_rule_mappings,
    parse_obfuscation_arguments,
    register_transformer,
    resolve_obfuscation,
    transformer_names,
)


def test_builtin_transformers_are_registered_in_order() -> None:
    assert transformer_names()[:4] == ("md5", "md5-email", "sha256", "mask")


def test_md5_transformers_match_reference_digests() -> None:
    assert build_transformer("md5")("hello") == "5d41402abc4b2a76b9719d911017c592"
    assert build_transformer("md5-email")("hello") == "5d41402abc4b2a76@google.com"
    assert build_transformer("md5-email", domain="example.org")("hello").endswith("@example.org")


def test_sha256_transformer_prefixes_and_salts() -> None:
    plain = build_transformer("sha256")("abc")
    salted = build_transformer("sha256", salt="pepper")("abc")

    assert plain == "sha256:ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
    expected = hashlib.sha256(b"pepperabc").hexdigest()
    assert salted == f"sha256:{expected}"


def test_mask_transformer_uses_placeholder() -> None:
    assert build_transformer("mask")("secret") == "[REDACTED]"
    assert build_transformer("mask", placeholder="***")("secret") == "***"


def test_build_transformer_rejects_unknown_names_and_options() -> None:
    with pytest.raises(ConfigError, match="Unknown transformer"):
        build_transformer("rot13")
    with pytest.raises(ConfigError, match="Invalid options"):
        build_transformer("md5", salt="x")


def test_register_transformer_guards_duplicates() -> None:
    def factory():
        return str.lower

    register_transformer("test-lower", factory)
    register_transformer("test-lower", factory)

    with pytest.raises(ValueError):
        register_transformer("test-lower", lambda: str.upper)
    assert build_transformer("test-lower")("ABC") == "abc"


def test_obfuscation_map_resolves_names_mappings_and_callables() -> None:
    rules = ObfuscationMap.from_mapping(
        {
            "user": {
                "username": "md5",
                "secret": {"transformer": "mask", "placeholder": "--"},
                "nickname": str.upper,
            }
        }
    )

    user = rules.for_table("user")
    assert user["username"]("hello") == "5d41402abc4b2a76b9719d911017c592"
    assert user["secret"]("anything") == "--"
    assert user["nickname"]("bo") == "BO"
    assert describe_rules(rules) == ["user.username", "user.secret", "user.nickname"]


def test_obfuscation_map_is_table_scoped() -> None:
    rules = ObfuscationMap.from_mapping({"user": {"email": "md5-email"}})

    assert "email" in rules.for_table("user")
    assert rules.for_table("customer") == {}


def test_obfuscation_map_is_read_only() -> None:
    rules = ObfuscationMap.from_mapping({"user": {"email": "md5"}})

    with pytest.raises(TypeError):
        rules.rules["other"] = {}  # type: ignore[index]
    with pytest.raises(TypeError):
        rules.for_table("user")["name"] = str.upper  # type: ignore[index]


@pytest.mark.parametrize(
    "payload",
    [
        {"user": ["email"]},
        {"user": {"email": 5}},
        {"user": {"email": {"placeholder": "x"}}},
    ],
)
def test_obfuscation_map_rejects_invalid_rules(payload: object) -> None:
    with pytest.raises(ConfigError):
        ObfuscationMap.from_mapping(payload)  # type: ignore[arg-type]


def test_resolve_obfuscation_accepts_all_forms() -> None:
    existing = ObfuscationMap.from_mapping({"user": {"email": "md5"}})

    assert resolve_obfuscation(existing) is existing
    assert not resolve_obfuscation(None)
    assert resolve_obfuscation({"t": {"c": "mask"}}).tables == ("t",)


def test_parse_obfuscation_arguments_groups_by_table() -> None:
    parsed = parse_obfuscation_arguments(
        ["user.email=md5-email", " user.auth_key = md5 ", "", "orders.note=mask"]
    )

    assert parsed == {
        "user": {"email": "md5-email", "auth_key": "md5"},
        "orders": {"note": "mask"},
    }


@pytest.mark.parametrize("entry", ["user.email", "useremail=md5", "user.=md5", ".email=md5", "user.email="])
def test_parse_obfuscation_arguments_rejects_malformed_entries(entry: str) -> None:
    with pytest.raises(ConfigError, match="expected table.column=transformer"):
        parse_obfuscation_arguments([entry])


def test_merge_rule_mappings_prefers_later_payloads() -> None:
    merged = merge_rule_mappings(
        {"user": {"email": "md5", "name": "mask"}},
        None,
        {"user": {"email": "md5-email"}, "orders": {"note": "mask"}},
    )

    assert merged == {
        "user": {"email": "md5-email", "name": "mask"},
        "orders": {"note": "mask"},
    }

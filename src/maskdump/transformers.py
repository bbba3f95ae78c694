"""Named column transformers and the per-table obfuscation map.

Transformers are registered by name so obfuscation rules can live in JSON
configuration or on the command line::

    >>> rules = ObfuscationMap.from_mapping({"user": {"email": "md5-email"}})
    >>> rules.for_table("user")["email"]("a@x.com").endswith("@google.com")
    True

The registry keeps insertion order and rejects a second factory under an
existing name.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import hashlib
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from .codec import TEXT_ENCODING, TEXT_ERRORS, ColumnTransform
from .errors import ConfigError

TransformerFactory = Callable[..., ColumnTransform]
ColumnRule = Union[str, ColumnTransform, Mapping[str, Any]]

_TRANSFORMERS: Dict[str, TransformerFactory] = {}


def register_transformer(name: str, factory: TransformerFactory) -> None:
    """Register ``factory`` under ``name``.

    Registering the same factory twice is ignored. A different factory
    claiming an existing name raises :class:`ValueError`.
    """

    if not name or not name.strip():
        raise ValueError("Transformer name must not be empty")
    existing = _TRANSFORMERS.get(name)
    if existing is factory:
        return
    if existing is not None:
        raise ValueError(f"A transformer named {name!r} is already registered: {existing!r}")
    _TRANSFORMERS[name] = factory


def transformer_names() -> Tuple[str, ...]:
    """Return registered transformer names in registration order."""

    return tuple(_TRANSFORMERS)


def build_transformer(name: str, **options: Any) -> ColumnTransform:
    factory = _TRANSFORMERS.get(name)
    if factory is None:
        known = ", ".join(transformer_names())
        raise ConfigError(f"Unknown transformer {name!r} (known: {known})")
    try:
        return factory(**options)
    except TypeError as exc:
        raise ConfigError(f"Invalid options for transformer {name!r}: {exc}") from exc


def _md5_hex(data: str) -> str:
    return hashlib.md5(data.encode(TEXT_ENCODING, TEXT_ERRORS)).hexdigest()


def md5_transformer() -> ColumnTransform:
    return _md5_hex


def md5_email_transformer(*, domain: str = "google.com") -> ColumnTransform:
    def transform(data: str) -> str:
        return f"{_md5_hex(data)[:16]}@{domain}"

    return transform


def sha256_transformer(*, salt: str = "") -> ColumnTransform:
    def transform(data: str) -> str:
        digest = hashlib.sha256()
        digest.update(salt.encode(TEXT_ENCODING))
        digest.update(data.encode(TEXT_ENCODING, TEXT_ERRORS))
        return f"sha256:{digest.hexdigest()}"

    return transform


def mask_transformer(*, placeholder: str = "[REDACTED]") -> ColumnTransform:
    def transform(_data: str) -> str:
        return placeholder

    return transform


register_transformer("md5", md5_transformer)
register_transformer("md5-email", md5_email_transformer)
register_transformer("sha256", sha256_transformer)
register_transformer("mask", mask_transformer)


def _resolve_rule(table: str, column: str, rule: ColumnRule) -> ColumnTransform:
    if callable(rule):
        return rule
    if isinstance(rule, str):
        return build_transformer(rule.strip())
    if isinstance(rule, Mapping):
        options = {str(key): value for key, value in rule.items()}
        name = options.pop("transformer", None)
        if not name or not str(name).strip():
            raise ConfigError(
                f"Rule for {table}.{column} requires a 'transformer' name",
                phase="obfuscation",
            )
        return build_transformer(str(name).strip(), **options)
    raise ConfigError(
        f"Rule for {table}.{column} must be a transformer name, mapping or callable",
        phase="obfuscation",
    )


_EMPTY: Mapping[str, ColumnTransform] = MappingProxyType({})


@dataclass(frozen=True)
class ObfuscationMap:
    """Read-only ``table -> column -> transform`` rules for one dump."""

    rules: Mapping[str, Mapping[str, ColumnTransform]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        frozen = {
            str(table): MappingProxyType(dict(columns))
            for table, columns in self.rules.items()
        }
        object.__setattr__(self, "rules", MappingProxyType(frozen))

    @classmethod
    def from_mapping(
        cls, payload: Optional[Mapping[str, Mapping[str, ColumnRule]]]
    ) -> "ObfuscationMap":
        if not payload:
            return cls()
        if not isinstance(payload, Mapping):
            raise ConfigError("Obfuscation rules must be a mapping of tables", phase="obfuscation")
        rules: Dict[str, Dict[str, ColumnTransform]] = {}
        for table, columns in payload.items():
            if not table:
                continue
            if not isinstance(columns, Mapping):
                raise ConfigError(
                    f"Obfuscation rules for {table!r} must map columns to transformers",
                    phase="obfuscation",
                )
            resolved = {
                str(column): _resolve_rule(str(table), str(column), rule)
                for column, rule in columns.items()
                if column
            }
            if resolved:
                rules[str(table)] = resolved
        return cls(rules=rules)

    def for_table(self, table: str) -> Mapping[str, ColumnTransform]:
        return self.rules.get(table, _EMPTY)

    @property
    def tables(self) -> Tuple[str, ...]:
        return tuple(self.rules)

    def __bool__(self) -> bool:
        return bool(self.rules)


def resolve_obfuscation(
    value: Union[ObfuscationMap, Mapping[str, Mapping[str, ColumnRule]], None],
) -> ObfuscationMap:
    """Return an :class:`ObfuscationMap` for whatever the caller supplied."""

    if value is None:
        return ObfuscationMap()
    if isinstance(value, ObfuscationMap):
        return value
    return ObfuscationMap.from_mapping(value)


def parse_obfuscation_arguments(values: Sequence[str] | None) -> Mapping[str, Mapping[str, str]]:
    """Group ``table.column=transformer`` entries by table."""

    grouped: Dict[str, Dict[str, str]] = {}
    for entry in values or ():
        text = (entry or "").strip()
        if not text:
            continue
        target, sep, name = text.partition("=")
        table, dot, column = target.partition(".")
        table, column, name = table.strip(), column.strip(), name.strip()
        if not sep or not dot or not table or not column or not name:
            raise ConfigError(
                f"Invalid obfuscation rule {entry!r}; expected table.column=transformer",
                phase="obfuscation",
            )
        grouped.setdefault(table, {})[column] = name
    return grouped


def merge_rule_mappings(
    *payloads: Optional[Mapping[str, Mapping[str, ColumnRule]]],
) -> Mapping[str, Mapping[str, ColumnRule]]:
    """Merge nested rule mappings, later payloads overriding earlier columns."""

    merged: Dict[str, Dict[str, ColumnRule]] = {}
    for payload in payloads:
        for table, columns in (payload or {}).items():
            merged.setdefault(table, {}).update(columns)
    return merged


def describe_rules(rules: ObfuscationMap) -> List[str]:
    return [f"{table}.{column}" for table in rules.tables for column in rules.for_table(table)]


__all__ = [
    "ColumnRule",
    "ColumnTransform",
    "ObfuscationMap",
    "TransformerFactory",
    "build_transformer",
    "describe_rules",
    "md5_email_transformer",
    "md5_transformer",
    "mask_transformer",
    "merge_rule_mappings",
    "parse_obfuscation_arguments",
    "register_transformer",
    "resolve_obfuscation",
    "sha256_transformer",
    "transformer_names",
]

"""Config types for declaring typespecs as data.

A typespec document is the JSON/YAML-friendly spelling of a builder call
tree. Config-driven construction path:
  dict → parse_typespec_config() → TypespecConfig → Registry.load() → Matcher

Document shape (one node):

| Node                                   | Config type    | Typespec          |
|----------------------------------------|----------------|-------------------|
| "Anything" / "Nil" / "Bool"            | NamedConfig    | anything() ...    |
| "int" (any other string)               | TypeConfig     | only(int)         |
| {"Only": "int"}                        | TypeConfig     | only(int)         |
| {"Matching": "^a"}                     | RegexConfig    | matching("^a")    |
| {"Value": 7}                           | LiteralConfig  | value(7)          |
| {"IncludedIn": [7, 5]}                 | LiteralConfig  | included_in(7, 5) |
| {"CoveredBy": [1, 4]}                  | LiteralConfig  | covered_by(1, 4)  |
| {"OfElements": 3} (and AtLeast/AtMost) | LiteralConfig  | length_exactly(3) |
| {"ObjectWith": ["upper"]}              | LiteralConfig  | object_with(...)  |
| {"Satisfying": "positive"}             | LiteralConfig  | satisfying(fn)    |
| {"ArrayOf": node} / {"Maybe": node}    | NestedConfig   | array_of(...)     |
| {"Either": [node, ...]} / {"Both": ..} | NestedConfig   | either(...)       |
| {"HashWith": {key: node}} (Of/Perm.)   | KeyedConfig    | hash_with(...)    |

Type names and predicate names are resolved by the registry, not here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from mal._errors import MatcherError

# ═══════════════════════════════════════════════════════════════════════════════
# Config types (frozen dataclasses, one per node shape)
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class NamedConfig:
    """A typespec with no payload: Anything, Nil or Bool."""

    variant: str


@dataclass(frozen=True, slots=True)
class TypeConfig:
    """Class membership against a type registered under ``name``."""

    name: str


@dataclass(frozen=True, slots=True)
class RegexConfig:
    """RE2 search over string values."""

    pattern: str


@dataclass(frozen=True, slots=True)
class LiteralConfig:
    """A typespec parameterised by plain data.

    ``value`` holds the literal for Value, a tuple for IncludedIn, CoveredBy
    and ObjectWith, an int for the length variants and a registered predicate
    name for Satisfying.
    """

    variant: str
    value: Any


@dataclass(frozen=True, slots=True)
class NestedConfig:
    """A typespec built from child typespecs (ArrayOf, Maybe, Either, Both)."""

    variant: str
    members: tuple[TypespecConfig, ...]


@dataclass(frozen=True, slots=True)
class KeyedConfig:
    """A mapping typespec (HashWith, HashOf, HashPermitting)."""

    variant: str
    entries: tuple[tuple[Any, TypespecConfig], ...]


type TypespecConfig = (
    NamedConfig | TypeConfig | RegexConfig | LiteralConfig | NestedConfig | KeyedConfig
)


# ═══════════════════════════════════════════════════════════════════════════════
# Parsing (dict → config types)
# ═══════════════════════════════════════════════════════════════════════════════

NAMED_VARIANTS = frozenset({"Anything", "Nil", "Bool"})
LENGTH_VARIANTS = frozenset({"OfElements", "OfAtLeastElements", "OfAtMostElements"})
SINGLE_CHILD_VARIANTS = frozenset({"ArrayOf", "Maybe"})
MULTI_CHILD_VARIANTS = frozenset({"Either", "Both"})
KEYED_VARIANTS = frozenset({"HashWith", "HashOf", "HashPermitting"})

_ALL_VARIANTS = (
    NAMED_VARIANTS
    | LENGTH_VARIANTS
    | SINGLE_CHILD_VARIANTS
    | MULTI_CHILD_VARIANTS
    | KEYED_VARIANTS
    | {"Only", "Matching", "Value", "IncludedIn", "CoveredBy", "ObjectWith", "Satisfying"}
)


class ConfigParseError(MatcherError):
    """Error parsing a typespec document into config types."""


def parse_typespec_config(data: Any) -> TypespecConfig:
    """Parse a typespec document into a TypespecConfig.

    This is the main entry point for config loading. Accepts the output of
    json.load() or yaml.safe_load().

    Raises:
        ConfigParseError: If the document is malformed.
    """
    if isinstance(data, str):
        if data in NAMED_VARIANTS:
            return NamedConfig(variant=data)
        if not data:
            msg = "type name must not be empty"
            raise ConfigParseError(msg)
        return TypeConfig(name=data)

    if not isinstance(data, dict):
        msg = f"typespec must be a string or a dict, got {type(data).__name__}"
        raise ConfigParseError(msg)
    if len(data) != 1:
        msg = f"typespec dict must have exactly one key, got {sorted(map(str, data))}"
        raise ConfigParseError(msg)

    ((variant, payload),) = data.items()
    if variant not in _ALL_VARIANTS:
        expected = sorted(_ALL_VARIANTS)
        msg = f"unknown typespec variant {variant!r}, expected one of {expected}"
        raise ConfigParseError(msg)
    return _parse_variant(variant, payload)


def _parse_variant(variant: str, payload: Any) -> TypespecConfig:
    if variant in NAMED_VARIANTS:
        if payload not in (None, {}):
            msg = f"{variant} takes no arguments, got {payload!r}"
            raise ConfigParseError(msg)
        return NamedConfig(variant=variant)

    if variant == "Only":
        return TypeConfig(name=_string(variant, payload))
    if variant == "Matching":
        return RegexConfig(pattern=_string(variant, payload))
    if variant == "Value":
        return LiteralConfig(variant=variant, value=payload)
    if variant == "IncludedIn":
        return LiteralConfig(variant=variant, value=tuple(_list(variant, payload)))
    if variant == "CoveredBy":
        bounds = _list(variant, payload)
        if len(bounds) != 2:
            msg = f"CoveredBy takes [low, high], got {len(bounds)} items"
            raise ConfigParseError(msg)
        return LiteralConfig(variant=variant, value=tuple(bounds))
    if variant == "ObjectWith":
        names = _list(variant, payload)
        if not all(isinstance(n, str) for n in names):
            msg = "ObjectWith names must all be strings"
            raise ConfigParseError(msg)
        return LiteralConfig(variant=variant, value=tuple(names))
    if variant == "Satisfying":
        return LiteralConfig(variant=variant, value=_string(variant, payload))
    if variant in LENGTH_VARIANTS:
        if isinstance(payload, bool) or not isinstance(payload, int) or payload < 0:
            msg = f"{variant} takes a non-negative int, got {payload!r}"
            raise ConfigParseError(msg)
        return LiteralConfig(variant=variant, value=payload)

    if variant in SINGLE_CHILD_VARIANTS:
        return NestedConfig(variant=variant, members=(parse_typespec_config(payload),))
    if variant in MULTI_CHILD_VARIANTS:
        children = _list(variant, payload)
        if not children:
            msg = f"{variant} needs at least one member"
            raise ConfigParseError(msg)
        return NestedConfig(
            variant=variant, members=tuple(parse_typespec_config(c) for c in children)
        )

    # KEYED_VARIANTS
    if not isinstance(payload, dict):
        msg = f"{variant} takes a dict of key → typespec, got {type(payload).__name__}"
        raise ConfigParseError(msg)
    return KeyedConfig(
        variant=variant,
        entries=tuple((k, parse_typespec_config(v)) for k, v in payload.items()),
    )


def _string(variant: str, payload: Any) -> str:
    if not isinstance(payload, str) or not payload:
        msg = f"{variant} takes a non-empty string, got {payload!r}"
        raise ConfigParseError(msg)
    return payload


def _list(variant: str, payload: Any) -> list[Any]:
    if not isinstance(payload, list):
        msg = f"{variant} takes a list, got {type(payload).__name__}"
        raise ConfigParseError(msg)
    return payload

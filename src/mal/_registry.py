"""Type registry for config-driven typespec construction.

The registry turns typespec documents into matchers without any
schema-specific code:
- RegistryBuilder → .build() → Registry (immutable)
- Types are registered by name (the class used for membership checks)
- Predicates are registered by name (the callable behind Satisfying)
- load() walks the config tree and constructs typespecs via the builders

Example::

    builder = RegistryBuilder()
    register_builtin_types(builder)
    builder.predicate("positive", lambda x: x > 0)
    registry = builder.build()

    matcher = registry.load_document({"HashWith": {"id": "int"}})
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from mal import _builders as b
from mal._config import (
    KeyedConfig,
    LiteralConfig,
    NamedConfig,
    NestedConfig,
    RegexConfig,
    TypeConfig,
    TypespecConfig,
    parse_typespec_config,
)
from mal._errors import MatcherError
from mal._matcher import Matcher

logger = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════════════════
# Limits
# ═══════════════════════════════════════════════════════════════════════════════

MAX_DEPTH = 32
MAX_MEMBERS = 256
MAX_REGEX_PATTERN_LENGTH = 4096

# ═══════════════════════════════════════════════════════════════════════════════
# Error types
# ═══════════════════════════════════════════════════════════════════════════════


class UnknownTypeNameError(MatcherError):
    """A type or predicate name was not found in the registry."""

    def __init__(self, name: str, kind: str, available: list[str]) -> None:
        self.name = name
        self.kind = kind
        self.available = sorted(available)
        if self.available:
            registered = ", ".join(self.available)
            msg = f"unknown {kind} name: {name!r} (registered: {registered})"
        else:
            msg = f"unknown {kind} name: {name!r} (no {kind}s are registered)"
        super().__init__(msg)


class InvalidConfigError(MatcherError):
    """A config payload was well-formed but could not be built into a typespec."""

    def __init__(self, source: str) -> None:
        self.source = source
        super().__init__(f"invalid config: {source}")


class DepthExceededError(MatcherError):
    """Typespec document nests deeper than the depth limit."""

    def __init__(self, depth: int, max_: int) -> None:
        self.depth = depth
        self.max = max_
        super().__init__(f"typespec depth {depth} exceeds maximum allowed depth {max_}")


class TooManyMembersError(MatcherError):
    """A compound typespec has too many members (width-based limit)."""

    def __init__(self, variant: str, count: int, max_: int) -> None:
        self.variant = variant
        self.count = count
        self.max = max_
        super().__init__(f"too many members in {variant}: {count} exceeds maximum {max_}")


class PatternTooLongError(MatcherError):
    """A regex pattern exceeds the length limit."""

    def __init__(self, length: int, max_: int) -> None:
        self.length = length
        self.max = max_
        super().__init__(f"pattern length {length} exceeds maximum {max_}")


# ═══════════════════════════════════════════════════════════════════════════════
# Builder
# ═══════════════════════════════════════════════════════════════════════════════

type Predicate = Callable[[Any], Any]


class RegistryBuilder:
    """Builder for constructing a Registry.

    Register named types and predicates, then call build() to produce an
    immutable Registry. Registering a name twice replaces the first entry.
    """

    def __init__(self) -> None:
        self._types: dict[str, type | tuple[type, ...]] = {}
        self._predicates: dict[str, Predicate] = {}

    def named_type(self, name: str, cls: type | tuple[type, ...]) -> RegistryBuilder:
        """Register a class (or tuple of classes) under a type name."""
        self._types[name] = cls
        return self

    def predicate(self, name: str, fn: Predicate) -> RegistryBuilder:
        """Register a unary predicate for use by Satisfying."""
        self._predicates[name] = fn
        return self

    def build(self) -> Registry:
        """Freeze the registry. No further registration is possible."""
        logger.debug(
            "freezing typespec registry with %d types and %d predicates",
            len(self._types),
            len(self._predicates),
        )
        return Registry(
            _types=MappingProxyType(dict(self._types)),
            _predicates=MappingProxyType(dict(self._predicates)),
        )


BUILTIN_TYPES: dict[str, type | tuple[type, ...]] = {
    "int": int,
    "float": float,
    "number": (int, float),
    "str": str,
    "bytes": bytes,
    "bool": bool,
    "list": list,
    "dict": dict,
}


def register_builtin_types(builder: RegistryBuilder) -> RegistryBuilder:
    """Register the JSON-ish builtin classes under their Python names.

    ``number`` covers int and float together.
    """
    for name, cls in BUILTIN_TYPES.items():
        builder.named_type(name, cls)
    return builder


# ═══════════════════════════════════════════════════════════════════════════════
# Registry
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Registry:
    """Immutable registry of named types and predicates.

    Constructed via RegistryBuilder. Use load() to compile a parsed config
    into a typespec, or load_document() to parse and compile in one go.
    """

    _types: MappingProxyType[str, type | tuple[type, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    _predicates: MappingProxyType[str, Predicate] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def load(self, config: TypespecConfig) -> Matcher:
        """Build a typespec from configuration.

        Raises:
            UnknownTypeNameError: type or predicate name not registered
            InvalidConfigError: payload rejected by a builder
            DepthExceededError: document nested deeper than MAX_DEPTH
            TooManyMembersError: compound with more than MAX_MEMBERS members
            PatternTooLongError: regex longer than MAX_REGEX_PATTERN_LENGTH
        """
        return self._load(config, 1)

    def load_document(self, data: Any) -> Matcher:
        """Parse a typespec document and build it.

        Raises:
            ConfigParseError: If the document is malformed.
            MatcherError: Anything load() raises.
        """
        matcher = self.load(parse_typespec_config(data))
        logger.debug("compiled typespec document into %s", matcher.render())
        return matcher

    @property
    def type_count(self) -> int:
        """Number of registered types."""
        return len(self._types)

    @property
    def predicate_count(self) -> int:
        """Number of registered predicates."""
        return len(self._predicates)

    def contains_type(self, name: str) -> bool:
        return name in self._types

    def contains_predicate(self, name: str) -> bool:
        return name in self._predicates

    def type_names(self) -> list[str]:
        """Return all registered type names (sorted)."""
        return sorted(self._types.keys())

    def predicate_names(self) -> list[str]:
        """Return all registered predicate names (sorted)."""
        return sorted(self._predicates.keys())

    # ── Private loading methods ────────────────────────────────────────────

    def _load(self, config: TypespecConfig, depth: int) -> Matcher:
        if depth > MAX_DEPTH:
            raise DepthExceededError(depth, MAX_DEPTH)

        try:
            return self._load_node(config, depth)
        except _LOAD_ERRORS:
            raise
        except MatcherError as e:
            raise InvalidConfigError(str(e)) from e

    def _load_node(self, config: TypespecConfig, depth: int) -> Matcher:
        match config:
            case NamedConfig(variant="Anything"):
                return b.anything()
            case NamedConfig(variant="Nil"):
                return b.nil()
            case NamedConfig(variant="Bool"):
                return b.boolean()
            case TypeConfig(name=name):
                return b.only(self._resolve_type(name))
            case RegexConfig(pattern=pattern):
                if len(pattern) > MAX_REGEX_PATTERN_LENGTH:
                    raise PatternTooLongError(len(pattern), MAX_REGEX_PATTERN_LENGTH)
                return b.matching(pattern)
            case LiteralConfig():
                return self._load_literal(config)
            case NestedConfig(variant=variant, members=members):
                _check_width(variant, len(members))
                children = [self._load(m, depth + 1) for m in members]
                match variant:
                    case "ArrayOf":
                        return b.array_of(children[0])
                    case "Maybe":
                        return b.maybe(children[0])
                    case "Either":
                        return b.either(*children)
                    case "Both":
                        return b.both(*children)
            case KeyedConfig(variant=variant, entries=entries):
                _check_width(variant, len(entries))
                loaded = {key: self._load(v, depth + 1) for key, v in entries}
                match variant:
                    case "HashWith":
                        return b.hash_with(loaded)
                    case "HashOf":
                        return b.hash_of(loaded)
                    case "HashPermitting":
                        return b.hash_permitting(loaded)
        msg = f"unknown typespec config: {config!r}"
        raise InvalidConfigError(msg)

    def _load_literal(self, config: LiteralConfig) -> Matcher:
        match config.variant:
            case "Value":
                return b.value(config.value)
            case "IncludedIn":
                _check_width(config.variant, len(config.value))
                return b.included_in(*config.value)
            case "CoveredBy":
                low, high = config.value
                return b.covered_by(low, high)
            case "ObjectWith":
                _check_width(config.variant, len(config.value))
                return b.object_with(*config.value)
            case "Satisfying":
                return b.satisfying(self._resolve_predicate(config.value))
            case "OfElements":
                return b.length_exactly(config.value)
            case "OfAtLeastElements":
                return b.length_at_least(config.value)
            case "OfAtMostElements":
                return b.length_at_most(config.value)
        msg = f"unknown literal typespec variant: {config.variant!r}"
        raise InvalidConfigError(msg)

    def _resolve_type(self, name: str) -> type | tuple[type, ...]:
        cls = self._types.get(name)
        if cls is None:
            raise UnknownTypeNameError(name, "type", list(self._types.keys()))
        return cls

    def _resolve_predicate(self, name: str) -> Predicate:
        fn = self._predicates.get(name)
        if fn is None:
            raise UnknownTypeNameError(name, "predicate", list(self._predicates.keys()))
        return fn


_LOAD_ERRORS = (
    UnknownTypeNameError,
    InvalidConfigError,
    DepthExceededError,
    TooManyMembersError,
    PatternTooLongError,
)


def _check_width(variant: str, count: int) -> None:
    if count > MAX_MEMBERS:
        raise TooManyMembersError(variant, count, MAX_MEMBERS)

"""mal — composable typespecs for matching the shape of unstructured data.

Builders, the Matcher base class and the config layer are exported from
this module for flat imports:

    from mal import hash_with, array_of, boolean, nil

    spec = hash_with(user=hash_with(id=int, active=boolean(), nickname=nil() | str))
    spec.matches({"user": {"id": 123, "active": True, "nickname": None}})

The concrete typespec classes live in mal._matcher and are not part of the
public surface; build typespecs through the functions below.
"""

__version__ = "0.1.0"

# Builders
from mal._builders import (
    anything,
    array_of,
    boolean,
    both,
    covered_by,
    either,
    hash_of,
    hash_permitting,
    hash_with,
    included_in,
    length_at_least,
    length_at_most,
    length_exactly,
    matching,
    maybe,
    nil,
    object_with,
    only,
    satisfying,
    value,
)

# Config types — see mal._config for the document shape
from mal._config import (
    ConfigParseError,
    KeyedConfig,
    LiteralConfig,
    NamedConfig,
    NestedConfig,
    RegexConfig,
    TypeConfig,
    TypespecConfig,
    parse_typespec_config,
)
from mal._errors import InvalidMatcherOperand, MatcherError
from mal._matcher import Matcher, matcher_depth

# Registry — see mal._registry for details
from mal._registry import (
    MAX_DEPTH,
    MAX_MEMBERS,
    MAX_REGEX_PATTERN_LENGTH,
    DepthExceededError,
    InvalidConfigError,
    PatternTooLongError,
    Registry,
    RegistryBuilder,
    TooManyMembersError,
    UnknownTypeNameError,
    register_builtin_types,
)

# Terminal predicates
from mal._terminals import (
    Between,
    Call,
    EqualTo,
    InstanceOf,
    IsNone,
    MemberOf,
    RegexMatch,
)
from mal._types import Matchable, TerminalPredicate

__all__ = [
    # Protocols
    "Matchable",
    "Matcher",
    "TerminalPredicate",
    "matcher_depth",
    # Builders
    "anything",
    "nil",
    "boolean",
    "only",
    "value",
    "satisfying",
    "included_in",
    "covered_by",
    "matching",
    "array_of",
    "length_exactly",
    "length_at_least",
    "length_at_most",
    "hash_with",
    "hash_of",
    "hash_permitting",
    "object_with",
    "either",
    "both",
    "maybe",
    # Terminal predicates
    "InstanceOf",
    "RegexMatch",
    "EqualTo",
    "MemberOf",
    "Between",
    "Call",
    "IsNone",
    # Errors
    "MatcherError",
    "InvalidMatcherOperand",
    # Config types
    "NamedConfig",
    "TypeConfig",
    "RegexConfig",
    "LiteralConfig",
    "NestedConfig",
    "KeyedConfig",
    "TypespecConfig",
    "ConfigParseError",
    "parse_typespec_config",
    # Registry
    "RegistryBuilder",
    "Registry",
    "register_builtin_types",
    "UnknownTypeNameError",
    "InvalidConfigError",
    "DepthExceededError",
    "TooManyMembersError",
    "PatternTooLongError",
    "MAX_DEPTH",
    "MAX_MEMBERS",
    "MAX_REGEX_PATTERN_LENGTH",
]

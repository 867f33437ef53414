"""Builder functions — the public way to construct typespecs.

Each builder validates its operands and returns an immutable typespec:

    >>> from mal import hash_with, boolean, nil
    >>> spec = hash_with(id=int, active=boolean(), nickname=nil() | str)
    >>> spec
    HashWith('id'=>int, 'active'=>Bool(), 'nickname'=>Maybe(str))
    >>> spec.matches({"id": 1, "active": True, "nickname": None})
    True

Wherever a child typespec is expected, a class, a tuple of classes, a
compiled regular expression or any TerminalPredicate works too. Plain
literals do not: wrap them with value().
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from mal._errors import InvalidMatcherOperand, MatcherError
from mal._matcher import (
    Anything,
    ArrayOf,
    Bool,
    Both,
    CoveredBy,
    Either,
    HashOf,
    HashPermitting,
    HashWith,
    IncludedIn,
    Matcher,
    Maybe,
    Nil,
    ObjectWith,
    OfAtLeastElements,
    OfAtMostElements,
    OfElements,
    Only,
    Satisfying,
    Value,
    as_matcher,
    unique,
)
from mal._terminals import Between, Call, EqualTo, MemberOf, RegexMatch, as_terminal

if TYPE_CHECKING:
    from mal._types import Matchable


def anything() -> Matcher:
    """Match any value at all."""
    return Anything()


def nil() -> Matcher:
    """Match None and nothing else."""
    return Nil()


def boolean() -> Matcher:
    """Match True or False (truthy or falsy values do not count)."""
    return Bool()


def only(matchable: Matchable) -> Matcher:
    """Match whatever the given class, pattern or predicate accepts.

    Unlike using the bare class, the result can be combined with | and &
    from the left-hand side.
    """
    return Only(as_terminal(matchable, "for only()"))


def value(literal: Any) -> Matcher:
    """Match values equal (==) to ``literal``."""
    return Value(EqualTo(literal))


def satisfying(predicate: Callable[[Any], Any]) -> Matcher:
    """Match values for which ``predicate(value)`` is truthy.

    Exceptions raised by the predicate are not caught.

        >>> satisfying(lambda x: x > 10).matches(11)
        True
    """
    if not callable(predicate):
        raise InvalidMatcherOperand(predicate, "predicate", "expected a callable")
    return Satisfying(Call(predicate))


def included_in(*values: Any) -> Matcher:
    """Match values equal to one of ``values``."""
    return IncludedIn(MemberOf(values))


def covered_by(low: Any, high: Any) -> Matcher:
    """Match values within the inclusive bounds ``low..high``."""
    return CoveredBy(Between(low, high))


def matching(pattern: str) -> Matcher:
    """Match strings in which the RE2 ``pattern`` finds a match.

    Patterns RE2 cannot compile (backreferences, lookaround) are rejected.
    """
    if not isinstance(pattern, str):
        raise InvalidMatcherOperand(pattern, "pattern", "expected a string")
    try:
        return Only(RegexMatch(pattern))
    except MatcherError as e:
        raise InvalidMatcherOperand(pattern, "pattern", str(e)) from e


def array_of(element: Matchable) -> Matcher:
    """Match a non-empty sequence whose every element matches ``element``."""
    return ArrayOf(as_matcher(element, "array element"))


def _check_count(n: Any) -> int:
    if isinstance(n, bool) or not isinstance(n, int) or n < 0:
        raise InvalidMatcherOperand(n, "length", "expected a non-negative int")
    return n


def length_exactly(n: int) -> Matcher:
    """Match sized values with exactly ``n`` elements."""
    return OfElements(_check_count(n))


def length_at_least(n: int) -> Matcher:
    """Match sized values with ``n`` or more elements."""
    return OfAtLeastElements(_check_count(n))


def length_at_most(n: int) -> Matcher:
    """Match sized values with at most ``n`` elements."""
    return OfAtMostElements(_check_count(n))


def _entries(
    entries: Mapping[Any, Matchable] | None, extra: dict[str, Matchable]
) -> tuple[tuple[Any, Matcher], ...]:
    if entries is None:
        entries = {}
    if not isinstance(entries, Mapping):
        raise InvalidMatcherOperand(entries, "key mapping", "expected a mapping")
    merged = {**entries, **extra}
    return tuple(
        (key, as_matcher(m, f"value for key {key!r}")) for key, m in merged.items()
    )


def hash_with(
    entries: Mapping[Any, Matchable] | None = None, /, **kwargs: Matchable
) -> Matcher:
    """Match a mapping holding at least these keys, with matching values.

    Keys can be given as a mapping (any hashable keys) and/or as keyword
    arguments (string keys). Extra keys in the value are ignored.

        >>> hash_with(name=str).matches({"name": "John Doe", "age": 21})
        True
    """
    return HashWith(_entries(entries, kwargs))


def hash_of(
    entries: Mapping[Any, Matchable] | None = None, /, **kwargs: Matchable
) -> Matcher:
    """Match a mapping holding exactly these keys, with matching values."""
    return HashOf(_entries(entries, kwargs))


def hash_permitting(
    entries: Mapping[Any, Matchable] | None = None, /, **kwargs: Matchable
) -> Matcher:
    """Match a mapping holding only (some of) these keys, with matching values.

    An empty mapping always matches; a mapping with any other key never does.
    """
    return HashPermitting(_entries(entries, kwargs))


def object_with(*names: str) -> Matcher:
    """Match objects that have every one of the named attributes or methods.

        >>> object_with("upper", "lower").matches("foo")
        True
    """
    for name in names:
        if not isinstance(name, str) or not name:
            raise InvalidMatcherOperand(name, "attribute name", "expected a non-empty string")
    return ObjectWith(unique(names))


def _members(matchables: tuple[Matchable, ...], builder: str) -> tuple[Matcher, ...]:
    if not matchables:
        raise InvalidMatcherOperand(
            matchables, f"member list for {builder}()", "expected at least one member"
        )
    return unique(as_matcher(m, f"member of {builder}()") for m in matchables)


def either(*matchables: Matchable) -> Matcher:
    """Match values matching at least one of the given typespecs."""
    return Either(_members(matchables, "either"))


def both(*matchables: Matchable) -> Matcher:
    """Match values matching all of the given typespecs.

        >>> both(str, matching("abc")).matches("an abc string")
        True
    """
    return Both(_members(matchables, "both"))


def maybe(matchable: Matchable) -> Matcher:
    """Match None or whatever ``matchable`` matches."""
    return Maybe(as_matcher(matchable, "for maybe()"))

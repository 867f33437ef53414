"""Matcher — the typespec algebra.

Every typespec is a frozen dataclass deriving from Matcher:
- matches(value) answers whether a value has the described shape
- render() gives the canonical textual form (also used as repr)
- | and & (or or_() / and_()) fold two typespecs into a new one,
  simplifying at construction time instead of deferring to match time

Matching is plain structural recursion over the tree. Container typespecs
reject values of the wrong shape before consulting their children, and no
typespec keeps state between calls, so a tree can be shared freely across
threads.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence, Sized
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar

from mal._terminals import IsNone, as_terminal

if TYPE_CHECKING:
    from mal._types import Matchable, TerminalPredicate


class Matcher:
    """Base class of every typespec.

    Subclasses implement matches() and render(). Combinators never mutate
    their operands; they always return a fresh node (or one of the operands
    unchanged, when the other one is absorbed).

    Every typespec also satisfies the TerminalPredicate protocol, so one can
    be wrapped by only() like any other opaque check.
    """

    __slots__ = ()

    def matches(self, value: Any, /) -> bool:
        raise NotImplementedError

    def render(self) -> str:
        raise NotImplementedError

    def accepts(self, value: Any, /) -> bool:
        return self.matches(value)

    def describe(self) -> str:
        return self.render()

    def or_(self, other: Matchable) -> Matcher:
        """Disjoint union of this typespec and another."""
        return disjoin(self, as_matcher(other))

    def and_(self, other: Matchable) -> Matcher:
        """Conjunction of this typespec and another."""
        return conjoin(self, as_matcher(other))

    def __or__(self, other: Matchable) -> Matcher:
        return self.or_(other)

    def __ror__(self, other: Matchable) -> Matcher:
        return as_matcher(other).or_(self)

    def __and__(self, other: Matchable) -> Matcher:
        return self.and_(other)

    def __rand__(self, other: Matchable) -> Matcher:
        return as_matcher(other).and_(self)

    def __repr__(self) -> str:
        return self.render()


# ═══════════════════════════════════════════════════════════════════════════════
# Terminal typespecs
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True, repr=False)
class Anything(Matcher):
    """Matches every value. Absorbs the other operand of |, vanishes in &."""

    def matches(self, value: Any, /) -> bool:
        return True

    def render(self) -> str:
        return "Anything()"


@dataclass(frozen=True, slots=True, repr=False)
class Only(Matcher):
    """Matches whatever the wrapped terminal predicate accepts."""

    predicate: TerminalPredicate
    label: ClassVar[str] = "Only"

    def matches(self, value: Any, /) -> bool:
        return self.predicate.accepts(value)

    def render(self) -> str:
        return f"{self.label}({self.predicate.describe()})"


@dataclass(frozen=True, slots=True, repr=False)
class Bare(Only):
    """A terminal predicate used directly as an operand (a class, a pattern).

    Renders as the predicate alone, so ``only(int) | str`` reads
    ``Either(Only(int), str)``.
    """

    def render(self) -> str:
        return self.predicate.describe()


@dataclass(frozen=True, slots=True, repr=False)
class Nil(Only):
    """Matches None and nothing else."""

    predicate: TerminalPredicate = field(default_factory=IsNone, init=False)

    def render(self) -> str:
        return "Nil()"


@dataclass(frozen=True, slots=True, repr=False)
class Value(Only):
    label: ClassVar[str] = "Value"


@dataclass(frozen=True, slots=True, repr=False)
class Satisfying(Only):
    label: ClassVar[str] = "Satisfying"


@dataclass(frozen=True, slots=True, repr=False)
class IncludedIn(Only):
    label: ClassVar[str] = "IncludedIn"


@dataclass(frozen=True, slots=True, repr=False)
class CoveredBy(Only):
    label: ClassVar[str] = "CoveredBy"


@dataclass(frozen=True, slots=True, repr=False)
class Bool(Matcher):
    """Matches exactly True or exactly False; truthy and falsy values do not count."""

    def matches(self, value: Any, /) -> bool:
        return value is True or value is False

    def render(self) -> str:
        return "Bool()"


@dataclass(frozen=True, slots=True, repr=False)
class ObjectWith(Matcher):
    """Matches objects exposing every named attribute or method."""

    names: tuple[str, ...]

    def matches(self, value: Any, /) -> bool:
        return all(hasattr(value, name) for name in self.names)

    def render(self) -> str:
        return f"ObjectWith({', '.join(f':{name}' for name in self.names)})"


# ═══════════════════════════════════════════════════════════════════════════════
# Length typespecs
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True, repr=False)
class OfElements(Matcher):
    """Matches sized values whose len() is exactly ``count``."""

    count: int
    label: ClassVar[str] = "OfElements"

    def matches(self, value: Any, /) -> bool:
        if not isinstance(value, Sized):
            return False
        return self.accepts_length(len(value))

    def accepts_length(self, length: int) -> bool:
        return length == self.count

    def render(self) -> str:
        return f"{self.label}({self.count})"


@dataclass(frozen=True, slots=True, repr=False)
class OfAtLeastElements(OfElements):
    label: ClassVar[str] = "OfAtLeastElements"

    def accepts_length(self, length: int) -> bool:
        return length >= self.count


@dataclass(frozen=True, slots=True, repr=False)
class OfAtMostElements(OfElements):
    label: ClassVar[str] = "OfAtMostElements"

    def accepts_length(self, length: int) -> bool:
        return length <= self.count


# ═══════════════════════════════════════════════════════════════════════════════
# Container typespecs
# ═══════════════════════════════════════════════════════════════════════════════


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, str | bytes | bytearray)


@dataclass(frozen=True, slots=True, repr=False)
class ArrayOf(Matcher):
    """Matches a non-empty sequence whose every element matches ``element``.

    An empty sequence never matches: "array of X" implies at least one X.
    Strings and bytes are not treated as sequences.
    """

    element: Matcher

    def matches(self, value: Any, /) -> bool:
        if not _is_sequence(value) or len(value) == 0:
            return False
        return all(self.element.matches(item) for item in value)

    def render(self) -> str:
        return f"ArrayOf({self.element.render()})"


@dataclass(frozen=True, slots=True, repr=False)
class HashWith(Matcher):
    """Matches a mapping holding at least the given keys, each value matching.

    Keys beyond the required ones are ignored. Entries keep their
    declaration order, which is also the order they are checked and
    rendered in.
    """

    entries: tuple[tuple[Any, Matcher], ...]
    label: ClassVar[str] = "HashWith"

    def matches(self, value: Any, /) -> bool:
        if not isinstance(value, Mapping):
            return False
        for key, matcher in self.entries:
            if key not in value:
                return False
            if not matcher.matches(value[key]):
                return False
        return True

    def required_keys(self) -> frozenset[Any]:
        return frozenset(key for key, _ in self.entries)

    def render(self) -> str:
        pairs = ", ".join(f"{key!r}=>{matcher.render()}" for key, matcher in self.entries)
        return f"{self.label}({pairs})"


@dataclass(frozen=True, slots=True, repr=False)
class HashOf(HashWith):
    """Like HashWith, but the mapping must hold exactly the given keys."""

    label: ClassVar[str] = "HashOf"

    def matches(self, value: Any, /) -> bool:
        if not HashWith.matches(self, value):
            return False
        return set(value) == self.required_keys()


@dataclass(frozen=True, slots=True, repr=False)
class HashPermitting(HashWith):
    """Matches a mapping whose keys are a subset of the given ones.

    Missing keys are fine (an empty mapping always matches); keys outside
    the permitted set are not. Values present under permitted keys must
    match their typespec.
    """

    label: ClassVar[str] = "HashPermitting"

    def matches(self, value: Any, /) -> bool:
        if not isinstance(value, Mapping):
            return False
        permitted = self.required_keys()
        if any(key not in permitted for key in value):
            return False
        for key, matcher in self.entries:
            if key in value and not matcher.matches(value[key]):
                return False
        return True


@dataclass(frozen=True, slots=True, repr=False)
class Either(Matcher):
    """Matches if any member matches (logical OR). Short-circuits on first hit."""

    members: tuple[Matcher, ...]

    def matches(self, value: Any, /) -> bool:
        return any(m.matches(value) for m in self.members)

    def render(self) -> str:
        return f"Either({', '.join(m.render() for m in self.members)})"


@dataclass(frozen=True, slots=True, repr=False, init=False)
class Maybe(Either):
    """Either(Nil(), inner), rendered as Maybe(inner)."""

    def __init__(self, inner: Matcher) -> None:
        object.__setattr__(self, "members", (Nil(), inner))

    @property
    def inner(self) -> Matcher:
        return self.members[1]

    def render(self) -> str:
        return f"Maybe({self.inner.render()})"


@dataclass(frozen=True, slots=True, repr=False)
class Both(Matcher):
    """Matches if every member matches (logical AND). Short-circuits on first miss."""

    members: tuple[Matcher, ...]

    def matches(self, value: Any, /) -> bool:
        return all(m.matches(value) for m in self.members)

    def render(self) -> str:
        return f"Both({', '.join(m.render() for m in self.members)})"


# ═══════════════════════════════════════════════════════════════════════════════
# Combinators
# ═══════════════════════════════════════════════════════════════════════════════


def as_matcher(obj: object, role: str = "operand") -> Matcher:
    """Return obj if it is a typespec, else wrap it as a bare terminal predicate.

    Raises:
        InvalidMatcherOperand: If obj cannot act as a matcher.
    """
    if isinstance(obj, Matcher):
        return obj
    return Bare(as_terminal(obj, role))


def unique[T](items: Iterable[T]) -> tuple[T, ...]:
    """Drop repeated items, keeping the first occurrence of each in order.

    Two items repeat each other only if they are == and render the same, so
    value(1) and value(True) both survive even though 1 == True.
    """
    kept: list[T] = []
    for item in items:
        if not any(_same(item, other) for other in kept):
            kept.append(item)
    return tuple(kept)


def _same(a: object, b: object) -> bool:
    return repr(a) == repr(b) and a == b


def disjoin(left: Matcher, right: Matcher) -> Matcher:
    """Fold two typespecs into a disjoint union.

    Rules, first match wins:
    - Anything on either side absorbs the other
    - Nil | x becomes Maybe(x), unless x is already an Either (or Maybe)
    - Either | Either concatenates both member lists
    - Either | x appends x
    - anything else becomes a fresh two-member Either
    Member lists are deduplicated without reordering, so the result is
    always a single flat Either.
    """
    match left, right:
        case Anything(), _:
            return left
        case _, Anything():
            return right
        case Nil(), Either():
            return Either((left, right))
        case Nil(), _:
            return Maybe(right)
        case Either(members=ours), Either(members=theirs):
            return Either(unique(ours + theirs))
        case Either(members=ours), _:
            return Either(unique((*ours, right)))
        case _:
            return Either((left, right))


def conjoin(left: Matcher, right: Matcher) -> Matcher:
    """Fold two typespecs into a conjunction.

    Rules, first match wins:
    - Anything on either side vanishes, leaving the other operand
    - Both & Both concatenates both member lists (deduplicated)
    - ObjectWith & ObjectWith merges the attribute names into one ObjectWith
    - anything else becomes a fresh two-member Both
    """
    match left, right:
        case _, Anything():
            return left
        case Anything(), _:
            return right
        case Both(members=ours), Both(members=theirs):
            return Both(unique(ours + theirs))
        case ObjectWith(names=ours), ObjectWith(names=theirs):
            return ObjectWith(unique(ours + theirs))
        case _:
            return Both((left, right))


def matcher_depth(m: Matcher) -> int:
    """Calculate the nesting depth of a typespec tree."""
    match m:
        case Either(members=ms) | Both(members=ms):
            return 1 + max((matcher_depth(sub) for sub in ms), default=0)
        case ArrayOf(element=inner):
            return 1 + matcher_depth(inner)
        case HashWith(entries=entries):
            return 1 + max((matcher_depth(sub) for _, sub in entries), default=0)
        case _:
            return 1

"""Concrete terminal predicates implementing the TerminalPredicate protocol.

Each adapter is a frozen dataclass, immutable after construction. Adapters
never raise for values of the wrong kind: a regex given a non-string, or a
range given something that does not order against its bounds, just does not
accept the value.

Regex uses ``google-re2`` for guaranteed linear-time matching. RE2 does not
support backreferences or lookahead/lookbehind because they require
backtracking, so patterns using them are rejected at compile time.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import re2

from mal._errors import InvalidMatcherOperand, MatcherError
from mal._types import TerminalPredicate


@dataclass(frozen=True, slots=True)
class InstanceOf:
    """Class membership via isinstance.

    Accepts a single class or a tuple of classes, like isinstance itself.
    Note that bool is a subclass of int, so InstanceOf(int) accepts True.
    """

    types: type | tuple[type, ...]

    def accepts(self, value: Any, /) -> bool:
        return isinstance(value, self.types)

    def describe(self) -> str:
        if isinstance(self.types, tuple):
            return " | ".join(t.__qualname__ for t in self.types)
        return self.types.__qualname__


@dataclass(frozen=True, slots=True)
class RegexMatch:
    """Regular expression search over string values.

    The pattern is compiled at construction time via ``google-re2``. Uses
    search (not fullmatch), so anchors have to be spelled out in the pattern.

    Raises:
        MatcherError: If the pattern is not valid RE2 syntax.
    """

    pattern: str
    _compiled: re2.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        try:
            compiled = re2.compile(self.pattern)
        except re2.error as e:
            msg = f'invalid regex pattern "{self.pattern}": {e}'
            raise MatcherError(msg) from e
        object.__setattr__(self, "_compiled", compiled)

    def accepts(self, value: Any, /) -> bool:
        if not isinstance(value, str):
            return False
        return self._compiled.search(value) is not None

    def describe(self) -> str:
        return f"/{self.pattern}/"


def _equal(value: Any, literal: Any) -> bool:
    # Array-likes answer == with an elementwise result that has no truth value.
    if value is literal:
        return True
    try:
        return bool(value == literal)
    except (TypeError, ValueError):
        return False


@dataclass(frozen=True, slots=True)
class EqualTo:
    """Value equality using the == operator.

    A value whose == result cannot be read as a bool is not accepted.
    """

    literal: Any

    def accepts(self, value: Any, /) -> bool:
        return _equal(value, self.literal)

    def describe(self) -> str:
        return repr(self.literal)


@dataclass(frozen=True, slots=True)
class MemberOf:
    """Equality against any member of a fixed collection of literals.

    Members are compared with == one by one rather than through a set, so
    unhashable literals (lists, dicts) work too.
    """

    values: tuple[Any, ...]

    def accepts(self, value: Any, /) -> bool:
        return any(_equal(value, member) for member in self.values)

    def describe(self) -> str:
        return repr(list(self.values))


@dataclass(frozen=True, slots=True)
class Between:
    """Inclusive bound check using the value's natural ordering.

    Values that cannot be compared against the bounds are not accepted.
    """

    low: Any
    high: Any

    def accepts(self, value: Any, /) -> bool:
        try:
            return bool(self.low <= value <= self.high)
        except TypeError:
            return False

    def describe(self) -> str:
        return f"{self.low!r}..{self.high!r}"


@dataclass(frozen=True, slots=True)
class Call:
    """Truthiness of a unary callable.

    Exceptions raised by the callable propagate to the caller of matches().
    The callable has no textual form, so it always describes as ``&blk``.
    """

    fn: Callable[[Any], Any]

    def accepts(self, value: Any, /) -> bool:
        return bool(self.fn(value))

    def describe(self) -> str:
        return "&blk"


@dataclass(frozen=True, slots=True)
class IsNone:
    """Identity check against None, the absence sentinel."""

    def accepts(self, value: Any, /) -> bool:
        return value is None

    def describe(self) -> str:
        return "None"


def _is_type_spec(obj: object) -> bool:
    if isinstance(obj, type):
        return True
    return isinstance(obj, tuple) and bool(obj) and all(isinstance(t, type) for t in obj)


_RE2_FLAGS = ((re.IGNORECASE, "i"), (re.MULTILINE, "m"), (re.DOTALL, "s"))
_SUPPORTED_FLAGS = re.IGNORECASE | re.MULTILINE | re.DOTALL | re.UNICODE


def _from_host_pattern(pattern: re.Pattern[str], role: str) -> RegexMatch:
    """Recompile a stdlib pattern as RE2, carrying its flags as an inline group.

    re.UNICODE is implied for str patterns and RE2 is Unicode-aware, so it
    needs no translation.
    """
    unsupported = pattern.flags & ~_SUPPORTED_FLAGS
    if unsupported:
        reason = f"regex flags {re.RegexFlag(unsupported)!r} have no RE2 equivalent"
        raise InvalidMatcherOperand(pattern, role, reason)

    inline = "".join(letter for flag, letter in _RE2_FLAGS if pattern.flags & flag)
    source = f"(?{inline}){pattern.pattern}" if inline else pattern.pattern
    try:
        return RegexMatch(source)
    except MatcherError as e:
        raise InvalidMatcherOperand(pattern, role, str(e)) from e


def as_terminal(obj: object, role: str = "operand") -> TerminalPredicate:
    """Adapt a bare host-native check into a TerminalPredicate.

    Classes (and tuples of classes) become InstanceOf, compiled patterns
    become RegexMatch (recompiled as RE2 from their source text, keeping the
    IGNORECASE, MULTILINE and DOTALL flags), and
    anything that already speaks the protocol is returned as-is.

    Raises:
        InvalidMatcherOperand: If obj is none of the above, or a pattern that
            RE2 cannot express.
    """
    if _is_type_spec(obj):
        return InstanceOf(obj)  # type: ignore[arg-type]
    if isinstance(obj, re.Pattern) and isinstance(obj.pattern, str):
        return _from_host_pattern(obj, role)
    if isinstance(obj, TerminalPredicate):
        return obj
    raise InvalidMatcherOperand(obj, role)

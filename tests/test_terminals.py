"""Tests for the terminal predicate adapters."""

import re

import pytest

from mal import (
    Between,
    Call,
    EqualTo,
    InstanceOf,
    InvalidMatcherOperand,
    IsNone,
    MatcherError,
    MemberOf,
    RegexMatch,
    TerminalPredicate,
    only,
)
from mal._terminals import as_terminal


class _Elementwise:
    """Answers == with a result that has no truth value, like an array."""

    def __eq__(self, other: object) -> object:
        return self

    def __bool__(self) -> bool:
        msg = "truth value is ambiguous"
        raise ValueError(msg)

    __hash__ = object.__hash__


class TestInstanceOf:
    def test_accepts_instances(self) -> None:
        p = InstanceOf(str)
        assert p.accepts("x") is True
        assert p.accepts(1) is False

    def test_subclasses(self) -> None:
        assert InstanceOf(int).accepts(True) is True

    def test_tuple(self) -> None:
        p = InstanceOf((int, float))
        assert p.accepts(1) is True
        assert p.accepts(1.5) is True
        assert p.accepts("1") is False

    def test_describe(self) -> None:
        assert InstanceOf(str).describe() == "str"
        assert InstanceOf((int, float)).describe() == "int | float"


class TestRegexMatch:
    def test_search_anywhere(self) -> None:
        p = RegexMatch("hello")
        assert p.accepts("say hello") is True
        assert p.accepts("goodbye") is False

    def test_anchored(self) -> None:
        p = RegexMatch("^he")
        assert p.accepts("hello") is True
        assert p.accepts("ahem") is False

    def test_non_string_is_not_accepted(self) -> None:
        p = RegexMatch("1")
        assert p.accepts(1) is False
        assert p.accepts(None) is False
        assert p.accepts(b"1") is False

    def test_describe(self) -> None:
        assert RegexMatch("ab+c").describe() == "/ab+c/"

    def test_invalid_pattern(self) -> None:
        with pytest.raises(MatcherError, match="invalid regex pattern"):
            RegexMatch("[unclosed")

    def test_backreference_rejected(self) -> None:
        with pytest.raises(MatcherError):
            RegexMatch(r"(a)\1")

    def test_equality_ignores_compiled_state(self) -> None:
        assert RegexMatch("abc") == RegexMatch("abc")
        assert RegexMatch("abc") != RegexMatch("abd")


class TestEqualTo:
    def test_accepts_equal(self) -> None:
        p = EqualTo("ohai")
        assert p.accepts("ohai") is True
        assert p.accepts("OHAI") is False

    def test_ambiguous_equality_is_not_accepted(self) -> None:
        assert EqualTo(1).accepts(_Elementwise()) is False

    def test_identity(self) -> None:
        marker = _Elementwise()
        assert EqualTo(marker).accepts(marker) is True

    def test_describe(self) -> None:
        assert EqualTo("ohai").describe() == "'ohai'"
        assert EqualTo(None).describe() == "None"


class TestMemberOf:
    def test_accepts_members(self) -> None:
        p = MemberOf((7, 5))
        assert p.accepts(7) is True
        assert p.accepts(6) is False

    def test_ambiguous_equality_is_not_accepted(self) -> None:
        assert MemberOf((1, 2)).accepts(_Elementwise()) is False

    def test_unhashable_members(self) -> None:
        p = MemberOf(([1], {"a": 1}))
        assert p.accepts({"a": 1}) is True
        assert p.accepts([2]) is False

    def test_describe(self) -> None:
        assert MemberOf((7, 5)).describe() == "[7, 5]"


class TestBetween:
    def test_inclusive(self) -> None:
        p = Between(1, 4)
        assert p.accepts(1) is True
        assert p.accepts(4) is True
        assert p.accepts(0) is False
        assert p.accepts(5) is False

    def test_unorderable_is_not_accepted(self) -> None:
        assert Between(1, 4).accepts("2") is False
        assert Between(1, 4).accepts(None) is False

    def test_describe(self) -> None:
        assert Between(1, 4).describe() == "1..4"
        assert Between("a", "f").describe() == "'a'..'f'"


class TestCall:
    def test_truthiness(self) -> None:
        p = Call(lambda v: v % 2)
        assert p.accepts(3) is True
        assert p.accepts(4) is False

    def test_errors_propagate(self) -> None:
        p = Call(lambda v: v % 2)
        with pytest.raises(TypeError):
            p.accepts(None)

    def test_describe(self) -> None:
        assert Call(bool).describe() == "&blk"


class TestIsNone:
    def test_identity(self) -> None:
        assert IsNone().accepts(None) is True
        assert IsNone().accepts(0) is False
        assert IsNone().accepts(False) is False


class TestAsTerminal:
    def test_class(self) -> None:
        assert as_terminal(int) == InstanceOf(int)

    def test_tuple_of_classes(self) -> None:
        assert as_terminal((int, str)) == InstanceOf((int, str))

    def test_compiled_pattern_is_recompiled(self) -> None:
        assert as_terminal(re.compile("abc")) == RegexMatch("abc")

    def test_pattern_flags_are_kept(self) -> None:
        p = as_terminal(re.compile("abc", re.IGNORECASE))
        assert p == RegexMatch("(?i)abc")
        assert p.accepts("ABC") is True
        assert only(re.compile("abc", re.IGNORECASE)).matches("xAbC") is True

    def test_multiline_and_dotall(self) -> None:
        p = as_terminal(re.compile("^b.c", re.MULTILINE | re.DOTALL))
        assert p.describe() == "/(?ms)^b.c/"
        assert p.accepts("a\nb\nc") is True

    def test_unsupported_flag_rejected(self) -> None:
        with pytest.raises(InvalidMatcherOperand, match="no RE2 equivalent"):
            as_terminal(re.compile("a b", re.VERBOSE))

    @pytest.mark.parametrize("pattern", [r"(?=a)b", r"(a)\1"])
    def test_pattern_outside_re2_rejected(self, pattern: str) -> None:
        with pytest.raises(InvalidMatcherOperand, match="invalid regex pattern"):
            only(re.compile(pattern))

    def test_protocol_passthrough(self) -> None:
        p = Between(0, 1)
        assert as_terminal(p) is p

    @pytest.mark.parametrize("bad", [5, "int", None, (), (int, 5), [int]])
    def test_rejects_everything_else(self, bad: object) -> None:
        with pytest.raises(InvalidMatcherOperand):
            as_terminal(bad)


class _Even:
    """A hand-written terminal predicate."""

    def accepts(self, value: object, /) -> bool:
        return isinstance(value, int) and value % 2 == 0

    def describe(self) -> str:
        return "even"


class TestCustomPredicate:
    def test_satisfies_protocol(self) -> None:
        assert isinstance(_Even(), TerminalPredicate)

    def test_usable_by_only(self) -> None:
        m = only(_Even())
        assert m.render() == "Only(even)"
        assert m.matches(2) is True
        assert m.matches(3) is False

    def test_usable_as_bare_operand(self) -> None:
        m = only(str) | _Even()
        assert m.render() == "Either(Only(str), even)"
        assert m.matches(4) is True

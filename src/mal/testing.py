"""Test utilities for mal.

Provides assertion helpers with readable failure messages, and a registry
helper with a few stock predicates for exploring typespec documents. These
are conveniences for tests and examples; real schemas should register
their own types and predicates.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from mal._registry import RegistryBuilder, register_builtin_types

if TYPE_CHECKING:
    from mal._matcher import Matcher


def assert_matches(typespec: Matcher, value: Any) -> None:
    """Fail with the rendered typespec if ``value`` does not match it.

    >>> from mal import boolean
    >>> assert_matches(boolean(), True)
    """
    if not typespec.matches(value):
        msg = f"expected {value!r} to match {typespec.render()}"
        raise AssertionError(msg)


def assert_no_match(typespec: Matcher, value: Any) -> None:
    """Fail with the rendered typespec if ``value`` matches it."""
    if typespec.matches(value):
        msg = f"expected {value!r} not to match {typespec.render()}"
        raise AssertionError(msg)


def _positive(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool) and value > 0


def _non_blank(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def register(builder: RegistryBuilder) -> RegistryBuilder:
    """Register the builtin types plus the ``positive`` and ``non_blank`` predicates."""
    register_builtin_types(builder)
    builder.predicate("positive", _positive)
    builder.predicate("non_blank", _non_blank)
    return builder

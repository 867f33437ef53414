"""Core protocols and type aliases for mal.

The type system has two layers:
- TerminalPredicate is the injected "does this opaque check accept the value"
  port (class membership, regex, equality, ranges, plain callables)
- Matchable is anything the builders accept where a child matcher is expected
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from mal._matcher import Matcher


@runtime_checkable
class TerminalPredicate(Protocol):
    """Answer whether an opaque host-native check accepts a value.

    Implementations wrap the things Python can already test on its own:
    classes, regular expressions, literals, ranges and callables. The
    matcher algebra never looks inside a terminal predicate; it only asks
    it to accept values and to describe itself for rendering.
    """

    def accepts(self, value: Any, /) -> bool: ...

    def describe(self) -> str: ...


# Operands accepted by builders and by | / &. Literals are not matchables:
# they have to be wrapped with value() to avoid ambiguity with classes.
type Matchable = Matcher | TerminalPredicate | type | tuple[type, ...] | re.Pattern[str]

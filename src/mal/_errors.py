"""Error types shared by the matcher algebra, the config parser and the registry."""

from __future__ import annotations

_EXPECTED_MATCHABLE = "expected a matcher, a class, a compiled pattern or a terminal predicate"


class MatcherError(Exception):
    """Base class for every error raised by mal."""


class InvalidMatcherOperand(MatcherError, TypeError):
    """A builder or combinator was given something it cannot build a typespec from.

    Raised at construction time only; matching never raises it.
    """

    def __init__(
        self, operand: object, role: str = "operand", reason: str | None = None
    ) -> None:
        self.operand = operand
        self.role = role
        super().__init__(
            f"invalid matcher {role}: {operand!r} ({type(operand).__name__}); "
            f"{reason or _EXPECTED_MATCHABLE}"
        )

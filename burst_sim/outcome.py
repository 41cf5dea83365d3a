"""
Explicit result type for fallible geometry and movement operations.

Expected failures (degenerate walls, robots too large for a room, invalid
headings, ...) are reported as a failed ``Outcome`` carrying a reason code
rather than raised, so callers can branch on them and tests can tell the
causes apart.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class BurstError(Exception):
    """Base class for errors raised by burst_sim."""


class OutcomeError(BurstError):
    """Raised when unwrapping a failed Outcome."""


class Failure(str, Enum):
    """Reason codes for failed outcomes."""

    DEGENERATE_BOUNDARY = "degenerate_boundary"
    ROBOT_TOO_LARGE = "robot_too_large"
    SPACE_TOO_TIGHT = "space_too_tight"
    INTERNAL_INCONSISTENCY = "internal_inconsistency"
    INVALID_ORIGIN = "invalid_origin"
    INVALID_HEADING = "invalid_heading"
    NO_INTERSECTION = "no_intersection"
    ZERO_LENGTH_MOVEMENT = "zero_length_movement"
    NO_CONFIGURATION_SPACE = "no_configuration_space"


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Either a value or a failure reason.

    Truthy on success, so ``if outcome:`` reads like an optional check.
    """

    value: Optional[T] = None
    failure: Optional[Failure] = None
    detail: str = ""

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def fail(cls, failure: Failure, detail: str = "") -> "Outcome[T]":
        return cls(failure=failure, detail=detail)

    @property
    def ok(self) -> bool:
        return self.failure is None

    def __bool__(self) -> bool:
        return self.ok

    def unwrap(self) -> T:
        """Return the value or raise OutcomeError with the failure reason."""
        if self.failure is not None:
            msg = self.failure.value
            if self.detail:
                msg = f"{msg}: {self.detail}"
            raise OutcomeError(msg)
        return self.value  # type: ignore[return-value]
